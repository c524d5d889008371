"""
Shared utilities package.

This package contains logging configuration and the camelCase schema base
used across the application.
"""

from movie_rankings.utils.logging_config import setup_logging, configure_api_logging, configure_script_logging
from movie_rankings.utils.schema import CamelModel

__all__ = ['setup_logging', 'configure_api_logging', 'configure_script_logging', 'CamelModel']
