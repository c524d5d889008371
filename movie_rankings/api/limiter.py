"""
Per-client request rate limiting.
"""

from slowapi import Limiter
from slowapi.util import get_remote_address

from movie_rankings.api.config import get_rate_limit, is_rate_limit_enabled

limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[get_rate_limit()],
    enabled=is_rate_limit_enabled(),
)
