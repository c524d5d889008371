"""
Movie Rankings Application Package.

This package contains the application logic for tracking a group's annual
movie rankings: database models and CRUD operations, the statistics engine,
data import/export, third-party metadata lookup, and the REST API.
"""

__version__ = "1.0.0"
