"""
Statistics engine and service.

``aggregations`` holds the pure computations; ``StatisticsService`` feeds
them from the database.
"""

from movie_rankings.core.stats import aggregations
from movie_rankings.core.stats.service import StatisticsService

__all__ = ['aggregations', 'StatisticsService']
