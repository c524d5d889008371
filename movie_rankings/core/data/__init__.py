"""Data transfer: JSON export/import and batched bulk updates."""

from movie_rankings.core.data.transfer import export_data, import_data, export_filename, EXPORT_VERSION
from movie_rankings.core.data.bulk import bulk_update_movies

__all__ = ['export_data', 'import_data', 'export_filename', 'EXPORT_VERSION', 'bulk_update_movies']
