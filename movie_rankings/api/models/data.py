"""
Pydantic schemas for data export/import API.
"""

from typing import Any

from pydantic import Field

from movie_rankings.utils.schema import CamelModel


class ImportPayload(CamelModel):
    """An export document; records are validated one at a time during import."""

    users: list[Any] | None = None
    movies: list[Any] | None = None
    rankings: list[Any] | None = None


class ImportRequest(CamelModel):
    data: ImportPayload
    overwrite: bool = False


class ImportTally(CamelModel):
    imported: int
    skipped: int
    errors: list[str]


class ImportResults(CamelModel):
    users: ImportTally
    movies: ImportTally
    rankings: ImportTally


class ImportSummary(CamelModel):
    total_imported: int
    total_skipped: int
    total_errors: int


class ImportResponse(CamelModel):
    message: str = "Import completed"
    results: ImportResults
    summary: ImportSummary


class EntityCounts(CamelModel):
    users: int
    movies: int
    rankings: int


class YearCount(CamelModel):
    year: int
    count: int


class ExportSize(CamelModel):
    users: int
    movies: int
    rankings: int
    total: int


class DataStats(CamelModel):
    counts: EntityCounts
    years: list[YearCount] = Field(default_factory=list)
    export_size: ExportSize
