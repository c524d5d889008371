"""
Mapping of exceptions to JSON error responses.
"""

import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded
from starlette.exceptions import HTTPException as StarletteHTTPException

from movie_rankings.api.config import is_production
from movie_rankings.api.models.movie import MovieResponse
from movie_rankings.api.models.ranking import RankingResponse
from movie_rankings.api.models.user import UserResponse
from movie_rankings.database.models import User, Movie, Ranking
from movie_rankings.exceptions import (
    ConflictError,
    InvariantViolationError,
    MetadataLookupError,
    MovieRankingsError,
    NotFoundError,
)

logger = logging.getLogger(__name__)

# Request locations that are not part of a field path
_LOCATION_PREFIXES = {"body", "query", "path", "header", "cookie"}

_CONFLICT_SCHEMAS = {
    User: ("existingUser", UserResponse),
    Movie: ("existingMovie", MovieResponse),
    Ranking: ("existingRanking", RankingResponse),
}


def validation_details(errors) -> list[dict]:
    """Turn Pydantic error entries into ``[{path, message}]``."""
    details = []
    for error in errors:
        loc = list(error.get("loc", ()))
        if loc and loc[0] in _LOCATION_PREFIXES:
            loc = loc[1:]
        details.append({
            "path": ".".join(str(part) for part in loc),
            "message": error.get("msg", "Invalid value"),
        })
    return details


def _conflict_body(exc: ConflictError) -> dict:
    body = exc.to_dict()
    existing = exc.existing
    if existing is not None and type(existing) in _CONFLICT_SCHEMAS:
        key, schema = _CONFLICT_SCHEMAS[type(existing)]
        body[key] = jsonable_encoder(schema.model_validate(existing).model_dump(by_alias=True))
    return body


def register_exception_handlers(app: FastAPI):
    """Register exception handlers with the FastAPI app."""

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(request: Request, exc: RequestValidationError):
        return JSONResponse(
            status_code=400,
            content={"error": "Validation failed", "details": validation_details(exc.errors())},
        )

    @app.exception_handler(StarletteHTTPException)
    async def handle_http_exception(request: Request, exc: StarletteHTTPException):
        content = exc.detail if isinstance(exc.detail, dict) else {"error": exc.detail}
        return JSONResponse(status_code=exc.status_code, content=content, headers=exc.headers)

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return JSONResponse(status_code=404, content=exc.to_dict())

    @app.exception_handler(ConflictError)
    async def handle_conflict(request: Request, exc: ConflictError):
        return JSONResponse(status_code=409, content=_conflict_body(exc))

    @app.exception_handler(InvariantViolationError)
    async def handle_invariant_violation(request: Request, exc: InvariantViolationError):
        return JSONResponse(status_code=400, content=exc.to_dict())

    @app.exception_handler(MetadataLookupError)
    async def handle_metadata_lookup(request: Request, exc: MetadataLookupError):
        return JSONResponse(
            status_code=502,
            content={"error": "Metadata lookup failed", "message": exc.message},
        )

    @app.exception_handler(MovieRankingsError)
    async def handle_movie_rankings_error(request: Request, exc: MovieRankingsError):
        return JSONResponse(status_code=400, content=exc.to_dict())

    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

    @app.exception_handler(Exception)
    async def handle_unexpected(request: Request, exc: Exception):
        logger.error("Unhandled exception on %s %s", request.method, request.url.path, exc_info=exc)
        content = {"error": "Internal server error"}
        if not is_production():
            content["message"] = str(exc)
        return JSONResponse(status_code=500, content=content)
