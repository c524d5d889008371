"""
Batched metadata updates for many movies at once.

Movie ids are split into fixed-size batches that are written one after the
other with a short pause in between. A failing batch is rolled back and
recorded; the remaining batches still run.
"""

import logging
import time
from typing import Any, Callable, Dict, List, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from movie_rankings.database import crud
from movie_rankings.exceptions import MovieRankingsError

logger = logging.getLogger(__name__)

BATCH_SIZE = 10
BATCH_DELAY_SECONDS = 0.1


def chunk(items: Sequence[Any], size: int) -> List[List[Any]]:
    """Split ``items`` into consecutive lists of at most ``size`` elements."""
    if size < 1:
        raise ValueError("Batch size must be at least 1")
    return [list(items[i:i + size]) for i in range(0, len(items), size)]


def bulk_update_movies(
    session: Session,
    movie_ids: Sequence[int],
    metadata: Dict[str, Any],
    batch_size: int = BATCH_SIZE,
    delay: float = BATCH_DELAY_SECONDS,
    sleep: Callable[[float], None] = time.sleep,
) -> Dict[str, Any]:
    """
    Apply the same metadata to every movie in ``movie_ids``.

    Args:
        session: Database session
        movie_ids: Movie IDs to update (duplicates are ignored)
        metadata: Column values to set (description, poster_url, year)
        batch_size: Number of movies per UPDATE statement
        delay: Seconds to wait before each batch after the first
        sleep: Function used to wait

    Returns:
        Dictionary with ``success`` (no batch failed), ``total_requested``,
        ``total_updated``, per-batch ``results`` and failed-batch ``errors``
    """
    ids = list(dict.fromkeys(movie_ids))
    batches = chunk(ids, batch_size)
    results = []
    errors = []
    total_updated = 0

    for number, batch in enumerate(batches, start=1):
        if number > 1 and delay > 0:
            sleep(delay)
        try:
            updated = crud.bulk_update_movies(session, batch, metadata)
        except (SQLAlchemyError, MovieRankingsError) as e:
            session.rollback()
            message = e.message if isinstance(e, MovieRankingsError) else str(e)
            logger.warning("Bulk update batch %d failed: %s", number, message)
            entry = {'batch': number, 'movie_ids': batch, 'updated': 0, 'error': message}
            results.append(entry)
            errors.append(entry)
            continue

        total_updated += updated
        results.append({'batch': number, 'movie_ids': batch, 'updated': updated, 'error': None})

    logger.info(
        "Bulk update finished: %d of %d movies updated in %d batches (%d failed)",
        total_updated, len(ids), len(batches), len(errors),
    )
    return {
        'success': not errors,
        'total_requested': len(ids),
        'total_updated': total_updated,
        'results': results,
        'errors': errors,
    }
