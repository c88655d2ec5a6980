"""
Transaction scopes for the workflow services.

``run_serializable`` is the single place the retry policy is applied: every
attempt gets a fresh session pinned to SERIALIZABLE isolation, and the whole
body is replayed when the datastore aborts it with a serialization conflict.
"""

import logging
from contextlib import contextmanager
from typing import Callable, Iterator, TypeVar

from fastapi import status
from sqlalchemy.orm import Session, sessionmaker

from grouproster.app.core.errors import RETRY_EXHAUSTED, ApiStatusError
from grouproster.app.db.retry import (
    MAX_SERIALIZABLE_RETRIES,
    is_serialization_conflict_error,
    should_retry_serializable_error,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


@contextmanager
def transactional_session(session_factory: sessionmaker) -> Iterator[Session]:
    """All-or-nothing scope without a retry loop."""
    db = session_factory()
    try:
        yield db
        db.commit()
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


def run_serializable(
    session_factory: sessionmaker,
    work: Callable[[Session], T],
    *,
    max_retries: int = MAX_SERIALIZABLE_RETRIES,
    label: str = "transaction",
) -> T:
    """
    Run ``work(db)`` inside a SERIALIZABLE transaction, retrying on conflict.

    ``work`` must return plain values; the session is closed once the attempt ends.
    Non-conflict errors propagate after rollback. A conflict on the final attempt
    surfaces as 503.
    """
    for attempt in range(max_retries + 1):
        db = session_factory()
        try:
            db.connection(execution_options={"isolation_level": "SERIALIZABLE"})
            result = work(db)
            db.commit()
            return result
        except Exception as exc:
            db.rollback()
            if should_retry_serializable_error(exc, attempt, max_retries):
                logger.warning(
                    f"Serialization conflict in {label}, retrying",
                    extra={"attempt": attempt + 1},
                )
                continue
            if is_serialization_conflict_error(exc):
                logger.warning(
                    f"Serialization conflict in {label}, retries exhausted",
                    extra={"attempt": attempt + 1},
                )
                raise ApiStatusError(status.HTTP_503_SERVICE_UNAVAILABLE, RETRY_EXHAUSTED) from exc
            raise
        finally:
            db.close()

    raise ApiStatusError(status.HTTP_503_SERVICE_UNAVAILABLE, RETRY_EXHAUSTED)
