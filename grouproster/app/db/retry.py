"""Classification of datastore conflicts and the bounded retry policy."""

from sqlalchemy.exc import DBAPIError

MAX_SERIALIZABLE_RETRIES = 2

# serialization_failure, deadlock_detected
SERIALIZATION_CONFLICT_SQLSTATES = frozenset({"40001", "40P01"})
# SQLite aborts a contended writer with SQLITE_BUSY instead of a SQLSTATE
SQLITE_CONFLICT_NAMES = frozenset({"SQLITE_BUSY", "SQLITE_BUSY_SNAPSHOT"})


def _driver_error(error: BaseException):
    if isinstance(error, DBAPIError):
        return error.orig
    return error


def is_serialization_conflict_error(error: BaseException | None) -> bool:
    if error is None:
        return False
    orig = _driver_error(error)
    if orig is None:
        return False

    # psycopg exposes ``sqlstate``, psycopg2 ``pgcode``
    sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if sqlstate in SERIALIZATION_CONFLICT_SQLSTATES:
        return True

    return getattr(orig, "sqlite_errorname", None) in SQLITE_CONFLICT_NAMES


def should_retry_serializable_error(error: BaseException | None, attempt: int, max_retries: int) -> bool:
    return is_serialization_conflict_error(error) and attempt < max_retries
