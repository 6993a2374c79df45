"""
Classification of transient write conflicts.

A conflict is transient when rerunning the same unit of work from a fresh
transaction can succeed: PostgreSQL serialization failures and deadlocks,
and SQLite busy/locked errors.

Dependencies: sqlalchemy
System role: Retry predicate for service units of work
"""

from sqlalchemy.exc import DBAPIError, OperationalError

# serialization_failure, deadlock_detected
RETRYABLE_SQLSTATES = frozenset({"40001", "40P01"})


def is_transient_conflict(exc: BaseException) -> bool:
    """
    Return True if ``exc`` is a database error worth retrying.

    Args:
        exc: Exception raised while running a unit of work

    Returns:
        bool: True for serialization failures, deadlocks and locked databases
    """
    if not isinstance(exc, DBAPIError):
        return False

    orig = exc.orig
    sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if sqlstate in RETRYABLE_SQLSTATES:
        return True

    message = str(orig).lower()
    return isinstance(exc, OperationalError) and ("locked" in message or "busy" in message)
