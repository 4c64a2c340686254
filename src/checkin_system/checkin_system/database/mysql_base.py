from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Dict, List, Optional, Sequence

import mysql.connector
from mysql.connector import errorcode

from ..core.exceptions import DuplicateKeyError, RepositoryError, RepositoryTimeoutError
from .connection import DatabaseConnection

logger = logging.getLogger(__name__)

_TIMEOUT_ERRNOS = {
    errorcode.CR_SERVER_LOST,
    errorcode.CR_CONN_HOST_ERROR,
    errorcode.ER_LOCK_WAIT_TIMEOUT,
    3024,  # statement exceeded MAX_EXECUTION_TIME
}


def translate_error(exc: mysql.connector.Error) -> RepositoryError:
    """Map a driver error onto the repository exception hierarchy."""

    if isinstance(exc, mysql.connector.IntegrityError) and exc.errno == errorcode.ER_DUP_ENTRY:
        return DuplicateKeyError(str(exc))
    if exc.errno in _TIMEOUT_ERRNOS:
        return RepositoryTimeoutError(str(exc))
    return RepositoryError(str(exc))


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    try:
        conn = conn_factory.connect()
    except mysql.connector.Error as exc:
        logger.error("database connect failed: %s", exc)
        raise translate_error(exc) from exc

    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except mysql.connector.Error as exc:
        conn.rollback()
        if not (isinstance(exc, mysql.connector.IntegrityError) and exc.errno == errorcode.ER_DUP_ENTRY):
            logger.warning("database call failed: %s", exc)
        raise translate_error(exc) from exc
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def in_clause(values: Sequence[Any]) -> str:
    """Placeholder list for ``IN (...)``; callers must pass a non-empty sequence."""
    if not values:
        raise ValueError("in_clause needs at least one value")
    return ", ".join(["%s"] * len(values))
