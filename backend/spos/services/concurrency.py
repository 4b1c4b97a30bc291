# Overview: Retry helpers for store commits; SQLite reports a busy database as OperationalError.

from __future__ import annotations

import time

from sqlalchemy.exc import OperationalError


def run_with_retry(func, *, session, attempts: int = 3, backoff_base: float = 0.1):
    """
    Execute a DB operation with retry on lock contention.

    Retries on OperationalError (e.g. "database is locked" when another
    process holds the SQLite write lock). Each retry starts from a rolled
    back session, so func must redo its own reads.
    """
    last_exc = None
    for attempt in range(attempts):
        try:
            return func()
        except OperationalError as exc:
            session.rollback()
            last_exc = exc
            if attempt >= attempts - 1:
                raise
            time.sleep(backoff_base * (2 ** attempt))
    if last_exc:
        raise last_exc
