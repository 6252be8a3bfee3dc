# Overview: Retry wrapper for short ledger writes that can hit lock contention.

from __future__ import annotations

import time
from typing import Callable, TypeVar

from flask import current_app
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm.exc import StaleDataError

from ..extensions import db

T = TypeVar("T")

# SQLite reports "database is locked" as OperationalError; other backends
# raise the same class for deadlocks and lock timeouts.
RETRYABLE = (OperationalError, StaleDataError)


def run_with_retry(func: Callable[[], T], *, attempts: int = 3, backoff_base: float = 0.1) -> T:
    """
    Call `func`, rolling back and retrying on lock contention.

    Sleeps backoff_base * 2**n between tries. The final failure propagates.
    `func` must be safe to re-run from a clean session.
    """
    for attempt in range(1, attempts + 1):
        try:
            return func()
        except RETRYABLE as exc:
            db.session.rollback()
            if attempt == attempts:
                raise
            current_app.logger.warning(
                "Retrying %s after %s (attempt %s/%s)",
                getattr(func, "__name__", "operation"), type(exc).__name__, attempt, attempts,
            )
            time.sleep(backoff_base * (2 ** (attempt - 1)))
    raise RuntimeError("attempts must be at least 1")
