# Overview: Retry helper for store writes that can lose a concurrency race.

from __future__ import annotations

import time

from flask import current_app, has_app_context
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm.exc import StaleDataError

from ..errors import ConflictError, UnavailableError
from ..extensions import db


def _warn(message: str, *args) -> None:
    if has_app_context():
        current_app.logger.warning(message, *args)


def run_with_retry(func, *, session=None, attempts: int = 3, backoff_base: float = 0.05):
    """
    Execute a DB operation with retry on concurrency-related failures.

    Retries on OperationalError (locks, timeouts) and StaleDataError
    (optimistic version conflicts). The session is rolled back after every
    failure so the next attempt re-reads current state. Exhaustion surfaces
    as ConflictError (version race) or UnavailableError (store unreachable);
    any other exception is re-raised after rollback without retrying.
    """
    session = session if session is not None else db.session
    for attempt in range(attempts):
        try:
            return func()
        except StaleDataError as exc:
            session.rollback()
            if attempt >= attempts - 1:
                raise ConflictError("Concurrent update conflict; retry the request") from exc
            _warn("Version conflict on attempt %d/%d, retrying", attempt + 1, attempts)
        except OperationalError as exc:
            session.rollback()
            if attempt >= attempts - 1:
                raise UnavailableError("Backing store unavailable; retry the request") from exc
            _warn("Store error on attempt %d/%d, retrying: %s", attempt + 1, attempts, exc.orig)
        except Exception:
            session.rollback()
            raise
        time.sleep(backoff_base * (2 ** attempt))
    raise ConflictError("Concurrent update conflict; retry the request")
