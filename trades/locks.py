from __future__ import annotations

"""trades.locks

Process-local lock serializing trade-log writes (submit / delete).

The validator's verdict is only correct for the state it was given, so
read-validate-append must not interleave with another write. Inside one
process this lock serializes callers; across processes the SQLite
BEGIN IMMEDIATE transaction in trades.apply does the same job.

Lock order: trade_write_lock -> LeagueRepo.transaction(...)
"""

import logging
from contextlib import contextmanager
from threading import RLock
from typing import Iterator

logger = logging.getLogger(__name__)

_TRADE_WRITE_LOCK = RLock()


@contextmanager
def trade_write_lock(*, reason: str = "") -> Iterator[None]:
    """Serialize trade-log write critical sections within a single process.

    Reentrant: a holder may enter again without deadlocking.

    Args:
        reason: Debug/log label.
    """

    _TRADE_WRITE_LOCK.acquire()
    logger.debug("trade_write_lock acquired reason=%s", reason)
    try:
        yield
    finally:
        _TRADE_WRITE_LOCK.release()


__all__ = [
    "trade_write_lock",
]
