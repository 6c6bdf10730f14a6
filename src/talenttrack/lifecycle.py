from __future__ import annotations

import signal
import sys
from typing import Callable

from .common.logger import get_logger
from .database.connection import ConnectionManager
from .database.errors import DatabaseError

logger = get_logger(__name__)


def shutdown(db: ConnectionManager, signal_name: str) -> int:
    """Close the pool and return the process exit code."""
    logger.info("%s received. Shutting down gracefully...", signal_name)
    try:
        db.close()
    except DatabaseError:
        logger.exception("Error during graceful shutdown")
        return 1
    return 0


def install_signal_handlers(db: ConnectionManager, *, exit: Callable[[int], None] = sys.exit) -> None:
    def _handler(signum, frame):
        exit(shutdown(db, signal.Signals(signum).name))

    signal.signal(signal.SIGINT, _handler)
    signal.signal(signal.SIGTERM, _handler)
