"""Append-only JSON-lines error log.

One file per UTC day (``error-YYYY-MM-DD.log``), one record per failure.
Writing is best-effort: a broken log directory never turns into a failure of
the operation being logged.
"""

from __future__ import annotations

from datetime import datetime, timezone
import json
from pathlib import Path
import threading
import traceback
from typing import Any, Mapping, Optional, Protocol

from .logger import get_logger

logger = get_logger(__name__)


class ErrorSink(Protocol):
    def log(self, error: BaseException, request: Optional[Mapping[str, Any]] = None) -> None:
        raise NotImplementedError


class ErrorLogger:
    def __init__(self, log_dir: str | Path):
        self._log_dir = Path(log_dir)
        self._lock = threading.Lock()

    @property
    def log_dir(self) -> Path:
        return self._log_dir

    def log_file_for(self, when: datetime) -> Path:
        return self._log_dir / f"error-{when.strftime('%Y-%m-%d')}.log"

    def build_entry(self, error: BaseException, request: Optional[Mapping[str, Any]] = None, *, now: Optional[datetime] = None) -> dict:
        now = now or datetime.now(timezone.utc)
        return {
            "timestamp": now.isoformat(),
            "error": {
                "name": type(error).__name__,
                "message": str(error),
                "stack": "".join(traceback.format_exception(type(error), error, error.__traceback__)),
                "status_code": getattr(error, "status_code", None),
                "error_code": getattr(error, "error_code", None),
            },
            "request": dict(request) if request else None,
        }

    def log(self, error: BaseException, request: Optional[Mapping[str, Any]] = None) -> None:
        now = datetime.now(timezone.utc)
        line = json.dumps(self.build_entry(error, request, now=now), default=str) + "\n"
        try:
            with self._lock:
                self._log_dir.mkdir(parents=True, exist_ok=True)
                with self.log_file_for(now).open("a", encoding="utf-8") as f:
                    f.write(line)
        except OSError:
            logger.exception("Failed to write to error log in %s", self._log_dir)


def request_context(req) -> dict:
    """Capture the parts of a Flask request worth keeping next to an error."""
    return {
        "method": req.method,
        "url": req.url,
        "headers": {k: v for k, v in req.headers.items() if k.lower() not in {"authorization", "cookie"}},
        "body": req.get_json(silent=True),
        "params": dict(req.view_args or {}),
        "query": req.args.to_dict(),
        "ip": req.remote_addr,
    }
