from __future__ import annotations

from datetime import datetime, timezone
import json

from flask import Flask, request

from talenttrack.common.error_logger import ErrorLogger, request_context
from talenttrack.core.exceptions import NotFoundError


def _raise(error):
    try:
        raise error
    except type(error) as e:
        return e


def test_log_appends_json_line_per_error(tmp_path):
    logger = ErrorLogger(tmp_path / "logs")

    logger.log(_raise(NotFoundError("Employee")))
    logger.log(_raise(ValueError("bad")), {"method": "GET", "url": "/x"})

    files = list((tmp_path / "logs").glob("error-*.log"))
    assert len(files) == 1
    lines = [json.loads(line) for line in files[0].read_text(encoding="utf-8").splitlines()]
    assert [entry["error"]["name"] for entry in lines] == ["NotFoundError", "ValueError"]
    assert lines[0]["error"]["status_code"] == 404
    assert lines[0]["error"]["error_code"] == "NOT_FOUND_ERROR"
    assert "Traceback" in lines[0]["error"]["stack"]
    assert lines[0]["request"] is None
    assert lines[1]["request"] == {"method": "GET", "url": "/x"}


def test_log_file_is_named_by_day(tmp_path):
    logger = ErrorLogger(tmp_path)

    assert logger.log_file_for(datetime(2026, 3, 4, tzinfo=timezone.utc)).name == "error-2026-03-04.log"


def test_unwritable_directory_is_tolerated(tmp_path):
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("x")

    ErrorLogger(blocker).log(RuntimeError("boom"))

    assert blocker.read_text() == "x"


def test_request_context_drops_credentials():
    app = Flask(__name__)

    with app.test_request_context(
        "/api/v1/employees?limit=5",
        method="POST",
        json={"first_name": "Ana"},
        headers={"Authorization": "Bearer abc", "Cookie": "token=abc", "X-Trace": "1"},
    ):
        ctx = request_context(request)

    assert ctx["method"] == "POST"
    assert ctx["body"] == {"first_name": "Ana"}
    assert ctx["query"] == {"limit": "5"}
    headers = {k.lower() for k in ctx["headers"]}
    assert "x-trace" in headers
    assert "authorization" not in headers
    assert "cookie" not in headers
