from __future__ import annotations

from flask import Flask, g, jsonify

from ..auth.decorators import optional_auth
from ..common.datetime_utils import utc_now
from ..container import Container
from ..core.constants import API_PREFIX, API_VERSION
from ..core.enums import Role

_STAFF = {Role.ADMIN.value, Role.HR.value}


def register(app: Flask, container: Container) -> None:
    @app.get("/health", endpoint="health")
    def health():
        return jsonify(
            {
                "status": "OK",
                "message": "TalentTrack API is running",
                "timestamp": utc_now().isoformat(),
            }
        )

    @app.get(API_PREFIX, endpoint="api_info")
    def api_info():
        return jsonify(
            {
                "message": "TalentTrack API v1",
                "status": "active",
                "version": API_VERSION,
                "timestamp": utc_now().isoformat(),
            }
        )

    @app.get(f"{API_PREFIX}/status", endpoint="api_status")
    @optional_auth
    def api_status():
        status = container.db.get_status()
        database = status.to_dict()
        user = g.get("user")
        # connection details only for staff
        if not user or user.get("role") not in _STAFF:
            database.pop("config")
        return jsonify(
            {
                "status": "OK" if status.is_connected else "DEGRADED",
                "database": database,
                "version": API_VERSION,
            }
        )
