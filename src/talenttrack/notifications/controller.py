from __future__ import annotations

from flask import Blueprint, Flask, jsonify

from ..auth.decorators import authenticate, check_permission
from ..container import Container
from ..core.constants import API_PREFIX


def register(app: Flask, container: Container) -> None:
    bp = Blueprint("notification_actions", __name__, url_prefix=f"{API_PREFIX}/notifications")

    @bp.post("/<int:notification_id>/read")
    @authenticate
    @check_permission("notifications", "read")
    def mark_read(notification_id: int):
        return jsonify({"success": True, "data": container.notification_service.mark_read(notification_id)})

    app.register_blueprint(bp)
