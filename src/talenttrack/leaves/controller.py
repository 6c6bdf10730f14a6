from __future__ import annotations

from flask import Blueprint, Flask, g, jsonify, request

from ..auth.decorators import authenticate, check_permission
from ..common.validators import require_json_object
from ..container import Container
from ..core.constants import API_PREFIX


def register(app: Flask, container: Container) -> None:
    bp = Blueprint("leave_workflow", __name__, url_prefix=f"{API_PREFIX}/leaves")
    service = container.leave_service

    @bp.post("/<int:leave_id>/approve")
    @authenticate
    @check_permission("leaves", "approve")
    def approve(leave_id: int):
        leave = service.approve(leave_id, approver_id=g.user["id"])
        return jsonify({"success": True, "data": leave})

    @bp.post("/<int:leave_id>/reject")
    @authenticate
    @check_permission("leaves", "reject")
    def reject(leave_id: int):
        payload = require_json_object(request.get_json(silent=True))
        leave = service.reject(leave_id, approver_id=g.user["id"], reason=payload.get("rejection_reason"))
        return jsonify({"success": True, "data": leave})

    app.register_blueprint(bp)
