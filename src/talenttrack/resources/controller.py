from __future__ import annotations

from flask import Blueprint, Flask, jsonify, request

from ..auth.decorators import authenticate, check_permission
from ..common.validators import require_json_object
from ..core.constants import API_PREFIX
from .service import ResourceService


def crud_blueprint(resource: str, service: ResourceService) -> Blueprint:
    """List/get/create/update/delete for ``/api/v1/<resource>``.

    Every route needs a token plus the matching ``(resource, action)`` permission.
    """
    bp = Blueprint(resource, __name__, url_prefix=f"{API_PREFIX}/{resource}")

    @bp.get("")
    @authenticate
    @check_permission(resource, "read")
    def list_records():
        return jsonify({"success": True, "data": service.list(request.args.to_dict())})

    @bp.get("/<int:record_id>")
    @authenticate
    @check_permission(resource, "read")
    def get_record(record_id: int):
        return jsonify({"success": True, "data": service.get(record_id)})

    @bp.post("")
    @authenticate
    @check_permission(resource, "create")
    def create_record():
        payload = require_json_object(request.get_json(silent=True))
        return jsonify({"success": True, "data": service.create(payload)}), 201

    @bp.put("/<int:record_id>")
    @authenticate
    @check_permission(resource, "update")
    def update_record(record_id: int):
        payload = require_json_object(request.get_json(silent=True))
        return jsonify({"success": True, "data": service.update(record_id, payload)})

    @bp.delete("/<int:record_id>")
    @authenticate
    @check_permission(resource, "delete")
    def delete_record(record_id: int):
        service.delete(record_id)
        return jsonify({"success": True, "message": f"{service.name} deleted"})

    return bp


def register(app: Flask, services: dict[str, ResourceService]) -> None:
    for resource, service in services.items():
        app.register_blueprint(crud_blueprint(resource, service))
