from __future__ import annotations

from flask import Flask, g, jsonify, request

from ..common.validators import require_json_object
from ..container import Container
from ..core.constants import API_PREFIX
from ..core.enums import Role
from ..core.exceptions import ValidationError
from .decorators import authenticate, require_role
from .permissions import get_permissions


def register(app: Flask, container: Container) -> None:
    users = container.users_repo

    @app.post(f"{API_PREFIX}/auth/login", endpoint="auth_login")
    def login():
        payload = require_json_object(request.get_json(silent=True))
        login_name = payload.get("username") or payload.get("email")
        result = container.auth_service.login(login_name, payload.get("password"))
        return jsonify({"success": True, "data": result.to_dict()})

    @app.post(f"{API_PREFIX}/auth/refresh", endpoint="auth_refresh")
    def refresh():
        payload = require_json_object(request.get_json(silent=True))
        token = payload.get("refresh_token")
        if not token:
            raise ValidationError("refresh_token is required", "refresh_token")
        result = container.auth_service.refresh(token)
        return jsonify({"success": True, "data": result.to_dict()})

    @app.get(f"{API_PREFIX}/auth/me", endpoint="auth_me")
    @authenticate
    def me():
        permissions = get_permissions(g.user.get("role"))
        return jsonify(
            {
                "success": True,
                "data": {"user": g.user, "permissions": {k: list(v) for k, v in permissions.items()}},
            }
        )

    @app.get(f"{API_PREFIX}/users", endpoint="users_list")
    @authenticate
    @require_role(Role.ADMIN, Role.HR)
    def list_users():
        filters = {k: v for k, v in request.args.items() if k in {"role", "is_active"}}
        return jsonify({"success": True, "data": users.list(filters=filters)})
