"""Request guards for JSON endpoints.

Guards raise ``DomainError`` subclasses; the API error handlers turn them
into responses. The caller is stored on ``flask.g.user``.
"""

from __future__ import annotations

from functools import wraps
from typing import Optional

from flask import current_app, g, request

from ..core.exceptions import AuthenticationError, AuthorizationError, DomainError
from .permissions import get_permissions, has_permission

EXTENSION_KEY = "talenttrack"


def _auth_service():
    return current_app.extensions[EXTENSION_KEY].auth_service


def token_from_request(req) -> Optional[str]:
    header = req.headers.get("Authorization", "")
    if header.startswith("Bearer "):
        return header[len("Bearer "):].strip() or None
    return req.cookies.get("token") or None


def _load_user() -> None:
    token = token_from_request(request)
    if not token:
        raise AuthenticationError("Access denied. No token provided.")
    g.user = _auth_service().current_user(token)


def authenticate(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        _load_user()
        return view(*args, **kwargs)

    return wrapper


def optional_auth(view):
    @wraps(view)
    def wrapper(*args, **kwargs):
        try:
            _load_user()
        except DomainError:
            g.user = None
        return view(*args, **kwargs)

    return wrapper


def _require_user() -> dict:
    user = g.get("user")
    if not user:
        raise AuthenticationError("Authentication required")
    return user


def require_role(*roles):
    allowed = {getattr(r, "value", r) for r in roles}

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            user = _require_user()
            if user.get("role") not in allowed:
                raise AuthorizationError(f"Access denied. Required roles: {', '.join(sorted(allowed))}")
            return view(*args, **kwargs)

        return wrapper

    return decorator


def check_permission(resource: str, action: str):
    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            user = _require_user()
            permissions = get_permissions(user.get("role"))
            if not has_permission(permissions, resource, action):
                raise AuthorizationError(f"Access denied. Cannot {action} {resource}")
            g.permissions = permissions
            return view(*args, **kwargs)

        return wrapper

    return decorator
