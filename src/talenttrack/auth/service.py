from __future__ import annotations

from dataclasses import dataclass

from werkzeug.security import check_password_hash

from ..common.logger import get_logger
from ..common.validators import require_non_empty
from ..core.exceptions import AuthenticationError
from .permissions import get_permissions
from .repository import UserRepository
from .tokens import TokenService

logger = get_logger(__name__)


@dataclass(frozen=True)
class AuthResult:
    """What the login/refresh endpoints hand back to the client."""

    user: dict
    token: str
    refresh_token: str

    def to_dict(self) -> dict:
        return {
            "user": self.user,
            "token": self.token,
            "refresh_token": self.refresh_token,
            "permissions": {k: list(v) for k, v in get_permissions(self.user.get("role")).items()},
        }


class AuthService:
    """Use cases: login, token refresh and resolving the caller of a request."""

    def __init__(self, users: UserRepository, tokens: TokenService):
        self._users = users
        self._tokens = tokens

    def _issue(self, user: dict) -> AuthResult:
        return AuthResult(
            user=user,
            token=self._tokens.generate_token(user["id"], user["role"]),
            refresh_token=self._tokens.generate_refresh_token(user["id"]),
        )

    def login(self, login: str, password: str) -> AuthResult:
        login = require_non_empty(login, "username")
        require_non_empty(password, "password")

        found = self._users.get_credentials(login)
        if not found:
            raise AuthenticationError("Invalid credentials")
        user, password_hash = found

        try:
            ok = check_password_hash(password_hash, password)
        except ValueError:
            # unknown hash method, e.g. a placeholder value
            ok = False
        if not ok:
            raise AuthenticationError("Invalid credentials")

        if not user.get("is_active", True):
            raise AuthenticationError("Account is deactivated.")

        self._users.touch_last_login(user["id"])
        logger.info("User %s logged in", user["id"])
        return self._issue(user)

    def refresh(self, refresh_token: str) -> AuthResult:
        payload = self._tokens.verify_refresh_token(refresh_token)
        return self._issue(self._active_user(payload["id"]))

    def current_user(self, token: str) -> dict:
        payload = self._tokens.verify_token(token)
        return self._active_user(payload["id"])

    def _active_user(self, user_id) -> dict:
        user = self._users.get_by_id(user_id)
        if not user:
            raise AuthenticationError("Invalid token. User not found.")
        if not user.get("is_active", True):
            raise AuthenticationError("Account is deactivated.")
        return user
