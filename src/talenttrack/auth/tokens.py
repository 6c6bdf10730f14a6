from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from typing import Any

import jwt

from ..common.datetime_utils import parse_duration, utc_now
from ..core.constants import JWT_ALGORITHM, JWT_AUDIENCE, JWT_ISSUER
from ..core.exceptions import TokenError


@dataclass(frozen=True)
class TokenSettings:
    secret: str
    refresh_secret: str
    expires_in: str = "7d"
    refresh_expires_in: str = "30d"

    @classmethod
    def from_settings(cls, settings) -> "TokenSettings":
        secret = str(getattr(settings, "JWT_SECRET"))
        return cls(
            secret=secret,
            refresh_secret=str(getattr(settings, "JWT_REFRESH_SECRET", None) or secret),
            expires_in=str(getattr(settings, "JWT_EXPIRES_IN", "7d")),
            refresh_expires_in=str(getattr(settings, "JWT_REFRESH_EXPIRES_IN", "30d")),
        )


class TokenService:
    """Issue and verify HS256 access/refresh tokens."""

    def __init__(self, settings: TokenSettings):
        self._settings = settings

    def _encode(self, claims: dict[str, Any], secret: str, expires_in: str) -> str:
        now = utc_now()
        payload = {
            **claims,
            "iat": now,
            "exp": now + timedelta(seconds=parse_duration(expires_in)),
            "iss": JWT_ISSUER,
            "aud": JWT_AUDIENCE,
        }
        return jwt.encode(payload, secret, algorithm=JWT_ALGORITHM)

    def _decode(self, token: str, secret: str) -> dict[str, Any]:
        if not token:
            raise TokenError("Access denied. No token provided.")
        try:
            return jwt.decode(
                token,
                secret,
                algorithms=[JWT_ALGORITHM],
                issuer=JWT_ISSUER,
                audience=JWT_AUDIENCE,
            )
        except jwt.ExpiredSignatureError:
            raise TokenError("Token expired")
        except jwt.ImmatureSignatureError:
            raise TokenError("Token not active")
        except jwt.InvalidTokenError:
            raise TokenError("Invalid token")

    def generate_token(self, user_id: int, role: str) -> str:
        return self._encode({"id": user_id, "role": getattr(role, "value", role)}, self._settings.secret, self._settings.expires_in)

    def generate_refresh_token(self, user_id: int) -> str:
        return self._encode(
            {"id": user_id, "type": "refresh"},
            self._settings.refresh_secret,
            self._settings.refresh_expires_in,
        )

    def verify_token(self, token: str) -> dict[str, Any]:
        payload = self._decode(token, self._settings.secret)
        if payload.get("type") == "refresh":
            raise TokenError("Invalid token")
        return payload

    def verify_refresh_token(self, token: str) -> dict[str, Any]:
        payload = self._decode(token, self._settings.refresh_secret)
        if payload.get("type") != "refresh":
            raise TokenError("Invalid refresh token")
        return payload
