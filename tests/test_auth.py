from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional

import jwt
import pytest
from werkzeug.security import generate_password_hash

from talenttrack.auth.permissions import get_permissions, has_permission
from talenttrack.auth.service import AuthService
from talenttrack.auth.tokens import TokenService, TokenSettings
from talenttrack.core.constants import JWT_AUDIENCE, JWT_ISSUER
from talenttrack.core.enums import Role
from talenttrack.core.exceptions import AuthenticationError, TokenError, ValidationError


@pytest.fixture
def tokens():
    return TokenService(TokenSettings(secret="access-secret", refresh_secret="refresh-secret"))


@dataclass
class InMemoryUsers:
    users: dict[int, dict]
    hashes: dict[int, str]
    logins: list[int] = field(default_factory=list)

    def get_by_id(self, user_id: int) -> Optional[dict]:
        return self.users.get(user_id)

    def get_credentials(self, login: str):
        for user in self.users.values():
            if login in (user["username"], user["email"]):
                return user, self.hashes[user["id"]]
        return None

    def touch_last_login(self, user_id: int) -> None:
        self.logins.append(user_id)


@pytest.fixture
def users():
    return InMemoryUsers(
        users={
            1: {"id": 1, "username": "ana", "email": "ana@example.com", "role": "hr", "is_active": True},
            2: {"id": 2, "username": "bo", "email": "bo@example.com", "role": "employee", "is_active": False},
        },
        hashes={1: generate_password_hash("pw-ana"), 2: generate_password_hash("pw-bo")},
    )


def test_access_token_claims(tokens):
    payload = tokens.verify_token(tokens.generate_token(7, Role.MANAGER))

    assert payload["id"] == 7
    assert payload["role"] == "manager"
    assert payload["iss"] == JWT_ISSUER
    assert payload["aud"] == JWT_AUDIENCE


def test_expired_token_is_rejected():
    service = TokenService(TokenSettings(secret="s", refresh_secret="r", expires_in="-10s"))

    with pytest.raises(TokenError, match="expired"):
        service.verify_token(service.generate_token(1, "admin"))


def test_token_signed_with_other_secret_is_rejected(tokens):
    forged = jwt.encode({"id": 1, "role": "admin", "iss": JWT_ISSUER, "aud": JWT_AUDIENCE}, "other", algorithm="HS256")

    with pytest.raises(TokenError, match="Invalid token"):
        tokens.verify_token(forged)


def test_refresh_and_access_tokens_are_not_interchangeable():
    same_secret = TokenService(TokenSettings(secret="s", refresh_secret="s"))

    with pytest.raises(TokenError):
        same_secret.verify_token(same_secret.generate_refresh_token(1))
    with pytest.raises(TokenError):
        same_secret.verify_refresh_token(same_secret.generate_token(1, "admin"))


def test_permissions_table():
    assert has_permission(get_permissions("admin"), "employees", "delete")
    assert has_permission(get_permissions(Role.MANAGER), "leaves", "approve")
    assert not has_permission(get_permissions("employee"), "leaves", "approve")
    assert not has_permission(get_permissions("hr"), "employees", "delete")
    assert get_permissions("intern") == {}


def test_login_by_username_or_email(users, tokens):
    svc = AuthService(users, tokens)

    by_name = svc.login("ana", "pw-ana")
    by_email = svc.login("ana@example.com", "pw-ana")

    assert by_name.user["id"] == by_email.user["id"] == 1
    assert tokens.verify_token(by_name.token)["role"] == "hr"
    assert users.logins == [1, 1]
    assert "permissions" in by_name.to_dict()


def test_login_rejects_bad_password_and_inactive_users(users, tokens):
    svc = AuthService(users, tokens)

    with pytest.raises(AuthenticationError, match="Invalid credentials"):
        svc.login("ana", "wrong")
    with pytest.raises(AuthenticationError, match="deactivated"):
        svc.login("bo", "pw-bo")
    with pytest.raises(AuthenticationError):
        svc.login("nobody", "pw")
    with pytest.raises(ValidationError):
        svc.login("", "pw")
    assert users.logins == []


def test_refresh_issues_new_pair(users, tokens):
    svc = AuthService(users, tokens)
    first = svc.login("ana", "pw-ana")

    refreshed = svc.refresh(first.refresh_token)

    assert refreshed.user["id"] == 1
    assert svc.current_user(refreshed.token)["username"] == "ana"


def test_current_user_requires_existing_active_user(users, tokens):
    svc = AuthService(users, tokens)

    with pytest.raises(AuthenticationError, match="User not found"):
        svc.current_user(tokens.generate_token(99, "admin"))
    with pytest.raises(AuthenticationError, match="deactivated"):
        svc.current_user(tokens.generate_token(2, "employee"))
