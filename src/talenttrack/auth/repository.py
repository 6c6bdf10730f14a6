from __future__ import annotations

from typing import Optional, Protocol


class UserRepository(Protocol):
    """Lookup surface the auth use cases depend on.

    Rows are plain dicts without ``password_hash``; the hash only comes back
    from ``get_credentials``.
    """

    def get_by_id(self, user_id: int) -> Optional[dict]:
        raise NotImplementedError

    def get_credentials(self, login: str) -> Optional[tuple[dict, str]]:
        raise NotImplementedError

    def touch_last_login(self, user_id: int) -> None:
        raise NotImplementedError
