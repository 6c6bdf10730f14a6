from __future__ import annotations

from typing import Optional

from sqlalchemy import or_, select, update

from ..common.datetime_utils import utc_now
from ..database.connection import ConnectionManager
from ..database.models import User
from ..database.repository import SqlAlchemyRepository
from .repository import UserRepository


class SqlUserRepository(SqlAlchemyRepository, UserRepository):
    def __init__(self, db: ConnectionManager):
        super().__init__(db, User, name="User")

    def get_credentials(self, login: str) -> Optional[tuple[dict, str]]:
        stmt = select(User).where(or_(User.username == login, User.email == login)).limit(1)

        def work(session):
            user = session.scalars(stmt).first()
            if user is None:
                return None
            return user.to_dict(), user.password_hash

        return self._run(work)

    def touch_last_login(self, user_id: int) -> None:
        stmt = update(User).where(User.id == user_id).values(last_login=utc_now().replace(tzinfo=None))
        self._run(lambda session: session.execute(stmt))
