from __future__ import annotations

from sqlalchemy import or_, select
from werkzeug.security import generate_password_hash

from ..common.logger import get_logger
from ..core.enums import Role
from .connection import ConnectionManager
from .models import Department, User

logger = get_logger(__name__)

DEFAULT_DEPARTMENTS = ("Human Resources", "Engineering", "Finance")


def ensure_admin_user(db: ConnectionManager, *, username: str, email: str, password: str) -> int:
    """Create the bootstrap admin, or reset its password/role if it already exists."""

    password_hash = generate_password_hash(password)

    def work(session) -> int:
        user = session.scalars(select(User).where(or_(User.username == username, User.email == email))).first()
        if user:
            user.password_hash = password_hash
            user.role = Role.ADMIN.value
            user.is_active = True
        else:
            user = User(username=username, email=email, password_hash=password_hash, role=Role.ADMIN.value)
            session.add(user)
        session.flush()
        return int(user.id)

    user_id = db.transaction(work)
    logger.info("Admin user ready: %s (id=%s)", username, user_id)
    return user_id


def ensure_departments(db: ConnectionManager, names=DEFAULT_DEPARTMENTS) -> int:
    def work(session) -> int:
        existing = set(session.scalars(select(Department.name)))
        created = 0
        for name in names:
            if name not in existing:
                session.add(Department(name=name))
                created += 1
        return created

    return db.transaction(work)
