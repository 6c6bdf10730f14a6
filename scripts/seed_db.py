"""Seed the bootstrap admin account and default departments."""

from __future__ import annotations

from dotenv import load_dotenv

from talenttrack.config import load_settings
from talenttrack.container import build_container
from talenttrack.database.seed import ensure_admin_user, ensure_departments


def main() -> None:
    load_dotenv(override=False)
    settings = load_settings()
    db = build_container(settings).db
    try:
        db.authenticate()
        db.sync()
        ensure_admin_user(
            db,
            username=settings.ADMIN_USERNAME,
            email=settings.ADMIN_EMAIL,
            password=settings.ADMIN_PASSWORD,
        )
        created = ensure_departments(db)
    finally:
        db.close()

    print(f"OK: admin '{settings.ADMIN_USERNAME}' ready, {created} department(s) created")


if __name__ == "__main__":
    main()
