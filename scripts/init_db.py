"""Create (or rebuild) the TalentTrack schema in the configured database."""

from __future__ import annotations

import argparse

from dotenv import load_dotenv

from talenttrack.config import load_settings
from talenttrack.container import build_container
from talenttrack.database.schema import list_tables


def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--force", action="store_true", help="drop and recreate every table (destroys data)")
    parser.add_argument("--alter", action="store_true", help="add columns missing from existing tables")
    args = parser.parse_args()

    load_dotenv(override=False)
    container = build_container(load_settings())
    db = container.db
    try:
        db.authenticate()
        db.sync({"force": args.force, "alter": args.alter})
        tables = list_tables(db.engine)
    finally:
        db.close()

    snapshot = db.config.snapshot()
    print(f"OK: schema synced -> {snapshot['host']}:{snapshot['port']}/{snapshot['database']} (tables={len(tables)})")


if __name__ == "__main__":
    main()
