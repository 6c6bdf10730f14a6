"""Example: drive the service layer and connection manager without Flask.

Controllers stay thin; the same use cases can run from a script.
"""

from dotenv import load_dotenv

from talenttrack.config import load_settings
from talenttrack.container import build_container


def main():
    load_dotenv(override=False)
    container = build_container(load_settings())
    db = container.db
    try:
        db.authenticate()
        print(db.get_status().to_dict())
        print(container.resource_services["employees"].list({"limit": 5}))
        print(db.query("SELECT count(*) AS n FROM leaves WHERE status = :status", {"params": {"status": "pending"}}))
    finally:
        db.close()


if __name__ == "__main__":
    main()
