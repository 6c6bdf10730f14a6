from __future__ import annotations

from types import ModuleType
from typing import Optional

from dotenv import load_dotenv
from flask import Flask

from .api.errors import register as register_errors
from .api.health import register as register_health
from .auth.controller import register as register_auth
from .auth.decorators import EXTENSION_KEY
from .common.logger import get_logger, init_logging
from .config import load_settings
from .container import Container, build_container
from .database.seed import ensure_admin_user, ensure_departments
from .leaves.controller import register as register_leaves
from .notifications.controller import register as register_notifications
from .resources.controller import register as register_resources

logger = get_logger(__name__)


def create_app(settings: Optional[ModuleType] = None, *, container: Optional[Container] = None) -> Flask:
    """Build the Flask app.

    The database must be reachable: ``authenticate`` failures propagate as
    ``DatabaseConnectionError`` so the caller can abort startup.
    """
    load_dotenv(override=False)
    if settings is None:
        settings = load_settings()
    init_logging(getattr(settings, "LOG_LEVEL", None))

    app = Flask(__name__)
    app.secret_key = getattr(settings, "SECRET_KEY")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))
    app.config["TESTING"] = bool(getattr(settings, "TESTING", False))
    app.json.sort_keys = False

    container = container or build_container(settings)
    db = container.db

    logger.info("Connecting to database %s", db.config.snapshot())
    db.authenticate()

    if getattr(settings, "AUTO_SYNC_DB", True):
        db.sync()
    if getattr(settings, "AUTO_SEED_DB", False):
        ensure_admin_user(
            db,
            username=getattr(settings, "ADMIN_USERNAME"),
            email=getattr(settings, "ADMIN_EMAIL"),
            password=getattr(settings, "ADMIN_PASSWORD"),
        )
        ensure_departments(db)

    app.extensions[EXTENSION_KEY] = container

    register_errors(app, container.error_logger, development=bool(getattr(settings, "DEVELOPMENT", False)))
    register_health(app, container)
    register_auth(app, container)
    register_leaves(app, container)
    register_notifications(app, container)
    register_resources(app, container.resource_services)

    return app
