from .base import *  # noqa: F401,F403

SECRET_KEY = "test-secret"
JWT_SECRET = "test-jwt-secret"
JWT_REFRESH_SECRET = "test-jwt-refresh-secret"

DB_CONFIG = dict(DB_CONFIG, dialect="sqlite", database=":memory:")  # noqa: F405

DEVELOPMENT = False
DEBUG = False
TESTING = True

AUTO_SYNC_DB = True
AUTO_SEED_DB = False
