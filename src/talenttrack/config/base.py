"""Settings shared by every environment, read from the process environment."""

import os


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name, "")
    try:
        return int(raw)
    except ValueError:
        return default


def _flag_env(name: str, default: str) -> bool:
    return bool(int(os.getenv(name, default)))


SECRET_KEY = os.getenv("SECRET_KEY", "talenttrack-dev-secret")

DB_CONFIG = {
    "database": os.getenv("DB_NAME", "talenttrack"),
    "user": os.getenv("DB_USER", "postgres"),
    "password": os.getenv("DB_PASSWORD", "password"),
    "host": os.getenv("DB_HOST", "localhost"),
    "port": _int_env("DB_PORT", 5432),
    "dialect": os.getenv("DB_DIALECT", "postgres"),
    "pool_max": _int_env("DB_POOL_MAX", 20),
    "pool_min": _int_env("DB_POOL_MIN", 5),
    "pool_acquire_ms": _int_env("DB_POOL_ACQUIRE", 30000),
    "pool_idle_ms": _int_env("DB_POOL_IDLE", 10000),
    "connect_timeout_ms": _int_env("DB_CONNECT_TIMEOUT", 60000),
    "acquire_timeout_ms": _int_env("DB_ACQUIRE_TIMEOUT", 60000),
    "query_timeout_ms": _int_env("DB_QUERY_TIMEOUT", 60000),
}

JWT_SECRET = os.getenv("JWT_SECRET", SECRET_KEY)
JWT_REFRESH_SECRET = os.getenv("JWT_REFRESH_SECRET", JWT_SECRET)
JWT_EXPIRES_IN = os.getenv("JWT_EXPIRES_IN", "7d")
JWT_REFRESH_EXPIRES_IN = os.getenv("JWT_REFRESH_EXPIRES_IN", "30d")

PORT = _int_env("PORT", 3000)
CLIENT_URL = os.getenv("CLIENT_URL", "http://localhost:3000")

LOG_DIR = os.getenv("LOG_DIR", "logs")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# Bootstrap admin created by seed
ADMIN_USERNAME = os.getenv("ADMIN_USERNAME", "admin")
ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "admin@talenttrack.local")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "admin123")

AUTO_SYNC_DB = _flag_env("AUTO_SYNC_DB", "1")
AUTO_SEED_DB = _flag_env("AUTO_SEED_DB", "0")
