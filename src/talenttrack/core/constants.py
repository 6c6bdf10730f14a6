"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_MAX_RETRIES = 5
BACKOFF_BASE_MS = 1000
BACKOFF_MAX_MS = 10000

DEFAULT_PAGE_LIMIT = 50
MAX_PAGE_LIMIT = 200

API_PREFIX = "/api/v1"
API_VERSION = "1.0.0"

JWT_ISSUER = "talenttrack-api"
JWT_AUDIENCE = "talenttrack-client"
JWT_ALGORITHM = "HS256"
