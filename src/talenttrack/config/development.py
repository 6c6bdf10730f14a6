from .base import *  # noqa: F401,F403

# Gates SQL echo and non-destructive schema altering
DEVELOPMENT = True
DEBUG = True
