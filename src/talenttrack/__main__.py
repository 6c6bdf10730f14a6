from __future__ import annotations

import sys

from dotenv import load_dotenv

from .auth.decorators import EXTENSION_KEY
from .common.logger import get_logger
from .config import load_settings
from .core.exceptions import DomainError
from .lifecycle import install_signal_handlers
from .main import create_app

logger = get_logger("talenttrack")


def main() -> None:
    load_dotenv(override=False)
    settings = load_settings()
    try:
        app = create_app(settings)
    except DomainError as e:
        logger.error("Failed to start server: %s", e.message)
        sys.exit(1)

    install_signal_handlers(app.extensions[EXTENSION_KEY].db)
    port = int(getattr(settings, "PORT", 3000))
    logger.info("TalentTrack API listening on port %s", port)
    app.run(host="0.0.0.0", port=port, debug=bool(getattr(settings, "DEBUG", False)), use_reloader=False)


if __name__ == "__main__":
    main()
