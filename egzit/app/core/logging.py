"""
Logging setup.

All application loggers live under the "egzit" hierarchy so a single
handler configuration covers middleware, services and the route client.
"""

import logging

from egzit.app.core.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logging() -> None:
    """Configure the root "egzit" logger once per process."""
    level = getattr(logging, settings.log_level.upper(), logging.INFO)
    logger = logging.getLogger("egzit")
    logger.setLevel(level)

    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
