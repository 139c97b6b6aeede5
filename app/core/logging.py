"""Logging for the manga reader API.

Services log event names such as ``bookmark_saved`` or ``comment_deleted``
with their context in ``extra``; this module only decides where those
records go.  Everything is written to stdout at ``settings.LOG_LEVEL``.
"""

import logging
import sys

from app.core.config import settings

# Chatty loggers from the Supabase HTTP stack and the access log, which
# would otherwise repeat every request already logged by the middleware.
QUIET_LOGGERS = ("httpx", "httpcore", "hpack", "uvicorn.access")


def setup_logging() -> None:
    """Install a single stdout handler on the root logger.

    Called from the application lifespan; calling it again replaces the
    handler instead of adding a second one.
    """
    level = getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)

    handler = logging.StreamHandler(stream=sys.stdout)
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%Y-%m-%dT%H:%M:%S%z",
        )
    )

    root = logging.getLogger()
    root.setLevel(level)
    root.handlers.clear()
    root.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
