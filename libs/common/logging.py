from __future__ import annotations

import logging
import sys

CLIENT_LOGGER = "libs.mixpanel"

# httpx logs every request line at INFO and httpcore traces at DEBUG, which
# drowns out the client's own send/response lines.
NOISY_LOGGERS = ("httpx", "httpcore")


def configure_logging(level: str = "INFO") -> None:
    """Send the Mixpanel client's logs to stdout at ``level``.

    Records from ``libs.mixpanel`` are emitted at ``level``; httpx and httpcore
    never go below WARNING.
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    root_logger.addHandler(handler)

    logging.getLogger(CLIENT_LOGGER).setLevel(numeric_level)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(numeric_level, logging.WARNING))
