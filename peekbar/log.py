"""Logging configuration for the panel controller.

PEEKBAR_LOG_LEVEL sets the overall level (default WARNING).
PEEKBAR_DEBUG lists components to log at debug regardless of that level,
e.g. ``PEEKBAR_DEBUG=barrier,hot_edge`` while tuning the edge gesture
without the per-second enforcer noise.
"""

import logging
import os

LOG_LEVEL = os.environ.get("PEEKBAR_LOG_LEVEL", "WARNING").upper()

logging.basicConfig(
    format="%(asctime)s.%(msecs)03d %(name)-18s %(levelname)-5s %(message)s",
    datefmt="%H:%M:%S",
    level=getattr(logging, LOG_LEVEL, logging.WARNING),
)


def parse_debug_components(value: str | None) -> frozenset[str]:
    """Comma separated component names, blanks dropped."""
    if not value:
        return frozenset()
    return frozenset(part.strip() for part in value.split(",") if part.strip())


DEBUG_COMPONENTS = parse_debug_components(os.environ.get("PEEKBAR_DEBUG"))


def get_logger(name: str) -> logging.Logger:
    """Return a logger under the 'peekbar.' namespace."""
    logger = logging.getLogger(f"peekbar.{name}")
    if name in DEBUG_COMPONENTS or "all" in DEBUG_COMPONENTS:
        logger.setLevel(logging.DEBUG)
    return logger
