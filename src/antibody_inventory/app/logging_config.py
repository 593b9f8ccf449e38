from __future__ import annotations

import logging
import sys

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

_HANDLER_NAME = "antibody_inventory.console"


def configure_logging(level: str | int = "INFO", debug: bool = False) -> logging.Logger:
    """Send package logs to stdout. Calling it again only adjusts the level."""
    logger = logging.getLogger("antibody_inventory")
    if debug:
        resolved = logging.DEBUG
    elif isinstance(level, str):
        # getLevelName returns "Level X" for names it doesn't know
        resolved = logging.getLevelName(level.upper())
    else:
        resolved = level
    if not isinstance(resolved, int):
        resolved = logging.INFO
    logger.setLevel(resolved)

    handler = next((h for h in logger.handlers if h.get_name() == _HANDLER_NAME), None)
    if handler is None:
        handler = logging.StreamHandler(sys.stdout)
        handler.set_name(_HANDLER_NAME)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    handler.setLevel(resolved)
    return logger
