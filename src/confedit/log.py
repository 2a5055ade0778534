from __future__ import annotations

import logging
import os

logger = logging.getLogger("confedit")


def enable_debug() -> None:
    """Send ``confedit`` log records to stderr at DEBUG level."""
    if not any(getattr(h, "_confedit", False) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(levelname)s:%(name)s:%(message)s"))
        handler._confedit = True  # type: ignore[attr-defined]
        logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)


if os.environ.get("CONFEDIT_DEBUG"):
    enable_debug()

__all__ = ["enable_debug", "logger"]
