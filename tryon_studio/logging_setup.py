"""Logging setup shared by the server and scripts."""

import logging

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


def configure_logging(level: str | int = "INFO") -> None:
    """Install one stream handler on the package logger."""
    logger = logging.getLogger("tryon_studio")
    logger.setLevel(level)

    if not any(getattr(h, "_tryon_studio", False) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        handler._tryon_studio = True  # type: ignore[attr-defined]
        logger.addHandler(handler)
