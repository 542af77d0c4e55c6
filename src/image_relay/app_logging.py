"""Logging configuration helpers."""

import logging

LOGGER_NAME = "image_relay"


def configure_logging(level: str = "INFO") -> None:
    """Attach one stream handler to the relay logger and apply ``level``.

    Unknown level names fall back to INFO. Calling this again only updates
    the level.
    """
    logger = logging.getLogger(LOGGER_NAME)
    resolved = logging.getLevelName(level.strip().upper())
    logger.setLevel(resolved if isinstance(resolved, int) else logging.INFO)
    if logger.handlers:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)s: %(name)s: %(message)s")
    )
    logger.addHandler(handler)
    logger.propagate = False
