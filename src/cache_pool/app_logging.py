"""Logging configuration helpers."""

import logging

_FORMAT = "%(levelname)s: %(name)s: %(message)s"


def configure_logging(level: int | str = logging.INFO) -> None:
    """Send ``cache_pool`` log records to a single stream handler.

    The library itself only emits records; applications call this once at
    startup when they want cache warnings on stderr without configuring the
    root logger. ``level`` accepts a number or a name such as ``"DEBUG"``.
    """
    logger = logging.getLogger("cache_pool")
    logger.setLevel(level.upper() if isinstance(level, str) else level)
    if logger.handlers:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(_FORMAT))
    logger.addHandler(handler)
    logger.propagate = False
