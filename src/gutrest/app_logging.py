"""Logging configuration helpers.

Calculators log at DEBUG, store mutations and migrations at INFO, and
rejected fasting windows or unreadable settings at WARNING.
"""

import logging


def configure_logging(level: int | str = logging.INFO) -> None:
    """Configure the ``gutrest`` logger with a single stream handler.

    The level may be a number or a name such as ``"DEBUG"``. Repeated calls
    only adjust the level.
    """
    logger = logging.getLogger("gutrest")
    logger.setLevel(level.upper() if isinstance(level, str) else level)
    if logger.handlers:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(levelname)s: %(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.propagate = False
