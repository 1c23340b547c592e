"""The engine's two loggers: ``System`` for the core and ``App`` for clients."""

from __future__ import annotations

import logging
import sys

TRACE = 5
logging.addLevelName(TRACE, "TRACE")

_CORE_NAME = "System"
_CLIENT_NAME = "App"
_FORMAT = "[%(asctime)s] %(name)s: %(message)s"
_DATE_FORMAT = "%H:%M:%S"


def _configure(logger: logging.Logger) -> None:
    if any(getattr(h, "_planetsim", False) for h in logger.handlers):
        return
    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(_FORMAT, _DATE_FORMAT))
    handler._planetsim = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    logger.setLevel(TRACE)
    logger.propagate = False


def init() -> None:
    """Attach stdout handlers to both loggers and enable every level."""
    _configure(core_logger())
    _configure(client_logger())


def shutdown() -> None:
    """Flush and detach the handlers that ``init`` attached."""
    for logger in (core_logger(), client_logger()):
        for handler in [h for h in logger.handlers if getattr(h, "_planetsim", False)]:
            handler.flush()
            logger.removeHandler(handler)
            handler.close()
        logger.propagate = True


def core_logger() -> logging.Logger:
    """Return the engine's own logger."""
    return logging.getLogger(_CORE_NAME)


def client_logger() -> logging.Logger:
    """Return the logger for application code."""
    return logging.getLogger(_CLIENT_NAME)