"""Loggers for sqlfluent.

Every logger lives under the ``sqlfluent`` namespace so applications can tune the
whole package through one parent logger. Statement, cache and savepoint events
carry their details in an ``extra_fields`` mapping on the record.
"""

import logging
from typing import Any, Optional

__all__ = ("ROOT_LOGGER_NAME", "get_logger", "log_with_context")

ROOT_LOGGER_NAME = "sqlfluent"


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """Return ``sqlfluent`` or a child logger such as ``sqlfluent.driver``."""
    if name is None:
        return logging.getLogger(ROOT_LOGGER_NAME)
    if name != ROOT_LOGGER_NAME and not name.startswith(f"{ROOT_LOGGER_NAME}."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def log_with_context(logger: logging.Logger, level: int, event: str, **fields: Any) -> None:
    """Log ``event`` with ``fields`` attached as ``record.extra_fields``.

    Args:
        logger: Logger to emit on.
        level: Logging level.
        event: Dotted event name, for example ``cache.hit``.
        **fields: Event details such as ``sql`` or ``ttl``.
    """
    if logger.isEnabledFor(level):
        logger.log(level, event, extra={"extra_fields": fields}, stacklevel=2)
