"""Structured logging helpers shared by every component."""

import logging
from typing import Optional, Union

from .config import SERVICE_NAME, configure_logging
from .context import (
    clear_log_context,
    get_log_context,
    pop_log_context,
    push_log_context,
    scoring_context,
)


class ComponentLoggerAdapter(logging.LoggerAdapter):
    """LoggerAdapter that tags records with a component name.

    Per-call ``extra`` is merged on top of the adapter's fields instead of
    replacing them (the stdlib adapter discards the call's extra).
    """

    def process(self, msg, kwargs):
        kwargs["extra"] = {**self.extra, **kwargs.get("extra", {})}
        return msg, kwargs


def get_logger(
    name: str, component: Optional[str] = None
) -> Union[logging.Logger, ComponentLoggerAdapter]:
    """Get a logger, optionally bound to a component.

    Example:
        >>> logger = get_logger(__name__, component="ranking")
        >>> logger.info("Ranked internships", extra={"event": "ranking.completed"})
    """
    logger = logging.getLogger(name)
    if component:
        return ComponentLoggerAdapter(logger, {"component": component})
    return logger


__all__ = [
    "SERVICE_NAME",
    "ComponentLoggerAdapter",
    "configure_logging",
    "get_logger",
    "get_log_context",
    "push_log_context",
    "pop_log_context",
    "clear_log_context",
    "scoring_context",
]
