"""Context propagation for structured logging.

Fields pushed here (student_id, internship_id, matching_version, ...) are
attached to every log record emitted while they are active. Storage is a
ContextVar, so concurrent scoring in threads or tasks keeps separate
contexts.
"""

from contextlib import contextmanager
from contextvars import ContextVar, Token
from typing import Any, Dict, Iterator

_log_context: ContextVar[Dict[str, Any]] = ContextVar("internmatch_log_context", default={})


def get_log_context() -> Dict[str, Any]:
    """Return a copy of the active logging context."""
    return dict(_log_context.get())


def push_log_context(**fields: Any) -> Token:
    """Merge fields into the logging context.

    Fields set to None are dropped so optional identifiers never show up as
    ``null`` in every line.

    Returns:
        Token for pop_log_context()
    """
    merged = dict(_log_context.get())
    merged.update({key: value for key, value in fields.items() if value is not None})
    return _log_context.set(merged)


def pop_log_context(token: Token) -> None:
    """Restore the context that was active before push_log_context()."""
    _log_context.reset(token)


def clear_log_context() -> None:
    """Drop every context field. Mostly useful in tests."""
    _log_context.set({})


@contextmanager
def scoring_context(**fields: Any) -> Iterator[Dict[str, Any]]:
    """Scope logging context to a block.

    Example:
        >>> with scoring_context(student_id="s-1", internship_id="i-9"):
        ...     logger.info("Scoring pair", extra={"event": "matching.pair.started"})

    Yields:
        The merged context active inside the block
    """
    token = push_log_context(**fields)
    try:
        yield get_log_context()
    finally:
        pop_log_context(token)
