from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


class InicfgError(Exception):
    """Base class for pyinicfg errors."""


class SpecLoadError(InicfgError):
    """Raised when a specification document cannot be parsed."""


# ---------------------------------------------------------------------------
# Shared error-message buffer
# ---------------------------------------------------------------------------

_messages: list[str] = []


def append_error_message(msg: str = "") -> None:
    """Append *msg* to the shared buffer; an empty message clears it.

    A message already in the buffer is not repeated.
    """
    if not msg:
        _messages.clear()
        return
    if msg in _messages:
        return
    _messages.append(msg)
    logger.debug("error buffer: %s", msg)


def clear_error_message() -> None:
    _messages.clear()


def error_message() -> str:
    return "\n".join(_messages)


def is_error() -> bool:
    return bool(_messages)
