"""Structured logging helpers for the entry-point adapter.

Purpose
    Keep every diagnostic emitted while dispatching a command predictable and
    contextual without forcing applications to adopt a logging backend.

Contents
    - ``get_logger``: returns the shared package logger (quiet by default).
    - ``log_debug`` / ``log_info`` / ``log_error``: emit structured entries via a
      single private emitter.
    - ``make_event``: convenience builder for structured event payloads.
    - ``attach_stream_handler`` / ``detach_handler``: opt-in console output used
      by the CLI wrapper.

System Integration
    Used by the dispatcher and the default library function. Diagnostics never
    go to the command's output streams; those carry only user-facing text.
"""

from __future__ import annotations

import logging
from typing import IO, Any, Final, Mapping

_LOGGER: Final[logging.Logger] = logging.getLogger("lib_cmd_entry")
_LOGGER.addHandler(logging.NullHandler())

LOG_FORMAT: Final[str] = "%(levelname)s %(name)s: %(message)s %(context)s"


def get_logger() -> logging.Logger:
    """Expose the package logger so applications may attach handlers.

    Why
        Leaves the library silent by default while giving host applications full
        control over handler and formatter configuration.
    """

    return _LOGGER


def log_debug(message: str, **fields: Any) -> None:
    """Emit a structured debug log entry."""

    _emit(logging.DEBUG, message, fields)


def log_info(message: str, **fields: Any) -> None:
    """Emit a structured info log entry."""

    _emit(logging.INFO, message, fields)


def log_error(message: str, /, **fields: Any) -> None:
    """Emit a structured error log entry."""

    _emit(logging.ERROR, message, fields)


def make_event(stage: str, payload: Mapping[str, Any] | None = None) -> dict[str, Any]:
    """Build a structured logging payload for a dispatch stage.

    Why
        Keeps event construction consistent so downstream log processors can rely
        on stable keys.
    Inputs
        stage: Name of the dispatch stage (``validate``, ``parse``, ``call``...).
        payload: Optional mapping with extra diagnostic detail.
    Outputs
        dict[str, Any]: Data safe to unpack into :func:`log_*` helpers.

    Examples
    --------
    >>> make_event('parse', {'files': 1})
    {'stage': 'parse', 'files': 1}
    """

    event: dict[str, Any] = {"stage": stage}
    if payload:
        event |= dict(payload)
    return event


def attach_stream_handler(stream: IO[str], level: int | str) -> logging.Handler:
    """Route package logs to *stream* at *level* and return the new handler.

    The caller owns the handler and must pass it to :func:`detach_handler`.
    """

    handler = logging.StreamHandler(stream)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, defaults={"context": {}}))
    handler.setLevel(level)
    _LOGGER.addHandler(handler)
    _LOGGER.setLevel(level)
    return handler


def detach_handler(handler: logging.Handler) -> None:
    """Remove *handler* from the package logger and reset its level."""

    _LOGGER.removeHandler(handler)
    _LOGGER.setLevel(logging.NOTSET)


def _emit(level: int, message: str, fields: Mapping[str, Any]) -> None:
    """Send a log entry through the shared logger with contextual metadata."""

    _LOGGER.log(level, message, extra={"context": dict(fields)})
