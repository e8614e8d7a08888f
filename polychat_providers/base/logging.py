"""Structured logging utilities for the provider layer.

All package loggers are children of the shared ``polychat`` logger, which owns
a single stderr handler using :class:`JsonFormatter`. The level comes from
``POLYCHAT_LOG_LEVEL`` (default INFO).

``normalized_log_event`` wraps ``log_event`` and guarantees the canonical keys
``structured``, ``phase``, ``attempt``, ``emitted`` and ``tokens`` (plus
``error_code`` when an error is being reported) so HTTP attempts, stream
lifecycle and tool dispatch all log with one schema.
"""
from __future__ import annotations

import contextlib
import json
import logging
import os
import sys
from typing import Any, Dict, Mapping

from .log_support import JsonFormatter, LogContext

BASE_LOGGER_NAME = "polychat"
_CONSOLE_HANDLER_ATTR = "_polychat_console_handler"
_PLAIN_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def _parse_level(value: str | None, default: int = logging.INFO) -> int:
    """Parse a level name (DEBUG, INFO, WARNING, ERROR, CRITICAL) case-insensitively."""
    if not value:
        return default
    mapping = {
        "DEBUG": logging.DEBUG,
        "INFO": logging.INFO,
        "WARN": logging.WARNING,
        "WARNING": logging.WARNING,
        "ERROR": logging.ERROR,
        "CRITICAL": logging.CRITICAL,
    }
    return mapping.get(value.strip().upper(), default)


def _make_handler(json_mode: bool, level: int) -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(JsonFormatter() if json_mode else logging.Formatter(_PLAIN_FORMAT))
    setattr(handler, _CONSOLE_HANDLER_ATTR, True)
    return handler


def _ensure_base_logger(json_mode: bool, level: int) -> logging.Logger:
    """Initialize (or refresh) the shared ``polychat`` logger.

    The console handler is rebuilt on every call so it always targets the
    current ``sys.stderr`` (pytest swaps it per test).
    """
    logger = logging.getLogger(BASE_LOGGER_NAME)
    desired = _parse_level(os.getenv("POLYCHAT_LOG_LEVEL"), default=level)
    logger.setLevel(desired)
    for existing in list(logger.handlers):
        if getattr(existing, _CONSOLE_HANDLER_ATTR, False):
            logger.removeHandler(existing)
            with contextlib.suppress(Exception):
                existing.close()
    logger.addHandler(_make_handler(json_mode, desired))
    logger.propagate = False
    return logger


def get_logger(
    name: str = BASE_LOGGER_NAME, json_mode: bool = True, level: int = logging.INFO
) -> logging.Logger:
    """Return a package logger; child names should start with ``polychat.``."""
    base_logger = _ensure_base_logger(json_mode=json_mode, level=level)
    if name == BASE_LOGGER_NAME:
        return base_logger
    logger = logging.getLogger(name)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
    return logger


def configure_logger(*, level: int | str | None = None, json_mode: bool = True) -> logging.Logger:
    """Adjust the shared logger level and formatter at runtime."""
    logger = logging.getLogger(BASE_LOGGER_NAME)
    if isinstance(level, str):
        resolved = _parse_level(level, default=logger.level or logging.INFO)
    elif level is None:
        resolved = logger.level or logging.INFO
    else:
        resolved = level
    for existing in list(logger.handlers):
        if getattr(existing, _CONSOLE_HANDLER_ATTR, False):
            logger.removeHandler(existing)
    logger.addHandler(_make_handler(json_mode, resolved))
    logger.setLevel(resolved)
    logger.propagate = False
    return logger


def log_event(
    logger: logging.Logger,
    event: str,
    ctx: LogContext | None = None,
    *,
    level: int = logging.INFO,
    keep_none: bool = False,
    **fields: Any,
) -> None:
    """Emit one structured JSON log line.

    Keys whose value is ``None`` are dropped unless ``keep_none`` is set.
    """
    payload: Dict[str, Any] = {"event": event}
    if ctx:
        payload |= ctx.to_dict()
    if keep_none:
        payload.update(fields)
    else:
        payload.update({k: v for k, v in fields.items() if v is not None})
    logger.log(level, json.dumps(payload, ensure_ascii=False, default=str))


REQUIRED_NORMALIZED_KEYS = (
    "structured",
    "phase",
    "attempt",
    "error_code",
    "emitted",
    "tokens",
)


def _coerce_tokens(tokens: Any) -> Any:
    """Coerce token usage info (mapping, dataclass with ``to_dict``, pairs) into a dict."""
    if tokens is None:
        return None
    if isinstance(tokens, Mapping):
        return dict(tokens.items())
    to_dict = getattr(tokens, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    if isinstance(tokens, (list, tuple)):
        with contextlib.suppress(TypeError, ValueError):
            return dict(tokens)
    return {"value": repr(tokens)}


def normalized_log_event(
    logger: logging.Logger,
    event: str,
    ctx: LogContext | None = None,
    *,
    phase: str,
    attempt: int | None = None,
    error_code: str | None = None,
    emitted: bool | None = None,
    tokens: Any = None,
    structured: bool = True,
    level: int = logging.INFO,
    **extra_fields: Any,
) -> None:
    """Emit a log event carrying the normalized key set.

    ``error_code`` is omitted when ``None``; the other required keys are always
    present. ``extra_fields`` never overwrite normalized values.
    """
    base_fields: Dict[str, Any] = {
        "structured": structured,
        "phase": phase,
        "attempt": attempt,
        "emitted": emitted,
        "tokens": _coerce_tokens(tokens),
    }
    if error_code is not None:
        base_fields["error_code"] = error_code
    for k, v in extra_fields.items():
        if v is None or base_fields.get(k) is not None:
            continue
        base_fields[k] = v
    log_event(logger, event, ctx, level=level, keep_none=True, **base_fields)


__all__ = [
    "BASE_LOGGER_NAME",
    "LogContext",
    "get_logger",
    "configure_logger",
    "log_event",
    "normalized_log_event",
    "REQUIRED_NORMALIZED_KEYS",
]
