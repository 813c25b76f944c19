"""Structured logging utilities for aegis.

All modules log through children of the shared ``aegis`` logger, which owns a
single stderr handler (JSON by default). The level comes from
``AEGIS_LOG_LEVEL`` and can be changed at runtime with
:func:`configure_logger`, which also manages an optional rotating file
handler.

Events are emitted with :func:`log_event` as one JSON object per line.
:func:`normalized_log_event` guarantees the presence of the canonical keys
(``phase``, ``latency_ms``, ``error_code``, ``emitted``) so dashboards can
filter uniformly across providers. Nothing logged here may contain a
credential; request headers are redacted by ``WireRequest.redacted_headers``
before they reach a log call.
"""
from __future__ import annotations

import contextlib
import json
import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import Any, Dict, Optional, Union

from .log_support import JsonFormatter, LogContext

ROOT_LOGGER_NAME = "aegis"
LOG_LEVEL_ENV = "AEGIS_LOG_LEVEL"

_PLAIN_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
_INITIALIZED_ATTR = "_aegis_logger_initialized"
_CONSOLE_ATTR = "_aegis_console_handler"
_FILE_ATTR = "_aegis_file_handler"

_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARN": logging.WARNING,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def _parse_level(value: Optional[str], default: int = logging.INFO) -> int:
    """Parse a level name case-insensitively, falling back to ``default``."""
    if not value:
        return default
    return _LEVELS.get(value.strip().upper(), default)


def _formatter(json_mode: bool) -> logging.Formatter:
    return JsonFormatter() if json_mode else logging.Formatter(_PLAIN_FORMAT)


def _ensure_root_logger(json_mode: bool) -> logging.Logger:
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    level = _parse_level(os.getenv(LOG_LEVEL_ENV))
    if getattr(logger, _INITIALIZED_ATTR, False):
        # Replace a console handler whose stream was closed (pytest capture swaps).
        for handler in list(logger.handlers):
            if not getattr(handler, _CONSOLE_ATTR, False):
                continue
            stream = getattr(handler, "stream", None)
            if stream is None or getattr(stream, "closed", False):
                logger.removeHandler(handler)
                logger.addHandler(_console_handler(json_mode, logger.level))
        return logger

    logger.setLevel(level)
    logger.handlers[:] = [_console_handler(json_mode, level)]
    logger.propagate = False
    setattr(logger, _INITIALIZED_ATTR, True)
    return logger


def _console_handler(json_mode: bool, level: int) -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(_formatter(json_mode))
    setattr(handler, _CONSOLE_ATTR, True)
    return handler


def get_logger(name: str = ROOT_LOGGER_NAME, json_mode: bool = True) -> logging.Logger:
    """Return the shared ``aegis`` logger or one of its children.

    Children carry no handlers of their own and propagate to the root
    ``aegis`` logger, so a name outside the ``aegis.`` namespace is nested
    under it.
    """
    root = _ensure_root_logger(json_mode)
    if name == ROOT_LOGGER_NAME:
        return root
    if not name.startswith(ROOT_LOGGER_NAME + "."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def configure_logger(
    *,
    level: Union[int, str, None] = None,
    file_path: Optional[str] = None,
    json_mode: bool = True,
) -> logging.Logger:
    """Reconfigure the shared ``aegis`` logger at runtime.

    Parameters
    ----------
    level:
        Numeric level or name (e.g. ``"DEBUG"``); ``None`` keeps the current one.
    file_path:
        When given, attach (or retarget) a rotating file handler writing to
        this path; when ``None``, remove any file handler added here earlier.
        Handlers attached by the application are left alone.
    json_mode:
        JSON or plain-text formatting for the managed handlers.
    """
    logger = get_logger(json_mode=json_mode)
    if level is not None:
        numeric = _parse_level(level, default=logger.level) if isinstance(level, str) else level
        logger.setLevel(numeric)
        for handler in logger.handlers:
            handler.setLevel(numeric)

    managed = [h for h in logger.handlers if getattr(h, _FILE_ATTR, False)]
    target = os.path.abspath(os.path.expanduser(file_path)) if file_path else None
    for handler in managed:
        if target is not None and getattr(handler, "baseFilename", None) == target:
            handler.setFormatter(_formatter(json_mode))
            handler.setLevel(logger.level)
            return logger
        logger.removeHandler(handler)
        with contextlib.suppress(OSError):
            handler.close()
    if target is None:
        return logger

    directory = os.path.dirname(target)
    if directory:
        os.makedirs(directory, exist_ok=True)
    # 10MB x 5 backups
    fh = RotatingFileHandler(target, maxBytes=10 * 1024 * 1024, backupCount=5, encoding="utf-8")
    fh.setLevel(logger.level)
    fh.setFormatter(_formatter(json_mode))
    setattr(fh, _FILE_ATTR, True)
    logger.addHandler(fh)
    return logger


def log_event(
    logger: logging.Logger,
    event: str,
    ctx: Optional[LogContext] = None,
    *,
    level: int = logging.INFO,
    keep_none: bool = False,
    **fields: Any,
) -> None:
    """Emit ``{"event": event, **ctx, **fields}`` as one JSON line.

    ``None`` values are dropped unless ``keep_none`` is set.
    """
    payload: Dict[str, Any] = {"event": event}
    if ctx is not None:
        payload |= ctx.to_dict()
    payload.update(fields if keep_none else {k: v for k, v in fields.items() if v is not None})
    logger.log(level, json.dumps(payload, ensure_ascii=False, default=str))


REQUIRED_NORMALIZED_KEYS = ("phase", "latency_ms", "emitted")


def normalized_log_event(
    logger: logging.Logger,
    event: str,
    ctx: Optional[LogContext] = None,
    *,
    phase: str,
    latency_ms: Optional[float] = None,
    error_code: Optional[str] = None,
    emitted: Optional[int] = None,
    level: Optional[int] = None,
    **extra_fields: Any,
) -> None:
    """Emit an event that always carries :data:`REQUIRED_NORMALIZED_KEYS`.

    ``error_code`` is included only when set. Error events default to
    ``WARNING`` level, everything else to ``INFO``. Extra fields never
    overwrite the normalized ones.
    """
    fields: Dict[str, Any] = {
        "phase": phase,
        "latency_ms": round(latency_ms, 2) if latency_ms is not None else None,
        "emitted": emitted,
    }
    if error_code is not None:
        fields["error_code"] = error_code
    for key, value in extra_fields.items():
        if value is not None and key not in fields:
            fields[key] = value
    if level is None:
        level = logging.WARNING if error_code is not None else logging.INFO
    log_event(logger, event, ctx, level=level, keep_none=True, **fields)


__all__ = [
    "LogContext",
    "REQUIRED_NORMALIZED_KEYS",
    "configure_logger",
    "get_logger",
    "log_event",
    "normalized_log_event",
]
