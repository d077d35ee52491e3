"""Structured log events for HTTP calls and relation lookups."""

from __future__ import annotations

import logging
import time
from typing import Any, Dict, Optional

EVENT_LOGGER = "hal_client.observability"

# attribute names LogRecord already owns; `extra` must not collide with them
_RESERVED = frozenset(
    logging.LogRecord("", logging.INFO, "", 0, "", None, None).__dict__
) | {"message", "asctime"}


def event_fields(fields: Dict[str, Any]) -> Dict[str, Any]:
    """Fields safe to pass as `extra`: no reserved names, no None values."""
    return {k: v for k, v in fields.items() if k not in _RESERVED and v is not None}


def log_event(
    event: str,
    logger: Optional[logging.Logger] = None,
    *,
    level: int = logging.INFO,
    **fields: Any,
) -> None:
    log = logger or logging.getLogger(EVENT_LOGGER)
    if log.isEnabledFor(level):
        log.log(level, event, extra={"event": event, **event_fields(fields)})


def elapsed_ms(started: float) -> int:
    return int((time.perf_counter() - started) * 1000)


def log_http_call(
    method: str,
    url: str,
    *,
    status: Any,
    started: float,
    attempt: int = 0,
    error: Optional[BaseException] = None,
) -> None:
    """Emit one `hal_call` event; failed calls carry status="exception"."""
    log_event(
        "hal_call",
        method=method,
        url=url,
        status="exception" if error is not None else status,
        duration_ms=elapsed_ms(started),
        attempt=attempt,
        error_type=type(error).__name__ if error is not None else None,
    )


__all__ = ["log_event", "log_http_call", "event_fields", "elapsed_ms", "EVENT_LOGGER"]
