"""Structured logging helpers."""

from __future__ import annotations

import json
import logging
import os
import time
from contextlib import contextmanager
from typing import Any, Dict, Iterator

JSON_LOGS_ENV = "SEQENGINE_JSON_LOGS"


def _json_logs_from_env() -> bool:
    return os.getenv(JSON_LOGS_ENV, "false").lower() == "true"


def configure_logging(level: str = "WARNING", json_logs: bool | None = None) -> None:
    """Configure global logging. Respects SEQENGINE_JSON_LOGS env override."""

    if json_logs is None:
        json_logs = _json_logs_from_env()

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(message)s" if json_logs else "%(levelname)s:%(name)s:%(message)s",
    )


def log_event(
    logger: logging.Logger,
    event: str,
    *,
    level: int = logging.INFO,
    json_logs: bool | None = None,
    **fields: Any,
) -> None:
    """Emit a structured log event; numpy scalars and paths are rendered with ``str``."""

    if json_logs is None:
        json_logs = _json_logs_from_env()

    payload = {"event": event, **fields}
    if json_logs:
        logger.log(level, json.dumps(payload, default=str))
    else:
        logger.log(level, payload)


@contextmanager
def timed_event(logger: logging.Logger, event: str, **fields: Any) -> Iterator[Dict[str, Any]]:
    """Log ``event`` with ``elapsed_ms`` once the block completes.

    The yielded dict may be updated inside the block. Nothing is logged when
    the block raises.
    """

    payload: Dict[str, Any] = dict(fields)
    started = time.perf_counter()
    yield payload
    payload["elapsed_ms"] = round((time.perf_counter() - started) * 1000.0, 3)
    log_event(logger, event, **payload)
