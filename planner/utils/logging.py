from __future__ import annotations

import logging
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, UTC
from typing import Iterator, Optional

# Context variables for structured logging
request_id_var: ContextVar[str] = ContextVar("request_id", default="-")
scenario_id_var: ContextVar[str] = ContextVar("scenario_id", default="-")


class ContextFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get()
        record.scenario_id = scenario_id_var.get()
        return True


class SimpleStructuredFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        ts = datetime.now(UTC).isoformat(timespec="seconds").replace("+00:00", "Z")
        msg = record.getMessage()
        return (
            f"{ts} level={record.levelname} logger={record.name} "
            f"request_id={getattr(record, 'request_id', '-')} "
            f"scenario_id={getattr(record, 'scenario_id', '-')} "
            f"msg={msg}"
        )


def setup_logging(level: str = "INFO") -> None:
    lvl = getattr(logging, level.upper(), logging.INFO)
    root = logging.getLogger()
    root.setLevel(lvl)

    # Replace handlers (avoid duplicate logs on repeated setup)
    root.handlers = []

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(lvl)
    handler.addFilter(ContextFilter())
    handler.setFormatter(SimpleStructuredFormatter())

    root.addHandler(handler)


def set_log_context(*, request_id: str, scenario_id: Optional[str] = None) -> None:
    request_id_var.set(request_id)
    if scenario_id is not None:
        scenario_id_var.set(scenario_id)


@contextmanager
def scenario_context(scenario_id: str) -> Iterator[None]:
    """Tag log lines emitted inside the block with scenario_id, then restore."""
    token = scenario_id_var.set(scenario_id)
    try:
        yield
    finally:
        scenario_id_var.reset(token)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
