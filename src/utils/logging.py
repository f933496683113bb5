"""Logging setup for the DocuGen server and CLI.

Modules log through ``logging.getLogger(__name__)``; structlog renders the
records. While a render or automation job runs, its id is attached to every
event emitted from that job's task.
"""

import logging
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from typing import Iterator

import structlog

current_job_id: ContextVar[str | None] = ContextVar("current_job_id", default=None)

# HTTP clients and the sqlite driver log every request at INFO
QUIET_LOGGERS = (
    "httpx",
    "httpcore",
    "google_genai",
    "google_genai.models",
    "urllib3.connectionpool",
    "aiosqlite",
)


def add_job_id(_logger, _method_name, event_dict):
    """Tag the event with the running render/automation job, if any."""
    job_id = current_job_id.get()
    if job_id:
        event_dict["job_id"] = job_id
    return event_dict


def _event_chain() -> list:
    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        add_job_id,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]


def setup_logging(log_level: str = "INFO", json_output: bool = False) -> None:
    """Install the DocuGen handler on the root logger.

    Args:
        log_level: LOG_LEVEL value; unknown names fall back to INFO
        json_output: LOG_JSON value; one JSON object per line instead of
            the colored console format
    """
    chain = _event_chain()
    renderer = structlog.processors.JSONRenderer() if json_output else structlog.dev.ConsoleRenderer(colors=True)

    structlog.configure(
        processors=[*chain, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(
        structlog.stdlib.ProcessorFormatter(
            foreign_pre_chain=chain,
            processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
        )
    )

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def set_job_context(job_id: str) -> None:
    """Attach ``job_id`` to log events from the current task.

    Each background job runs in its own asyncio task with a copied context,
    so the id does not leak into other jobs.
    """
    current_job_id.set(job_id)


def clear_job_context() -> None:
    current_job_id.set(None)


@contextmanager
def job_context(job_id: str) -> Iterator[None]:
    """Tag log events with ``job_id`` for the duration of the block."""
    set_job_context(job_id)
    try:
        yield
    finally:
        clear_job_context()
