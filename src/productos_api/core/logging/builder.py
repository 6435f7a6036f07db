"""
Logging builder: create and apply a dictConfig logging configuration and optionally
move handler I/O to a background QueueListener.

 - `make_dict_config(settings)` builds the dictConfig mapping (pure, easy to test)
 - `setup_logging(settings)` applies it; with LOG_USE_QUEUE the real handlers run
   in a listener thread while request code only enqueues records
 - `stop_queue_logging()` flushes and stops the listener at shutdown

Queue knobs (Settings):
 - LOG_QUEUE_MAX_SIZE: > 0 bounds the queue, 0 leaves it unbounded
 - LOG_QUEUE_BLOCKING: with a bounded queue, block producers when full (True)
   or drop the record and count it (False)
"""

from __future__ import annotations

from pathlib import Path
import logging
import logging.config
import queue as _queue
import threading
from logging.handlers import QueueHandler, QueueListener

from productos_api.config.settings import Settings
from productos_api.utils.logging import get_project_name

from .formatters import JsonFormatter, ColorFormatter
from .filters import RequestIdFilter, RedactFilter
from .handlers import (
    get_console_handler,
    get_file_handler,
    get_error_file_handler,
    get_error_console_handler,
)

_QUEUE_LISTENER: QueueListener | None = None
_QUEUE: _queue.Queue | None = None

_DROPPED_LOGS_COUNT = 0
_DROPPED_LOGS_LOCK = threading.Lock()


class NonBlockingQueueHandler(QueueHandler):
    """
    QueueHandler that never blocks the producer on a full bounded queue: the
    record is dropped and counted (see `get_queue_stats`).
    """

    def emit(self, record: logging.LogRecord) -> None:
        global _DROPPED_LOGS_COUNT
        try:
            self.queue.put_nowait(self.prepare(record))
        except _queue.Full:
            with _DROPPED_LOGS_LOCK:
                _DROPPED_LOGS_COUNT += 1


def get_queue_stats() -> dict:
    with _DROPPED_LOGS_LOCK:
        return {"dropped_logs": _DROPPED_LOGS_COUNT, "queue_present": _QUEUE is not None}


def _use_files(settings: Settings) -> bool:
    return (not settings.LOG_TO_STDOUT) and bool(settings.LOG_DIR)


def make_dict_config(settings: Settings) -> dict:
    """
    Build the dictConfig mapping:
      - formatters: "standard" (colored text) and "json"
      - filters: "request_id", "redact"
      - handlers: console + (file, error_file) when writing to LOG_DIR,
        otherwise console + error_console
      - loggers: root, uvicorn.error, uvicorn.access, sqlalchemy.engine
    """
    formatters = {
        "standard": {
            "()": ColorFormatter,
            "format": "%(asctime)s | %(levelname)s | %(name)s | %(request_id)s | %(message)s",
        },
        "json": {
            "()": JsonFormatter,
            "env": settings.ENV,
            "service": get_project_name(),
        },
    }

    filters = {
        "request_id": {"()": RequestIdFilter},
        "redact": {"()": RedactFilter},
    }

    handlers: dict[str, dict] = {"console": get_console_handler(settings)}
    if _use_files(settings):
        handlers["file"] = get_file_handler(settings)
        handlers["error_file"] = get_error_file_handler(settings)
    else:
        handlers["error_console"] = get_error_console_handler(settings)

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": formatters,
        "filters": filters,
        "handlers": handlers,
        "loggers": {
            "": {
                "handlers": list(handlers.keys()),
                "level": settings.LOG_LEVEL,
                "propagate": True,
            },
            "uvicorn.error": {
                "level": settings.LOG_LEVEL,
                "handlers": list(handlers.keys()),
                "propagate": False,
            },
            "uvicorn.access": {
                "level": "INFO",
                "handlers": ["console"],
                "propagate": False,
            },
            "sqlalchemy.engine": {
                "level": "DEBUG" if settings.ENABLE_SQL_LOGGING else "WARNING",
                "handlers": ["console"],
                "propagate": False,
            },
        },
    }


def setup_logging(settings: Settings) -> None:
    """
    Apply the logging configuration; with LOG_USE_QUEUE, swap the configured
    handlers for one QueueHandler on every logger that used them.

    Producer-side filters (request id, redaction) are attached to the
    QueueHandler so they run in the request's context, where the ContextVar is set.
    """
    global _QUEUE_LISTENER, _QUEUE

    if _use_files(settings):
        Path(settings.LOG_DIR).mkdir(parents=True, exist_ok=True)

    # Re-configuring replaces handlers; stop a previous listener first
    stop_queue_logging()
    logging.config.dictConfig(make_dict_config(settings))

    if not settings.LOG_USE_QUEUE:
        return

    root_logger = logging.getLogger()
    moved_handlers = list(root_logger.handlers)
    if not moved_handlers:
        return

    # Detach the real handlers from every logger that shares them; those
    # loggers (root and the non-propagating ones) get the QueueHandler instead
    detached: list[logging.Logger] = []
    for logger_obj in [root_logger, *logging.Logger.manager.loggerDict.values()]:
        if isinstance(logger_obj, logging.Logger):
            shared = [h for h in logger_obj.handlers if h in moved_handlers]
            for h in shared:
                logger_obj.removeHandler(h)
            if shared:
                detached.append(logger_obj)

    max_size = settings.LOG_QUEUE_MAX_SIZE or 0
    log_queue: _queue.Queue = _queue.Queue(max_size)  # maxsize=0 -> unbounded

    if max_size > 0 and not settings.LOG_QUEUE_BLOCKING:
        qh: QueueHandler = NonBlockingQueueHandler(log_queue)
    else:
        qh = QueueHandler(log_queue)
    qh.addFilter(RequestIdFilter())
    qh.addFilter(RedactFilter())

    listener = QueueListener(log_queue, *moved_handlers, respect_handler_level=True)
    listener.start()
    for logger_obj in detached:
        logger_obj.addHandler(qh)

    _QUEUE_LISTENER = listener
    _QUEUE = log_queue


def stop_queue_logging() -> None:
    """Flush and stop the QueueListener, if one is running."""
    global _QUEUE_LISTENER, _QUEUE
    listener = _QUEUE_LISTENER
    if listener is None:
        return

    try:
        listener.stop()  # drains the queue and joins the thread
    finally:
        _QUEUE_LISTENER = None
        _QUEUE = None
