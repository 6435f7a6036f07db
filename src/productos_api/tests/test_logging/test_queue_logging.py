import logging
import queue
from logging.handlers import QueueHandler
from pathlib import Path

from productos_api.core.logging import builder
from productos_api.core.logging.builder import (
    NonBlockingQueueHandler,
    get_queue_stats,
    setup_logging,
    stop_queue_logging,
)
from productos_api.core.logging.filters import reset_request_id, set_request_id
from productos_api.tests.test_fixtures.settings_fixtures import make_test_settings


def file_settings(tmp_path: Path, **overrides):
    values = dict(
        LOG_FORMAT="json",
        LOG_TO_STDOUT=False,  # write to files, not stdout
        LOG_DIR=tmp_path,
        LOG_USE_QUEUE=True,
    )
    values.update(overrides)
    return make_test_settings(**values)


def test_queue_listener_writes_file(tmp_path):
    settings = file_settings(tmp_path)
    setup_logging(settings)

    logger = logging.getLogger("productos_api.queue")
    token = set_request_id("test-req-1")
    try:
        for i in range(10):
            logger.info("test message %d", i, extra={"iteration": i, "password": "hunter2"})
    finally:
        reset_request_id(token)

    # Drains the queue before returning
    stop_queue_logging()

    text = (Path(settings.LOG_DIR) / "app.log").read_text()
    assert "test message 0" in text
    assert "test message 9" in text
    assert '"iteration": 9' in text
    # Filters run on the producer side, in the request's context
    assert "test-req-1" in text
    assert "hunter2" not in text


def test_non_propagating_loggers_keep_output(tmp_path):
    setup_logging(file_settings(tmp_path, LOG_LEVEL="INFO"))

    logging.getLogger("uvicorn.error").info("server started")
    stop_queue_logging()

    assert "server started" in (tmp_path / "app.log").read_text()


def test_root_gets_a_single_queue_handler(tmp_path):
    setup_logging(file_settings(tmp_path))

    handlers = logging.getLogger().handlers
    assert len(handlers) == 1
    assert isinstance(handlers[0], QueueHandler)
    assert get_queue_stats()["queue_present"] is True

    stop_queue_logging()
    assert get_queue_stats()["queue_present"] is False


def test_bounded_queue_drops_instead_of_blocking():
    handler = NonBlockingQueueHandler(queue.Queue(1))
    record = logging.LogRecord("x", logging.INFO, __file__, 1, "m", (), None)
    before = get_queue_stats()["dropped_logs"]

    handler.emit(record)
    handler.emit(record)

    assert get_queue_stats()["dropped_logs"] == before + 1


def test_bounded_non_blocking_setting_selects_dropping_handler(tmp_path):
    setup_logging(file_settings(tmp_path, LOG_QUEUE_MAX_SIZE=100, LOG_QUEUE_BLOCKING=False))

    assert isinstance(logging.getLogger().handlers[0], NonBlockingQueueHandler)
    assert builder._QUEUE.maxsize == 100
