"""
Tests for the queue-based logging setup.
"""

import logging
import logging.handlers

import pytest

from snowplow_tracker.logging_config import (
    NOISY_LOGGERS,
    ThreadSafeLoggingConfig,
    get_logger,
)


@pytest.fixture
def restore_logging():
    """Put root and library loggers back the way they were."""
    root = logging.getLogger()
    saved_handlers = list(root.handlers)
    saved_level = root.level
    saved_noisy = {
        name: (logging.getLogger(name).level, list(logging.getLogger(name).handlers),
               logging.getLogger(name).propagate)
        for name in NOISY_LOGGERS
    }
    yield
    root.handlers[:] = saved_handlers
    root.setLevel(saved_level)
    for name, (level, handlers, propagate) in saved_noisy.items():
        logger = logging.getLogger(name)
        logger.setLevel(level)
        logger.handlers[:] = handlers
        logger.propagate = propagate


class TestThreadSafeLoggingConfig:
    """Test setup and teardown of the logging listener."""

    def test_setup_installs_queue_handler(self, restore_logging):
        config = ThreadSafeLoggingConfig()
        try:
            config.setup_logging(debug=False)
            root = logging.getLogger()
            assert config.active
            assert root.level == logging.INFO
            assert len(root.handlers) == 1
            assert isinstance(root.handlers[0], logging.handlers.QueueHandler)
        finally:
            config.stop()
        assert not config.active

    def test_debug_level(self, restore_logging):
        config = ThreadSafeLoggingConfig()
        try:
            config.setup_logging(debug=True)
            assert logging.getLogger().level == logging.DEBUG
        finally:
            config.stop()

    def test_noisy_libraries_silenced(self, restore_logging):
        config = ThreadSafeLoggingConfig()
        try:
            config.setup_logging(debug=False)
            urllib3_logger = logging.getLogger("urllib3")
            assert urllib3_logger.level == logging.WARNING
            assert urllib3_logger.propagate is False
        finally:
            config.stop()

    def test_setup_twice_replaces_listener(self, restore_logging):
        config = ThreadSafeLoggingConfig()
        try:
            config.setup_logging()
            config.setup_logging()
            assert len(logging.getLogger().handlers) == 1
        finally:
            config.stop()

    def test_stop_without_setup(self):
        ThreadSafeLoggingConfig().stop()


def test_get_logger():
    assert get_logger("snowplow_tracker.tracker") is logging.getLogger("snowplow_tracker.tracker")
