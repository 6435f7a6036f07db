import pytest

from productos_api.core.logging.builder import setup_logging, stop_queue_logging
from productos_api.tests.test_fixtures.settings_fixtures import make_test_settings


@pytest.fixture(autouse=True)
def restore_logging():
    """These tests reconfigure logging; put the suite's configuration back afterwards."""
    yield
    stop_queue_logging()
    setup_logging(make_test_settings())
