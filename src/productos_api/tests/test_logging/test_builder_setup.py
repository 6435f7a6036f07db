import logging

from productos_api.core.logging.builder import make_dict_config, setup_logging
from productos_api.tests.test_fixtures.settings_fixtures import make_test_settings


def test_make_dict_config_with_files(tmp_path):
    settings = make_test_settings(LOG_TO_STDOUT=False, LOG_DIR=tmp_path, LOG_FORMAT="json")

    cfg = make_dict_config(settings)

    assert set(cfg["handlers"]) == {"console", "file", "error_file"}
    assert cfg["handlers"]["file"]["filename"].endswith("app.log")
    assert cfg["handlers"]["file"]["formatter"] == "json"
    # Error files stay structured even with text output
    assert cfg["handlers"]["error_file"]["formatter"] == "json"
    assert {"json", "standard"} <= set(cfg["formatters"])


def test_make_dict_config_stdout_only():
    settings = make_test_settings(LOG_TO_STDOUT=True, LOG_FORMAT="text")

    cfg = make_dict_config(settings)

    assert set(cfg["handlers"]) == {"console", "error_console"}
    assert cfg["handlers"]["console"]["formatter"] == "standard"
    assert cfg["handlers"]["console"]["filters"] == ["request_id", "redact"]


def test_sql_logging_switch():
    quiet = make_dict_config(make_test_settings())
    loud = make_dict_config(make_test_settings(ENABLE_SQL_LOGGING=True))

    assert quiet["loggers"]["sqlalchemy.engine"]["level"] == "WARNING"
    assert loud["loggers"]["sqlalchemy.engine"]["level"] == "DEBUG"


def test_setup_logging_creates_log_dir(tmp_path):
    settings = make_test_settings(LOG_TO_STDOUT=False, LOG_DIR=tmp_path / "logs", LOG_LEVEL="INFO")
    assert not settings.LOG_DIR.exists()

    setup_logging(settings)

    assert settings.LOG_DIR.exists()
    root = logging.getLogger()
    assert root.level == logging.INFO
    assert root.handlers
