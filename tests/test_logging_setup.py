import logging

import logging_setup


def test_parse_level_names_and_numbers(monkeypatch):
    monkeypatch.delenv(logging_setup.LEVEL_ENV_VAR, raising=False)

    assert logging_setup._parse_level("debug") == logging.DEBUG
    assert logging_setup._parse_level("30") == 30
    assert logging_setup._parse_level(logging.ERROR) == logging.ERROR
    assert logging_setup._parse_level(None) == logging.INFO
    assert logging_setup._parse_level("bogus") == logging.INFO


def test_env_var_is_the_fallback(monkeypatch):
    monkeypatch.setenv(logging_setup.LEVEL_ENV_VAR, "warning")
    assert logging_setup._parse_level(None) == logging.WARNING

    monkeypatch.setenv(logging_setup.LEVEL_ENV_VAR, "nonsense")
    assert logging_setup._parse_level(None) == logging.INFO


def test_get_logger_is_under_package_logger():
    log = logging_setup.get_logger("seller_dashboard.analytics")

    assert log.name == "seller_dashboard.analytics"
    assert logging.getLogger(logging_setup.LOGGER_NAME).handlers
