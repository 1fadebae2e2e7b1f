import logging

from selfhost_dashboard.logging_config import (
    HealthCheckFilter,
    SecretRedactionFilter,
    get_logging_config,
)


def _record(name, msg, *args):
    return logging.LogRecord(name, logging.INFO, __file__, 1, msg, args, None)


def test_redacts_query_string_secrets():
    record = _record("uvicorn.access", '%s "GET %s HTTP/1.1" 200', "127.0.0.1", "/apps?token=abc123&x=1")

    assert SecretRedactionFilter().filter(record) is True
    assert "abc123" not in record.getMessage()
    assert "token=***" in record.getMessage()


def test_leaves_clean_messages_untouched():
    record = _record("selfhost_dashboard", "User %s logged in", "admin")

    SecretRedactionFilter().filter(record)

    assert record.args == ("admin",)
    assert record.getMessage() == "User admin logged in"


def test_health_checks_suppressed():
    health = _record("uvicorn.access", '"GET /health HTTP/1.1" 200')
    apps = _record("uvicorn.access", '"GET /apps HTTP/1.1" 200')

    assert HealthCheckFilter().filter(health) is False
    assert HealthCheckFilter().filter(apps) is True


def test_config_levels_and_filters():
    config = get_logging_config("DEBUG")

    assert config["loggers"]["selfhost_dashboard"]["level"] == "DEBUG"
    assert "secret_redaction_filter" in config["handlers"]["default"]["filters"]
    assert "health_check_filter" in config["handlers"]["access"]["filters"]
