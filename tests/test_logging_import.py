"""
Test that reputul_logging can be imported without circular import and logger works.
"""

from __future__ import annotations


def test_logging_import():
    """Import get_logger from reputul_logging and use the logger."""
    from backend_reputul.reputul_logging import get_logger

    logger = get_logger("test")
    assert logger is not None
    assert hasattr(logger, "info")
    assert hasattr(logger, "debug")
    assert hasattr(logger, "warning")
    assert hasattr(logger, "error")
    # Smoke test: call info (should not raise)
    logger.info("test_message", key="value")


def test_bind_business_logger():
    from backend_reputul.reputul_logging import bind_business

    logger = bind_business("biz-1")
    logger.info("test_bound_message", rating=5)


def _last_json_line(capsys):
    import json

    lines = [line for line in capsys.readouterr().out.splitlines() if line.strip()]
    assert lines
    return json.loads(lines[-1])


def test_logger_writes_named_json_event(capsys):
    """Each record carries event_type and the module name it was requested for."""
    import pytest

    from backend_reputul.reputul_logging import get_logger
    from backend_reputul.reputul_logging.logger import LOG_FORMAT

    if LOG_FORMAT != "json":
        pytest.skip("console log format configured")
    get_logger("tests.logging").info("capture_check", health_score=82)
    record = _last_json_line(capsys)
    assert record["event_type"] == "capture_check"
    assert record["logger"] == "tests.logging"
    assert record["health_score"] == 82
    assert record["level"] == "info"


def test_bind_business_adds_business_id(capsys):
    import pytest

    from backend_reputul.reputul_logging import bind_business
    from backend_reputul.reputul_logging.logger import LOG_FORMAT

    if LOG_FORMAT != "json":
        pytest.skip("console log format configured")
    bind_business("biz-7", "tests.logging").info("bound_check")
    record = _last_json_line(capsys)
    assert record["business_id"] == "biz-7"
    assert record["logger"] == "tests.logging"


def test_api_requests_log_business_id(client, capsys):
    import pytest

    from backend_reputul.reputul_logging.logger import LOG_FORMAT

    if LOG_FORMAT != "json":
        pytest.skip("console log format configured")
    capsys.readouterr()
    assert client.get("/reputation/biz-9/snapshot").status_code == 200
    record = _last_json_line(capsys)
    assert record["event_type"] == "reputation_snapshot_served"
    assert record["business_id"] == "biz-9"
