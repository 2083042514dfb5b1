"""Tests for loguru logging setup."""

import logging

import pytest
from loguru import logger

from library_catalog.api.utils.app_startup import configure_logging
from library_catalog.runtime.config.config_data import ConfigData, LoggingConfig
from library_catalog.runtime.context import with_context


@pytest.fixture
def restore_logging():
    yield
    configure_logging()


@pytest.fixture
def captured(restore_logging):
    messages = []
    configure_logging()
    sink_id = logger.add(messages.append, format="{extra[request_id]} {message}")
    yield messages
    logger.remove(sink_id)


def test_stdlib_records_are_forwarded(captured):
    """Standard logging records should reach loguru sinks."""
    logging.getLogger("library_catalog.test").warning("stdlib says hi")

    assert any("stdlib says hi" in message for message in captured)


def test_access_log_records_are_dropped(captured):
    """uvicorn access records should be dropped."""
    logging.getLogger("uvicorn.access").critical("GET /books 200")

    assert not any("GET /books 200" in message for message in captured)


def test_request_id_defaults_to_dash(captured):
    """Records outside a request should carry request_id "-"."""
    logger.info("outside a request")

    assert any(message.startswith("- outside a request") for message in captured)


def test_request_id_from_context(captured):
    """Records inside contextualize should carry its request_id."""
    with logger.contextualize(request_id="abc123"):
        logger.info("inside a request")

    assert any(message.startswith("abc123 inside a request") for message in captured)


def test_json_file_sink(tmp_path, restore_logging):
    """A json file sink should write serialized records."""
    log_file = tmp_path / "logs" / "catalog.log"
    config = ConfigData(logging=LoggingConfig(format="json", file=str(log_file)))

    with with_context(config):
        configure_logging()
        logger.info("written to file")
        logger.complete()

    content = log_file.read_text()
    assert '"message": "written to file"' in content
