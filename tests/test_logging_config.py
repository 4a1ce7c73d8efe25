import io
import logging

import pytest

from konstruo import logging_config
from konstruo.logging_config import (
    LOGGER_PREFIX,
    disable_debug,
    enable_debug,
    get_logger,
    set_log_level,
    setup_logging,
)


@pytest.fixture(autouse=True)
def restore_logging():
    root = logging.getLogger(LOGGER_PREFIX)
    level = root.level
    propagate = root.propagate
    handlers = list(root.handlers)
    initialized = logging_config._initialized
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    root.propagate = propagate
    logging_config._initialized = initialized


def test_get_logger_nests_names_under_the_package():
    assert get_logger("flatten").name == "konstruo.flatten"
    assert get_logger("konstruo.stroke").name == "konstruo.stroke"


def test_get_logger_installs_no_handlers():
    logger = get_logger("projection")
    assert logger.handlers == []


def test_setup_logging_writes_to_stream():
    stream = io.StringIO()
    setup_logging(level=logging.INFO, stream=stream)
    get_logger("flatten").info("flattened %d segments", 3)
    assert "[INFO] konstruo.flatten: flattened 3 segments" in stream.getvalue()


def test_setup_logging_twice_keeps_one_handler():
    setup_logging(stream=io.StringIO())
    root = setup_logging(stream=io.StringIO())
    assert len(root.handlers) == 1
    assert root.propagate is False


def test_detailed_format_has_line_numbers():
    stream = io.StringIO()
    setup_logging(level=logging.WARNING, detailed=True, stream=stream)
    get_logger("offset").warning("fit failed")
    output = stream.getvalue()
    assert "konstruo.offset:" in output
    assert "fit failed" in output


def test_debug_switches():
    stream = io.StringIO()
    setup_logging(stream=stream)
    logger = get_logger("stroke")
    logger.debug("hidden")
    enable_debug()
    logger.debug("shown")
    disable_debug()
    logger.debug("hidden again")
    assert "shown" in stream.getvalue()
    assert "hidden" not in stream.getvalue()


def test_set_log_level():
    setup_logging(stream=io.StringIO())
    set_log_level(logging.ERROR)
    root = logging.getLogger(LOGGER_PREFIX)
    assert root.level == logging.ERROR
    assert all(handler.level == logging.ERROR for handler in root.handlers)
