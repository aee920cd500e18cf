import json
import sys

import pytest
from loguru import logger

from ikesu.inspection.infrastructure.logging import (
    LoggingContext,
    configure_logging,
    get_logging_context,
    resolve_level,
)


@pytest.fixture(autouse=True)
def restore_logger():
    yield
    logger.remove()
    logger.add(sys.stderr)


@pytest.mark.parametrize(
    ("level", "expected"),
    [("debug", "DEBUG"), ("info", "INFO"), ("warn", "WARNING"), ("ERROR", "ERROR")],
)
def test_resolve_level(level, expected):
    assert resolve_level(level) == expected


def test_unsupported_level():
    with pytest.raises(ValueError, match="unsupported log level 'trace'"):
        resolve_level("trace")


def test_context_is_nested_and_restored():
    with LoggingContext(rule="web"):
        with LoggingContext(host="3yAYEDLXKL5"):
            assert get_logging_context() == {"rule": "web", "host": "3yAYEDLXKL5"}
        assert get_logging_context() == {"rule": "web"}
    assert get_logging_context() == {}


def test_file_sink_receives_context(tmp_path):
    path = tmp_path / "logs" / "ikesu.log"
    configure_logging("info", str(path))

    with LoggingContext(rule="web"):
        logger.info("inspecting")
    logger.debug("hidden")
    logger.remove()

    records = [json.loads(line)["record"] for line in path.read_text().splitlines()]
    assert [record["message"] for record in records] == ["inspecting"]
    assert records[0]["extra"] == {"rule": "web"}


def test_directory_is_not_a_log_file(tmp_path):
    with pytest.raises(ValueError, match="is a directory"):
        configure_logging("info", str(tmp_path))
