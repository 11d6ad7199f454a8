"""Tests for structlog configuration."""

from __future__ import annotations

import importlib
import io
import json
import logging
import logging.handlers
from pathlib import Path

import pytest

from sprout.log.logger import DEFAULT_MAX_BYTES, _parse_rotation, configure, remove_exception_in_production

# 注意：`sprout.log.logger` 属性被同名 logger 对象遮蔽，需从模块表取模块本身
logger_module = importlib.import_module("sprout.log.logger")


@pytest.fixture
def root_file_handlers():
    """Collect rotating handlers added to the root logger and detach them afterwards."""
    before = list(logging.root.handlers)
    level = logging.root.level
    added: list[logging.handlers.RotatingFileHandler] = []

    def collect() -> list[logging.handlers.RotatingFileHandler]:
        added[:] = [
            handler
            for handler in logging.root.handlers
            if handler not in before and isinstance(handler, logging.handlers.RotatingFileHandler)
        ]
        return added

    yield collect

    for handler in collect():
        logging.root.removeHandler(handler)
        handler.close()
    logging.root.setLevel(level)


def test_configure_json_output() -> None:
    stream = io.StringIO()
    configure(log_level="DEBUG", log_env="container", output_file=stream, cache=False)

    logger_module.logger.info("serialized", kind="map")

    lines = [json.loads(line) for line in stream.getvalue().splitlines()]
    event = lines[-1]
    assert event["event"] == "serialized"
    assert event["kind"] == "map"
    assert event["level"] == "info"


def test_configure_filters_below_level() -> None:
    stream = io.StringIO()
    configure(log_level="ERROR", log_env="container", output_file=stream, cache=False)

    logger_module.logger.debug("hidden")

    assert "hidden" not in stream.getvalue()


def test_disable_silences_output() -> None:
    stream = io.StringIO()
    configure(log_level="DEBUG", log_env="container", output_file=stream, disable=True, cache=False)

    logger_module.logger.error("muted")

    assert stream.getvalue() == ""


def test_log_file_receives_events(tmp_path: Path, root_file_handlers) -> None:
    log_file = tmp_path / "sprout-run.log"
    configure(log_level="INFO", log_file=log_file, log_env="container", log_rotation="2 MB", cache=False)

    logger_module.logger.info("written to file", step=1)

    (handler,) = root_file_handlers()
    handler.flush()
    assert Path(handler.baseFilename) == log_file
    assert handler.maxBytes == 2 * 1024 * 1024
    event = json.loads(log_file.read_text(encoding="utf-8").splitlines()[-1])
    assert event["event"] == "written to file"
    assert event["step"] == 1


def test_log_file_in_missing_directory_falls_back_to_cache_dir(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch, root_file_handlers
) -> None:
    cache_dir = tmp_path / "cache"
    monkeypatch.setattr(logger_module, "user_cache_dir", lambda _appname: str(cache_dir))

    configure(log_level="INFO", log_file=tmp_path / "missing" / "run.log", cache=False)

    (handler,) = root_file_handlers()
    assert Path(handler.baseFilename) == cache_dir / "sprout.log"
    assert (cache_dir / "sprout.log").exists()
    assert not (tmp_path / "missing").exists()


def test_remove_exception_outside_dev() -> None:
    event = remove_exception_in_production(None, "error", {"event": "x", "exc_info": True, "exception": "tb"})

    assert event == {"event": "x"}


@pytest.mark.parametrize(
    ("rotation", "expected"),
    [
        (None, DEFAULT_MAX_BYTES),
        ("5 MB", 5 * 1024 * 1024),
        ("abc MB", DEFAULT_MAX_BYTES),
        ("0 MB", DEFAULT_MAX_BYTES),
        ("1 GB", DEFAULT_MAX_BYTES),
    ],
)
def test_parse_rotation(rotation: str | None, expected: int) -> None:
    assert _parse_rotation(rotation) == expected
