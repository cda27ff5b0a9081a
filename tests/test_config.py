"""Configuration and logging setup."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from vwaudit.utils.config import Config, get_config, reset_config
from vwaudit.utils.logger import get_logger, setup_file_logging


def test_defaults(isolated_config: Path) -> None:
    config = get_config()

    assert config.data_dir == isolated_config
    assert config.reports_dir == isolated_config / "reports"
    assert config.api_host == "127.0.0.1"
    assert config.api_port == 8000
    assert config.default_report_format == "markdown"
    assert get_config() is config


def test_environment_overrides(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("VWAUDIT_REPORTS_DIR", str(tmp_path / "elsewhere"))
    monkeypatch.setenv("VWAUDIT_API_PORT", "9001")
    monkeypatch.setenv("VWAUDIT_LOG_LEVEL", "DEBUG")
    reset_config()

    config = get_config()

    assert config.reports_dir == tmp_path / "elsewhere"
    assert config.api_port == 9001
    assert config.log_level == "DEBUG"


def test_explicit_reports_dir_wins() -> None:
    config = Config(reports_dir=Path("/tmp/custom"))

    assert config.reports_dir == Path("/tmp/custom")


def test_loggers_share_root_handler() -> None:
    log = get_logger("tests.naming")

    assert log.name == "vwaudit.tests.naming"
    assert get_logger("vwaudit.tests.naming").name == "vwaudit.tests.naming"
    assert get_logger("tests.naming") is log


def test_file_logging(tmp_path: Path) -> None:
    log_path = tmp_path / "logs" / "vwaudit.log"
    handler = setup_file_logging(log_path)
    try:
        get_logger("tests.file").warning("written to file")
        handler.flush()
    finally:
        logging.getLogger("vwaudit").removeHandler(handler)
        handler.close()

    assert "written to file" in log_path.read_text(encoding="utf-8")
