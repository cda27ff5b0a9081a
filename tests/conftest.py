"""Shared fixtures for the VW-AUDIT test suite."""

from __future__ import annotations

from pathlib import Path
from typing import Iterator

import pytest

from vwaudit.utils.config import reset_config
from vwaudit.utils.logger import set_level


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[Path]:
    """Point the data directory at tmp_path and drop any cached config."""
    data_dir = tmp_path / "data"
    monkeypatch.setenv("VWAUDIT_DATA_DIR", str(data_dir))
    for name in ("VWAUDIT_REPORTS_DIR", "VWAUDIT_LOG_FILE", "VWAUDIT_API_HOST", "VWAUDIT_API_PORT"):
        monkeypatch.delenv(name, raising=False)
    reset_config()
    yield data_dir
    reset_config()


@pytest.fixture
def quiet_logs() -> Iterator[None]:
    """Keep INFO chatter out of captured CLI output."""
    set_level("WARNING")
    yield
    set_level("INFO")
