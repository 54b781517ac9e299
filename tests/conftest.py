from __future__ import annotations

from pathlib import Path

import pytest

from meshmake.runtime import AppContext
from tests._fixtures.workspace_builder import RecordingDispatcher, WorkspaceBuilder


@pytest.fixture
def workspace(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> WorkspaceBuilder:
    """Empty workspace with `apps/` and `pkg/` roots and a recorder config."""
    monkeypatch.delenv("MESHMAKE_CONFIG", raising=False)
    (tmp_path / "apps").mkdir()
    (tmp_path / "pkg").mkdir()
    ws = WorkspaceBuilder(tmp_path)
    ws.write_config()
    return ws


@pytest.fixture
def recorder() -> RecordingDispatcher:
    return RecordingDispatcher()


@pytest.fixture(autouse=True)
def _reset_context():
    yield
    AppContext.reset()


@pytest.fixture(autouse=True)
def _plain_console(monkeypatch: pytest.MonkeyPatch) -> None:
    for var in ("FORCE_COLOR", "TTY_COMPATIBLE", "LOG_LEVEL"):
        monkeypatch.delenv(var, raising=False)
