"""Dispatcher against real sub-processes (a recorder script stands in for make)."""

from __future__ import annotations

from pathlib import Path

import pytest

from meshmake.domain.models import Operation, Unit, UnitKind
from meshmake.errors import ConfigError
from meshmake.runtime import WorkspaceConfig
from meshmake.services.dispatcher import (
    COMMAND_NOT_FOUND_RETURNCODE,
    NOT_FOUND_RETURNCODE,
    Dispatcher,
)
from meshmake.services.runner import run_all
from tests._fixtures.workspace_builder import WorkspaceBuilder


def _dispatcher(ws: WorkspaceBuilder, **kw) -> Dispatcher:
    return Dispatcher(ws.config().workspace, **kw)


def test_application_runs_in_its_directory_with_goals(workspace: WorkspaceBuilder) -> None:
    path = workspace.add_app("alpha")
    unit = Unit(name="alpha", kind=UnitKind.APPLICATION, path=path)
    result = _dispatcher(workspace).dispatch(unit, ["migrate-up", "build"])
    assert result.ok
    assert workspace.calls() == [("alpha", ["migrate-up", "build"])]


def test_nonzero_exit_is_reported(workspace: WorkspaceBuilder) -> None:
    path = workspace.add_app("alpha", fail_on=["test"])
    unit = Unit(name="alpha", kind=UnitKind.APPLICATION, path=path)
    result = _dispatcher(workspace).dispatch(unit, ["test"])
    assert result.returncode == 1
    assert not result.ok


def test_library_uses_native_command_for_goal(workspace: WorkspaceBuilder) -> None:
    path = workspace.add_lib("auth")
    unit = Unit(name="auth", kind=UnitKind.LIBRARY, path=path)
    assert _dispatcher(workspace).dispatch(unit, ["lint"]).ok
    assert workspace.calls() == [("auth", ["lint"])]


def test_library_has_no_build_command(workspace: WorkspaceBuilder) -> None:
    path = workspace.add_lib("auth")
    unit = Unit(name="auth", kind=UnitKind.LIBRARY, path=path)
    with pytest.raises(ConfigError):
        _dispatcher(workspace).dispatch(unit, ["build"])


def test_missing_directory_is_plain_nonzero(workspace: WorkspaceBuilder) -> None:
    unit = Unit(name="worker", kind=UnitKind.APPLICATION, path=workspace.root / "apps" / "worker")
    result = _dispatcher(workspace).dispatch(unit, ["run"])
    assert result.returncode == NOT_FOUND_RETURNCODE
    assert workspace.calls() == []


def test_missing_executable_returns_127(workspace: WorkspaceBuilder) -> None:
    workspace.write_config(app_command=["definitely-not-a-build-tool-xyz"])
    path = workspace.add_app("alpha")
    unit = Unit(name="alpha", kind=UnitKind.APPLICATION, path=path)
    result = _dispatcher(workspace).dispatch(unit, ["build"])
    assert result.returncode == COMMAND_NOT_FOUND_RETURNCODE


def test_dry_run_spawns_nothing(workspace: WorkspaceBuilder) -> None:
    path = workspace.add_app("alpha", fail_on=["build"])
    unit = Unit(name="alpha", kind=UnitKind.APPLICATION, path=path)
    result = _dispatcher(workspace, dry_run=True).dispatch(unit, ["build"])
    assert result.ok
    assert workspace.calls() == []


def test_command_for_application_appends_goals() -> None:
    dispatcher = Dispatcher(WorkspaceConfig())
    unit = Unit(name="rest-api", kind=UnitKind.APPLICATION, path=Path("apps/rest-api"))
    assert dispatcher.command_for(unit, ["docker"]) == ["make", "docker"]


def test_end_to_end_build_stops_at_failing_app(workspace: WorkspaceBuilder) -> None:
    workspace.add_app("alpha")
    workspace.add_app("beta", fail_on=["build"])
    workspace.add_app("gamma")
    outcome = run_all(
        Operation.BUILD, config=workspace.config(), dispatcher=_dispatcher(workspace)
    )
    assert outcome.returncode == 1
    assert workspace.calls() == [("alpha", ["build"]), ("beta", ["build"])]
