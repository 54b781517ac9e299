"""Sub-build dispatcher: delegate one goal list to one unit's own build definition.

The dispatcher knows nothing about what a goal means. Applications get
`app_command + goals` run inside their directory; libraries have no build
definition, so their native test/lint command is looked up per goal instead.
"""
from __future__ import annotations

import logging
import subprocess
from collections.abc import Sequence

from meshmake.domain.models import DispatchResult, Unit, UnitKind
from meshmake.errors import ConfigError
from meshmake.infrastructure.logging import render_command
from meshmake.runtime import WorkspaceConfig

log = logging.getLogger(__name__)

# `make -C <missing>` exits 2; a shell exits 127 for a missing executable.
NOT_FOUND_RETURNCODE = 2
COMMAND_NOT_FOUND_RETURNCODE = 127


class Dispatcher:
    def __init__(self, config: WorkspaceConfig, *, dry_run: bool = False) -> None:
        self.config = config
        self.dry_run = dry_run

    def command_for(self, unit: Unit, goals: Sequence[str]) -> list[str]:
        if unit.kind is UnitKind.APPLICATION:
            return [*self.config.app_command, *goals]
        if len(goals) != 1 or goals[0] not in self.config.library_commands:
            raise ConfigError(f"No library command for {list(goals)} ({unit.name})")
        return list(self.config.library_commands[goals[0]])

    def dispatch(self, unit: Unit, goals: Sequence[str]) -> DispatchResult:
        goals = list(goals)
        if not unit.path.is_dir():
            log.error("%s: no such directory %s", unit.label, unit.path)
            return DispatchResult(unit=unit, goals=goals, returncode=NOT_FOUND_RETURNCODE)
        argv = self.command_for(unit, goals)
        if self.dry_run:
            render_command(argv, str(unit.path))
            return DispatchResult(unit=unit, goals=goals, returncode=0)
        log.debug("exec %s (cwd=%s)", argv, unit.path)
        try:
            proc = subprocess.run(argv, cwd=unit.path, check=False)
        except FileNotFoundError as exc:
            log.error("%s: command not found: %s", unit.label, exc.filename or argv[0])
            return DispatchResult(unit=unit, goals=goals, returncode=COMMAND_NOT_FOUND_RETURNCODE)
        return DispatchResult(unit=unit, goals=goals, returncode=proc.returncode)


__all__ = ["COMMAND_NOT_FOUND_RETURNCODE", "Dispatcher", "NOT_FOUND_RETURNCODE"]
