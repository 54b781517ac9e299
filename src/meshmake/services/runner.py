"""Aggregate runner: fan one operation out across the whole workspace.

Responsibilities:
    * Provision the binary output dir before `build`
    * Dispatch every application in listing order, stopping at the first failure
    * For `test`/`lint`, continue over the shared libraries once all apps pass
    * For `clean`, empty the binary output dir once all apps cleaned
"""
from __future__ import annotations

import logging
from typing import Protocol

from meshmake.domain.models import (
    AGGREGATE_OPERATIONS,
    LIBRARY_OPERATIONS,
    DispatchResult,
    Operation,
    RunOutcome,
    Unit,
)
from meshmake.infrastructure.fs import clear_output_dir, ensure_output_dir
from meshmake.infrastructure.logging import render_progress
from meshmake.infrastructure.workspace import list_applications, list_libraries
from meshmake.runtime import RuntimeConfig

log = logging.getLogger(__name__)


class SupportsDispatch(Protocol):
    def dispatch(self, unit: Unit, goals: list[str]) -> DispatchResult: ...


def _dispatch_each(
    units: list[Unit], operation: Operation, dispatcher: SupportsDispatch, outcome: RunOutcome
) -> bool:
    for unit in units:
        render_progress(operation.value, unit.label)
        result = dispatcher.dispatch(unit, [operation.value])
        outcome.results.append(result)
        if not result.ok:
            log.error(
                "%s failed for %s (exit %d)", operation.value, unit.label, result.returncode
            )
            return False
    return True


def run_all(
    operation: Operation, *, config: RuntimeConfig, dispatcher: SupportsDispatch
) -> RunOutcome:
    if operation not in AGGREGATE_OPERATIONS:
        raise ValueError(f"{operation.value} is not a workspace-wide operation")
    outcome = RunOutcome(operation=operation)
    if operation is Operation.BUILD:
        ensure_output_dir(config.bin_root)
    applications = list_applications(config.apps_root)
    # both roots are read before anything runs; a missing pkg/ is fatal up front
    libraries = list_libraries(config.libs_root) if operation in LIBRARY_OPERATIONS else []
    if not _dispatch_each(applications, operation, dispatcher, outcome):
        return outcome
    if libraries and not _dispatch_each(libraries, operation, dispatcher, outcome):
        return outcome
    if operation is Operation.CLEAN:
        removed = clear_output_dir(config.bin_root)
        log.debug("removed %d entries from %s", len(removed), config.bin_root)
    return outcome


__all__ = ["SupportsDispatch", "run_all"]
