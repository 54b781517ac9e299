"""Resolve top-level target names and run them.

Match order for a target name:
    1. static alias  -> forward the residual goal list to that one app
    2. operation     -> workspace-wide aggregate run
    3. run-<name>    -> forward the single goal "run" to app <name>
Aliases win even when the name also looks like `run-<name>`.
"""
from __future__ import annotations

import logging
from collections.abc import Callable, Sequence

from meshmake.domain.models import AGGREGATE_OPERATIONS, Operation, TargetPlan
from meshmake.errors import UnknownTargetError
from meshmake.infrastructure.logging import render_progress
from meshmake.infrastructure.workspace import application_unit
from meshmake.runtime import RuntimeConfig
from meshmake.services.runner import SupportsDispatch, run_all

log = logging.getLogger(__name__)

WILDCARD_PREFIX = "run-"

_OPERATIONS_BY_NAME = {op.value: op for op in AGGREGATE_OPERATIONS}


def _match_alias(name: str, goals: Sequence[str], aliases: Sequence[str]) -> TargetPlan | None:
    if name in aliases:
        return TargetPlan(target=name, kind="alias", unit_name=name, goals=list(goals))
    return None


def _match_operation(name: str, goals: Sequence[str], aliases: Sequence[str]) -> TargetPlan | None:
    op = _OPERATIONS_BY_NAME.get(name)
    if op is None:
        return None
    return TargetPlan(target=name, kind="aggregate", operation=op, goals=[op.value])


def _match_wildcard(name: str, goals: Sequence[str], aliases: Sequence[str]) -> TargetPlan | None:
    suffix = name[len(WILDCARD_PREFIX):] if name.startswith(WILDCARD_PREFIX) else ""
    if not suffix:
        return None
    return TargetPlan(
        target=name, kind="wildcard", unit_name=suffix, goals=[Operation.RUN.value]
    )


Matcher = Callable[[str, Sequence[str], Sequence[str]], TargetPlan | None]
MATCHERS: tuple[Matcher, ...] = (_match_alias, _match_operation, _match_wildcard)


def resolve_target(
    name: str, extra_goals: Sequence[str] = (), *, aliases: Sequence[str]
) -> TargetPlan:
    for matcher in MATCHERS:
        plan = matcher(name, extra_goals, aliases)
        if plan is not None:
            return plan
    raise UnknownTargetError(name)


def execute_plan(plan: TargetPlan, *, config: RuntimeConfig, dispatcher: SupportsDispatch) -> int:
    if plan.operation is not None:
        return run_all(plan.operation, config=config, dispatcher=dispatcher).returncode
    unit = application_unit(config.apps_root, plan.unit_name or plan.target)
    render_progress(" ".join(plan.goals) or "(default goal)", unit.label)
    result = dispatcher.dispatch(unit, plan.goals)
    if not result.ok:
        log.error("%s failed for %s (exit %d)", plan.target, unit.label, result.returncode)
    return result.returncode


def resolve_and_run(
    name: str,
    extra_goals: Sequence[str] = (),
    *,
    config: RuntimeConfig,
    dispatcher: SupportsDispatch,
) -> int:
    """Single-target entry point; the app directory is not checked up front."""
    plan = resolve_target(name, extra_goals, aliases=config.workspace.aliases)
    return execute_plan(plan, config=config, dispatcher=dispatcher)


def run_targets(
    targets: Sequence[str], *, config: RuntimeConfig, dispatcher: SupportsDispatch
) -> int:
    """Run command-line targets the way `make a b c` would.

    No targets means the configured default. A leading alias swallows every
    following word as its goal list; otherwise targets run in order until one
    returns non-zero.
    """
    names = list(targets) or [config.workspace.default_target]
    head, rest = names[0], names[1:]
    if head in config.workspace.aliases:
        return resolve_and_run(head, rest, config=config, dispatcher=dispatcher)
    plans = [resolve_target(n, aliases=config.workspace.aliases) for n in names]
    for plan in plans:
        code = execute_plan(plan, config=config, dispatcher=dispatcher)
        if code != 0:
            return code
    return 0


__all__ = [
    "MATCHERS",
    "WILDCARD_PREFIX",
    "execute_plan",
    "resolve_and_run",
    "resolve_target",
    "run_targets",
]
