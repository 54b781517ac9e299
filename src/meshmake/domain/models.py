"""Domain models (Pydantic) for workspace units, dispatch results and target plans.

Everything here is transient: rebuilt from the filesystem on each invocation.
"""
from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field


class Operation(str, Enum):
    BUILD = "build"
    TEST = "test"
    LINT = "lint"
    DOCKER = "docker"
    CLEAN = "clean"
    RUN = "run"


AGGREGATE_OPERATIONS: tuple[Operation, ...] = (
    Operation.BUILD,
    Operation.TEST,
    Operation.LINT,
    Operation.DOCKER,
    Operation.CLEAN,
)
# Operations that continue over the shared libraries once every app passed.
LIBRARY_OPERATIONS: tuple[Operation, ...] = (Operation.TEST, Operation.LINT)


class UnitKind(str, Enum):
    APPLICATION = "application"
    LIBRARY = "library"


# -------------------- Workspace units -------------------- #


class Unit(BaseModel):
    """An application (under the apps root) or shared library (under the libs root)."""

    name: str
    kind: UnitKind
    path: Path

    model_config = {"frozen": True}

    @property
    def label(self) -> str:
        return f"{self.kind.value} {self.name}"


# -------------------- Dispatch & run outcomes -------------------- #


class DispatchResult(BaseModel):
    """Exit status of one delegated sub-build."""

    unit: Unit
    goals: list[str]
    returncode: int

    @property
    def ok(self) -> bool:
        return self.returncode == 0


class RunOutcome(BaseModel):
    """Aggregate result of one workspace-wide operation.

    `results` holds only the dispatches actually attempted; nothing after the
    first failure is ever run.
    """

    operation: Operation
    results: list[DispatchResult] = Field(default_factory=list)

    @property
    def failed(self) -> DispatchResult | None:
        for r in self.results:
            if not r.ok:
                return r
        return None

    @property
    def ok(self) -> bool:
        return self.failed is None

    @property
    def returncode(self) -> int:
        failed = self.failed
        return 0 if failed is None else failed.returncode


# -------------------- Target resolution -------------------- #

PlanKind = Literal["aggregate", "alias", "wildcard"]


class TargetPlan(BaseModel):
    """What a top-level target name resolved to."""

    target: str
    kind: PlanKind
    operation: Operation | None = None  # aggregate only
    unit_name: str | None = None  # alias / wildcard
    goals: list[str] = Field(default_factory=list)


__all__ = [
    "AGGREGATE_OPERATIONS",
    "DispatchResult",
    "LIBRARY_OPERATIONS",
    "Operation",
    "PlanKind",
    "RunOutcome",
    "TargetPlan",
    "Unit",
    "UnitKind",
]
