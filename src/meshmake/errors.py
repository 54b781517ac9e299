"""Workspace-level failures.

Sub-build failures are not exceptions: they travel as non-zero return codes
inside `DispatchResult` so the runner can stop at the first one.
"""
from __future__ import annotations


class MeshMakeError(RuntimeError):
    """Base for fatal orchestrator errors (CLI exits with code 2)."""


class DiscoveryError(MeshMakeError):
    """An applications/libraries root is missing or unreadable."""


class ProvisioningError(MeshMakeError):
    """The binary output directory cannot be created or cleared."""


class ConfigError(MeshMakeError):
    """Workspace config file is malformed."""


class UnknownTargetError(MeshMakeError):
    def __init__(self, target: str) -> None:
        super().__init__(f"No rule to make target '{target}'")
        self.target = target


__all__ = [
    "ConfigError",
    "DiscoveryError",
    "MeshMakeError",
    "ProvisioningError",
    "UnknownTargetError",
]
