"""Runtime context & bootstrap utilities (dotenv + workspace config + logging)."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

import yaml
from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError

from meshmake.errors import ConfigError
from meshmake.infrastructure.logging import setup_logging

CONFIG_FILENAME = "meshmake.yaml"
CONFIG_ENV_VAR = "MESHMAKE_CONFIG"


class WorkspaceConfig(BaseModel):
    """Workspace layout and how each unit's own build definition is invoked."""

    apps_dir: str = "apps"
    libs_dir: str = "pkg"
    bin_dir: str = "bin"
    aliases: list[str] = Field(default_factory=lambda: ["mcp-server", "rest-api", "worker"])
    app_command: list[str] = Field(default_factory=lambda: ["make"])
    library_commands: dict[str, list[str]] = Field(
        default_factory=lambda: {
            "test": ["go", "test", "./..."],
            "lint": ["golangci-lint", "run", "./..."],
        }
    )
    default_target: str = "build"

    model_config = {"extra": "forbid"}


@dataclass(slots=True)
class RuntimeConfig:
    workspace: WorkspaceConfig
    root: Path
    path: Path | None = None

    def resolve(self, rel: str) -> Path:
        return self.root / rel

    @property
    def apps_root(self) -> Path:
        return self.resolve(self.workspace.apps_dir)

    @property
    def libs_root(self) -> Path:
        return self.resolve(self.workspace.libs_dir)

    @property
    def bin_root(self) -> Path:
        return self.resolve(self.workspace.bin_dir)


class AppContext:
    _instance: AppContext | None = None

    def __init__(self, config: RuntimeConfig):
        self.config = config

    @classmethod
    def init(cls, config: RuntimeConfig) -> AppContext:
        if cls._instance is None:
            cls._instance = cls(config)
        return cls._instance

    @classmethod
    def get(cls) -> AppContext:
        if cls._instance is None:
            raise RuntimeError("AppContext not initialized")
        return cls._instance

    @classmethod
    def reset(cls) -> None:
        cls._instance = None


def load_config(root: Path, path: Path | None = None) -> RuntimeConfig:
    cfg_path = path or Path(os.getenv(CONFIG_ENV_VAR) or root / CONFIG_FILENAME)
    if not cfg_path.exists():
        if path is not None:
            raise ConfigError(f"Config file not found: {cfg_path}")
        return RuntimeConfig(workspace=WorkspaceConfig(), root=root, path=None)
    try:
        data = yaml.safe_load(cfg_path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid YAML in {cfg_path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Config root must be a mapping: {cfg_path}")
    try:
        workspace = WorkspaceConfig(**data)
    except ValidationError as exc:
        raise ConfigError(f"Invalid config {cfg_path}: {exc}") from exc
    return RuntimeConfig(workspace=workspace, root=root, path=cfg_path)


def bootstrap(
    root: Path | None = None,
    *,
    config_path: Path | None = None,
    log_level: str | None = None,
    json_logs: bool = False,
) -> AppContext:
    """Fresh context per CLI invocation; replaces any previous one."""
    AppContext.reset()
    load_dotenv(override=False)
    setup_logging(level=log_level, json_mode=json_logs)
    config = load_config((root or Path.cwd()).resolve(), config_path)
    return AppContext.init(config)


__all__ = [
    "AppContext",
    "CONFIG_ENV_VAR",
    "CONFIG_FILENAME",
    "RuntimeConfig",
    "WorkspaceConfig",
    "bootstrap",
    "load_config",
]
