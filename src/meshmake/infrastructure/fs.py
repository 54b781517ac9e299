"""File-system helpers for the shared binary output directory."""
from __future__ import annotations

import shutil
from pathlib import Path

from meshmake.errors import ProvisioningError


def ensure_output_dir(path: Path) -> Path:
    """Create the output dir (and parents); no-op when already present."""
    try:
        path.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise ProvisioningError(f"Cannot create output directory {path}: {exc}") from exc
    return path


def rm(path: Path) -> None:
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
    else:
        path.unlink(missing_ok=True)


def clear_output_dir(path: Path) -> list[Path]:
    """Remove everything inside `path`, keeping the directory itself."""
    removed: list[Path] = []
    if not path.exists():
        return removed
    try:
        for child in sorted(path.iterdir()):
            rm(child)
            removed.append(child)
    except OSError as exc:
        raise ProvisioningError(f"Cannot clear output directory {path}: {exc}") from exc
    return removed


__all__ = ["clear_output_dir", "ensure_output_dir", "rm"]
