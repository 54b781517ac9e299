"""Workspace layout reader: directory listing is the only registry of units."""
from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

from meshmake.domain.models import Unit, UnitKind
from meshmake.errors import DiscoveryError


def iter_unit_dirs(root: Path) -> Iterable[Path]:
    if not root.is_dir():
        raise DiscoveryError(f"Workspace root not found: {root}")
    try:
        children = sorted(root.iterdir(), key=lambda p: p.name)
    except OSError as exc:
        raise DiscoveryError(f"Cannot read {root}: {exc}") from exc
    for child in children:
        if child.name.startswith("."):
            continue
        if child.is_dir():
            yield child


def _list_units(root: Path, kind: UnitKind) -> list[Unit]:
    return [Unit(name=d.name, kind=kind, path=d) for d in iter_unit_dirs(root)]


def list_applications(apps_root: Path) -> list[Unit]:
    """Snapshot of the applications root, lexical order. Never cached."""
    return _list_units(apps_root, UnitKind.APPLICATION)


def list_libraries(libs_root: Path) -> list[Unit]:
    return _list_units(libs_root, UnitKind.LIBRARY)


def application_unit(apps_root: Path, name: str) -> Unit:
    """Address an application by name without checking it exists."""
    return Unit(name=name, kind=UnitKind.APPLICATION, path=apps_root / name)


__all__ = [
    "application_unit",
    "iter_unit_dirs",
    "list_applications",
    "list_libraries",
]
