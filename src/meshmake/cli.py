"""Command line surface: `meshmake [TARGET ...]`, make-style.

    meshmake                      # same as `meshmake build`
    meshmake test                 # every app, then every shared library
    meshmake rest-api migrate-up  # forward goals to one aliased app
    meshmake run-worker           # `run` goal for apps/worker
    meshmake -n rest-api build -v # orchestrator options go before the first target
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated, Any

import typer
from rich.json import JSON
from rich.table import Table

from meshmake.errors import MeshMakeError
from meshmake.infrastructure.logging import get_console
from meshmake.infrastructure.workspace import list_applications, list_libraries
from meshmake.runtime import RuntimeConfig, bootstrap
from meshmake.services.dispatcher import Dispatcher
from meshmake.services.resolver import run_targets

log = logging.getLogger(__name__)

app = typer.Typer(
    help="Monorepo build orchestrator",
    add_completion=False,
)


def _exit_code(code: int) -> int:
    # signal-killed children report -N
    return 128 - code if code < 0 else code


def _list_units(config: RuntimeConfig, json_out: bool) -> None:
    cons = get_console()
    apps = list_applications(config.apps_root)
    libs = list_libraries(config.libs_root) if config.libs_root.is_dir() else []
    aliases = set(config.workspace.aliases)
    rows: list[dict[str, Any]] = [
        {
            "name": u.name,
            "kind": u.kind.value,
            "path": str(u.path.relative_to(config.root)),
            "alias": u.name in aliases,
        }
        for u in [*apps, *libs]
    ]
    if json_out:
        cons.print(JSON.from_data(rows))
        return
    table = Table(title=f"Workspace {config.root}")
    for col in ("Name", "Kind", "Path", "Alias"):
        table.add_column(col)
    for r in rows:
        table.add_row(r["name"], r["kind"], r["path"], "yes" if r["alias"] else "")
    cons.print(table)


CONTEXT_SETTINGS = {
    "allow_extra_args": True,
    "ignore_unknown_options": True,
    # options end at the first target so flags after an alias reach the app
    "allow_interspersed_args": False,
}


@app.command(context_settings=CONTEXT_SETTINGS)
def main_cmd(
    targets: Annotated[
        list[str] | None, typer.Argument(help="Targets, then goals for an aliased app")
    ] = None,
    root: Annotated[
        Path | None, typer.Option("--root", "-C", help="Workspace root (default: cwd)")
    ] = None,
    config: Annotated[
        Path | None, typer.Option("--config", help="Config file (default: meshmake.yaml)")
    ] = None,
    dry_run: Annotated[
        bool, typer.Option("--dry-run", "-n", help="Print sub-build commands only")
    ] = False,
    list_only: Annotated[
        bool, typer.Option("--list", help="List discovered apps and libraries")
    ] = False,
    json_out: Annotated[bool, typer.Option("--json", help="JSON output for --list")] = False,
    log_level: Annotated[str | None, typer.Option(help="Log level (env LOG_LEVEL)")] = None,
    json_logs: Annotated[bool, typer.Option("--json-logs", help="Emit JSON log lines")] = False,
) -> None:
    try:
        ctx = bootstrap(root, config_path=config, log_level=log_level, json_logs=json_logs)
        if list_only:
            _list_units(ctx.config, json_out)
            return
        names = list(targets or [])
        if "--" in names:
            names.remove("--")
        dispatcher = Dispatcher(ctx.config.workspace, dry_run=dry_run)
        code = run_targets(names, config=ctx.config, dispatcher=dispatcher)
    except MeshMakeError as exc:
        log.error("%s", exc)
        raise typer.Exit(code=2) from exc
    if code != 0:
        raise typer.Exit(code=_exit_code(code))


def main() -> None:
    app(prog_name="meshmake")


if __name__ == "__main__":  # pragma: no cover
    main()
