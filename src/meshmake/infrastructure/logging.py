"""Logging & console helpers.

Features:
    * RichHandler based console logging on stderr (color, tracebacks)
    * Optional JSON logging mode (machine ingest, e.g. CI log collectors)
    * Presentation helpers (`get_console`, `render_progress`, `render_command`) so
      service layers never import rich directly.
"""

from __future__ import annotations

import json
import logging
import os

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

_CONSOLE: Console | None = None
_STDERR_CONSOLE: Console | None = None


class _JsonHandler(logging.Handler):
    def emit(self, record: logging.LogRecord) -> None:  # pragma: no cover - simple
        try:
            data = {
                "level": record.levelname,
                "name": record.name,
                "message": record.getMessage(),
            }
            if record.exc_info:
                data["exc_info"] = logging.Formatter().formatException(record.exc_info)
            get_console(stderr=True).out(json.dumps(data, ensure_ascii=False), highlight=False)
        except Exception:  # pragma: no cover
            self.handleError(record)


def setup_logging(level: str | None = None, json_mode: bool = False) -> None:
    """(Re)configure root logging; safe to call once per CLI invocation."""
    lvl_name = (level or os.getenv("LOG_LEVEL") or "INFO").upper()
    lvl = getattr(logging, lvl_name, logging.INFO)
    if not isinstance(lvl, int):
        lvl = logging.INFO
    handler: logging.Handler
    if json_mode:
        handler = _JsonHandler()
    else:
        handler = RichHandler(
            console=get_console(stderr=True),
            rich_tracebacks=True,
            show_path=False,
            markup=False,
        )
    logging.basicConfig(level=lvl, handlers=[handler], force=True, format="%(message)s")


def get_console(stderr: bool = False) -> Console:
    """Return the shared rich Console (stdout) or its stderr twin."""
    global _CONSOLE, _STDERR_CONSOLE
    if stderr:
        if _STDERR_CONSOLE is None:
            _STDERR_CONSOLE = Console(stderr=True)
        return _STDERR_CONSOLE
    if _CONSOLE is None:
        _CONSOLE = Console()
    return _CONSOLE


def render_progress(operation: str, label: str) -> None:
    """Standard per-dispatch progress line: `==> build application alpha`."""
    get_console().print(
        f"[bold cyan]==>[/bold cyan] [bold]{escape(operation)}[/bold] {escape(label)}",
        highlight=False,
    )


def render_command(argv: list[str], cwd: str) -> None:
    """Echo a command without running it (dry-run mode)."""
    get_console().print(f"[dim]({escape(cwd)})[/dim] {escape(' '.join(argv))}", highlight=False)


__all__ = [
    "get_console",
    "render_command",
    "render_progress",
    "setup_logging",
]
