"""Shared CLI helpers."""

from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

import typer
from rich.console import Console
from rich.markup import escape

from ..config import AnalyzerConfig, load_config
from ..exceptions import RequirementAnalyzerError
from ..logging_config import setup_logging
from ..persistence import WorkspaceDB, load_workspace, save_workspace
from ..workspace import Workspace

console = Console()


def resolve_config(ctx: typer.Context) -> AnalyzerConfig:
    """Build configuration from the global CLI options stored on the context."""
    options = ctx.obj or {}
    data_dir: Optional[Path] = options.get("data_dir")
    log_file: Optional[Path] = options.get("log_file")
    try:
        config = load_config(
            config_file=options.get("config"),
            data_dir=str(data_dir) if data_dir is not None else None,
            verbose=options.get("verbose", False),
            log_file=str(log_file) if log_file is not None else None,
        )
    except RequirementAnalyzerError as e:
        console.print(f"[red]Configuration error:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    try:
        setup_logging(
            verbose=config.verbosity == "verbose",
            quiet=config.verbosity == "quiet",
            log_file=config.log_file,
        )
    except OSError as e:
        console.print(f"[red]Cannot open log file:[/red] {escape(str(e))}")
        raise typer.Exit(1)
    return config


@contextmanager
def open_workspace(config: AnalyzerConfig, save: bool = True) -> Iterator[Workspace]:
    """Load the stored workspace; write it back when the block exits cleanly."""
    with WorkspaceDB(config.data_dir) as db:
        workspace = load_workspace(db.conn, default_name=config.default_name)
        yield workspace
        if save:
            save_workspace(db.conn, workspace)


def fail(error: Exception) -> typer.Exit:
    """Report ``error`` on the console and return the exit to raise."""
    console.print(f"[red]Error:[/red] {escape(str(error))}")
    return typer.Exit(1)


def short_timestamp(value: str) -> str:
    """Trim an ISO timestamp to ``YYYY-MM-DD HH:MM``."""
    return value.replace("T", " ")[:16]
