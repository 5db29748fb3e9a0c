"""Global options shared by every subcommand."""

from pathlib import Path
from typing import Optional

import typer

from . import app
from ._common import console


@app.callback(invoke_without_command=True, no_args_is_help=False)
def main(
    ctx: typer.Context,
    data_dir: Optional[Path] = typer.Option(
        None,
        "-d",
        "--data-dir",
        help="Directory holding .requirements/workspace.db (default: current directory)",
        file_okay=False,
        dir_okay=True,
    ),
    config: Optional[Path] = typer.Option(
        None,
        "-c",
        "--config",
        help="Configuration file (TOML)",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable debug logging",
    ),
    log_file: Optional[Path] = typer.Option(
        None,
        "--log-file",
        help="Also append log records to this file",
        file_okay=True,
        dir_okay=False,
    ),
    version: bool = typer.Option(
        False,
        "--version",
        help="Show version and exit",
    ),
):
    """
    Manage requirement analyses: create, score, export and import them.

    Analyses live in [bold].requirements/workspace.db[/bold] under the data
    directory. One analysis is active at a time; commands that take an
    optional ID default to it.

    [bold cyan]Examples:[/bold cyan]

      requirement-analyzer new "Dark mode toggle" --phase MVP

      requirement-analyzer list --phase Untagged

      requirement-analyzer export --output dark-mode.md

      requirement-analyzer import notes.md --merge --append problem.problem
    """
    ctx.ensure_object(dict)
    ctx.obj["data_dir"] = data_dir
    ctx.obj["config"] = config
    ctx.obj["verbose"] = verbose
    ctx.obj["log_file"] = log_file

    if version:
        from .. import __version__

        console.print(
            f"[bold cyan]Requirement Analyzer[/bold cyan] version [green]{__version__}[/green]"
        )
        raise typer.Exit(0)

    if ctx.invoked_subcommand is None:
        console.print(ctx.get_help())
        raise typer.Exit(0)
