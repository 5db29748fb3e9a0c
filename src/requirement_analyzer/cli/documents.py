"""Workspace commands: create, list, activate, rename and delete analyses."""

import json
from enum import Enum
from typing import Optional

import typer
from rich.markup import escape

from ..document.vocabulary import Phase
from ..exceptions import RequirementAnalyzerError
from ..scoring import score as completion_score
from ..workspace import ALL_FILTER, UNTAGGED_FILTER
from . import app
from ._common import console, fail, open_workspace, resolve_config, short_timestamp

# Choices for `list --phase`: every phase plus the All and Untagged views.
_FILTER_TOKENS = [ALL_FILTER] + [phase.value for phase in Phase] + [UNTAGGED_FILTER]
PhaseFilter = Enum("PhaseFilter", [(token, token) for token in _FILTER_TOKENS])


@app.command()
def new(
    ctx: typer.Context,
    name: Optional[str] = typer.Argument(None, help="Analysis name (default from config)"),
    phase: Optional[Phase] = typer.Option(
        None,
        "--phase",
        "-p",
        help="Target phase",
    ),
):
    """Create a blank analysis and make it active."""
    config = resolve_config(ctx)
    try:
        with open_workspace(config) as workspace:
            doc = workspace.create(name, language=config.default_language)
            if phase is not None:
                workspace.set_phase(phase.value)
    except RequirementAnalyzerError as e:
        raise fail(e)
    console.print(f"[green]Created[/green] {escape(doc.name)} [dim]({doc.id})[/dim]")


@app.command("list")
def list_documents(
    ctx: typer.Context,
    phase: PhaseFilter = typer.Option(
        PhaseFilter(ALL_FILTER),
        "--phase",
        "-p",
        help="Show only analyses with this target phase (or Untagged)",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output in machine-readable JSON format",
    ),
):
    """
    List analyses in the workspace, newest first.

    [bold cyan]Examples:[/bold cyan]

      requirement-analyzer list

      requirement-analyzer list --phase MVP --json
    """
    config = resolve_config(ctx)
    try:
        with open_workspace(config) as workspace:
            documents = workspace.filter_by_phase(phase.value)
            counts = workspace.phase_counts()
            active_id = workspace.active_id
    except RequirementAnalyzerError as e:
        raise fail(e)

    rows = [
        {
            "id": doc.id,
            "name": doc.name,
            "phase": doc.phase,
            "score": completion_score(doc),
            "updated_at": doc.updated_at.isoformat(),
            "active": doc.id == active_id,
        }
        for doc in documents
    ]

    if json_output:
        print(json.dumps({"analyses": rows, "counts": counts}, indent=2))
        return
    _output_rich(rows, counts, phase.value)


def _output_rich(rows, counts, phase_filter):
    """Human-readable Rich table output."""
    from rich.table import Table

    if not rows:
        console.print(f"[yellow]No analyses match {escape(phase_filter)}.[/yellow]")
        return

    table = Table(title="Analyses", show_lines=False, pad_edge=True)
    table.add_column("", style="bold green")  # active marker
    table.add_column("ID", style="cyan")
    table.add_column("Name", style="bold")
    table.add_column("Phase")
    table.add_column("Complete", justify="right", style="yellow")
    table.add_column("Updated", style="dim")

    for row in rows:
        table.add_row(
            "*" if row["active"] else "",
            row["id"],
            escape(row["name"]),
            row["phase"] or "-",
            f"{row['score']}%",
            short_timestamp(row["updated_at"]),
        )

    console.print()
    console.print(table)
    summary = "  ".join(f"{key}: {value}" for key, value in counts.items() if value)
    console.print(f"[dim]{summary}[/dim]")
    console.print()


@app.command()
def use(
    ctx: typer.Context,
    document_id: str = typer.Argument(..., metavar="ID", help="Analysis to activate"),
):
    """Make an analysis the active one."""
    config = resolve_config(ctx)
    try:
        with open_workspace(config) as workspace:
            doc = workspace.activate(document_id)
    except RequirementAnalyzerError as e:
        raise fail(e)
    console.print(f"Active analysis: [bold]{escape(doc.name)}[/bold] [dim]({doc.id})[/dim]")


@app.command()
def rename(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="New name for the active analysis"),
):
    """Rename the active analysis."""
    config = resolve_config(ctx)
    try:
        with open_workspace(config) as workspace:
            doc = workspace.rename(name)
    except RequirementAnalyzerError as e:
        raise fail(e)
    console.print(f"[green]Renamed[/green] {doc.id} to {escape(doc.name)}")


@app.command()
def delete(
    ctx: typer.Context,
    document_id: str = typer.Argument(..., metavar="ID", help="Analysis to delete"),
):
    """Delete an analysis. Deleting the last one leaves a blank analysis."""
    config = resolve_config(ctx)
    try:
        with open_workspace(config) as workspace:
            doc = workspace.remove(document_id)
            active = workspace.active
    except RequirementAnalyzerError as e:
        raise fail(e)
    console.print(f"[green]Deleted[/green] {escape(doc.name)} [dim]({doc.id})[/dim]")
    console.print(f"Active analysis: [bold]{escape(active.name)}[/bold] [dim]({active.id})[/dim]")
