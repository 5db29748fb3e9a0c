"""Score command: how complete an analysis is."""

import json
from typing import Optional

import typer
from rich.markup import escape

from ..exceptions import RequirementAnalyzerError
from ..scoring import score as completion_score
from ..scoring import section_scores
from . import app
from ._common import console, fail, open_workspace, resolve_config


def _color(percent: int) -> str:
    if percent >= 80:
        return "green"
    if percent >= 40:
        return "yellow"
    return "red"


@app.command()
def score(
    ctx: typer.Context,
    document_id: Optional[str] = typer.Argument(
        None, metavar="[ID]", help="Analysis to score (default: active)"
    ),
    sections: bool = typer.Option(
        False,
        "--sections",
        "-s",
        help="Show per-section completion",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output in machine-readable JSON format",
    ),
):
    """Show the completion percentage of an analysis."""
    config = resolve_config(ctx)
    try:
        with open_workspace(config, save=False) as workspace:
            doc = workspace.resolve(document_id)
    except RequirementAnalyzerError as e:
        raise fail(e)

    total = completion_score(doc)
    per_section = section_scores(doc) if sections or json_output else {}

    if json_output:
        print(
            json.dumps(
                {"id": doc.id, "name": doc.name, "score": total, "sections": per_section},
                indent=2,
            )
        )
        return

    console.print(
        f"[bold]{escape(doc.name)}[/bold] [dim]({doc.id})[/dim]: "
        f"[{_color(total)}]{total}% complete[/{_color(total)}]"
    )
    if not sections:
        return

    from rich.table import Table

    table = Table(show_header=True, pad_edge=True)
    table.add_column("Section", style="bold")
    table.add_column("Complete", justify="right")
    for name, percent in per_section.items():
        table.add_row(name, f"[{_color(percent)}]{percent}%[/{_color(percent)}]")
    console.print(table)
