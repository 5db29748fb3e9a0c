"""Text export / import commands."""

from pathlib import Path
from typing import List, Optional

import typer
from rich.markup import escape

from ..codec import encode
from ..exceptions import RequirementAnalyzerError
from ..merge import MergePolicy, parse_field_key
from . import app
from ._common import console, fail, open_workspace, resolve_config


@app.command()
def export(
    ctx: typer.Context,
    document_id: Optional[str] = typer.Argument(
        None, metavar="[ID]", help="Analysis to export (default: active)"
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Write to this file instead of stdout",
        file_okay=True,
        dir_okay=False,
        writable=True,
    ),
):
    """
    Export an analysis as markdown text.

    [bold cyan]Examples:[/bold cyan]

      requirement-analyzer export > analysis.md

      requirement-analyzer export 3f9a2c1e --output checkout.md
    """
    config = resolve_config(ctx)
    try:
        with open_workspace(config, save=False) as workspace:
            doc = workspace.resolve(document_id)
    except RequirementAnalyzerError as e:
        raise fail(e)

    text = encode(doc, default_name=config.default_name)
    if output is None:
        print(text)
        return

    try:
        output.write_text(text + "\n", encoding="utf-8")
    except OSError as e:
        raise fail(e)
    console.print(f"[green]Exported[/green] {escape(doc.name)} to {escape(str(output))}")


@app.command("import")
def import_document(
    ctx: typer.Context,
    file: Path = typer.Argument(
        ...,
        help="Exported analysis text to read",
        exists=True,
        file_okay=True,
        dir_okay=False,
        readable=True,
    ),
    merge_into_active: bool = typer.Option(
        False,
        "--merge",
        "-m",
        help="Merge into the active analysis instead of adding a new one",
    ),
    append: Optional[List[str]] = typer.Option(
        None,
        "--append",
        "-a",
        help="Field to append instead of replace when merging (e.g. problem.problem); repeatable",
    ),
):
    """
    Import an exported analysis, as a new analysis or merged into the active one.

    When merging, filled fields are replaced by the imported values unless
    listed with --append or in the configured append_fields; lists are
    concatenated.

    [bold cyan]Examples:[/bold cyan]

      requirement-analyzer import checkout.md

      requirement-analyzer import interview.md --merge --append notes
    """
    config = resolve_config(ctx)

    keys = list(config.append_fields) + list(append or [])
    unknown = [key for key in append or [] if parse_field_key(key) is None]
    if unknown:
        raise typer.BadParameter(
            f"unknown field(s): {', '.join(unknown)}", param_hint="--append"
        )
    policy = MergePolicy.appending(keys)

    try:
        text = file.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        raise fail(e)

    try:
        with open_workspace(config) as workspace:
            doc = workspace.import_text(text, merge_into_active=merge_into_active, policy=policy)
    except RequirementAnalyzerError as e:
        raise fail(e)

    verb = "Merged into" if merge_into_active else "Imported"
    console.print(f"[green]{verb}[/green] {escape(doc.name)} [dim]({doc.id})[/dim]")
