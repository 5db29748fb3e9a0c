"""CLI entry point; registers all subcommands."""

import typer


app = typer.Typer(
    name="requirement-analyzer",
    help="Requirement Analyzer - structured feature analyses in plain text",
    add_completion=False,
    rich_markup_mode="rich",
)


# Import subcommands to register them
from .callback import main as _main_callback  # noqa: F401, E402
from .documents import (  # noqa: F401, E402
    delete as _delete,
    list_documents as _list,
    new as _new,
    rename as _rename,
    use as _use,
)
from .transfer import export as _export, import_document as _import  # noqa: F401, E402
from .score import score as _score  # noqa: F401, E402


def main() -> None:
    """Console script entry point."""
    app()
