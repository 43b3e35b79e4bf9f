"""CLI entrypoint (Typer).

Why this layout:
- One sub-app per resource keeps each module small.
- The root callback resolves global options once and hands every command the
  same `ClientContext` through `ctx.obj`.
"""

from __future__ import annotations

from typing import Annotated, Optional

import typer

from cli import __version__
from cli import card, deck, doctor, due, template
from cli.common import build_context
from core.log_setup import setup_logging

app = typer.Typer(
    name="mochi",
    help="Command-line client for the Mochi flashcards API.",
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)

app.add_typer(card.app, name="card")
app.add_typer(deck.app, name="deck")
app.add_typer(template.app, name="template")
app.add_typer(due.app, name="due")
app.add_typer(doctor.app, name="doctor")


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"mochi v{__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    api_key: Annotated[
        Optional[str],
        typer.Option("--api-key", help="Mochi API key (overrides MOCHI_API_KEY).", show_default=False),
    ] = None,
    verbose: Annotated[bool, typer.Option("--verbose", help="Log requests and retries to stderr.")] = False,
    version: Annotated[
        Optional[bool],
        typer.Option(
            "--version",
            "-v",
            callback=_version_callback,
            is_eager=True,
            help="Show the version and exit.",
        ),
    ] = None,
) -> None:
    context = build_context(api_key)
    setup_logging("DEBUG" if verbose else context.settings.log_level)
    ctx.obj = context


def run() -> None:
    app()
