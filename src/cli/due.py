"""`mochi due ...` commands (cards due for review)."""

from __future__ import annotations

from typing import Annotated, Optional

import typer

from adapters.resources import DueApi
from cli.common import get_context, run_command
from cli.output import print_json
from core.domain.errors import LocalValidationError

app = typer.Typer(help="Cards due for review.", invoke_without_command=True)

DateOption = Annotated[
    Optional[str], typer.Option("--date", help="ISO 8601 date (default: today).")
]


def _print_cards(cards: list) -> None:
    print_json({"cards": [card.to_wire() for card in cards]})


@app.callback()
def due(ctx: typer.Context, date: DateOption = None) -> None:
    """Without an action, behaves like `due list`."""

    if ctx.invoked_subcommand is not None:
        return
    _list_due(ctx, date)


def _list_due(ctx: typer.Context, date: str | None) -> None:
    context = get_context(ctx)

    async def _run() -> None:
        async with context.session() as client:
            cards = await DueApi(client).list(date=date)
        _print_cards(cards)

    run_command(_run)


@app.command("list")
def list_due(ctx: typer.Context, date: DateOption = None) -> None:
    """Cards due across all decks."""

    _list_due(ctx, date)


@app.command("list-by-deck")
def list_due_by_deck(
    ctx: typer.Context,
    deck_id: Annotated[Optional[str], typer.Option("--deck-id", help="Deck ID.")] = None,
    date: DateOption = None,
) -> None:
    """Cards due in one deck."""

    context = get_context(ctx)

    async def _run() -> None:
        if not deck_id:
            raise LocalValidationError("--deck-id is required")
        async with context.session() as client:
            cards = await DueApi(client).list_by_deck(deck_id, date=date)
        _print_cards(cards)

    run_command(_run)
