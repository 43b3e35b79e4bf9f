"""`mochi deck ...` commands."""

from __future__ import annotations

from typing import Annotated, Optional

import typer

from adapters.resources import DecksApi
from cli.common import get_context, run_command
from cli.output import print_json
from core.services.inputs import build_deck_create, build_deck_update

app = typer.Typer(no_args_is_help=True, help="Create, read, update and delete decks.")

DeckId = Annotated[str, typer.Argument(help="Deck ID.")]
ParentIdOption = Annotated[
    Optional[str], typer.Option("--parent-id", help='Parent deck ID ("null" on update moves to the top level).')
]
SortOption = Annotated[Optional[float], typer.Option("--sort", help="Numeric sort position.")]
ArchivedOption = Annotated[Optional[bool], typer.Option("--archived/--no-archived", help="Archive the deck.")]
TrashedOption = Annotated[
    Optional[str], typer.Option("--trashed", help='Trash timestamp (ISO 8601); "null" on update restores it.')
]
SortByOption = Annotated[
    Optional[str],
    typer.Option("--sort-by", help="Card order: none, lexicographically, created-at, updated-at, ..."),
]
CardsViewOption = Annotated[
    Optional[str], typer.Option("--cards-view", help="Cards view: list, grid, note or column.")
]
ShowSidesOption = Annotated[
    Optional[bool], typer.Option("--show-sides/--no-show-sides", help="Show all sides in the list view.")
]
SortDirectionOption = Annotated[
    Optional[bool],
    typer.Option("--sort-by-direction/--no-sort-by-direction", help="Reverse the card order."),
]
ReviewReverseOption = Annotated[
    Optional[bool], typer.Option("--review-reverse/--no-review-reverse", help="Also review the back side.")
]


@app.command("list")
def list_decks(
    ctx: typer.Context,
    bookmark: Annotated[Optional[str], typer.Option("--bookmark", help="Pagination bookmark.")] = None,
    all_pages: Annotated[bool, typer.Option("--all", help="Stream every deck as JSON lines.")] = False,
) -> None:
    """List decks."""

    context = get_context(ctx)

    async def _run() -> None:
        async with context.session() as client:
            decks = DecksApi(client)
            if all_pages:
                async for deck in decks.list_all():
                    print_json(deck.to_wire(), compact=True)
                return
            page = await decks.list(bookmark=bookmark)
            print_json(page.to_wire())

    run_command(_run)


@app.command("get")
def get_deck(ctx: typer.Context, deck_id: DeckId) -> None:
    context = get_context(ctx)

    async def _run() -> None:
        async with context.session() as client:
            deck = await DecksApi(client).get(deck_id)
        print_json(deck.to_wire())

    run_command(_run)


@app.command("create")
def create_deck(
    ctx: typer.Context,
    name: Annotated[Optional[str], typer.Option("--name", help="Deck name.")] = None,
    parent_id: ParentIdOption = None,
    sort: SortOption = None,
    archived: ArchivedOption = None,
    trashed: TrashedOption = None,
    sort_by: SortByOption = None,
    cards_view: CardsViewOption = None,
    show_sides: ShowSidesOption = None,
    sort_by_direction: SortDirectionOption = None,
    review_reverse: ReviewReverseOption = None,
) -> None:
    """Create a deck (--name is required)."""

    context = get_context(ctx)

    async def _run() -> None:
        payload = build_deck_create(
            name=name,
            parent_id=parent_id,
            sort=sort,
            archived=archived,
            trashed=trashed,
            sort_by=sort_by,
            cards_view=cards_view,
            show_sides=show_sides,
            sort_by_direction=sort_by_direction,
            review_reverse=review_reverse,
        )
        async with context.session() as client:
            deck = await DecksApi(client).create(payload)
        print_json(deck.to_wire())

    run_command(_run)


@app.command("update")
def update_deck(
    ctx: typer.Context,
    deck_id: DeckId,
    name: Annotated[Optional[str], typer.Option("--name", help="New name.")] = None,
    parent_id: ParentIdOption = None,
    sort: SortOption = None,
    archived: ArchivedOption = None,
    trashed: TrashedOption = None,
    sort_by: SortByOption = None,
    cards_view: CardsViewOption = None,
    show_sides: ShowSidesOption = None,
    sort_by_direction: SortDirectionOption = None,
    review_reverse: ReviewReverseOption = None,
) -> None:
    """Update a deck; only the given options are sent."""

    context = get_context(ctx)

    async def _run() -> None:
        payload = build_deck_update(
            name=name,
            parent_id=parent_id,
            sort=sort,
            archived=archived,
            trashed=trashed,
            sort_by=sort_by,
            cards_view=cards_view,
            show_sides=show_sides,
            sort_by_direction=sort_by_direction,
            review_reverse=review_reverse,
        )
        async with context.session() as client:
            deck = await DecksApi(client).update(deck_id, payload)
        print_json(deck.to_wire())

    run_command(_run)


@app.command("delete")
def delete_deck(ctx: typer.Context, deck_id: DeckId) -> None:
    """Delete a deck permanently (its cards go with it)."""

    context = get_context(ctx)

    async def _run() -> None:
        async with context.session() as client:
            await DecksApi(client).delete(deck_id)
        print_json({"success": True, "message": "Deck deleted"}, compact=True)

    run_command(_run)
