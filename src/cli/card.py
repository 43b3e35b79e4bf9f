"""`mochi card ...` commands."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Optional

import typer

from adapters.resources import CardsApi
from cli.common import get_context, run_command
from cli.output import print_json
from core.domain.errors import LocalValidationError
from core.services.inputs import build_card_create, build_card_update

app = typer.Typer(no_args_is_help=True, help="Create, read, update and delete cards.")

CardId = Annotated[str, typer.Argument(help="Card ID.")]
DeckIdOption = Annotated[Optional[str], typer.Option("--deck-id", help="Deck ID.")]
TemplateIdOption = Annotated[
    Optional[str], typer.Option("--template-id", help='Template ID ("null" on update removes it).')
]
ArchivedOption = Annotated[
    Optional[bool], typer.Option("--archived/--no-archived", help="Archive or unarchive the card.")
]
ReviewReverseOption = Annotated[
    Optional[bool], typer.Option("--review-reverse/--no-review-reverse", help="Also review the back side.")
]
PosOption = Annotated[Optional[str], typer.Option("--pos", help="Position used for sorting.")]
TagsOption = Annotated[Optional[str], typer.Option("--manual-tags", help='Comma-separated tags ("tag1,tag2").')]
FieldsOption = Annotated[
    Optional[str], typer.Option("--fields", help='Field values as JSON, e.g. \'{"front": "Hello"}\'.')
]


@app.command("list")
def list_cards(
    ctx: typer.Context,
    deck_id: DeckIdOption = None,
    limit: Annotated[Optional[int], typer.Option("--limit", min=1, max=100, help="Cards per page.")] = None,
    bookmark: Annotated[Optional[str], typer.Option("--bookmark", help="Pagination bookmark.")] = None,
    all_pages: Annotated[bool, typer.Option("--all", help="Stream every card as JSON lines.")] = False,
) -> None:
    """List cards (one page, or every page with --all)."""

    context = get_context(ctx)

    async def _run() -> None:
        async with context.session() as client:
            cards = CardsApi(client)
            if all_pages:
                async for card in cards.list_all(deck_id=deck_id, limit=limit):
                    print_json(card.to_wire(), compact=True)
                return
            page = await cards.list(deck_id=deck_id, limit=limit, bookmark=bookmark)
            print_json(page.to_wire())

    run_command(_run)


@app.command("get")
def get_card(ctx: typer.Context, card_id: CardId) -> None:
    """Get a single card."""

    context = get_context(ctx)

    async def _run() -> None:
        async with context.session() as client:
            card = await CardsApi(client).get(card_id)
        print_json(card.to_wire())

    run_command(_run)


@app.command("create")
def create_card(
    ctx: typer.Context,
    content: Annotated[Optional[str], typer.Option("--content", help="Card content (Markdown).")] = None,
    deck_id: DeckIdOption = None,
    template_id: TemplateIdOption = None,
    archived: ArchivedOption = None,
    review_reverse: ReviewReverseOption = None,
    pos: PosOption = None,
    manual_tags: TagsOption = None,
    fields: FieldsOption = None,
) -> None:
    """Create a card (--content and --deck-id are required)."""

    context = get_context(ctx)

    async def _run() -> None:
        payload = build_card_create(
            content=content,
            deck_id=deck_id,
            template_id=template_id,
            archived=archived,
            review_reverse=review_reverse,
            pos=pos,
            manual_tags=manual_tags,
            fields=fields,
        )
        async with context.session() as client:
            card = await CardsApi(client).create(payload)
        print_json(card.to_wire())

    run_command(_run)


@app.command("update")
def update_card(
    ctx: typer.Context,
    card_id: CardId,
    content: Annotated[Optional[str], typer.Option("--content", help="New content.")] = None,
    deck_id: DeckIdOption = None,
    template_id: TemplateIdOption = None,
    archived: ArchivedOption = None,
    trashed: Annotated[
        Optional[str], typer.Option("--trashed", help='Trash timestamp (ISO 8601), or "null" to restore.')
    ] = None,
    review_reverse: ReviewReverseOption = None,
    pos: PosOption = None,
    manual_tags: TagsOption = None,
    fields: FieldsOption = None,
) -> None:
    """Update a card; only the given options are sent."""

    context = get_context(ctx)

    async def _run() -> None:
        payload = build_card_update(
            content=content,
            deck_id=deck_id,
            template_id=template_id,
            archived=archived,
            trashed=trashed,
            review_reverse=review_reverse,
            pos=pos,
            manual_tags=manual_tags,
            fields=fields,
        )
        async with context.session() as client:
            card = await CardsApi(client).update(card_id, payload)
        print_json(card.to_wire())

    run_command(_run)


@app.command("delete")
def delete_card(ctx: typer.Context, card_id: CardId) -> None:
    """Delete a card permanently."""

    context = get_context(ctx)

    async def _run() -> None:
        async with context.session() as client:
            await CardsApi(client).delete(card_id)
        print_json({"success": True, "message": "Card deleted"}, compact=True)

    run_command(_run)


@app.command("add-attachment")
def add_attachment(
    ctx: typer.Context,
    card_id: CardId,
    file: Annotated[Optional[Path], typer.Option("--file", help="File to upload.")] = None,
    filename: Annotated[
        Optional[str], typer.Option("--filename", help="Attachment name (default: the file's name).")
    ] = None,
) -> None:
    """Upload a file as an attachment of a card."""

    context = get_context(ctx)

    async def _run() -> None:
        if file is None:
            raise LocalValidationError("--file is required")
        name = filename or file.name or "attachment"
        async with context.session() as client:
            await CardsApi(client).add_attachment(card_id, name, file)
        print_json({"success": True, "message": "Attachment added"}, compact=True)

    run_command(_run)


@app.command("delete-attachment")
def delete_attachment(
    ctx: typer.Context,
    card_id: CardId,
    filename: Annotated[Optional[str], typer.Option("--filename", help="Attachment to delete.")] = None,
) -> None:
    """Delete an attachment from a card."""

    context = get_context(ctx)

    async def _run() -> None:
        if not filename:
            raise LocalValidationError("--filename is required")
        async with context.session() as client:
            await CardsApi(client).delete_attachment(card_id, filename)
        print_json({"success": True, "message": "Attachment deleted"}, compact=True)

    run_command(_run)
