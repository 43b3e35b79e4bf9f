from __future__ import annotations

import pytest

from adapters.resources import CardsApi, DecksApi, DueApi, TemplatesApi
from core.domain.errors import LocalValidationError, MochiError
from core.domain.models import CardUpdateInput
from conftest import FakeApi, json_response

CARD = {
    "id": "c1",
    "content": "# Hello",
    "deck-id": "d1",
    "archived?": False,
    "created-at": {"date": "2024-01-01T00:00:00.000Z"},
    "fields": {"name": {"id": "name", "value": "Hello"}},
    "server-only": 42,
}


@pytest.mark.asyncio
async def test_card_list_returns_typed_page(make_client):
    api = FakeApi([json_response(200, {"docs": [CARD], "bookmark": "b1"})])

    async with make_client(api) as client:
        page = await CardsApi(client).list(deck_id="d1", limit=5)

    assert page.bookmark == "b1"
    assert page.docs[0].deck_id == "d1"
    assert page.docs[0].fields["name"].value == "Hello"
    # Unknown keys survive the round trip to output.
    assert page.docs[0].to_wire() == CARD
    assert dict(api.requests[0].url.params) == {"deck-id": "d1", "limit": "5"}


@pytest.mark.asyncio
async def test_card_ids_are_url_encoded(make_client):
    api = FakeApi([json_response(200, CARD)])

    async with make_client(api) as client:
        await CardsApi(client).get("a/b c")

    assert api.requests[0].url.raw_path == b"/api/cards/a%2Fb%20c"


@pytest.mark.asyncio
async def test_blank_id_fails_locally(make_client):
    api = FakeApi()

    async with make_client(api) as client:
        with pytest.raises(LocalValidationError, match="Card ID is required"):
            await CardsApi(client).get("  ")

    assert api.requests == []


@pytest.mark.asyncio
async def test_card_update_sends_only_set_fields_and_explicit_null(make_client):
    api = FakeApi([json_response(200, CARD)])
    payload = CardUpdateInput.model_validate({"content": "new", "template-id": None})

    async with make_client(api) as client:
        await CardsApi(client).update("c1", payload)

    request = api.requests[0]
    assert request.method == "POST"
    assert request.url.path == "/api/cards/c1"
    assert api.json_body() == {"content": "new", "template-id": None}


@pytest.mark.asyncio
async def test_card_create_accepts_wire_dict(make_client):
    api = FakeApi([json_response(200, CARD)])

    async with make_client(api) as client:
        card = await CardsApi(client).create({"content": "# Hello", "deck-id": "d1"})

    assert card.id == "c1"
    assert api.json_body() == {"content": "# Hello", "deck-id": "d1"}


@pytest.mark.asyncio
async def test_card_create_rejects_missing_required_input(make_client):
    api = FakeApi()

    async with make_client(api) as client:
        with pytest.raises(LocalValidationError):
            await CardsApi(client).create({"content": "no deck"})

    assert api.requests == []


@pytest.mark.asyncio
async def test_list_all_streams_every_page(make_client):
    api = FakeApi(
        [
            json_response(200, {"docs": [{"id": "d1", "name": "One"}], "bookmark": "b1"}),
            json_response(200, {"docs": [{"id": "d2", "name": "Two"}], "bookmark": None}),
        ]
    )

    async with make_client(api) as client:
        names = [deck.name async for deck in DecksApi(client).list_all()]

    assert names == ["One", "Two"]


@pytest.mark.asyncio
async def test_attachment_paths(make_client, tmp_path):
    upload = tmp_path / "notes.txt"
    upload.write_text("hello")
    api = FakeApi([json_response(200, {}), json_response(204)])

    async with make_client(api) as client:
        cards = CardsApi(client)
        await cards.add_attachment("c1", "my notes.txt", upload)
        await cards.delete_attachment("c1", "my notes.txt")

    assert api.requests[0].method == "POST"
    assert api.requests[0].url.raw_path == b"/api/cards/c1/attachments/my%20notes.txt"
    assert api.requests[1].method == "DELETE"
    assert api.requests[1].url.raw_path == b"/api/cards/c1/attachments/my%20notes.txt"


@pytest.mark.asyncio
async def test_due_unwraps_cards_envelope(make_client):
    api = FakeApi(
        [
            json_response(200, {"cards": [CARD]}),
            json_response(200, {"cards": []}),
        ]
    )

    async with make_client(api) as client:
        due = DueApi(client)
        everywhere = await due.list(date="2024-01-01")
        in_deck = await due.list_by_deck("d1")

    assert [card.id for card in everywhere] == ["c1"]
    assert in_deck == []
    assert dict(api.requests[0].url.params) == {"date": "2024-01-01"}
    assert api.requests[1].url.path == "/api/due/d1"


@pytest.mark.asyncio
async def test_template_create_and_get(make_client):
    template = {
        "id": "t1",
        "name": "Basic",
        "content": "<< Front >>",
        "fields": {"name": {"id": "name", "name": "Front", "type": "text"}},
    }
    api = FakeApi([json_response(200, template), json_response(200, template)])

    async with make_client(api) as client:
        templates = TemplatesApi(client)
        created = await templates.create(
            {"name": "Basic", "content": "<< Front >>", "fields": template["fields"]}
        )
        fetched = await templates.get("t1")

    assert created.fields["name"].type == "text"
    assert fetched.to_wire() == template


@pytest.mark.asyncio
async def test_deck_delete_and_unexpected_payload(make_client):
    api = FakeApi([json_response(204), json_response(200, ["not", "a", "deck"])])

    async with make_client(api) as client:
        decks = DecksApi(client)
        await decks.delete("d1")
        with pytest.raises(MochiError, match="Unexpected Deck payload"):
            await decks.get("d1")

    assert api.requests[0].method == "DELETE"
