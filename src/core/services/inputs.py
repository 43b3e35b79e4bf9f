"""Input shaping for create/update commands.

The CLI hands over raw option values (strings, JSON snippets, flags); these
helpers turn them into validated input models and raise
`LocalValidationError` with a user-facing message before any request is sent.
"""

from __future__ import annotations

import json
from enum import Enum
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

from core.domain.errors import LocalValidationError
from core.domain.models import (
    CardCreateInput,
    CardUpdateInput,
    DeckCardsView,
    DeckCreateInput,
    DeckSortBy,
    DeckUpdateInput,
    TemplateCreateInput,
    TemplateFieldType,
    TextAlignment,
)

E = TypeVar("E", bound=Enum)
M = TypeVar("M", bound=BaseModel)

# Sentinel accepted by `--template-id` / `--parent-id` on update to clear the value.
NULL_LITERAL = "null"


def _choices(enum: type[Enum]) -> str:
    return ", ".join(str(member.value) for member in enum)


def parse_choice(value: str, enum: type[E], option: str) -> E:
    try:
        return enum(value)
    except ValueError:
        raise LocalValidationError(
            f"Invalid {option}: {value}. Must be one of: {_choices(enum)}"
        ) from None


def split_tags(value: str) -> list[str]:
    """`"a, b,,c"` -> `["a", "b", "c"]`."""
    return [tag.strip() for tag in value.split(",") if tag.strip()]


def _load_json_object(raw: str, label: str) -> dict[str, Any]:
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise LocalValidationError(f"Invalid {label} JSON: {exc.msg}") from exc
    if not isinstance(data, dict):
        raise LocalValidationError(f"Invalid {label} JSON: expected an object")
    return data


def parse_card_fields(raw: str | None) -> dict[str, Any] | None:
    """Card field values keyed by field id.

    A bare string is shorthand for `{"id": <key>, "value": <string>}`.
    """

    if not raw:
        return None
    data = _load_json_object(raw, "fields")
    fields: dict[str, Any] = {}
    for key, value in data.items():
        if isinstance(value, str):
            fields[key] = {"id": key, "value": value}
        elif isinstance(value, dict) and "id" in value and "value" in value:
            fields[key] = value
        else:
            raise LocalValidationError(
                f'Invalid fields JSON: Field "{key}" must have "id" and "value" properties or be a string'
            )
    return fields


def parse_template_fields(raw: str | None) -> dict[str, Any] | None:
    if not raw:
        return None
    data = _load_json_object(raw, "fields")
    fields: dict[str, Any] = {}
    for key, value in data.items():
        if not isinstance(value, dict):
            raise LocalValidationError(f'Invalid fields JSON: Field "{key}" must be an object')
        field_type = value.get("type")
        if field_type is not None and field_type not in {t.value for t in TemplateFieldType}:
            raise LocalValidationError(
                f'Invalid fields JSON: Field "{key}" has invalid type: {field_type}. '
                f"Must be one of: {_choices(TemplateFieldType)}"
            )
        fields[key] = {**value, "id": value.get("id") or key}
    return fields


def parse_style(raw: str | None) -> dict[str, Any] | None:
    if not raw:
        return None
    data = _load_json_object(raw, "style")
    alignment = data.get("text-alignment")
    if alignment is not None and alignment not in {a.value for a in TextAlignment}:
        raise LocalValidationError(
            f"Invalid style JSON: Invalid text-alignment: {alignment}. "
            f"Must be one of: {_choices(TextAlignment)}"
        )
    return data


def parse_options(raw: str | None) -> dict[str, Any] | None:
    if not raw:
        return None
    return _load_json_object(raw, "options")


def _validate(model: type[M], values: dict[str, Any]) -> M:
    try:
        return model.model_validate(values)
    except ValidationError as exc:
        first = exc.errors()[0]
        location = ".".join(str(part) for part in first.get("loc", ()))
        raise LocalValidationError(f"Invalid {location or 'input'}: {first['msg']}") from exc


def _nullable(value: str) -> str | None:
    return None if value == NULL_LITERAL else value


# --- Cards ---


def build_card_create(
    *,
    content: str | None,
    deck_id: str | None,
    template_id: str | None = None,
    archived: bool | None = None,
    review_reverse: bool | None = None,
    pos: str | None = None,
    manual_tags: str | None = None,
    fields: str | None = None,
) -> CardCreateInput:
    if not content:
        raise LocalValidationError("--content is required")
    if not deck_id:
        raise LocalValidationError("--deck-id is required")

    values: dict[str, Any] = {"content": content, "deck-id": deck_id}
    if template_id:
        values["template-id"] = template_id
    if archived is not None:
        values["archived?"] = archived
    if review_reverse is not None:
        values["review-reverse?"] = review_reverse
    if pos:
        values["pos"] = pos
    if manual_tags:
        values["manual-tags"] = split_tags(manual_tags)
    if fields:
        values["fields"] = parse_card_fields(fields)
    return _validate(CardCreateInput, values)


def build_card_update(
    *,
    content: str | None = None,
    deck_id: str | None = None,
    template_id: str | None = None,
    archived: bool | None = None,
    trashed: str | None = None,
    review_reverse: bool | None = None,
    pos: str | None = None,
    manual_tags: str | None = None,
    fields: str | None = None,
) -> CardUpdateInput:
    values: dict[str, Any] = {}
    if content is not None:
        values["content"] = content
    if deck_id is not None:
        values["deck-id"] = deck_id
    if template_id is not None:
        values["template-id"] = _nullable(template_id)
    if archived is not None:
        values["archived?"] = archived
    if trashed is not None:
        values["trashed?"] = _nullable(trashed)
    if review_reverse is not None:
        values["review-reverse?"] = review_reverse
    if pos is not None:
        values["pos"] = pos
    if manual_tags is not None:
        values["manual-tags"] = split_tags(manual_tags)
    if fields is not None:
        values["fields"] = parse_card_fields(fields)
    return _validate(CardUpdateInput, values)


# --- Decks ---


def _deck_values(
    *,
    name: str | None,
    parent_id: str | None,
    sort: float | None,
    archived: bool | None,
    trashed: str | None,
    sort_by: str | None,
    cards_view: str | None,
    show_sides: bool | None,
    sort_by_direction: bool | None,
    review_reverse: bool | None,
    allow_null: bool,
) -> dict[str, Any]:
    values: dict[str, Any] = {}
    if name is not None:
        values["name"] = name
    if parent_id is not None:
        values["parent-id"] = _nullable(parent_id) if allow_null else parent_id
    if sort is not None:
        values["sort"] = int(sort) if float(sort).is_integer() else sort
    if archived is not None:
        values["archived?"] = archived
    if trashed is not None:
        values["trashed?"] = _nullable(trashed) if allow_null else trashed
    if show_sides is not None:
        values["show-sides?"] = show_sides
    if sort_by_direction is not None:
        values["sort-by-direction"] = sort_by_direction
    if review_reverse is not None:
        values["review-reverse?"] = review_reverse
    if sort_by is not None:
        values["sort-by"] = parse_choice(sort_by, DeckSortBy, "sort-by")
    if cards_view is not None:
        values["cards-view"] = parse_choice(cards_view, DeckCardsView, "cards-view")
    return values


def build_deck_create(
    *,
    name: str | None,
    parent_id: str | None = None,
    sort: float | None = None,
    archived: bool | None = None,
    trashed: str | None = None,
    sort_by: str | None = None,
    cards_view: str | None = None,
    show_sides: bool | None = None,
    sort_by_direction: bool | None = None,
    review_reverse: bool | None = None,
) -> DeckCreateInput:
    if not name:
        raise LocalValidationError("--name is required")
    values = _deck_values(
        name=name,
        parent_id=parent_id or None,
        sort=sort,
        archived=archived,
        trashed=trashed,
        sort_by=sort_by,
        cards_view=cards_view,
        show_sides=show_sides,
        sort_by_direction=sort_by_direction,
        review_reverse=review_reverse,
        allow_null=False,
    )
    return _validate(DeckCreateInput, values)


def build_deck_update(
    *,
    name: str | None = None,
    parent_id: str | None = None,
    sort: float | None = None,
    archived: bool | None = None,
    trashed: str | None = None,
    sort_by: str | None = None,
    cards_view: str | None = None,
    show_sides: bool | None = None,
    sort_by_direction: bool | None = None,
    review_reverse: bool | None = None,
) -> DeckUpdateInput:
    values = _deck_values(
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
        allow_null=True,
    )
    return _validate(DeckUpdateInput, values)


# --- Templates ---


def build_template_create(
    *,
    name: str | None,
    content: str | None,
    fields: str | None,
    pos: str | None = None,
    style: str | None = None,
    options: str | None = None,
) -> TemplateCreateInput:
    parsed_fields = parse_template_fields(fields)
    if not name:
        raise LocalValidationError("--name is required")
    if not content:
        raise LocalValidationError("--content is required")
    if not parsed_fields:
        raise LocalValidationError("--fields is required")

    values: dict[str, Any] = {"name": name, "content": content, "fields": parsed_fields}
    if pos:
        values["pos"] = pos
    if style:
        values["style"] = parse_style(style)
    if options:
        values["options"] = parse_options(options)
    return _validate(TemplateCreateInput, values)
