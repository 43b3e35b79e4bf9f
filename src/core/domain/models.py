"""Domain models (Pydantic v2).

Why Pydantic in the domain:
- Wire names use hyphens and a trailing `?` for booleans (`deck-id`,
  `archived?`); aliases keep Python attribute names readable while the JSON
  stays byte-for-byte what the API expects.
- Input models validate locally before any request is sent.

Note:
- Records are owned by the remote service. Nothing here is cached or mutated
  locally; unknown keys are preserved (`extra="allow"`) so output is lossless.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Generic, TypeVar

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

T = TypeVar("T")


class DeckSortBy(str, Enum):
    NONE = "none"
    # Both spellings are accepted by the API.
    LEXIGRAPHICALLY = "lexigraphically"
    LEXICOGRAPHICALLY = "lexicographically"
    CREATED_AT = "created-at"
    UPDATED_AT = "updated-at"
    RETENTION_RATE_ASC = "retention-rate-asc"
    INTERVAL_LENGTH = "interval-length"


class DeckCardsView(str, Enum):
    LIST = "list"
    GRID = "grid"
    NOTE = "note"
    COLUMN = "column"


class TemplateFieldType(str, Enum):
    TEXT = "text"
    BOOLEAN = "boolean"
    NUMBER = "number"
    DRAW = "draw"
    AI = "ai"
    SPEECH = "speech"
    IMAGE = "image"
    TRANSLATE = "translate"
    TRANSCRIPTION = "transcription"
    DICTIONARY = "dictionary"
    PINYIN = "pinyin"
    FURIGANA = "furigana"


class TextAlignment(str, Enum):
    LEFT = "left"
    CENTER = "center"
    RIGHT = "right"


class WireModel(BaseModel):
    """Base for every model exchanged with the API."""

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    def to_wire(self) -> dict[str, Any]:
        """Serialize with wire aliases, keeping only explicitly set keys."""

        return self.model_dump(mode="json", by_alias=True, exclude_unset=True)


class Timestamp(WireModel):
    date: str


class CardField(WireModel):
    id: str = Field(..., min_length=1)
    value: str = Field(default="")


class Review(WireModel):
    date: Timestamp | None = None
    due: Timestamp | None = None
    remembered: bool | None = Field(default=None, alias="remembered?")


class Card(WireModel):
    """A flashcard. `content` is Markdown, optionally with template fields."""

    id: str = Field(..., min_length=1)
    deck_id: str | None = Field(default=None, alias="deck-id")
    content: str | None = None
    name: str | None = None
    pos: str | None = None
    template_id: str | None = Field(default=None, alias="template-id")
    archived: bool | None = Field(default=None, alias="archived?")
    trashed: str | None = Field(default=None, alias="trashed?")
    review_reverse: bool | None = Field(default=None, alias="review-reverse?")
    new: bool | None = Field(default=None, alias="new?")
    manual_tags: list[str] | None = Field(default=None, alias="manual-tags")
    tags: list[str] | None = None
    fields: dict[str, CardField] | None = None
    references: list[str] | None = None
    reviews: list[Review] | None = None
    attachments: dict[str, Any] | None = None
    created_at: Timestamp | None = Field(default=None, alias="created-at")
    updated_at: Timestamp | None = Field(default=None, alias="updated-at")


class Deck(WireModel):
    id: str = Field(..., min_length=1)
    name: str
    parent_id: str | None = Field(default=None, alias="parent-id")
    sort: int | float | None = None
    trashed: str | None = Field(default=None, alias="trashed?")
    archived: bool | None = Field(default=None, alias="archived?")
    # Plain strings: values the server adds later must still parse.
    sort_by: str | None = Field(default=None, alias="sort-by")
    cards_view: str | None = Field(default=None, alias="cards-view")
    show_sides: bool | None = Field(default=None, alias="show-sides?")
    sort_by_direction: bool | None = Field(default=None, alias="sort-by-direction")
    review_reverse: bool | None = Field(default=None, alias="review-reverse?")
    created_at: Timestamp | None = Field(default=None, alias="created-at")
    updated_at: Timestamp | None = Field(default=None, alias="updated-at")


class TemplateField(WireModel):
    id: str = Field(..., min_length=1)
    name: str | None = None
    type: str | None = None
    pos: str | None = None
    content: str | None = None
    options: dict[str, Any] | None = None


class TemplateStyle(WireModel):
    text_alignment: str | None = Field(default=None, alias="text-alignment")


class TemplateOptions(WireModel):
    show_sides_separately: bool | None = Field(default=None, alias="show-sides-separately?")


class Template(WireModel):
    id: str = Field(..., min_length=1)
    name: str
    content: str
    pos: str | None = None
    fields: dict[str, TemplateField] = Field(default_factory=dict)
    style: TemplateStyle | None = None
    options: TemplateOptions | None = None


class Page(WireModel, Generic[T]):
    """One page of a bookmark-paginated list endpoint."""

    docs: list[T] = Field(default_factory=list)
    bookmark: str | None = None


class DueCards(WireModel):
    cards: list[Card] = Field(default_factory=list)


# --- Inputs ---


class CardCreateInput(WireModel):
    content: str = Field(..., min_length=1)
    deck_id: str = Field(..., min_length=1, alias="deck-id")
    template_id: str | None = Field(default=None, alias="template-id")
    archived: bool | None = Field(default=None, alias="archived?")
    review_reverse: bool | None = Field(default=None, alias="review-reverse?")
    pos: str | None = None
    manual_tags: list[str] | None = Field(default=None, alias="manual-tags")
    fields: dict[str, CardField] | None = None


class CardUpdateInput(WireModel):
    content: str | None = None
    deck_id: str | None = Field(default=None, alias="deck-id")
    # Explicit None removes the template.
    template_id: str | None = Field(default=None, alias="template-id")
    archived: bool | None = Field(default=None, alias="archived?")
    trashed: str | None = Field(default=None, alias="trashed?")
    review_reverse: bool | None = Field(default=None, alias="review-reverse?")
    pos: str | None = None
    manual_tags: list[str] | None = Field(default=None, alias="manual-tags")
    fields: dict[str, CardField] | None = None


class DeckCreateInput(WireModel):
    name: str = Field(..., min_length=1)
    parent_id: str | None = Field(default=None, alias="parent-id")
    sort: int | float | None = None
    trashed: str | None = Field(default=None, alias="trashed?")
    archived: bool | None = Field(default=None, alias="archived?")
    sort_by: DeckSortBy | None = Field(default=None, alias="sort-by")
    cards_view: DeckCardsView | None = Field(default=None, alias="cards-view")
    show_sides: bool | None = Field(default=None, alias="show-sides?")
    sort_by_direction: bool | None = Field(default=None, alias="sort-by-direction")
    review_reverse: bool | None = Field(default=None, alias="review-reverse?")


class DeckUpdateInput(WireModel):
    name: str | None = None
    parent_id: str | None = Field(default=None, alias="parent-id")
    sort: int | float | None = None
    trashed: str | None = Field(default=None, alias="trashed?")
    archived: bool | None = Field(default=None, alias="archived?")
    sort_by: DeckSortBy | None = Field(default=None, alias="sort-by")
    cards_view: DeckCardsView | None = Field(default=None, alias="cards-view")
    show_sides: bool | None = Field(default=None, alias="show-sides?")
    sort_by_direction: bool | None = Field(default=None, alias="sort-by-direction")
    review_reverse: bool | None = Field(default=None, alias="review-reverse?")


class TemplateCreateInput(WireModel):
    name: str = Field(..., min_length=1)
    content: str = Field(..., min_length=1)
    fields: dict[str, TemplateField]
    pos: str | None = None
    style: TemplateStyle | None = None
    options: TemplateOptions | None = None
