"""Resource clients (one module per API resource).

Why a package:
- Groups the thin wrappers by resource (cards, decks, templates, due).
- Each one depends only on `core.interfaces.requester.ApiRequester`.
"""

from adapters.resources.cards import CardsApi
from adapters.resources.decks import DecksApi
from adapters.resources.due import DueApi
from adapters.resources.templates import TemplatesApi

__all__ = [
    "CardsApi",
    "DecksApi",
    "DueApi",
    "TemplatesApi",
]
