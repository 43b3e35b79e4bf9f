"""Helpers shared by the resource clients."""

from __future__ import annotations

from typing import Any, TypeVar
from urllib.parse import quote

from pydantic import BaseModel, ValidationError

from core.domain.errors import LocalValidationError, MochiError
from core.interfaces.requester import ApiRequester

M = TypeVar("M", bound=BaseModel)


def segment(value: str, *, name: str = "ID") -> str:
    """URL-encode one path segment, rejecting blank values locally."""

    if not value or not value.strip():
        raise LocalValidationError(f"{name} is required")
    return quote(value, safe="")


def coerce_input(model: type[M], value: M | dict[str, Any]) -> M:
    """Accept either a ready input model or a plain wire-format dict."""

    if isinstance(value, model):
        return value
    try:
        return model.model_validate(value)
    except ValidationError as exc:
        raise LocalValidationError(f"Invalid {model.__name__}: {exc.errors()[0]['msg']}") from exc


def parse_response(model: type[M], data: Any) -> M:
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise MochiError(f"Unexpected {model.__name__} payload from the API: {exc}") from exc


class ResourceApi:
    """Base for resource clients bound to one requester."""

    def __init__(self, requester: ApiRequester) -> None:
        self._requester = requester
