"""Outcome of a single request attempt.

The executor classifies every attempt into exactly one of these before
deciding whether to sleep and retry, return, or raise.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Union


@dataclass(frozen=True)
class Success:
    data: Any = None


@dataclass(frozen=True)
class RetryableFailure:
    status_code: int
    headers: Mapping[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class TerminalFailure:
    status_code: int
    reason: str
    data: Any = None

    @property
    def errors(self) -> Any:
        if isinstance(self.data, dict):
            return self.data.get("errors")
        return None


@dataclass(frozen=True)
class NetworkFailure:
    error: Exception


Outcome = Union[Success, RetryableFailure, TerminalFailure, NetworkFailure]
