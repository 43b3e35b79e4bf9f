"""Retry/backoff policy for transient API failures.

Two sources for the delay, in priority order:
1. A `Retry-After` header (delta-seconds or HTTP-date), clamped to
   [retry_after_min_ms, max_delay_ms].
2. Exponential backoff `base * 2**attempt` capped at max_delay_ms, plus a
   random jitter in [0, jitter_ms) added after the cap.
"""

from __future__ import annotations

import math
import random
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime

from core.config import AppSettings

RETRYABLE_STATUS_CODES: frozenset[int] = frozenset({429, 502, 503, 504})


def parse_retry_after_ms(value: str | None, *, now: datetime | None = None) -> float | None:
    """Convert a Retry-After header value to milliseconds, or None if unusable."""

    if not value:
        return None
    value = value.strip()

    try:
        seconds = float(value)
    except ValueError:
        seconds = None
    if seconds is not None:
        if math.isfinite(seconds) and seconds >= 0:
            return seconds * 1000
        return None

    try:
        when = parsedate_to_datetime(value)
    except (TypeError, ValueError, IndexError):
        return None
    if when is None:
        return None
    if when.tzinfo is None:
        when = when.replace(tzinfo=timezone.utc)
    now = now or datetime.now(timezone.utc)
    return max(0.0, (when - now).total_seconds() * 1000)


@dataclass(frozen=True)
class RetryPolicy:
    max_retries: int = 5
    base_delay_ms: int = 500
    max_delay_ms: int = 10_000
    retry_after_min_ms: int = 250
    jitter_ms: int = 250
    retryable_status_codes: frozenset[int] = field(default=RETRYABLE_STATUS_CODES)

    @classmethod
    def from_settings(cls, settings: AppSettings) -> "RetryPolicy":
        return cls(
            max_retries=settings.max_retries,
            base_delay_ms=settings.retry_base_delay_ms,
            max_delay_ms=settings.retry_max_delay_ms,
            retry_after_min_ms=settings.retry_after_min_ms,
            jitter_ms=settings.retry_jitter_ms,
        )

    @property
    def max_attempts(self) -> int:
        return self.max_retries + 1

    def is_retryable_status(self, status_code: int) -> bool:
        return status_code in self.retryable_status_codes

    def can_retry(self, attempt: int) -> bool:
        return attempt < self.max_retries

    def delay_ms(self, attempt: int, headers: Mapping[str, str] | None = None) -> float:
        """Milliseconds to wait after the 0-based `attempt` failed."""

        header = (headers.get("retry-after") or headers.get("Retry-After")) if headers else None
        retry_after = parse_retry_after_ms(header)
        if retry_after is not None:
            return min(max(float(self.retry_after_min_ms), retry_after), float(self.max_delay_ms))

        backoff = min(self.base_delay_ms * 2**attempt, self.max_delay_ms)
        jitter = math.floor(random.random() * self.jitter_ms)
        return float(backoff + jitter)
