"""Error taxonomy.

One exception class per failure category so the command boundary can tell
them apart with `except` clauses instead of inspecting fields:

- `ConfigurationError`: no usable API key; raised before any network I/O.
- `LocalValidationError`: caller input rejected before a request is built.
- `ApiError`: non-2xx response after retries (status code + raw `errors`).
- `NetworkError`: transport failure after retries (status code 0).
"""

from __future__ import annotations

from typing import Any


class MochiError(Exception):
    """Base class for every error this client raises on purpose."""


class ConfigurationError(MochiError):
    pass


class LocalValidationError(MochiError):
    pass


class ApiError(MochiError):
    """The remote service rejected the request."""

    def __init__(self, message: str, status_code: int, errors: Any = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.errors = errors

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.message,
            "statusCode": self.status_code,
            "details": self.errors,
        }


class NetworkError(ApiError):
    """The exchange could not be completed at all."""

    def __init__(self, message: str) -> None:
        super().__init__(message, 0)


def describe_errors(errors: Any, status_code: int, reason: str) -> str:
    """Render the `errors` payload of an error envelope as one line.

    Accepts the three shapes the API uses: a plain string, a list of strings,
    or a mapping of field name to message.
    """

    if errors is None:
        return f"HTTP {status_code}: {reason}"

    if isinstance(errors, str):
        message = errors
    elif isinstance(errors, list):
        message = ", ".join(str(item) for item in errors)
    elif isinstance(errors, dict):
        message = ", ".join(f"{key}: {value}" for key, value in errors.items())
    else:
        message = str(errors)

    return message or f"Request failed with status {status_code}"
