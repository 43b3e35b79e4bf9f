"""Core configuration.

Why here:
- Centralizes environment variables (pydantic-settings) without leaking into the CLI.
- Lets adapters (HTTP client, retry policy, pagination) read tunables consistently.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def get_user_config_dir() -> Path:
    """Per-user configuration directory (cross-platform, no extra dependencies)."""

    if sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(Path.home())))
        return base / "mochi-cli"
    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / "mochi-cli"

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "mochi-cli"
    return Path.home() / ".config" / "mochi-cli"


def get_user_env_file() -> Path:
    return get_user_config_dir() / ".env"


def _parse_env_lines(text: str) -> dict[str, str]:
    data: dict[str, str] = {}
    for raw_line in text.splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        if "=" not in line:
            continue
        key, value = line.split("=", 1)
        key = key.strip()
        value = value.strip().strip('"').strip("'")
        if key:
            data[key] = value
    return data


def write_user_env_vars(values: dict[str, str], *, env_path: Path | None = None) -> Path:
    """Write/update variables in the user's global .env file."""

    env_path = env_path or get_user_env_file()
    env_path.parent.mkdir(parents=True, exist_ok=True)

    existing: dict[str, str] = {}
    if env_path.exists():
        existing = _parse_env_lines(env_path.read_text(encoding="utf-8"))

    existing.update({k: v for k, v in values.items() if v is not None})

    lines = ["# mochi-cli user config (.env)"]
    for key in sorted(existing.keys()):
        lines.append(f"{key}={existing[key]}")
    env_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return env_path


class AppSettings(BaseSettings):
    """Central application settings.

    Why pydantic-settings:
    - Typed and validated at the edge (env vars) without polluting the core.
    - One configuration contract shared by the CLI and the adapters.
    """

    model_config = SettingsConfigDict(
        env_prefix="MOCHI_",
        extra="ignore",
        case_sensitive=False,
        # Order: project first (dev), then the user's global config.
        env_file=(".env", str(get_user_env_file())),
        env_file_encoding="utf-8",
    )

    api_key: str | None = Field(
        default=None,
        description="Mochi API key (Account Settings in the app).",
    )
    base_url: str = Field(
        default="https://app.mochi.cards/api",
        min_length=8,
        description="Base URL of the Mochi REST API.",
    )
    http_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        description="Per-request timeout (seconds).",
    )

    max_retries: int = Field(
        default=5,
        ge=0,
        le=10,
        description="Retries after the first attempt for transient failures (429/5xx, network).",
    )
    retry_base_delay_ms: int = Field(
        default=500,
        ge=0,
        description="Base delay for exponential backoff (milliseconds).",
    )
    retry_max_delay_ms: int = Field(
        default=10_000,
        ge=0,
        description="Ceiling applied to backoff and Retry-After delays (milliseconds).",
    )
    retry_after_min_ms: int = Field(
        default=250,
        ge=0,
        description="Floor applied to server-provided Retry-After delays (milliseconds).",
    )
    retry_jitter_ms: int = Field(
        default=250,
        ge=0,
        description="Upper bound (exclusive) of the random jitter added to backoff (milliseconds).",
    )

    pagination_delay_ms: int = Field(
        default=75,
        ge=0,
        description="Courtesy pause between pages when streaming list endpoints (milliseconds).",
    )

    log_level: str = Field(
        default="WARNING",
        min_length=1,
        description="Log level for stderr diagnostics (DEBUG, INFO, WARNING, ...).",
    )
