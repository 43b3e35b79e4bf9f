"""Command boundary shared by every subcommand.

The only place errors are caught: API errors are rendered with their status
code and raw details, every other client error with its message, and the
process exits with status 1.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable

import typer

from cli.output import print_error
from core.config import AppSettings
from core.context import ClientContext
from core.domain.errors import ApiError, MochiError


def build_context(api_key: str | None = None) -> ClientContext:
    return ClientContext(AppSettings(), api_key=api_key)


def get_context(ctx: typer.Context) -> ClientContext:
    context = ctx.find_object(ClientContext)
    if context is None:
        context = build_context()
        ctx.obj = context
    return context


def run_command(action: Callable[[], Awaitable[None]]) -> None:
    try:
        asyncio.run(action())
    except ApiError as exc:
        print_error(exc.to_dict())
        raise typer.Exit(code=1) from exc
    except MochiError as exc:
        print_error({"error": str(exc)})
        raise typer.Exit(code=1) from exc
