"""Doctor commands for environment diagnostics."""

from __future__ import annotations

import asyncio

import typer
from rich.console import Console

from cli.common import get_context
from cli.output import build_doctor_table, print_table
from core.config import write_user_env_vars
from core.context import ClientContext
from core.domain.errors import ApiError, MochiError

app = typer.Typer(no_args_is_help=True, help="Environment diagnostics and configuration checks.")

_console = Console(stderr=True)


async def _check_api(context: ClientContext) -> tuple[bool, str]:
    """Authenticated probe: one deck is enough to prove key and connectivity."""

    try:
        async with context.session() as client:
            await client.get("/decks", {"limit": 1})
        return True, "Authenticated request succeeded"
    except ApiError as exc:
        if exc.status_code:
            return False, f"HTTP {exc.status_code}: {exc.message}"
        return False, exc.message
    except MochiError as exc:
        return False, str(exc)


@app.command()
def run(ctx: typer.Context) -> None:
    """Check the API key, the configuration and connectivity to the API."""

    context = get_context(ctx)
    settings = context.settings
    table = build_doctor_table()

    source = context.api_key_source()
    if source == "option":
        table.add_row("API key", "OK", "From --api-key")
    elif source == "environment":
        table.add_row("API key", "OK", "From MOCHI_API_KEY (environment or .env)")
    else:
        table.add_row("API key", "FAIL", "Run `mochi doctor set-api-key` or set MOCHI_API_KEY")
    table.add_row("Base URL", "OK", settings.base_url)
    table.add_row(
        "Retries",
        "OK",
        f"max {settings.max_retries}, base {settings.retry_base_delay_ms} ms, "
        f"cap {settings.retry_max_delay_ms} ms",
    )

    if source is None:
        table.add_row("API connectivity", "SKIPPED", "No API key")
        ok_api = False
    else:
        ok_api, detail_api = asyncio.run(_check_api(context))
        table.add_row("API connectivity", "OK" if ok_api else "FAIL", detail_api)

    print_table(table)

    if not ok_api:
        raise typer.Exit(code=1)


@app.command(name="set-api-key")
def set_api_key() -> None:
    """Store the API key in the user config .env (no manual editing needed)."""

    api_key = typer.prompt("Mochi API key", hide_input=True, confirmation_prompt=False).strip()
    if not api_key:
        raise typer.BadParameter("API key must not be empty")

    env_path = write_user_env_vars({"MOCHI_API_KEY": api_key})
    _console.print(f"[green]Saved API key to:[/green] {env_path}")
