"""Output rendering for the CLI (Rich).

Why separate:
- Keeps command logic free of presentation details.
- stdout carries data as JSON; stderr carries errors as JSON.
"""

from __future__ import annotations

from typing import Any

from rich.console import Console
from rich.table import Table


def print_json(data: Any, *, compact: bool = False) -> None:
    """Print `data` as JSON on stdout (one line when `compact`)."""

    # A new Console per call picks up whatever stdout is current.
    Console().print_json(data=data, indent=None if compact else 2, default=str)


def print_error(payload: dict[str, Any]) -> None:
    Console(stderr=True).print_json(data=payload, indent=2, default=str)


def print_table(table: Table) -> None:
    Console().print(table)


def build_doctor_table() -> Table:
    table = Table(title="mochi-cli Doctor")
    table.add_column("Check", style="bright_green", no_wrap=True)
    table.add_column("Status", style="white")
    table.add_column("Details", style="dim")
    return table
