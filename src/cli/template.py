"""`mochi template ...` commands."""

from __future__ import annotations

from typing import Annotated, Optional

import typer

from adapters.resources import TemplatesApi
from cli.common import get_context, run_command
from cli.output import print_json
from core.services.inputs import build_template_create

app = typer.Typer(no_args_is_help=True, help="List, read and create templates.")


@app.command("list")
def list_templates(
    ctx: typer.Context,
    bookmark: Annotated[Optional[str], typer.Option("--bookmark", help="Pagination bookmark.")] = None,
    all_pages: Annotated[bool, typer.Option("--all", help="Stream every template as JSON lines.")] = False,
) -> None:
    context = get_context(ctx)

    async def _run() -> None:
        async with context.session() as client:
            templates = TemplatesApi(client)
            if all_pages:
                async for template in templates.list_all():
                    print_json(template.to_wire(), compact=True)
                return
            page = await templates.list(bookmark=bookmark)
            print_json(page.to_wire())

    run_command(_run)


@app.command("get")
def get_template(
    ctx: typer.Context,
    template_id: Annotated[str, typer.Argument(help="Template ID.")],
) -> None:
    context = get_context(ctx)

    async def _run() -> None:
        async with context.session() as client:
            template = await TemplatesApi(client).get(template_id)
        print_json(template.to_wire())

    run_command(_run)


@app.command("create")
def create_template(
    ctx: typer.Context,
    name: Annotated[Optional[str], typer.Option("--name", help="Template name.")] = None,
    content: Annotated[
        Optional[str], typer.Option("--content", help="Template body, e.g. '<< Front >>\\n---\\n<< Back >>'.")
    ] = None,
    fields: Annotated[
        Optional[str],
        typer.Option("--fields", help='Fields as JSON, e.g. \'{"name": {"name": "Front", "type": "text"}}\'.'),
    ] = None,
    pos: Annotated[Optional[str], typer.Option("--pos", help="Position used for sorting.")] = None,
    style: Annotated[
        Optional[str], typer.Option("--style", help='Style as JSON, e.g. \'{"text-alignment": "left"}\'.')
    ] = None,
    options: Annotated[
        Optional[str], typer.Option("--options", help='Options as JSON, e.g. \'{"show-sides-separately?": true}\'.')
    ] = None,
) -> None:
    """Create a template (--name, --content and --fields are required)."""

    context = get_context(ctx)

    async def _run() -> None:
        payload = build_template_create(
            name=name,
            content=content,
            fields=fields,
            pos=pos,
            style=style,
            options=options,
        )
        async with context.session() as client:
            template = await TemplatesApi(client).create(payload)
        print_json(template.to_wire())

    run_command(_run)
