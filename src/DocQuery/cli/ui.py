"""Click CLI interface definitions.

Defines the command-line interface structure and routes commands
to their respective runners.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import click
from dotenv import load_dotenv

from DocQuery.cli.commands import FormsCommand, SearchCommand
from DocQuery.cli.runner import CommandRunner
from DocQuery.config import load_config


def _parse_field(ctx: click.Context, param: click.Parameter, values: tuple[str, ...]) -> tuple[tuple[str, str], ...]:
    pairs: list[tuple[str, str]] = []
    for item in values:
        name, sep, value = item.partition("=")
        if not sep or not name.strip():
            raise click.BadParameter(f"expected FIELD=VALUE, got {item!r}", ctx=ctx, param=param)
        pairs.append((name.strip(), value))
    return tuple(pairs)


@click.group(help="DocQuery: query form-based document repositories.")
@click.option(
    "--config",
    "config_path",
    type=click.Path(path_type=Path, dir_okay=False),
    default=Path("config/default.yml"),
    show_default=True,
    help="Path to YAML config file.",
)
@click.option(
    "--override",
    "override_path",
    type=click.Path(path_type=Path, dir_okay=False, exists=True),
    default=None,
    help="Optional YAML file deep-merged over the config.",
)
@click.pass_context
def cli(ctx: click.Context, config_path: Path, override_path: Optional[Path]) -> None:
    """CLI entry group.

    Loads environment variables from .env file before processing config.

    Args:
        ctx: Click context.
        config_path: Path to YAML config file.
        override_path: Optional override file.
    """
    load_dotenv()
    ctx.obj = load_config(config_path, override_path)


@cli.command("forms")
@click.pass_context
def forms_cmd(ctx: click.Context) -> None:
    """List configured forms and their fields."""
    CommandRunner(ctx.obj).run(ctx.command.name, lambda api: FormsCommand(api=api))


@cli.command("search")
@click.option("--form", "form_name", default="everything", show_default=True, help="Form to submit.")
@click.option("--ref", default=None, help="Ref label, id or token (default: master ref).")
@click.option("--query", "-q", default=None, help="Raw query, e.g. '[[:d = at(document.type, \"blog\")]]'.")
@click.option("--page", type=int, default=None)
@click.option("--page-size", type=int, default=None)
@click.option("--orderings", default=None)
@click.option("--lang", default=None)
@click.option("--set", "fields", multiple=True, callback=_parse_field, metavar="FIELD=VALUE", help="Set any form field.")
@click.option(
    "--output",
    type=click.Choice(["text", "json", "raw"]),
    default="text",
    show_default=True,
)
@click.pass_context
def search_cmd(
    ctx: click.Context,
    form_name: str,
    ref: Optional[str],
    query: Optional[str],
    page: Optional[int],
    page_size: Optional[int],
    orderings: Optional[str],
    lang: Optional[str],
    fields: tuple[tuple[str, str], ...],
    output: str,
) -> None:
    """Submit a form and print the documents.

    Raises:
        click.Abort: When the search fails.
    """
    CommandRunner(ctx.obj).run(
        ctx.command.name,
        lambda api: SearchCommand(
            api=api,
            form_name=form_name,
            ref=ref,
            query=query,
            page=page,
            page_size=page_size,
            orderings=orderings,
            lang=lang,
            fields=fields,
            output=output,
        ),
    )
