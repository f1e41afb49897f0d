"""markstyle CLI: render HTML/Markdown with CSS from the command line."""

from __future__ import annotations
import json
from pathlib import Path
from typing import Optional

import click

from markstyle.config import Settings, get_settings
from markstyle.log import configure_logging
from markstyle.pipeline import css_to_rules, html_to_ast, render, render_markdown


def _read(path: Optional[str]) -> str:
    if not path:
        return ""
    return Path(path).read_text(encoding="utf-8")


@click.group()
@click.option("--verbose", is_flag=True, help="Log at DEBUG level, including successful stages.")
@click.pass_context
def cli(ctx: click.Context, verbose: bool) -> None:
    """markstyle - apply CSS to HTML and convert Markdown to styled HTML."""
    settings = get_settings()
    if verbose:
        settings = settings.model_copy(update={"verbose": True})
    ctx.obj = settings
    configure_logging("DEBUG" if settings.verbose else settings.log_level)


@cli.command("render")
@click.argument("html_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--css", "css_file", type=click.Path(exists=True, dir_okay=False), help="Stylesheet to apply.")
@click.pass_obj
def render_cmd(settings: Settings, html_file: str, css_file: Optional[str]) -> None:
    """Apply a stylesheet to an HTML fragment and print inline-styled HTML."""
    click.echo(render(_read(css_file), _read(html_file), settings))


@cli.command("markdown")
@click.argument("md_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--css", "css_file", type=click.Path(exists=True, dir_okay=False), help="Stylesheet to apply.")
@click.pass_obj
def markdown_cmd(settings: Settings, md_file: str, css_file: Optional[str]) -> None:
    """Convert a Markdown file to HTML, styled with an optional stylesheet."""
    click.echo(render_markdown(_read(md_file), _read(css_file), settings))


@cli.command("rules")
@click.argument("css_file", type=click.Path(exists=True, dir_okay=False))
@click.pass_obj
def rules_cmd(settings: Settings, css_file: str) -> None:
    """Print parsed CSS rules, sorted by specificity, as JSON."""
    rules = css_to_rules(_read(css_file), settings)
    click.echo(json.dumps([r.to_dict() for r in rules], indent=2))


@cli.command("tree")
@click.argument("html_file", type=click.Path(exists=True, dir_okay=False))
@click.pass_obj
def tree_cmd(settings: Settings, html_file: str) -> None:
    """Print the parsed HTML tree as JSON."""
    click.echo(json.dumps([html_to_ast(_read(html_file), settings).to_dict()], indent=2))


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
