"""
Compiles an HTML++ file into HTML.
The result is printed to stdout, or written to the file given with --output.
"""

from __future__ import annotations

import logging
from pathlib import Path

import click

from .config import ConfigError, build_config
from .filesystem import check_source_size, resolve_max_file_size, resolve_source, write_output
from .parser import ParseFileError, parse_file

__all__ = ["cli"]


@click.command()
@click.version_option(package_name="htmlplusplus")
@click.option("-o", "--output", type=click.Path(dir_okay=False), help="Write HTML to this file")
@click.option("--language", "default_language", help="Language for <code> tags without one")
@click.option("--tab-size", type=int, help="Spaces per tab inside code blocks")
@click.option(
    "--enable-backticks",
    "backticks_enabled",
    is_flag=True,
    help="Treat backticks as inline code from the start of the document",
)
@click.option(
    "--strict",
    "require_closed_tags",
    is_flag=True,
    help="Fail when tags are left open at the end of the document",
)
@click.option("-v", "--verbose", is_flag=True, help="Log debug information to stderr")
@click.argument("filepath", type=click.Path(exists=True, dir_okay=False))
def cli(
    filepath: str,
    output: str | None = None,
    default_language: str | None = None,
    tab_size: int | None = None,
    backticks_enabled: bool = False,
    require_closed_tags: bool = False,
    verbose: bool = False,
):
    """
    Entry point for compiling an HTML++ document.

    Args:
        filepath: Path to the HTML++ file to compile.
        output: Destination file; stdout when omitted.
        default_language: Highlighter language for untagged code blocks.
        tab_size: Override for the highlighter tab width.
        backticks_enabled: Start with backtick inline code enabled.
        require_closed_tags: Reject documents that leave tags open.
        verbose: Enable debug logging.

    Returns:
        None.

    Raises:
        click.BadParameter: If the path is invalid or the configuration values
            are unsupported.
        click.ClickException: If the document is malformed or filesystem
            checks fail.

    Examples:
        htmlplusplus post.hpp --language python -o post.html
    """
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    try:
        source_path = resolve_source(filepath)
    except ValueError as error:
        raise click.BadParameter(str(error)) from error
    try:
        config = build_config(
            source_path.parent,
            default_language=default_language,
            tab_size=tab_size,
            backticks_enabled=backticks_enabled or None,
            require_closed_tags=require_closed_tags or None,
        )
    except ConfigError as error:
        raise click.BadParameter(str(error)) from error

    try:
        check_source_size(source_path, resolve_max_file_size(config.max_file_size))
    except (ValueError, IOError) as error:
        raise click.ClickException(str(error)) from error

    try:
        html = parse_file(source_path, config)
    except ParseFileError as error:
        raise click.ClickException(str(error)) from error

    if output is None:
        click.echo(html, nl=False)
        return

    try:
        write_output(Path(output), html)
    except IOError as error:
        raise click.ClickException(str(error)) from error


if __name__ == "__main__":
    cli()
