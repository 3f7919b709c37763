"""Command line entry point for argtok."""

import json
from typing import Optional

import click

from . import __version__
from .fsm import InvalidTransition
from .logging import configure_logging, get_logger
from .parser import InvalidEscapeCharacter, tokenize

DEFAULT_RAW = "foo bar"


@click.command()
@click.argument("raw", required=False)
@click.option(
    "--log-level",
    type=click.Choice(["debug", "info", "warning", "error"], case_sensitive=False),
    default="warning",
    help="Logging level",
)
@click.option(
    "--log-format",
    type=click.Choice(["json", "text"], case_sensitive=False),
    default="json",
    help="Log format",
)
@click.option("--json", "as_json", is_flag=True, help="Print the tokens as a JSON array")
@click.version_option(version=__version__)
def main(raw: Optional[str], log_level: str, log_format: str, as_json: bool) -> None:
    """Tokenize RAW into arguments and print one token per line."""
    configure_logging(level=log_level, format_type=log_format)
    logger = get_logger("argtok.cli")

    if raw is None:
        raw = DEFAULT_RAW

    try:
        tokens = tokenize(raw)
    except (InvalidTransition, InvalidEscapeCharacter) as e:
        logger.info("invalid_input", error=str(e))
        raise click.ClickException(str(e))

    if as_json:
        click.echo(json.dumps(tokens))
        return

    click.echo("List of parsed tokens:")
    click.echo("----------------------")
    for token in tokens:
        click.echo(token)
