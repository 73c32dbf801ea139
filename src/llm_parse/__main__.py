"""CLI entry point for llm-parse."""

from __future__ import annotations

import asyncio
import json
import logging

import click
import pydantic

from . import __version__
from .config import RecoveryConfig, load_config
from .exceptions import LLMParseError
from .schema import PydanticSchema, RootKind


# ── Helpers ──────────────────────────────────────────────


def _read_input(source: click.File) -> str:
    text = source.read()
    if not text.strip():
        raise click.UsageError("No input text")
    return text


async def _whitespace_tokens(text: str) -> int:
    """Rough stand-in tokenizer: one token per whitespace-separated word."""
    return len(text.split())


# ── CLI Commands ─────────────────────────────────────────


@click.group()
@click.version_option(version=__version__, prog_name="llm-parse")
@click.option("--config", "config_path", default=None, help="Config file path")
@click.option("-v", "--verbose", is_flag=True, help="Log dropped candidates")
@click.pass_context
def main(ctx: click.Context, config_path: str | None, verbose: bool) -> None:
    """llm-parse — pull JSON, booleans and numbers out of LLM output."""
    try:
        config = load_config(config_path)
    except LLMParseError as e:
        raise click.ClickException(str(e)) from e

    logging.basicConfig(
        level=logging.DEBUG if verbose else config.log_level,
        format="%(levelname)s %(name)s: %(message)s",
    )
    ctx.obj = config


@main.command()
@click.argument("kind", type=click.Choice([k.value for k in RootKind]))
@click.argument("source", type=click.File("r"), default="-")
@click.option(
    "--all", "show_all", is_flag=True, help="Print every array/object found (array, object)"
)
@click.option("--integer", is_flag=True, help="Require an integral number (number only)")
@click.pass_obj
def extract(
    config: RecoveryConfig, kind: str, source: click.File, show_all: bool, integer: bool
) -> None:
    """Extract a KIND value from SOURCE (a file, or stdin) and print it as JSON."""
    from .extract import (
        extract_json_from_string,
        parse_array_output,
        parse_boolean_output,
        parse_number_output,
        parse_object_output,
    )

    root = RootKind(kind)
    if integer and root != RootKind.NUMBER:
        raise click.UsageError("--integer only applies to number extraction")
    if show_all and root not in (RootKind.ARRAY, RootKind.OBJECT):
        raise click.UsageError("--all only applies to array and object extraction")
    text = _read_input(source)

    try:
        if show_all:
            value = extract_json_from_string(text, root)
        elif root == RootKind.ARRAY:
            value = parse_array_output(text, config)
        elif root == RootKind.OBJECT:
            value = parse_object_output(text, config)
        elif root == RootKind.BOOLEAN:
            value = parse_boolean_output(text, config)
        else:
            schema = PydanticSchema(int, config.preview_chars) if integer else None
            value = parse_number_output(text, schema, config)
    except LLMParseError as e:
        click.echo(f"Error: {e}", err=True)
        raise SystemExit(1)

    click.echo(json.dumps(value, ensure_ascii=False))


@main.command()
@click.argument("source", type=click.File("r"), default="-")
@click.option("--model", default="gpt-3.5-turbo", show_default=True)
@click.pass_obj
def tokens(config: RecoveryConfig, source: click.File, model: str) -> None:
    """Estimate prompt tokens for a JSON list of chat messages in SOURCE.

    Counts words rather than real tokenizer tokens.
    """
    from .tokens import get_num_tokens_for_chat_messages

    try:
        messages = json.loads(_read_input(source))
    except json.JSONDecodeError as e:
        raise click.ClickException(f"Messages must be a JSON list: {e}") from e
    if not isinstance(messages, list):
        raise click.ClickException("Messages must be a JSON list")

    try:
        count = asyncio.run(
            get_num_tokens_for_chat_messages(
                messages,
                model=model,
                get_num_tokens=_whitespace_tokens,
                concurrency=config.tokens.concurrency,
            )
        )
    except pydantic.ValidationError as e:
        raise click.ClickException(f"Invalid chat message: {e}") from e
    click.echo(f"Total: {count.total}")
    for i, n in enumerate(count.per_message):
        click.echo(f"  [{i}] {n}")


if __name__ == "__main__":
    main()
