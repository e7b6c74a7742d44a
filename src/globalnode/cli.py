#!/usr/bin/env python3
"""
CLI for inspecting and minting global IDs.
"""

import sys

import click

from globalnode import __version__
from globalnode.codecs import FernetCodec, GlobalIdCodec, create_codec
from globalnode.codecs.factory import CODEC_NAMES
from globalnode.config import settings
from globalnode.errors import MalformedIdError
from globalnode.logging import configure_logging, get_logger

logger = get_logger(__name__)


def _build_codec(codec_name: str | None, keys: tuple[str, ...]) -> GlobalIdCodec:
    name = codec_name or settings.codec
    options = {"keys": list(keys)} if keys and name == "fernet" else {}
    try:
        return create_codec(name, **options)
    except ValueError as e:
        raise click.UsageError(str(e)) from e


@click.group()
@click.version_option(version=__version__, prog_name="globalnode")
@click.option(
    "--codec",
    "codec_name",
    type=click.Choice(CODEC_NAMES),
    default=None,
    help=f"Codec to use (default: {settings.codec})",
)
@click.option(
    "--key",
    "keys",
    multiple=True,
    help="Fernet key; repeat for rotation (default: GLOBALNODE_ENCRYPTION_KEYS)",
)
@click.option("--debug", is_flag=True, default=False, help="Human-readable debug logging")
@click.pass_context
def cli(ctx: click.Context, codec_name: str | None, keys: tuple[str, ...], debug: bool) -> None:
    """globalnode CLI - encode and decode global IDs."""
    configure_logging(debug=debug or settings.debug, level="DEBUG" if debug else "WARNING")
    ctx.ensure_object(dict)
    ctx.obj["codec_name"] = codec_name
    ctx.obj["keys"] = keys


@cli.command()
@click.argument("type_name")
@click.argument("local_id")
@click.pass_context
def encode(ctx: click.Context, type_name: str, local_id: str) -> None:
    """Encode TYPE_NAME and LOCAL_ID into a global ID."""
    codec = _build_codec(ctx.obj["codec_name"], ctx.obj["keys"])
    try:
        token = codec.encode(type_name, local_id)
    except ValueError as e:
        raise click.BadParameter(str(e), param_hint="TYPE_NAME/LOCAL_ID") from e
    click.echo(token)


@cli.command()
@click.argument("token")
@click.pass_context
def decode(ctx: click.Context, token: str) -> None:
    """Decode TOKEN into its type name and local id."""
    codec = _build_codec(ctx.obj["codec_name"], ctx.obj["keys"])
    try:
        type_name, local_id = codec.decode(token)
    except MalformedIdError as e:
        logger.debug("Decode failed", token=token, error=str(e))
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    click.echo(f"type_name: {type_name}")
    click.echo(f"local_id: {local_id}")


@cli.command("generate-key")
def generate_key() -> None:
    """Generate a key for the fernet codec."""
    click.echo(FernetCodec.generate_key())


def main() -> None:
    """Main entry point."""
    cli()


if __name__ == "__main__":
    main()
