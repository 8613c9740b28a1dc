import json
import sys

import click

from hdsk.cli.options import encode_bytes, hash_option, load_adapter
from hdsk.config import DEFAULT_SCHEMA, SECRET_ENV
from hdsk.exceptions import HDError
from hdsk.hd import Hdsk
from hdsk.lib.key import verify_lineage
from hdsk.log import get_logger, log

_logger = get_logger("hdsk.cli")


@click.command("derive")
@click.option(
    "--secret",
    envvar=SECRET_ENV,
    required=True,
    help="Root secret as hex or text.",
)
@click.option(
    "--schema",
    "schema_text",
    default=DEFAULT_SCHEMA,
    show_default=True,
    help="Derivation path schema.",
)
@click.option(
    "--path", "path_text", default="m", show_default=True, help="Derivation path."
)
@hash_option
@click.option("--json", "as_json", is_flag=True, help="Print the key as JSON.")
@click.option(
    "--base58", is_flag=True, help="Encode byte fields with base58 instead of hex."
)
def derive(secret, schema_text, path_text, hash_name, as_json, base58):
    """Derives the key at a path below the master key of a secret."""
    h = load_adapter(hash_name)
    try:
        hd = Hdsk(h)
        schema = hd.schema(schema_text)
        master = hd.master(secret)
        node = hd.derive(master, path_text, schema)
    except HDError as e:
        log(_logger, "error", "Derivation failed", hash=h.name, error=e.message)
        raise click.ClickException(str(e))

    key = node.key
    fields = {
        "key": encode_bytes(key.key, base58),
        "chain_code": encode_bytes(key.chain_code, base58),
        "fingerprint": encode_bytes(key.fingerprint, base58),
        "depth": key.depth,
        "path": key.path,
        "hash": h.name,
    }

    if as_json:
        click.echo(json.dumps(fields, indent=2))
        return

    click.echo(f"Derived key at {key.path} using {h.name}", err=True)
    for name in ("key", "chain_code", "fingerprint", "depth"):
        click.echo(f"{name}: {fields[name]}")


@click.command("lineage")
@click.option("--parent", "parent_hex", required=True, help="Hex-encoded parent key.")
@click.option("--child", "child_hex", required=True, help="Hex-encoded child key.")
@click.option(
    "--fingerprint",
    "fingerprint_hex",
    required=True,
    help="Hex-encoded 16-byte fingerprint stored with the child.",
)
@hash_option
def lineage_command(parent_hex, child_hex, fingerprint_hex, hash_name):
    """Checks that a child key was derived from a parent key."""
    h = load_adapter(hash_name)
    try:
        parent = bytes.fromhex(parent_hex)
        child = bytes.fromhex(child_hex)
        fp = bytes.fromhex(fingerprint_hex)
    except ValueError as e:
        raise click.ClickException(f"Invalid hex input: {e}")

    try:
        related = verify_lineage(h, fp, parent, child)
    except HDError as e:
        raise click.ClickException(str(e))

    if related:
        click.echo("✓ Lineage verified")
    else:
        click.echo("✗ Lineage mismatch")
        sys.exit(1)
