import click

from hdsk.cli.options import hash_option, load_adapter
from hdsk.config import DEFAULT_SCHEMA
from hdsk.exceptions import HDError
from hdsk.lib.hashes import get_available_adapters
from hdsk.lib.path import format_path, parse_path, parse_schema


@click.command("schema")
@click.argument("text", default=DEFAULT_SCHEMA)
def schema_command(text):
    """Validates a derivation path schema and lists its segments."""
    try:
        schema = parse_schema(text)
    except HDError as e:
        raise click.ClickException(str(e))

    click.echo(f"Schema has {len(schema)} segment(s) after the root:", err=True)
    for position, segment in enumerate(schema):
        click.echo(f"  {position}  {segment.label}  {segment.type.value}")


@click.command("parse")
@click.option(
    "--schema",
    "schema_text",
    default=DEFAULT_SCHEMA,
    show_default=True,
    help="Derivation path schema.",
)
@click.option("--path", "path_text", required=True, help="Derivation path.")
@hash_option
def parse_command(schema_text, path_text, hash_name):
    """Resolves a derivation path to its numeric indices."""
    h = load_adapter(hash_name)
    try:
        schema = parse_schema(schema_text)
        path = parse_path(h, path_text, schema)
    except HDError as e:
        raise click.ClickException(str(e))

    click.echo(format_path(path))


@click.command("hashes")
def hashes_command():
    """Lists the available hash adapters."""
    for name in get_available_adapters():
        click.echo(f"  - {name}")
