import click

from hdsk.cli.keys import derive, lineage_command
from hdsk.cli.paths import hashes_command, parse_command, schema_command


@click.group()
@click.version_option(package_name="hdsk")
def cli():
    """Derives symmetric keys from a secret along schema-checked paths."""
    pass


# Key commands
cli.add_command(derive)
cli.add_command(lineage_command)

# Schema and path commands
cli.add_command(schema_command)
cli.add_command(parse_command)
cli.add_command(hashes_command)


if __name__ == "__main__":
    cli()
