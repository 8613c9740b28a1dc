import click
import based58

from hdsk.config import DEFAULT_HASH, HASH_ENV
from hdsk.exceptions import HDError
from hdsk.lib.hashes import HashAdapter, get_adapter, get_available_adapters

hash_option = click.option(
    "--hash",
    "hash_name",
    envvar=HASH_ENV,
    default=DEFAULT_HASH,
    show_default=True,
    type=click.Choice(get_available_adapters(), case_sensitive=False),
    help="Hash adapter used for derivation.",
)


def load_adapter(hash_name: str) -> HashAdapter:
    try:
        return get_adapter(hash_name)
    except HDError as e:
        raise click.ClickException(str(e))


def encode_bytes(data: bytes, base58: bool = False) -> str:
    """Render bytes as hex, or base58 when requested."""
    if base58:
        return based58.b58encode(data).decode("ascii")
    return data.hex()
