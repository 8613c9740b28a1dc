"""
Object interface for symmetric HD key derivation.

Hdsk binds a hash adapter once so callers do not have to thread it
through every call:

    hd = Hdsk(HmacAdapter("sha256"))
    schema = hd.schema("m / application: any / purpose: any / context: any / index: num")
    master = hd.master(secret)
    node = master.node(schema.parse(hd.h, "m/42/0/1/0"))
    child = node.child(7)
    assert child.lineage(node)
"""

from typing import Iterator, Optional, Sequence, Union

from .exceptions import HDError, HDTypeError
from .lib.codec import Input
from .lib.hashes import HashAdapter
from .lib.key import HDKey, derive_child, derive_master, derive_node, lineage
from .lib.path import (
    DerivationPath,
    PathSchema,
    SchemaSegment,
    format_schema,
    parse_path,
    parse_schema,
)
from .log import get_logger, log

_logger = get_logger("hdsk.hd")


class Schema:
    """A parsed derivation path schema."""

    def __init__(self, text: str):
        self.segments: PathSchema = parse_schema(text)

    def __len__(self) -> int:
        return len(self.segments)

    def __iter__(self) -> Iterator[SchemaSegment]:
        return iter(self.segments)

    def __str__(self) -> str:
        return format_schema(self.segments)

    def __repr__(self) -> str:
        return f"Schema({str(self)!r})"

    def parse(self, h: HashAdapter, text: str) -> DerivationPath:
        """Parse a derivation path that must follow this schema."""
        try:
            return parse_path(h, text, self.segments)
        except HDError as e:
            log(_logger, "warning", "Rejected derivation path", error=e.message)
            raise


class Key:
    """An HDKey bound to the hash adapter that derived it."""

    def __init__(self, h: HashAdapter, key: HDKey):
        self.h = h
        self.key = key

    def __repr__(self) -> str:
        return f"Key({self.h!r}, {self.key!r})"

    @property
    def depth(self) -> int:
        return self.key.depth

    @property
    def path(self) -> Optional[str]:
        return self.key.path

    def child(self, index: Union[int, str]) -> "Key":
        """Derive the child at an index (ints are used as-is, strings are hashed)."""
        return Key(self.h, derive_child(self.h, self.key, index))

    def node(
        self, path: Union[str, Sequence[int]], schema: Optional[Schema] = None
    ) -> "Key":
        """
        Derive the key at a node below this key.

        Args:
            path: Parsed indices, or path text when a schema is given
            schema: Schema used to parse textual paths

        Raises:
            HDTypeError: If path is text and no schema is given
        """
        if isinstance(path, str):
            if schema is None:
                raise HDTypeError("A schema is required to parse a textual path")
            path = schema.parse(self.h, path)

        node = derive_node(self.h, self.key, path)
        log(
            _logger,
            "debug",
            "Derived node",
            hash=self.h.name,
            depth=node.depth,
            path=node.path,
        )
        return Key(self.h, node)

    def lineage(self, parent: Union["Key", HDKey, bytes]) -> bool:
        """True if this key is a direct child of parent."""
        if isinstance(parent, Key):
            parent = parent.key
        related = lineage(self.h, self.key, parent)
        if not related:
            log(
                _logger,
                "info",
                "Lineage check failed",
                depth=self.depth,
                path=self.path,
            )
        return related


class Hdsk:
    """
    Entry point for symmetric hierarchical deterministic keys.

    Derives master keys and parses schemas; every key it hands out stays
    bound to the adapter given here.
    """

    def __init__(self, h: HashAdapter):
        if not isinstance(h, HashAdapter):
            raise HDTypeError(
                f"Expected a HashAdapter, got {type(h).__name__}", value=h
            )
        self.h = h

    def schema(self, text: str) -> Schema:
        """Parse a derivation path schema."""
        return Schema(text)

    def master(self, secret: Input) -> Key:
        """Derive a master key from a secret."""
        key = derive_master(self.h, secret)
        log(_logger, "debug", "Derived master key", hash=self.h.name)
        return Key(self.h, key)

    def derive(
        self,
        key: Key,
        path: Union[str, Sequence[int]],
        schema: Optional[Schema] = None,
    ) -> Key:
        """Derive the key at path below key."""
        return key.node(path, schema)
