"""
hdsk - Symmetric Hierarchical Deterministic Keys

Derives trees of 32-byte symmetric keys from a single secret along
schema-validated derivation paths, the way HD wallets derive asymmetric keys.

Main Features:
- HKDF (extract-then-expand) over a pluggable hash adapter
- Domain-separated salts for master and child derivation
- Typed derivation path schemas (str, num, any segments)
- 16-byte parent fingerprints with constant-time lineage checks
- HMAC-SHA2/SHA3, BLAKE2b and BLAKE3 adapters

Example Usage:
    from hdsk import Hdsk, HmacAdapter

    hd = Hdsk(HmacAdapter("sha256"))
    schema = hd.schema("m / application: any / purpose: any / context: any / index: num")
    master = hd.master("747261636b6572706c61747a")
    node = hd.derive(master, "m/42/0/1/0", schema)
    print(node.key.key.hex())

Note: the hash adapter is part of a hierarchy's identity. Keys derived with
different adapters are unrelated, so record which adapter a hierarchy uses.
"""

from .exceptions import HDError, HDGrammarError, HDRangeError, HDTypeError
from .hd import Hdsk, Key, Schema
from .lib import (
    Blake2bAdapter,
    Blake3Adapter,
    DerivationPath,
    HashAdapter,
    HDKey,
    HmacAdapter,
    PathSchema,
    SchemaSegment,
    SegmentType,
    derive_child,
    derive_master,
    derive_node,
    fingerprint,
    get_adapter,
    get_available_adapters,
    lineage,
    parse_path,
    parse_schema,
    verify_lineage,
)

__all__ = [
    # Facade
    "Hdsk",
    "Schema",
    "Key",
    # Errors
    "HDError",
    "HDGrammarError",
    "HDTypeError",
    "HDRangeError",
    # Hash adapters
    "HashAdapter",
    "HmacAdapter",
    "Blake2bAdapter",
    "Blake3Adapter",
    "get_adapter",
    "get_available_adapters",
    # Keys
    "HDKey",
    "derive_master",
    "derive_child",
    "derive_node",
    "fingerprint",
    "lineage",
    "verify_lineage",
    # Paths
    "SegmentType",
    "SchemaSegment",
    "PathSchema",
    "DerivationPath",
    "parse_schema",
    "parse_path",
]

__version__ = "0.1.0"
__author__ = "hdsk team"
