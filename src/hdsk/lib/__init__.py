"""
Key derivation core.

Everything in this package is a pure function of its inputs: no logging,
no shared state, no default hash adapter.
"""

from .codec import Input, check_index, decode_int, encode_int, is_hex, to_bytes
from .hashes import (
    Blake2bAdapter,
    Blake3Adapter,
    HashAdapter,
    HmacAdapter,
    get_adapter,
    get_available_adapters,
)
from .hkdf import calc_salt, hkdf, hkdf_expand, hkdf_extract
from .key import (
    HDKey,
    constant_time_equal,
    derive_child,
    derive_master,
    derive_node,
    fingerprint,
    lineage,
    verify_lineage,
)
from .path import (
    DerivationPath,
    PathSchema,
    SchemaSegment,
    SegmentType,
    format_path,
    format_schema,
    get_index,
    parse_path,
    parse_schema,
    str_to_index,
)

__all__ = [
    # Byte codec
    "Input",
    "to_bytes",
    "is_hex",
    "encode_int",
    "decode_int",
    "check_index",
    # Hash adapters
    "HashAdapter",
    "HmacAdapter",
    "Blake2bAdapter",
    "Blake3Adapter",
    "get_adapter",
    "get_available_adapters",
    # KDF engine and salts
    "hkdf",
    "hkdf_extract",
    "hkdf_expand",
    "calc_salt",
    # Key tree and fingerprints
    "HDKey",
    "derive_master",
    "derive_child",
    "derive_node",
    "fingerprint",
    "constant_time_equal",
    "verify_lineage",
    "lineage",
    # Schemas and paths
    "SegmentType",
    "SchemaSegment",
    "PathSchema",
    "DerivationPath",
    "parse_schema",
    "format_schema",
    "parse_path",
    "format_path",
    "get_index",
    "str_to_index",
]
