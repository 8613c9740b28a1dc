"""
Hierarchical deterministic key derivation.

Master keys are derived from a secret, child keys from a parent chain code
and a 31-bit index, and nodes by folding child derivation along a path.
Every key carries a 16-byte fingerprint binding it to its parent key, which
lets a holder of the parent verify lineage.

    master = derive_master(h, secret)
    node = derive_node(h, master, [42, 0, 1, 0])
    child = derive_child(h, node, 7)
    assert lineage(h, child, node)
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional, Sequence, Union

from ..config import (
    CHAIN_CODE_SIZE,
    CHILD_DOMAIN,
    FINGERPRINT_SIZE,
    KEY_SIZE,
    MASTER_DOMAIN,
    OKM_SIZE,
    ROOT,
)
from ..exceptions import HDError, HDGrammarError, HDRangeError
from .codec import Input, check_index, encode_int, to_bytes
from .hashes import HashAdapter
from .hkdf import calc_salt, hkdf
from .path import str_to_index


@dataclass(frozen=True)
class HDKey:
    """A derived key, its chain code, depth and parent fingerprint."""

    key: bytes
    chain_code: bytes
    depth: int
    fingerprint: bytes
    path: Optional[str] = None

    def __post_init__(self):
        for field_name, size in (
            ("key", KEY_SIZE),
            ("chain_code", CHAIN_CODE_SIZE),
            ("fingerprint", FINGERPRINT_SIZE),
        ):
            value = getattr(self, field_name)
            if not isinstance(value, bytes) or len(value) != size:
                raise HDRangeError(
                    f"HDKey {field_name} must be {size} bytes", label=field_name
                )
        depth = self.depth
        if isinstance(depth, bool) or not isinstance(depth, int) or depth < 0:
            raise HDRangeError(
                f"HDKey depth must be a non-negative integer, got {depth!r}",
                label="depth",
                value=depth,
            )

    @property
    def is_master(self) -> bool:
        return self.depth == 0

    def __repr__(self) -> str:
        # Key material stays out of reprs and tracebacks
        return (
            f"HDKey(depth={self.depth}, path={self.path!r}, "
            f"fingerprint={self.fingerprint.hex()})"
        )

    def to_dict(self) -> Dict[str, Any]:
        """Hex-encoded view of the key for display."""
        return {
            "key": self.key.hex(),
            "chain_code": self.chain_code.hex(),
            "depth": self.depth,
            "fingerprint": self.fingerprint.hex(),
            "path": self.path,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "HDKey":
        """Rebuild a key from the output of to_dict."""
        return cls(
            key=bytes.fromhex(data["key"]),
            chain_code=bytes.fromhex(data["chain_code"]),
            depth=data["depth"],
            fingerprint=bytes.fromhex(data["fingerprint"]),
            path=data.get("path"),
        )


def _split_okm(okm: bytes):
    return okm[:KEY_SIZE], okm[KEY_SIZE:OKM_SIZE]


def fingerprint(h: HashAdapter, parent_key: bytes, child_key: bytes) -> bytes:
    """Fingerprint a child key: MAC(key=parent_key, data=child_key)[:16]."""
    return h.mac(parent_key, child_key)[:FINGERPRINT_SIZE]


def derive_master(h: HashAdapter, secret: Input) -> HDKey:
    """
    Derive a master key from a secret.

    Args:
        h: Hash adapter
        secret: Secret bytes, hex text, or UTF-8 text

    Returns:
        Master HDKey at depth 0

    Raises:
        HDGrammarError: If the secret is empty
    """
    secret = to_bytes(secret)
    if not secret:
        raise HDGrammarError("Secret cannot be empty")

    salt = calc_salt(h, secret)
    okm = hkdf(h, secret, salt, MASTER_DOMAIN, OKM_SIZE)
    key, chain_code = _split_okm(okm)
    return HDKey(
        key=key,
        chain_code=chain_code,
        depth=0,
        fingerprint=fingerprint(h, secret, key),
        path=ROOT,
    )


def derive_child(h: HashAdapter, parent: HDKey, index: Union[int, str]) -> HDKey:
    """
    Derive the child of a key at an index.

    String indices are hashed to an integer with str_to_index.

    Raises:
        HDTypeError: If index is neither an int nor a str
        HDRangeError: If index is outside 0..2^31-1
    """
    if isinstance(index, str):
        index = str_to_index(h, index)
    index = check_index(index)

    salt = calc_salt(h, parent.chain_code, encode_int(index))
    info = CHILD_DOMAIN + str(index).encode("ascii")
    okm = hkdf(h, parent.chain_code, salt, info, OKM_SIZE)
    key, chain_code = _split_okm(okm)
    return HDKey(
        key=key,
        chain_code=chain_code,
        depth=parent.depth + 1,
        fingerprint=fingerprint(h, parent.key, key),
        path=None if parent.path is None else f"{parent.path}/{index}",
    )


def derive_node(h: HashAdapter, root: HDKey, path: Sequence[int]) -> HDKey:
    """
    Derive the key at a node below root by following path left to right.

    All indices are validated before the first derivation step, so an
    invalid path never does partial work. An empty path returns root.
    """
    for position, index in enumerate(path):
        try:
            check_index(index)
        except HDError as e:
            raise e.at(position) from e

    key = root
    for index in path:
        key = derive_child(h, key, index)
    return key


def constant_time_equal(a: bytes, b: bytes) -> bool:
    """
    Compare two fingerprints in constant time.

    Every byte pair is XORed into an accumulator; there is no early exit.

    Raises:
        HDRangeError: If either operand is not exactly 16 bytes
    """
    if len(a) != FINGERPRINT_SIZE or len(b) != FINGERPRINT_SIZE:
        raise HDRangeError(
            f"Fingerprints for lineage verification must be "
            f"{FINGERPRINT_SIZE} bytes each, "
            f"got {len(a)} and {len(b)}"
        )
    result = 0
    for x, y in zip(a, b):
        result |= x ^ y
    return result == 0


def verify_lineage(
    h: HashAdapter, child_fingerprint: bytes, parent_key: bytes, child_key: bytes
) -> bool:
    """True if child_fingerprint was produced from parent_key and child_key."""
    expected = fingerprint(h, parent_key, child_key)
    return constant_time_equal(child_fingerprint, expected)


def lineage(h: HashAdapter, child: HDKey, parent: Union[HDKey, bytes]) -> bool:
    """
    Check that child is a direct child of parent.

    Args:
        h: Hash adapter used to derive both keys
        child: Candidate child key (must not be a master key)
        parent: Candidate parent HDKey or raw parent key bytes

    Raises:
        HDRangeError: If child is a master key
    """
    if child.is_master:
        raise HDRangeError("Master key has no parent; lineage cannot be verified")
    parent_key = parent.key if isinstance(parent, HDKey) else bytes(parent)
    return verify_lineage(h, child.fingerprint, parent_key, child.key)
