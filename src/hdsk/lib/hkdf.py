"""
HKDF over an injected hash adapter

Extract-then-expand key derivation (RFC 5869) written against the
HashAdapter MAC instead of a fixed HMAC, so the same engine serves HMAC
adapters and natively keyed hashes such as BLAKE2b and BLAKE3.

Algorithm Overview:
1. Extract: prk = MAC(key=salt, data=ikm), salt defaults to zero bytes
2. Expand: t(0) = b"", t(i) = MAC(key=prk, data=t(i-1) || info || i)
3. Output the first `length` bytes of t(1) || t(2) || ...

The salt deriver builds the 16-byte, domain-separated salts fed to step 1.
"""

from typing import Optional, Union

from ..config import SALT_DOMAIN, SALT_SIZE
from ..exceptions import HDRangeError
from .hashes import HashAdapter

Info = Union[str, bytes, None]


def _info_bytes(info: Info) -> bytes:
    if info is None:
        return b""
    if isinstance(info, str):
        return info.encode("utf-8")
    return bytes(info)


def hkdf_extract(h: HashAdapter, ikm: bytes, salt: Optional[bytes] = None) -> bytes:
    """
    Extract a pseudorandom key from input key material.

    Args:
        h: Hash adapter
        ikm: Input key material
        salt: Optional salt; zero bytes of the adapter's digest size when absent

    Returns:
        Pseudorandom key of the adapter's digest size
    """
    if not salt:
        salt = bytes(h.digest_size)
    return h.mac(salt, ikm)


def hkdf_expand(
    h: HashAdapter, prk: bytes, info: Info = None, length: int = 32
) -> bytes:
    """
    Expand a pseudorandom key into `length` bytes of output key material.

    Raises:
        HDRangeError: If length is not in 1..255 * digest_size
    """
    max_length = 255 * h.digest_size
    if not 1 <= length <= max_length:
        raise HDRangeError(
            f"HKDF output length must be between 1 and {max_length} bytes, "
            f"got {length}",
            value=length,
        )

    info = _info_bytes(info)
    t = b""
    okm = b""
    counter = 1
    while len(okm) < length:
        t = h.mac(prk, t + info + bytes([counter]))
        okm += t
        counter += 1
    return okm[:length]


def hkdf(
    h: HashAdapter,
    ikm: bytes,
    salt: Optional[bytes],
    info: Info,
    length: int = 32,
) -> bytes:
    """Derive `length` bytes from ikm, salt and info (extract then expand)."""
    prk = hkdf_extract(h, ikm, salt)
    return hkdf_expand(h, prk, info, length)


def calc_salt(h: HashAdapter, message: bytes, info: Optional[bytes] = None) -> bytes:
    """
    Derive a 16-byte salt from a message and optional context info.

    The MAC key is the digest of `info` truncated to 16 bytes, or 16 zero
    bytes without info. The MAC covers message || b"SALT".

    Args:
        h: Hash adapter
        message: Material the salt is bound to (secret or chain code)
        info: Optional context tag (e.g. an encoded child index)

    Returns:
        16-byte salt
    """
    if info:
        key = h.digest(info)[:SALT_SIZE]
    else:
        key = bytes(SALT_SIZE)
    return h.mac(key, message + SALT_DOMAIN)[:SALT_SIZE]
