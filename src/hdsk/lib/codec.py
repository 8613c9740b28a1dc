"""
Byte encoding helpers.

Conversions here are part of the derivation contract: changing any of them
changes every derived key.
"""

import string
from typing import Union

from ..config import MAX_INDEX
from ..exceptions import HDRangeError, HDTypeError

Input = Union[str, bytes, bytearray, memoryview]

_HEX_DIGITS = frozenset(string.hexdigits)


def is_hex(text: str) -> bool:
    """True if text is non-empty, even-length, and made only of hex digits."""
    return len(text) > 0 and len(text) % 2 == 0 and all(c in _HEX_DIGITS for c in text)


def to_bytes(value: Input) -> bytes:
    """
    Convert caller input to bytes.

    Byte buffers pass through unchanged. Strings that look like hex
    (even length, hex digits only) are hex-decoded; any other string is
    UTF-8 encoded.

    Args:
        value: Text or a byte buffer

    Returns:
        The input as bytes

    Raises:
        HDTypeError: If value is neither text nor a byte buffer
    """
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    if isinstance(value, str):
        if is_hex(value):
            return bytes.fromhex(value)
        return value.encode("utf-8")
    raise HDTypeError(
        f"Expected str or bytes, got {type(value).__name__}", value=value
    )


def encode_int(value: int) -> bytes:
    """Encode an unsigned 32-bit integer as 4 big-endian bytes."""
    if not 0 <= value <= 0xFFFFFFFF:
        raise HDRangeError(f"Integer {value} does not fit in 32 bits", value=value)
    return value.to_bytes(4, byteorder="big")


def decode_int(data: bytes) -> int:
    """Decode the first 4 bytes of data as a big-endian unsigned integer."""
    if len(data) < 4:
        raise HDRangeError(f"Need at least 4 bytes, got {len(data)}", value=data)
    return int.from_bytes(data[:4], byteorder="big")


def check_index(index: int) -> int:
    """
    Validate a child index against the accepted range 0..2^31-1.

    Raises:
        HDTypeError: If index is not an int (bools are rejected)
        HDRangeError: If index is outside the accepted range
    """
    if isinstance(index, bool) or not isinstance(index, int):
        raise HDTypeError(
            f"Index must be an integer, got {type(index).__name__}", value=index
        )
    if not 0 <= index <= MAX_INDEX:
        raise HDRangeError(
            f"Index {index} out of range 0..{MAX_INDEX}", value=index
        )
    return index
