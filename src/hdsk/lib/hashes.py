"""
Hash Adapters

A hash adapter supplies the two primitives the derivation engine needs:

- digest(data): one-shot digest at the adapter's native length
- mac(key, data): keyed MAC at the adapter's native length

Adapters are passed explicitly to every derivation call. They hold no
hashing state between calls, so a single instance can be shared freely
across threads.

Available adapters:
- HmacAdapter: HMAC over any hashlib algorithm (sha256 by default)
- Blake2bAdapter: BLAKE2b in native keyed mode
- Blake3Adapter: BLAKE3 in native keyed mode

Keys derived with one adapter never match keys derived with another, so the
adapter choice is part of a key hierarchy's identity.
"""

import hashlib
import hmac
from abc import ABC, abstractmethod
from typing import Callable, Dict, List

import blake3

from ..exceptions import HDRangeError, HDTypeError


class HashAdapter(ABC):
    """Digest and keyed-MAC capability injected into the derivation engine."""

    name: str = ""
    digest_size: int = 0

    @abstractmethod
    def digest(self, data: bytes) -> bytes:
        """Return the digest of data at the native output length."""

    @abstractmethod
    def mac(self, key: bytes, data: bytes) -> bytes:
        """Return the keyed MAC of data at the native output length."""

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"


class HmacAdapter(HashAdapter):
    """
    HMAC over a hashlib algorithm.

    With the default sha256 the KDF engine is exactly RFC 5869 HKDF-SHA256.

    Args:
        algorithm: hashlib algorithm name (sha256, sha512, sha3_256, sha3_512, ...)

    Raises:
        HDTypeError: If hashlib does not provide the algorithm
    """

    SUPPORTED = (
        "sha256",
        "sha384",
        "sha512",
        "sha3_256",
        "sha3_512",
        "blake2b",
        "blake2s",
    )

    def __init__(self, algorithm: str = "sha256"):
        if algorithm not in self.SUPPORTED:
            raise HDTypeError(
                f"Unsupported HMAC algorithm '{algorithm}'. "
                f"Valid algorithms: {list(self.SUPPORTED)}",
                value=algorithm,
            )
        self.algorithm = algorithm
        self.name = f"hmac-{algorithm}"
        self._hash_func = getattr(hashlib, algorithm)
        self.digest_size = self._hash_func().digest_size

    def digest(self, data: bytes) -> bytes:
        return self._hash_func(data).digest()

    def mac(self, key: bytes, data: bytes) -> bytes:
        return hmac.new(key, data, self._hash_func).digest()


class Blake2bAdapter(HashAdapter):
    """
    BLAKE2b using its built-in keyed mode as the MAC.

    BLAKE2b accepts keys of at most 64 bytes; longer keys are reduced with an
    unkeyed BLAKE2b digest first, the same way HMAC treats oversized keys.
    """

    MAX_KEY_SIZE = 64

    def __init__(self, digest_size: int = 64):
        if not 1 <= digest_size <= 64:
            raise HDRangeError(
                f"BLAKE2b digest size must be between 1 and 64 bytes, "
                f"got {digest_size}",
                value=digest_size,
            )
        self.digest_size = digest_size
        self.name = "blake2b" if digest_size == 64 else f"blake2b-{digest_size * 8}"

    def digest(self, data: bytes) -> bytes:
        return hashlib.blake2b(data, digest_size=self.digest_size).digest()

    def mac(self, key: bytes, data: bytes) -> bytes:
        if len(key) > self.MAX_KEY_SIZE:
            key = hashlib.blake2b(key).digest()
        return hashlib.blake2b(data, key=key, digest_size=self.digest_size).digest()


class Blake3Adapter(HashAdapter):
    """
    BLAKE3 using its built-in keyed mode as the MAC.

    BLAKE3 keys must be exactly 32 bytes, so every MAC key is first hashed
    with unkeyed BLAKE3. Output length is extendable; the default matches
    BLAKE3's native 32 bytes.
    """

    def __init__(self, digest_size: int = 32):
        if digest_size < 1:
            raise HDRangeError(
                f"BLAKE3 digest size must be positive, got {digest_size}",
                value=digest_size,
            )
        self.digest_size = digest_size
        self.name = "blake3" if digest_size == 32 else f"blake3-{digest_size * 8}"

    def digest(self, data: bytes) -> bytes:
        return blake3.blake3(data).digest(length=self.digest_size)

    def mac(self, key: bytes, data: bytes) -> bytes:
        blake3_key = blake3.blake3(key).digest()
        return blake3.blake3(data, key=blake3_key).digest(length=self.digest_size)


# Registry names used by the CLI and HDSK_HASH
ADAPTERS: Dict[str, Callable[[], HashAdapter]] = {
    "sha256": lambda: HmacAdapter("sha256"),
    "sha512": lambda: HmacAdapter("sha512"),
    "sha3-256": lambda: HmacAdapter("sha3_256"),
    "sha3-512": lambda: HmacAdapter("sha3_512"),
    "blake2b": Blake2bAdapter,
    "blake3": Blake3Adapter,
}


def get_available_adapters() -> List[str]:
    """Return the registry names accepted by get_adapter."""
    return list(ADAPTERS.keys())


def get_adapter(name: str) -> HashAdapter:
    """
    Build a fresh adapter from its registry name.

    Args:
        name: Registry name (sha256, sha512, sha3-256, sha3-512, blake2b, blake3)

    Returns:
        A new HashAdapter instance

    Raises:
        HDTypeError: If the name is not registered
    """
    factory = ADAPTERS.get(name.lower())
    if factory is None:
        raise HDTypeError(
            f"Unknown hash '{name}'. Valid hashes: {get_available_adapters()}",
            value=name,
        )
    return factory()
