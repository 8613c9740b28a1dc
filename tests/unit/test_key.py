"""Unit tests for master, child and node derivation and lineage checks."""

import dataclasses

import pytest

from hdsk.exceptions import HDGrammarError, HDRangeError, HDTypeError
from hdsk.lib.hashes import Blake2bAdapter, Blake3Adapter, HmacAdapter
from hdsk.lib.key import (
    HDKey,
    constant_time_equal,
    derive_child,
    derive_master,
    derive_node,
    fingerprint,
    lineage,
    verify_lineage,
)
from hdsk.lib.path import parse_path, parse_schema, str_to_index


def _assert_matches(key, vector):
    assert key.key.hex() == vector["key"]
    assert key.chain_code.hex() == vector["chain_code"]
    assert key.fingerprint.hex() == vector["fingerprint"]


def test_master_reference_vector(sha256, zero_secret, sha256_vectors):
    master = derive_master(sha256, zero_secret)
    _assert_matches(master, sha256_vectors["m"])
    assert master.depth == 0
    assert master.path == "m"


def test_node_reference_vectors(sha256, zero_secret, default_schema_text, sha256_vectors):
    """Secret of 32 zero bytes, default schema, fixed HMAC-SHA256 vectors."""
    schema = parse_schema(default_schema_text)
    master = derive_master(sha256, zero_secret)
    for path_text, vector in sha256_vectors.items():
        node = derive_node(sha256, master, parse_path(sha256, path_text, schema))
        _assert_matches(node, vector)
        assert node.path == path_text


def test_blake2b_reference_vectors(blake2b, zero_secret, default_schema_text, blake2b_vectors):
    schema = parse_schema(default_schema_text)
    master = derive_master(blake2b, zero_secret)
    for path_text, vector in blake2b_vectors.items():
        node = derive_node(blake2b, master, parse_path(blake2b, path_text, schema))
        _assert_matches(node, vector)


def test_vectors_differ_across_adapters(zero_secret):
    keys = {
        derive_master(h, zero_secret).key
        for h in (HmacAdapter("sha256"), HmacAdapter("sha512"), Blake2bAdapter(), Blake3Adapter())
    }
    assert len(keys) == 4


def test_secret_encodings_agree(sha256):
    """Hex text, raw bytes and bytearray secrets derive the same master."""
    from_hex = derive_master(sha256, "747261636B6572706C61747A")
    from_bytes = derive_master(sha256, b"trackerplatz")
    from_text = derive_master(sha256, "trackerplatz")
    assert from_hex == from_bytes == from_text
    assert derive_master(sha256, bytearray(32)) == derive_master(sha256, "00" * 32)


def test_empty_secret_rejected(sha256):
    with pytest.raises(HDGrammarError, match="Secret cannot be empty"):
        derive_master(sha256, b"")


def test_master_fingerprint_binds_secret(adapter, zero_secret):
    master = derive_master(adapter, zero_secret)
    assert master.fingerprint == fingerprint(adapter, zero_secret, master.key)


def test_derivation_is_deterministic(adapter):
    path = [42, 0, 1, 0]
    first = derive_node(adapter, derive_master(adapter, b"secret"), path)
    second = derive_node(adapter, derive_master(adapter, b"secret"), path)
    assert first == second


def test_key_sizes(adapter):
    master = derive_master(adapter, b"secret")
    child = derive_child(adapter, master, 7)
    for key in (master, child):
        assert len(key.key) == 32
        assert len(key.chain_code) == 32
        assert len(key.fingerprint) == 16


def test_depth_increases_by_one(adapter):
    key = derive_master(adapter, b"secret")
    assert key.depth == 0
    for expected_depth, index in enumerate([5, 0, 2**31 - 1, 9], start=1):
        key = derive_child(adapter, key, index)
        assert key.depth == expected_depth


def test_node_equals_folded_children(sha256):
    master = derive_master(sha256, b"secret")
    folded = master
    for index in (42, 0, 1, 0):
        folded = derive_child(sha256, folded, index)
    node = derive_node(sha256, master, [42, 0, 1, 0])
    assert node == folded
    assert node.depth == master.depth + 4
    assert node.path == "m/42/0/1/0"


def test_node_from_intermediate_root(sha256):
    master = derive_master(sha256, b"secret")
    mid = derive_node(sha256, master, [42, 0])
    assert derive_node(sha256, mid, [1, 0]) == derive_node(sha256, master, [42, 0, 1, 0])
    assert derive_node(sha256, mid, [1, 0]).depth == 4


def test_empty_path_returns_root(sha256):
    master = derive_master(sha256, b"secret")
    assert derive_node(sha256, master, []) is master


def test_siblings_differ(sha256):
    master = derive_master(sha256, b"secret")
    children = [derive_child(sha256, master, i) for i in range(10)]
    assert len({c.key for c in children}) == 10
    assert len({c.chain_code for c in children}) == 10


def test_child_key_independent_of_parent_key(sha256):
    """Children come from the chain code; the parent key only feeds the fingerprint."""
    master = derive_master(sha256, b"secret")
    swapped = dataclasses.replace(master, key=bytes(32))
    assert derive_child(sha256, swapped, 3).key == derive_child(sha256, master, 3).key
    assert derive_child(sha256, swapped, 3).fingerprint != derive_child(sha256, master, 3).fingerprint


def test_string_index_is_hashed(sha256):
    master = derive_master(sha256, b"secret")
    by_label = derive_child(sha256, master, "alpha")
    assert by_label == derive_child(sha256, master, str_to_index(sha256, "alpha"))
    assert by_label.path == "m/248772269"


def test_child_index_validation(sha256):
    master = derive_master(sha256, b"secret")
    with pytest.raises(HDRangeError):
        derive_child(sha256, master, 2**31)
    with pytest.raises(HDRangeError):
        derive_child(sha256, master, -1)
    with pytest.raises(HDTypeError):
        derive_child(sha256, master, 1.5)


def test_node_validates_before_deriving(sha256):
    master = derive_master(sha256, b"secret")
    with pytest.raises(HDRangeError) as exc_info:
        derive_node(sha256, master, [1, 2, 2**31])
    assert exc_info.value.position == 2


def test_lineage_soundness(adapter):
    master = derive_master(adapter, b"secret")
    parent = derive_node(adapter, master, [42, 0, 1])
    for index in (0, 1, 42, 2**31 - 1):
        child = derive_child(adapter, parent, index)
        assert lineage(adapter, child, parent)
        assert lineage(adapter, child, parent.key)
        assert verify_lineage(adapter, child.fingerprint, parent.key, child.key)


def test_lineage_non_forgery(adapter):
    master = derive_master(adapter, b"secret")
    parent = derive_child(adapter, master, 1)
    child = derive_child(adapter, parent, 2)

    unrelated = derive_master(adapter, b"other secret")
    assert not lineage(adapter, child, unrelated)
    assert not lineage(adapter, child, derive_child(adapter, master, 2))
    # A grandparent is not a parent
    assert not lineage(adapter, child, master)
    # Chain code is not the key
    assert not verify_lineage(adapter, child.fingerprint, parent.chain_code, child.key)


def test_lineage_rejects_master(sha256):
    master = derive_master(sha256, b"secret")
    with pytest.raises(HDRangeError, match="Master key has no parent"):
        lineage(sha256, master, master)


def test_lineage_requires_same_adapter():
    sha = HmacAdapter("sha256")
    parent = derive_master(sha, b"secret")
    child = derive_child(sha, parent, 1)
    assert not lineage(Blake2bAdapter(), child, parent)


def test_verify_lineage_rejects_bad_fingerprint_length(sha256):
    parent = derive_master(sha256, b"secret")
    child = derive_child(sha256, parent, 1)
    with pytest.raises(HDRangeError, match="16 bytes"):
        verify_lineage(sha256, child.fingerprint[:15], parent.key, child.key)
    with pytest.raises(HDRangeError):
        verify_lineage(sha256, child.fingerprint + b"\x00", parent.key, child.key)


def test_constant_time_equal():
    a = bytes(range(16))
    assert constant_time_equal(a, bytes(range(16)))
    # A mismatch at any position is detected
    for position in range(16):
        b = bytearray(a)
        b[position] ^= 0x80
        assert not constant_time_equal(a, bytes(b))
    with pytest.raises(HDRangeError):
        constant_time_equal(a, a[:8])


def test_constant_time_equal_visits_every_byte():
    """The comparison touches all 16 byte pairs wherever the mismatch is."""

    class CountingBytes(bytes):
        visits = 0

        def __iter__(self):
            for b in super().__iter__():
                CountingBytes.visits += 1
                yield b

    a = bytes(16)
    for position in (0, 7, 15, None):
        b = bytearray(16)
        if position is not None:
            b[position] = 1
        CountingBytes.visits = 0
        constant_time_equal(CountingBytes(a), bytes(b))
        assert CountingBytes.visits == 16


def test_hdkey_validates_sizes():
    with pytest.raises(HDRangeError, match="key must be 32 bytes"):
        HDKey(key=bytes(31), chain_code=bytes(32), depth=0, fingerprint=bytes(16))
    with pytest.raises(HDRangeError, match="chain_code"):
        HDKey(key=bytes(32), chain_code=bytes(33), depth=0, fingerprint=bytes(16))
    with pytest.raises(HDRangeError, match="fingerprint"):
        HDKey(key=bytes(32), chain_code=bytes(32), depth=0, fingerprint=bytes(8))
    with pytest.raises(HDRangeError, match="depth"):
        HDKey(key=bytes(32), chain_code=bytes(32), depth=-1, fingerprint=bytes(16))


def test_hdkey_is_immutable(sha256):
    master = derive_master(sha256, b"secret")
    with pytest.raises(dataclasses.FrozenInstanceError):
        master.depth = 3


def test_hdkey_repr_hides_key_material(sha256):
    master = derive_master(sha256, b"secret")
    text = repr(master)
    assert master.key.hex() not in text
    assert master.chain_code.hex() not in text
    assert master.fingerprint.hex() in text


def test_hdkey_dict_round_trip(sha256):
    node = derive_node(sha256, derive_master(sha256, b"secret"), [1, 2])
    data = node.to_dict()
    assert data["depth"] == 2
    assert data["path"] == "m/1/2"
    assert HDKey.from_dict(data) == node


def test_path_label_without_root_path(sha256):
    master = derive_master(sha256, b"secret")
    anonymous = dataclasses.replace(master, path=None)
    assert derive_child(sha256, anonymous, 1).path is None
