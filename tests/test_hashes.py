import hashlib

from hypothesis import given
from hypothesis import strategies as st

from celestia_types.hashes import default_sha256, simple_hash_from_byte_vectors


def test_default_sha256_value():
    assert default_sha256() == bytes.fromhex(
        "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"
    )


def test_empty_list_is_default_hash():
    assert simple_hash_from_byte_vectors([]) == default_sha256()


def test_single_item_is_leaf_hash():
    assert simple_hash_from_byte_vectors([b"abc"]) == hashlib.sha256(b"\x00abc").digest()


def test_three_items_split_at_power_of_two():
    left = simple_hash_from_byte_vectors([b"a", b"b"])
    right = simple_hash_from_byte_vectors([b"c"])
    expected = hashlib.sha256(b"\x01" + left + right).digest()
    assert simple_hash_from_byte_vectors([b"a", b"b", b"c"]) == expected


def test_order_matters():
    assert simple_hash_from_byte_vectors([b"a", b"b"]) != simple_hash_from_byte_vectors(
        [b"b", b"a"]
    )


@given(st.lists(st.binary(max_size=16), max_size=20))
def test_deterministic_and_32_bytes(items):
    first = simple_hash_from_byte_vectors(items)
    assert len(first) == 32
    assert first == simple_hash_from_byte_vectors(iter(items))