import pytest
from hypothesis import given, settings, strategies as st

from celestia_types.commitment import (
    Commitment,
    blob_min_square_size,
    merkle_mountain_range_sizes,
    round_down_to_power_of_2,
    round_up_to_power_of_2,
    split_blob_to_shares,
    subtree_width,
)
from celestia_types.consts import (
    CONTINUATION_SPARSE_SHARE_CONTENT_SIZE,
    FIRST_SPARSE_SHARE_CONTENT_SIZE,
    NAMESPACE_SIZE,
    SEQUENCE_LEN_BYTES,
    SHARE_INFO_BYTES,
    SHARE_SIZE,
)
from celestia_types.errors import DecodeError, UnsupportedShareVersionError
from celestia_types.hashes import default_sha256
from celestia_types.nmt import Namespace


@pytest.fixture
def namespace():
    return Namespace.new(0, bytes([1] * 10))


def test_single_sparse_share(namespace):
    data = bytes([1, 2, 3, 4, 5, 6, 7])
    shares = split_blob_to_shares(namespace, 0, data)
    assert len(shares) == 1
    share = shares[0]
    assert share[:NAMESPACE_SIZE] == namespace.raw
    rest = share[NAMESPACE_SIZE:]
    expected_start = bytes([1, 0, 0, 0, 7, 1, 2, 3, 4, 5, 6, 7])
    assert rest[:len(expected_start)] == expected_start
    assert rest[len(expected_start):] == bytes(FIRST_SPARSE_SHARE_CONTENT_SIZE - len(data))


def test_sparse_share_with_continuation(namespace):
    continuation_len = 7
    data = bytes([7] * (FIRST_SPARSE_SHARE_CONTENT_SIZE + continuation_len))
    first, continuation = split_blob_to_shares(namespace, 0, data)

    assert first[:NAMESPACE_SIZE] == namespace.raw
    rest = first[NAMESPACE_SIZE:]
    assert rest[:SHARE_INFO_BYTES] == bytes([1])
    rest = rest[SHARE_INFO_BYTES:]
    assert rest[:SEQUENCE_LEN_BYTES] == len(data).to_bytes(4, "big")
    assert rest[SEQUENCE_LEN_BYTES:] == bytes([7] * FIRST_SPARSE_SHARE_CONTENT_SIZE)

    assert continuation[:NAMESPACE_SIZE] == namespace.raw
    rest = continuation[NAMESPACE_SIZE:]
    expected_start = bytes([0, 7, 7, 7, 7, 7, 7, 7])
    assert rest[:len(expected_start)] == expected_start
    assert rest[len(expected_start):] == bytes(
        CONTINUATION_SPARSE_SHARE_CONTENT_SIZE - continuation_len
    )


def test_empty_data_gives_no_shares(namespace):
    assert split_blob_to_shares(namespace, 0, b"") == []


def test_empty_blob_commitment_is_empty_merkle_root(namespace):
    assert Commitment.from_blob(namespace, 0, b"").hash == default_sha256()


def test_unsupported_share_version(namespace):
    with pytest.raises(UnsupportedShareVersionError):
        split_blob_to_shares(namespace, 1, b"abc")
    with pytest.raises(UnsupportedShareVersionError):
        Commitment.from_blob(namespace, 1, b"abc")


@pytest.mark.parametrize(
    "total_size, square_size, expected",
    [
        (11, 4, [4, 4, 2, 1]),
        (2, 64, [2]),
        (64, 8, [8] * 8),
        (19, 8, [8, 8, 2, 1]),
    ],
)
def test_merkle_mountain_ranges(total_size, square_size, expected):
    assert merkle_mountain_range_sizes(total_size, square_size) == expected


@pytest.mark.parametrize("x, expected", [(0, 1), (1, 1), (2, 2), (3, 4), (4, 4), (5, 8)])
def test_round_up_to_power_of_2(x, expected):
    assert round_up_to_power_of_2(x) == expected


@pytest.mark.parametrize("x, expected", [(1, 1), (2, 2), (3, 2), (5, 4), (8, 8), (9, 8)])
def test_round_down_to_power_of_2(x, expected):
    assert round_down_to_power_of_2(x) == expected


def test_round_down_rejects_zero():
    with pytest.raises(ValueError):
        round_down_to_power_of_2(0)


@pytest.mark.parametrize("count, expected", [(0, 1), (1, 1), (4, 2), (5, 4), (16, 4), (17, 8)])
def test_blob_min_square_size(count, expected):
    assert blob_min_square_size(count) == expected


@pytest.mark.parametrize("count, expected", [(1, 1), (4, 1), (64, 1), (65, 2), (128, 2)])
def test_subtree_width(count, expected):
    assert subtree_width(count, 64) == expected


def test_commitment_base64_round_trip(namespace):
    commitment = Commitment.from_blob(namespace, 0, b"hello world")
    assert Commitment.from_base64(commitment.to_base64()) == commitment


def test_commitment_from_base64_wrong_size():
    with pytest.raises(DecodeError):
        Commitment.from_base64("AAAA")


def test_commitment_from_base64_invalid():
    with pytest.raises(DecodeError):
        Commitment.from_base64("not base64!!")


def test_commitment_depends_on_data(namespace):
    first = Commitment.from_blob(namespace, 0, b"abc")
    second = Commitment.from_blob(namespace, 0, b"abd")
    assert first.hash != second.hash
    assert len(first.hash) == 32


def test_from_blob_matches_from_shares(namespace):
    data = bytes(range(256)) * 5
    shares = split_blob_to_shares(namespace, 0, data)
    assert Commitment.from_blob(namespace, 0, data) == Commitment.from_shares(namespace, shares)


@settings(max_examples=30)
@given(st.binary(max_size=3000))
def test_shares_reassemble_data(data):
    ns = Namespace.new(0, bytes([1] * 10))
    shares = split_blob_to_shares(ns, 0, data)
    assert all(len(share) == SHARE_SIZE for share in shares)
    if not shares:
        assert data == b""
        return
    header = NAMESPACE_SIZE + SHARE_INFO_BYTES
    first = shares[0]
    length = int.from_bytes(first[header:header + SEQUENCE_LEN_BYTES], "big")
    assert length == len(data)
    joined = first[header + SEQUENCE_LEN_BYTES:] + b"".join(s[header:] for s in shares[1:])
    assert joined[:length] == data