"""SHA-256 helpers: the default empty hash and RFC 6962 merkle roots."""

import hashlib
from collections.abc import Iterable

EMPTY_HASH = b""
"""Representation of an absent hash."""

_LEAF_PREFIX = b"\x00"
_INNER_PREFIX = b"\x01"


def default_sha256() -> bytes:
    """Return the SHA-256 digest of empty input."""
    return hashlib.sha256(b"").digest()


def _leaf_hash(leaf: bytes) -> bytes:
    return hashlib.sha256(_LEAF_PREFIX + leaf).digest()


def _inner_hash(left: bytes, right: bytes) -> bytes:
    return hashlib.sha256(_INNER_PREFIX + left + right).digest()


def _root(items: list[bytes]) -> bytes:
    count = len(items)
    if count == 0:
        return default_sha256()
    if count == 1:
        return _leaf_hash(items[0])
    split = 1 << ((count - 1).bit_length() - 1)
    return _inner_hash(_root(items[:split]), _root(items[split:]))


def simple_hash_from_byte_vectors(items: Iterable[bytes]) -> bytes:
    """Compute the RFC 6962 merkle root of the given byte strings."""
    return _root([bytes(item) for item in items])