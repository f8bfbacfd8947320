"""Share commitments of blobs and splitting blob data into sparse shares."""

import base64
import binascii
import math
from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from typing import Optional, Union

from .consts import (
    HASH_SIZE,
    SEQUENCE_LEN_BYTES,
    SHARE_SIZE,
    SHARE_VERSION_ZERO,
    SUBTREE_ROOT_THRESHOLD,
)
from .errors import DecodeError, ShareSequenceLenExceededError, UnsupportedShareVersionError
from .hashes import simple_hash_from_byte_vectors
from .info_byte import InfoByte
from .nmt import Namespace, NamespacedSha2Hasher, NamespaceMerkleTree

_U64_MAX = 2**64 - 1
_SEQUENCE_LEN_MAX = 2 ** (8 * SEQUENCE_LEN_BYTES) - 1

BytesLike = Union[bytes, bytearray, memoryview]


@dataclass(frozen=True, order=True)
class Commitment:
    """A 32-byte share commitment over a blob."""

    hash: bytes

    def __post_init__(self) -> None:
        digest = bytes(self.hash)
        if len(digest) != HASH_SIZE:
            raise ValueError(f"commitment must be {HASH_SIZE} bytes, got {len(digest)}")
        object.__setattr__(self, "hash", digest)

    @classmethod
    def from_blob(
        cls, namespace: Namespace, share_version: int, blob_data: BytesLike
    ) -> "Commitment":
        """Compute the share commitment of the given blob."""
        shares = split_blob_to_shares(namespace, share_version, blob_data)
        return cls.from_shares(namespace, shares)

    @classmethod
    def from_shares(cls, namespace: Namespace, shares: Sequence[BytesLike]) -> "Commitment":
        """Compute the commitment over shares treated as opaque byte strings."""
        leaves = [bytes(share) for share in shares]
        width = subtree_width(len(leaves), SUBTREE_ROOT_THRESHOLD)
        subtree_roots = []
        position = 0
        for size in merkle_mountain_range_sizes(len(leaves), width):
            tree = NamespaceMerkleTree(NamespacedSha2Hasher(ignore_max_ns=True))
            for leaf in leaves[position:position + size]:
                tree.push_leaf(leaf, namespace)
            subtree_roots.append(tree.root().to_bytes())
            position += size
        return cls(simple_hash_from_byte_vectors(subtree_roots))

    def to_base64(self) -> str:
        return base64.b64encode(self.hash).decode("ascii")

    @classmethod
    def from_base64(cls, text: str) -> "Commitment":
        if not isinstance(text, str):
            raise DecodeError(f"expected a base64 string, got {text!r}")
        try:
            raw = base64.b64decode(text, validate=True)
        except binascii.Error as exc:
            raise DecodeError(f"invalid base64: {exc}") from exc
        if len(raw) != HASH_SIZE:
            raise DecodeError("commitment is not a size of a sha256")
        return cls(raw)

    def __bytes__(self) -> bytes:
        return self.hash


def _build_sparse_share_v0(namespace: Namespace, data: bytes, offset: int) -> bytes:
    is_first = offset == 0
    header = namespace.raw + bytes(
        [InfoByte.from_parts(SHARE_VERSION_ZERO, is_first).as_u8()]
    )
    if is_first:
        if len(data) > _SEQUENCE_LEN_MAX:
            raise ShareSequenceLenExceededError(len(data))
        header += len(data).to_bytes(SEQUENCE_LEN_BYTES, "big")
    chunk = data[offset:offset + SHARE_SIZE - len(header)]
    return (header + chunk).ljust(SHARE_SIZE, b"\x00")


def _iter_sparse_shares(namespace: Namespace, data: bytes) -> Iterator[bytes]:
    offset = 0
    while offset < len(data):
        share = _build_sparse_share_v0(namespace, data, offset)
        header_len = len(namespace.raw) + 1 + (SEQUENCE_LEN_BYTES if offset == 0 else 0)
        offset += min(SHARE_SIZE - header_len, len(data) - offset)
        yield share


def split_blob_to_shares(
    namespace: Namespace, share_version: int, blob_data: BytesLike
) -> list[bytes]:
    """Split blob data into a sequence of sparse shares."""
    if share_version != SHARE_VERSION_ZERO:
        raise UnsupportedShareVersionError(share_version)
    return list(_iter_sparse_shares(namespace, bytes(blob_data)))


def merkle_mountain_range_sizes(total_size: int, max_tree_size: int) -> list[int]:
    """Leaf counts of the trees in a merkle mountain range over total_size leaves."""
    sizes = []
    while total_size != 0:
        if total_size >= max_tree_size:
            size = max_tree_size
        else:
            size = round_down_to_power_of_2(total_size)
            if size is None:
                raise ValueError("Failed to find next power of 2")
        sizes.append(size)
        total_size -= size
    return sizes


def blob_min_square_size(share_count: int) -> int:
    """Smallest square size that can hold share_count shares."""
    side = 0 if share_count <= 0 else math.isqrt(share_count - 1) + 1
    size = round_up_to_power_of_2(side)
    if size is None:
        raise ValueError("Failed to find minimum blob square size")
    return size


def subtree_width(share_count: int, subtree_root_threshold: int) -> int:
    """Maximum number of leaves per subtree in the commitment over a blob."""
    s = -(-share_count // subtree_root_threshold)
    rounded = round_up_to_power_of_2(s)
    if rounded is None:
        raise ValueError("Failed to find next power of 2")
    return min(rounded, blob_min_square_size(share_count))


def round_up_to_power_of_2(x: int) -> Optional[int]:
    """Smallest power of two greater than or equal to x, or None past u64."""
    if x <= 1:
        return 1
    po2 = 1 << (x - 1).bit_length()
    return po2 if po2 <= _U64_MAX else None


def round_down_to_power_of_2(x: int) -> Optional[int]:
    """Largest power of two less than or equal to a nonzero x."""
    if x <= 0:
        raise ValueError("x must be a positive integer")
    up = round_up_to_power_of_2(x)
    if up is None:
        return None
    return x if up == x else up // 2