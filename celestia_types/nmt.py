"""Namespaces, namespaced hashes, the namespaced merkle tree and its proofs."""

import base64
import binascii
import hashlib
from collections import deque
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any, ClassVar, Optional, Union

from .consts import HASH_SIZE, NS_ID_SIZE, NS_ID_V0_SIZE, NS_SIZE
from .errors import (
    DecodeError,
    InvalidNamespacedHashError,
    InvalidNamespaceSizeError,
    InvalidNamespaceV0Error,
    NmtError,
    RangeProofError,
    UnsupportedNamespaceVersionError,
)
from .hashes import default_sha256

NAMESPACED_HASH_SIZE = 2 * NS_SIZE + HASH_SIZE

_LEAF_DOMAIN_SEPARATOR = b"\x00"
_INTERNAL_NODE_DOMAIN_SEPARATOR = b"\x01"
_MAX_NS = b"\xff" * NS_SIZE
_ZERO_NS = b"\x00" * NS_SIZE


def _b64decode(text: Any) -> bytes:
    if not isinstance(text, str):
        raise DecodeError(f"expected a base64 string, got {text!r}")
    try:
        return base64.b64decode(text, validate=True)
    except binascii.Error as exc:
        raise DecodeError(f"invalid base64: {exc}") from exc


def _b64encode(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


def _split_point(length: int) -> int:
    """Largest power of two strictly smaller than length (0 below 2)."""
    if length < 2:
        return 0
    return 1 << ((length - 1).bit_length() - 1)


@dataclass(frozen=True, order=True)
class Namespace:
    """A validated namespace: one version byte followed by a 28-byte id."""

    raw: bytes
    MAX: ClassVar["Namespace"]

    def __post_init__(self) -> None:
        raw = bytes(self.raw)
        if len(raw) != NS_SIZE:
            raise InvalidNamespaceSizeError()
        object.__setattr__(self, "raw", raw)

    @classmethod
    def from_raw(cls, data: bytes) -> "Namespace":
        data = bytes(data)
        if len(data) != NS_SIZE:
            raise InvalidNamespaceSizeError()
        return cls.new(data[0], data[1:])

    @classmethod
    def new(cls, version: int, id: bytes) -> "Namespace":
        if version == 0:
            return cls.new_v0(id)
        if version == 255:
            return cls._try_max(id)
        raise UnsupportedNamespaceVersionError(version)

    @classmethod
    def new_v0(cls, id: bytes) -> "Namespace":
        id = bytes(id)
        if len(id) == NS_ID_SIZE:
            cut = NS_ID_SIZE - NS_ID_V0_SIZE
            prefix, id = id[:cut], id[cut:]
        elif len(id) <= NS_ID_V0_SIZE:
            prefix = b""
        else:
            raise InvalidNamespaceSizeError()
        if any(prefix):
            raise InvalidNamespaceV0Error()
        return cls(id.rjust(NS_SIZE, b"\x00"))

    @classmethod
    def const_v0(cls, id: bytes) -> "Namespace":
        id = bytes(id)
        if len(id) != NS_ID_V0_SIZE:
            raise InvalidNamespaceSizeError()
        return cls(id.rjust(NS_SIZE, b"\x00"))

    @classmethod
    def _try_max(cls, id: bytes) -> "Namespace":
        if all(byte == 0xFF for byte in bytes(id)):
            return cls.MAX
        raise UnsupportedNamespaceVersionError(255)

    def version(self) -> int:
        return self.raw[0]

    def id(self) -> bytes:
        return self.raw[1:]

    def id_v0(self) -> Optional[bytes]:
        if self.version() == 0:
            return self.raw[NS_SIZE - NS_ID_V0_SIZE:]
        return None

    def to_base64(self) -> str:
        return _b64encode(self.raw)

    @classmethod
    def from_base64(cls, text: str) -> "Namespace":
        return cls.from_raw(_b64decode(text))

    def __bytes__(self) -> bytes:
        return self.raw


Namespace.MAX = Namespace(_MAX_NS)


def _namespace_bytes(namespace: Union[Namespace, bytes]) -> bytes:
    if isinstance(namespace, Namespace):
        return namespace.raw
    if not isinstance(namespace, (bytes, bytearray, memoryview)):
        raise TypeError(f"expected a namespace, got {type(namespace).__name__}")
    raw = bytes(namespace)
    if len(raw) != NS_SIZE:
        raise InvalidNamespaceSizeError()
    return raw


@dataclass(frozen=True)
class NamespacedHash:
    """A node of the namespaced merkle tree: namespace range plus SHA-256 digest."""

    min_namespace: bytes
    max_namespace: bytes
    hash: bytes
    SIZE: ClassVar[int] = NAMESPACED_HASH_SIZE

    def __post_init__(self) -> None:
        min_ns = bytes(self.min_namespace)
        max_ns = bytes(self.max_namespace)
        digest = bytes(self.hash)
        if len(min_ns) != NS_SIZE or len(max_ns) != NS_SIZE or len(digest) != HASH_SIZE:
            raise InvalidNamespacedHashError()
        object.__setattr__(self, "min_namespace", min_ns)
        object.__setattr__(self, "max_namespace", max_ns)
        object.__setattr__(self, "hash", digest)

    @classmethod
    def from_raw(cls, data: bytes) -> "NamespacedHash":
        data = bytes(data)
        if len(data) != NAMESPACED_HASH_SIZE:
            raise InvalidNamespacedHashError(
                f"Invalid namespaced hash size: {len(data)}"
            )
        return cls(data[:NS_SIZE], data[NS_SIZE:2 * NS_SIZE], data[2 * NS_SIZE:])

    @classmethod
    def empty_root(cls) -> "NamespacedHash":
        return cls(_ZERO_NS, _ZERO_NS, default_sha256())

    def to_bytes(self) -> bytes:
        return self.min_namespace + self.max_namespace + self.hash

    def __bytes__(self) -> bytes:
        return self.to_bytes()


@dataclass(frozen=True)
class NamespacedSha2Hasher:
    """SHA-256 hasher for namespaced leaves and inner nodes."""

    ignore_max_ns: bool = True

    def hash_leaf(self, data: bytes, namespace: Union[Namespace, bytes]) -> NamespacedHash:
        ns = _namespace_bytes(namespace)
        digest = hashlib.sha256(_LEAF_DOMAIN_SEPARATOR + ns + bytes(data)).digest()
        return NamespacedHash(ns, ns, digest)

    def hash_nodes(self, left: NamespacedHash, right: NamespacedHash) -> NamespacedHash:
        if left.max_namespace > right.min_namespace:
            raise NmtError(
                "Invalid nodes: left max namespace must be <= right min namespace"
            )
        min_ns = min(left.min_namespace, right.min_namespace)
        if self.ignore_max_ns and left.min_namespace == _MAX_NS:
            max_ns = _MAX_NS
        elif self.ignore_max_ns and right.min_namespace == _MAX_NS:
            max_ns = left.max_namespace
        else:
            max_ns = max(left.max_namespace, right.max_namespace)
        digest = hashlib.sha256(
            _INTERNAL_NODE_DOMAIN_SEPARATOR + left.to_bytes() + right.to_bytes()
        ).digest()
        return NamespacedHash(min_ns, max_ns, digest)


class NamespaceMerkleTree:
    """An in-memory namespaced merkle tree built by appending leaves."""

    def __init__(self, hasher: Optional[NamespacedSha2Hasher] = None) -> None:
        self.hasher = hasher if hasher is not None else NamespacedSha2Hasher()
        self._leaves: list[NamespacedHash] = []

    def __len__(self) -> int:
        return len(self._leaves)

    def push_leaf(self, data: bytes, namespace: Union[Namespace, bytes]) -> None:
        """Append a leaf; namespaces must be pushed in ascending order."""
        ns = _namespace_bytes(namespace)
        if self._leaves and ns < self._leaves[-1].max_namespace:
            raise NmtError("Leaves' namespaces should be inserted in ascending order")
        self._leaves.append(self.hasher.hash_leaf(data, ns))

    def root(self) -> NamespacedHash:
        return self._subtree_root(self._leaves)

    def _subtree_root(self, leaves: Sequence[NamespacedHash]) -> NamespacedHash:
        if not leaves:
            return NamespacedHash.empty_root()
        if len(leaves) == 1:
            return leaves[0]
        split = _split_point(len(leaves))
        return self.hasher.hash_nodes(
            self._subtree_root(leaves[:split]), self._subtree_root(leaves[split:])
        )


def _int_field(data: dict, key: str) -> int:
    value = data.get(key, 0)
    if isinstance(value, str) and value.isdigit():
        value = int(value)
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise DecodeError(f"invalid {key}: {value!r}")
    return value


@dataclass
class NamespaceProof:
    """Proof of presence (or, with a leaf, of absence) of a namespace range."""

    siblings: list[NamespacedHash] = field(default_factory=list)
    start: int = 0
    end: int = 0
    ignore_max_ns: bool = False
    leaf: Optional[NamespacedHash] = None

    def is_of_absence(self) -> bool:
        return self.leaf is not None

    def verify_range(
        self,
        root: NamespacedHash,
        leaves: Iterable[bytes],
        namespace: Union[Namespace, bytes],
    ) -> None:
        """Raise RangeProofError unless leaves occupy the proven range under root."""
        if self.is_of_absence():
            raise RangeProofError("Cannot prove that a partial namespace is absent")
        if self.start < 0 or self.end < self.start:
            raise RangeProofError("Malformed proof range")
        raw_leaves = [bytes(leaf) for leaf in leaves]
        if len(raw_leaves) != self.end - self.start:
            raise RangeProofError("Wrong amount of leaves provided")

        hasher = NamespacedSha2Hasher(self.ignore_max_ns)
        leaf_hashes = [hasher.hash_leaf(data, namespace) for data in raw_leaves]

        if not leaf_hashes:
            if root == NamespacedHash.empty_root() and not self.siblings:
                return
            raise RangeProofError("No leaves provided")
        if len(leaf_hashes) == 1 and not self.siblings:
            if leaf_hashes[0] == root and self.start == 0:
                return
            raise RangeProofError("Tree does not contain leaf")

        try:
            computed = self._compute_root(hasher, leaf_hashes)
        except NmtError as exc:
            raise RangeProofError(exc.reason) from exc
        if computed != root:
            raise RangeProofError("Invalid root")

    def _compute_root(
        self, hasher: NamespacedSha2Hasher, leaf_hashes: list[NamespacedHash]
    ) -> NamespacedHash:
        leaves = deque(leaf_hashes)
        nodes = deque(self.siblings)
        start, end = self.start, self.end

        def pop(queue: deque) -> Optional[NamespacedHash]:
            return queue.popleft() if queue else None

        def compute(lo: int, hi: int) -> Optional[NamespacedHash]:
            if hi - lo == 1:
                return pop(leaves) if start <= lo < end else pop(nodes)
            if hi <= start or lo >= end:
                return pop(nodes)
            split = _split_point(hi - lo)
            left = compute(lo, lo + split)
            right = compute(lo + split, hi)
            if left is None:
                raise RangeProofError("Malformed proof: missing left subtree")
            if right is None:
                return left
            return hasher.hash_nodes(left, right)

        computed = compute(0, max(_split_point(end) * 2, 1))
        if computed is None:
            raise RangeProofError("Malformed proof")
        for node in nodes:
            computed = hasher.hash_nodes(computed, node)
        return computed

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "NamespaceProof":
        if not isinstance(data, dict):
            raise DecodeError(f"expected an object, got {data!r}")
        start = _int_field(data, "start")
        end = _int_field(data, "end")
        nodes = data.get("nodes") or []
        if not isinstance(nodes, list):
            raise DecodeError("nodes must be a list")
        siblings = [NamespacedHash.from_raw(_b64decode(node)) for node in nodes]
        leaf_text = data.get("leaf_hash")
        leaf_bytes = _b64decode(leaf_text) if leaf_text is not None else b""
        leaf = NamespacedHash.from_raw(leaf_bytes) if leaf_bytes else None
        ignored = data.get("is_max_namespace_ignored", False)
        if ignored is None:
            ignored = False
        if not isinstance(ignored, bool):
            raise DecodeError(f"invalid is_max_namespace_ignored: {ignored!r}")
        return cls(siblings, start, end, ignored, leaf)

    def to_dict(self) -> dict[str, Any]:
        return {
            "start": self.start,
            "end": self.end,
            "nodes": [_b64encode(node.to_bytes()) for node in self.siblings],
            "leaf_hash": _b64encode(self.leaf.to_bytes()) if self.leaf else "",
            "is_max_namespace_ignored": self.ignore_max_ns,
        }