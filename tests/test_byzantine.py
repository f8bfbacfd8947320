from dataclasses import dataclass

import pytest

from celestia_types.byzantine import (
    BadEncodingFraudProof,
    NmtLeaf,
    ShareWithProof,
    encode_fraud_proof,
    parse_fraud_proof,
)
from celestia_types.consts import NS_SIZE, SHARE_SIZE
from celestia_types.data_availability_header import DataAvailabilityHeader
from celestia_types.errors import (
    DecodeError,
    InvalidAxisError,
    InvalidNmtLeafSizeError,
    MissingFieldError,
    RangeProofError,
    UnsupportedFraudProofTypeError,
    ValidationError,
    WrongProofTypeError,
)
from celestia_types.fraud_proof import RawFraudProof
from celestia_types.nmt import (
    Namespace,
    NamespacedHash,
    NamespacedSha2Hasher,
    NamespaceMerkleTree,
    NamespaceProof,
)
from celestia_types.rsmt2d import Axis
from celestia_types.share import Share

NS = Namespace.const_v0(bytes(range(1, 11)))
HEIGHT = 7


@dataclass
class _Header:
    block_height: int
    dah: DataAvailabilityHeader

    def height(self):
        return self.block_height


def _share(fill):
    return Share.from_raw(NS.raw + bytes([fill]) * (SHARE_SIZE - NS_SIZE))


def _row(first, second):
    shares = [_share(first), _share(second)]
    tree = NamespaceMerkleTree(NamespacedSha2Hasher(ignore_max_ns=True))
    for share in shares:
        tree.push_leaf(share.to_bytes(), NS)
    hasher = NamespacedSha2Hasher(True)
    leaf_hashes = [hasher.hash_leaf(share.to_bytes(), NS) for share in shares]
    proofs = [
        NamespaceProof([leaf_hashes[1]], 0, 1, True),
        NamespaceProof([leaf_hashes[0]], 1, 2, True),
    ]
    with_proofs = [
        ShareWithProof(NmtLeaf(NS, share), proof) for share, proof in zip(shares, proofs)
    ]
    return tree.root(), with_proofs


def honest_befp():
    root0, shares0 = _row(1, 2)
    root1, _ = _row(3, 4)
    dah = DataAvailabilityHeader([root0, root1], [root0, root1])
    proof = BadEncodingFraudProof(b"\xab" * 32, HEIGHT, shares0, 0, Axis.ROW)
    return proof, _Header(HEIGHT, dah)


def test_validate_honest_befp():
    proof, header = honest_befp()
    proof.validate(header)
    assert proof.height() == HEIGHT
    assert proof.header_hash() == b"\xab" * 32


def test_validate_befp_wrong_height():
    proof, header = honest_befp()
    header.block_height = 999
    with pytest.raises(ValidationError):
        proof.validate(header)


def test_validate_befp_wrong_roots_square():
    proof, header = honest_befp()
    header.dah.row_roots = []
    with pytest.raises(ValidationError):
        proof.validate(header)


def test_validate_befp_wrong_index():
    proof, header = honest_befp()
    proof.index = 999
    with pytest.raises(ValidationError):
        proof.validate(header)


def test_validate_befp_wrong_shares():
    proof, header = honest_befp()
    proof.shares = []
    with pytest.raises(ValidationError):
        proof.validate(header)


def test_validate_befp_tampered_share():
    proof, header = honest_befp()
    proof.shares[0] = ShareWithProof(NmtLeaf(NS, _share(9)), proof.shares[0].proof)
    with pytest.raises(RangeProofError):
        proof.validate(header)


def test_validate_befp_column_axis():
    proof, header = honest_befp()
    other_root, _ = _row(5, 6)
    header.dah.column_roots = [other_root, header.dah.row_roots[0]]
    proof.axis = Axis.COL
    proof.index = 1
    proof.validate(header)
    proof.index = 0
    with pytest.raises(RangeProofError):
        proof.validate(header)


def test_protobuf_round_trip():
    proof, _ = honest_befp()
    proof.axis = Axis.COL
    proof.index = 1
    decoded = BadEncodingFraudProof.from_protobuf(proof.to_protobuf())
    assert decoded == proof


def test_raw_fraud_proof_round_trip():
    proof, header = honest_befp()
    raw = encode_fraud_proof(proof)
    assert raw.proof_type == "badencoding"
    parsed = parse_fraud_proof(RawFraudProof.from_dict(raw.to_dict()))
    assert parsed == proof
    parsed.validate(header)


def test_parse_fraud_proof_from_dict():
    proof, _ = honest_befp()
    assert parse_fraud_proof(encode_fraud_proof(proof).to_dict()) == proof


def test_unsupported_fraud_proof_type():
    with pytest.raises(UnsupportedFraudProofTypeError):
        parse_fraud_proof(RawFraudProof("unknown", b""))


def test_nmt_leaf_round_trip():
    leaf = NmtLeaf(NS, _share(3))
    assert NmtLeaf.from_bytes(leaf.to_bytes()) == leaf


@pytest.mark.parametrize("size", [0, SHARE_SIZE, SHARE_SIZE + NS_SIZE + 1])
def test_nmt_leaf_wrong_size(size):
    with pytest.raises(InvalidNmtLeafSizeError):
        NmtLeaf.from_bytes(bytes(size))


def test_absence_proof_rejected():
    proof, _ = honest_befp()
    first = proof.shares[0]
    absence = NamespaceProof(first.proof.siblings, 0, 1, True, NamespacedHash.empty_root())
    proof.shares[0] = ShareWithProof(first.leaf, absence)
    with pytest.raises(WrongProofTypeError):
        BadEncodingFraudProof.from_protobuf(proof.to_protobuf())


def test_missing_proof_rejected():
    data = b"\x1a\xa0\x04" + b"\x0a\x9d\x04" + bytes(SHARE_SIZE + NS_SIZE)
    with pytest.raises(MissingFieldError):
        BadEncodingFraudProof.from_protobuf(data)


def test_invalid_axis_rejected():
    with pytest.raises(InvalidAxisError):
        BadEncodingFraudProof.from_protobuf(b"\x28\x05")


def test_invalid_header_hash_rejected():
    with pytest.raises(DecodeError):
        BadEncodingFraudProof.from_protobuf(b"\x0a\x03abc")


def test_truncated_protobuf_rejected():
    proof, _ = honest_befp()
    with pytest.raises(DecodeError):
        BadEncodingFraudProof.from_protobuf(proof.to_protobuf()[:-5])