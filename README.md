# celestia_types

Data types and validation rules for Celestia data: namespaces, shares,
blobs and their share commitments, the namespaced merkle tree and its
proofs, data availability headers, block headers and commits, validator
sets, extended headers, bad encoding fraud proofs and balances.

Every error the package raises is a subclass of
`celestia_types.errors.Error`; consistency checks raise `ValidationError`
and checks against trusted data raise `VerificationError`.

## Installation

```
pip install celestia_types
```

To run the test suite, install the test extra and run pytest:

```
pip install "celestia_types[test]"
pytest
```

## Namespaces and the namespaced merkle tree

```python
from celestia_types.nmt import Namespace, NamespaceMerkleTree

ns = Namespace.new_v0(bytes([1, 2, 3, 4, 5, 6, 7, 8]))
ns.version()        # 0
ns.id_v0()          # the last 10 bytes of the namespace
ns.to_base64()      # the 29 raw bytes, base64 encoded

tree = NamespaceMerkleTree()
tree.push_leaf(b"leaf data", ns)
tree.root()         # a NamespacedHash
```

Invalid input raises, for example, `InvalidNamespaceSizeError`,
`InvalidNamespaceV0Error` or `UnsupportedNamespaceVersionError`.
`NamespaceProof.from_dict` reads a proof in its JSON form and
`verify_range(root, leaves, namespace)` raises `RangeProofError` when the
leaves are not proven under the root.

## Blobs and share commitments

```python
from celestia_types.blob import Blob
from celestia_types.nmt import Namespace

blob = Blob.new(Namespace.new_v0(b"\x01" * 10), b"hello world")
blob.commitment.to_base64()   # share commitment
blob.to_shares()              # list of 512-byte sparse shares
blob.validate()               # raises ValidationError on a mismatch
```

`Commitment.from_blob` and `Commitment.from_shares` compute commitments
directly; `split_blob_to_shares` and `merkle_mountain_range_sizes` in
`celestia_types.commitment` expose the share layout rules.
`SubmitOptions` holds the fee and gas limit of a submission, with a fee of
`None` written as `-1`.

## Shares

`Share.from_raw` checks a 512-byte share and the namespace it starts with.
`NamespacedShares.from_dict` reads the rows returned when shares are
requested by namespace, each row a `NamespacedRow` of shares and a proof.

## Headers

`ExtendedHeader.from_dict` reads the JSON form of an extended header, and
`ExtendedHeader.decode_and_validate` parses JSON text or bytes and then
validates the result. `validate()` checks a header for internal
consistency, including the commit signatures of its validator set, and
`verify()`, `verify_range()` and `verify_adjacent_range()` check untrusted
headers against a trusted one. Block headers, commits and validator sets
are available on their own in `celestia_types.block` and
`celestia_types.validator_set`.

## Fraud proofs

```python
from celestia_types.byzantine import parse_fraud_proof, encode_fraud_proof

proof = parse_fraud_proof({"proof_type": "badencoding", "data": "..."})
proof.validate(extended_header)
encode_fraud_proof(proof).to_dict()
```

`parse_fraud_proof` accepts a `RawFraudProof` or its dictionary form and
returns a `BadEncodingFraudProof`; any other proof type raises
`UnsupportedFraudProofTypeError`.

## Balances

```python
from celestia_types.balance import Balance

Balance.from_dict({"denom": "utia", "amount": "1234"}).amount   # 1234
```

## What the package does not do

- It is a library only: it has no command, no network client and no
  storage.
- `BadEncodingFraudProof.validate` checks heights, sizes and the merkle
  proof of every share, but does not re-run erasure coding over the row or
  column, so a proof built from correctly proven but fake shares is not
  caught.
- Extended headers are read from their JSON form; there is no protobuf
  decoding of extended headers.
- Account, validator and consensus addresses in bech32 form are not
  provided; only the prefixes are listed in `celestia_types.consts`.