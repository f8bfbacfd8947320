import base64

import pytest

from celestia_types.blob import Blob, RawBlob, SubmitOptions
from celestia_types.commitment import Commitment
from celestia_types.consts import NAMESPACE_SIZE, SHARE_SIZE
from celestia_types.errors import (
    DecodeError,
    UnsupportedNamespaceVersionError,
    UnsupportedShareVersionError,
    ValidationError,
)

SAMPLE = {
    "namespace": "AAAAAAAAAAAAAAAAAAAAAAAAAAAADCBNOWAP3dM=",
    "data": "8fIMqAB+kQo7+LLmHaDya8oH73hxem6lQWX1",
    "share_version": 0,
    "commitment": "D6YGsPWdxR8ju2OcOspnkgPG2abD30pSHxsFdiPqnVk=",
}


def sample_blob() -> Blob:
    return Blob.from_dict(dict(SAMPLE))


def test_create_from_raw():
    expected = sample_blob()
    raw = expected.to_raw()
    assert Blob.from_raw(raw) == expected


def test_validate_blob():
    blob = sample_blob()
    blob.validate()
    assert blob.commitment.to_base64() == SAMPLE["commitment"]


def test_validate_blob_commitment_mismatch():
    blob = sample_blob()
    blob.commitment = Commitment(bytes([7] * 32))
    with pytest.raises(ValidationError):
        blob.validate()


def test_new_computes_sample_commitment():
    sample = sample_blob()
    blob = Blob.new(sample.namespace, sample.data)
    assert blob.commitment == sample.commitment
    assert blob.share_version == 0


def test_dict_round_trip():
    assert sample_blob().to_dict() == SAMPLE


def test_to_shares():
    blob = sample_blob()
    shares = blob.to_shares()
    assert len(shares) == 1
    share = shares[0]
    assert len(share) == SHARE_SIZE
    assert share[:NAMESPACE_SIZE] == blob.namespace.raw
    assert share[NAMESPACE_SIZE] == 1
    assert share[NAMESPACE_SIZE + 1:NAMESPACE_SIZE + 5] == len(blob.data).to_bytes(4, "big")
    payload_start = NAMESPACE_SIZE + 5
    assert share[payload_start:payload_start + len(blob.data)] == blob.data
    assert share[payload_start + len(blob.data):] == bytes(
        SHARE_SIZE - payload_start - len(blob.data)
    )


def test_raw_fields():
    raw = sample_blob().to_raw()
    assert raw.namespace_version == 0
    assert raw.share_version == 0
    assert len(raw.namespace_id) == 28
    assert raw.data == base64.b64decode(SAMPLE["data"])


def test_from_raw_unsupported_share_version():
    raw = sample_blob().to_raw()
    raw.share_version = 1
    with pytest.raises(UnsupportedShareVersionError):
        Blob.from_raw(raw)


def test_from_raw_unsupported_namespace_version():
    raw = RawBlob(bytes(28), 254, b"data", 0)
    with pytest.raises(UnsupportedNamespaceVersionError):
        Blob.from_raw(raw)


def test_from_dict_missing_field():
    data = dict(SAMPLE)
    del data["commitment"]
    with pytest.raises(DecodeError):
        Blob.from_dict(data)


def test_submit_options_none_fee_is_negative_one():
    assert SubmitOptions().to_dict() == {"Fee": -1, "GasLimit": None}


def test_submit_options_round_trip():
    options = SubmitOptions(fee=2000, gas_limit=100000)
    assert options.to_dict() == {"Fee": 2000, "GasLimit": 100000}
    assert SubmitOptions.from_dict(options.to_dict()) == options


def test_submit_options_negative_fee_is_none():
    options = SubmitOptions.from_dict({"Fee": -5, "GasLimit": None})
    assert options == SubmitOptions(None, None)


def test_submit_options_missing_fee():
    with pytest.raises(DecodeError):
        SubmitOptions.from_dict({"GasLimit": 10})