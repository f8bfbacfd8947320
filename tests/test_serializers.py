import json

import pytest
from hypothesis import given
from hypothesis import strategies as st

from celestia_types.errors import DecodeError
from celestia_types.serializers import option_from_negative_one, option_to_negative_one


def test_serialize_none_as_negative_one():
    assert json.dumps(option_to_negative_one(None)) == "-1"


@given(st.integers(min_value=-(2**63), max_value=-1))
def test_deserialize_negative(x):
    assert option_from_negative_one(json.loads(str(x))) is None


@given(st.none() | st.integers(min_value=0, max_value=2**64 - 1))
def test_serialize_deserialize(x):
    serialized = json.dumps(option_to_negative_one(x))
    assert option_from_negative_one(json.loads(serialized)) == x


def test_deserialize_null():
    assert option_from_negative_one(None) is None


def test_deserialize_too_large():
    with pytest.raises(DecodeError):
        option_from_negative_one(2**64)


def test_deserialize_not_integer():
    with pytest.raises(DecodeError):
        option_from_negative_one("1")