import json

import pytest

from celestia_types.balance import Balance, validate_denom
from celestia_types.errors import InvalidBalanceAmountError, InvalidBalanceDenominationError


def test_deserialize_balance():
    balance = Balance.from_dict(json.loads('{"denom":"abcd","amount":"1234"}'))
    assert balance.denom == "abcd"
    assert balance.amount == 1234


def test_deserialize_invalid_denom():
    with pytest.raises(InvalidBalanceDenominationError):
        Balance.from_dict(json.loads('{"denom":"0asdadas","amount":"1234"}'))


def test_deserialize_invalid_amount():
    with pytest.raises(InvalidBalanceAmountError):
        Balance.from_dict(json.loads('{"denom":"abcd","amount":"a1234"}'))


def test_serialize_balance():
    balance = Balance("abcd", 1234)
    s = json.dumps(balance.to_dict(), separators=(",", ":"))
    assert s == '{"denom":"abcd","amount":"1234"}'


def test_serialize_invalid_balance():
    with pytest.raises(InvalidBalanceDenominationError):
        Balance("0sdfsfs", 1234).to_dict()


@pytest.mark.parametrize("denom", ["abc", "a01", "A01", "z01", "Z01", "aAzZ09/:._-"])
def test_valid_denom(denom):
    validate_denom(denom)
    assert Balance(denom, 1).to_dict()["denom"] == denom


def test_small_denom():
    with pytest.raises(InvalidBalanceDenominationError):
        validate_denom("aa")
    assert Balance("aaa", 0).to_dict()["denom"] == "aaa"


def test_large_denom():
    assert Balance("a" * 128, 0).to_dict()["denom"] == "a" * 128
    with pytest.raises(InvalidBalanceDenominationError):
        validate_denom("a" * 129)


@pytest.mark.parametrize("denom", ["0bc", "_bc", "abc$"])
def test_invalid_denoms(denom):
    with pytest.raises(InvalidBalanceDenominationError) as info:
        validate_denom(denom)
    assert info.value.denom == denom


def test_amount_too_large():
    with pytest.raises(InvalidBalanceAmountError):
        Balance.from_dict({"denom": "abcd", "amount": str(2**256)})


def test_round_trip_large_amount():
    balance = Balance("utia", 2**256 - 1)
    assert Balance.from_dict(balance.to_dict()) == balance