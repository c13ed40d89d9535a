import pytest

from mevkit.coin import (
    Coin,
    CoinNotFoundError,
    filter_coins,
    format_sui_with_symbol,
    gas_coin_refs,
    is_native_coin,
    pick_coin,
)


def _coin(object_id, balance, coin_type="0x2::sui::SUI"):
    return Coin(coin_type=coin_type, coin_object_id=object_id, version=7, digest="D" + object_id, balance=balance)


def test_is_native_coin():
    assert is_native_coin("0x2::sui::SUI") is True
    assert is_native_coin("0x2::sui::sui") is False
    assert is_native_coin("0xdee::usdc::USDC") is False


def test_format_whole_sui_has_no_fraction():
    assert format_sui_with_symbol(1_000_000_000) == "1 SUI"


def test_format_one_mist_is_not_exponential():
    assert format_sui_with_symbol(1) == "0.000000001 SUI"


def test_format_zero():
    assert format_sui_with_symbol(0) == "0 SUI"


@pytest.mark.parametrize("mist", [1, 12, 1_500_000_000, 123_456_789_012, 2**63])
def test_format_round_trips(mist):
    text = format_sui_with_symbol(mist)
    number, symbol = text.split(" ")
    assert symbol == "SUI"
    assert "e" not in number.lower()
    assert float(number) == mist / 1e9


def test_object_ref():
    coin = _coin("0x1", 5)
    assert coin.object_ref() == ("0x1", 7, "D0x1")


def test_filter_keeps_order_and_threshold():
    coins = [_coin("0x1", 5), _coin("0x2", 10), _coin("0x3", 20)]
    assert [c.coin_object_id for c in filter_coins(coins, 10)] == ["0x2", "0x3"]
    assert filter_coins(coins, 0) == coins


def test_pick_coin_returns_first_match():
    coins = [_coin("0x1", 5), _coin("0x2", 10), _coin("0x3", 20)]
    assert pick_coin(coins, 6).coin_object_id == "0x2"


def test_pick_coin_raises_when_none_match():
    with pytest.raises(CoinNotFoundError, match="No coins with balance >= 100"):
        pick_coin([_coin("0x1", 5)], 100)


def test_gas_coin_refs_excludes_coin():
    coins = [_coin("0x1", 5), _coin("0x2", 10)]
    assert gas_coin_refs(coins, "0x1") == [coins[1].object_ref()]
    assert gas_coin_refs(coins) == [c.object_ref() for c in coins]