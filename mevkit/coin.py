"""Coin records and helpers for choosing and formatting coins."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal

SUI_COIN_TYPE = "0x2::sui::SUI"
MIST_PER_SUI = 1_000_000_000


class CoinNotFoundError(LookupError):
    """Raised when no coin satisfies the requested minimum balance."""


@dataclass(frozen=True)
class Coin:
    coin_type: str
    coin_object_id: str
    version: int
    digest: str
    balance: int
    previous_transaction: str = ""

    def object_ref(self) -> tuple[str, int, str]:
        """Return the (object id, version, digest) reference of the coin."""
        return (self.coin_object_id, self.version, self.digest)


def is_native_coin(coin_type: str) -> bool:
    return coin_type == SUI_COIN_TYPE


def _format_float(value: float) -> str:
    # Shortest round-tripping digits, never in exponent form.
    text = format(Decimal(repr(value)), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    return text


def format_sui_with_symbol(value: int) -> str:
    return f"{_format_float(value / float(MIST_PER_SUI))} SUI"


def filter_coins(coins: Iterable[Coin], min_balance: int) -> list[Coin]:
    return [coin for coin in coins if coin.balance >= min_balance]


def pick_coin(coins: Iterable[Coin], min_balance: int) -> Coin:
    for coin in filter_coins(coins, min_balance):
        return coin
    raise CoinNotFoundError(f"No coins with balance >= {min_balance}")


def gas_coin_refs(coins: Iterable[Coin], exclude: str | None = None) -> list[tuple[str, int, str]]:
    return [coin.object_ref() for coin in coins if exclude is None or coin.coin_object_id != exclude]