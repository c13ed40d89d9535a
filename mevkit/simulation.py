"""Simulation context, results and the simulator interface."""

from __future__ import annotations

import time
from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any


@dataclass
class SimEpoch:
    epoch_id: int = 0
    epoch_start_timestamp: int = 0
    epoch_duration_ms: int = 0
    gas_price: int = 0

    @classmethod
    def from_system_state(cls, summary: Mapping[str, Any]) -> "SimEpoch":
        """Build from a system state summary mapping."""
        return cls(
            epoch_id=int(summary["epoch"]),
            epoch_start_timestamp=int(summary["epoch_start_timestamp_ms"]),
            epoch_duration_ms=int(summary["epoch_duration_ms"]),
            gas_price=int(summary["reference_gas_price"]),
        )

    def is_stale(self) -> bool:
        """True while the current time is before the end of the epoch."""
        now_ms = time.time_ns() // 1_000_000
        return now_ms < self.epoch_start_timestamp + self.epoch_duration_ms


@dataclass
class SimulateCtx:
    epoch: SimEpoch = field(default_factory=SimEpoch)
    override_objects: list[Any] = field(default_factory=list)
    # (coin, amount): a coin assumed to be held (flash-loaned) during execution
    borrowed_coin: tuple[Any, int] | None = None

    def with_borrowed_coin(self, borrowed_coin: tuple[Any, int]) -> None:
        self.borrowed_coin = borrowed_coin

    def with_gas_price(self, gas_price: int) -> None:
        self.epoch.gas_price = gas_price


@dataclass
class SimulateResult:
    effects: Any
    events: Any
    object_changes: list[Any] = field(default_factory=list)
    balance_changes: list[Any] = field(default_factory=list)
    cache_misses: int = 0


class Simulator(ABC):
    """Something that can dry-run a transaction and look up objects."""

    @abstractmethod
    async def simulate(self, tx: Any, ctx: SimulateCtx) -> SimulateResult:
        """Execute the transaction against the given context."""

    @abstractmethod
    async def get_object(self, obj_id: str) -> Any | None:
        """Return the latest object with this id, or None."""

    @abstractmethod
    def name(self) -> str:
        """Return the simulator's name."""

    def get_object_layout(self, obj_id: str) -> Any | None:
        return None