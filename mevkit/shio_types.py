"""Items received from the Shio auction feed and their JSON decoding."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, TypeVar

_U64_LIMIT = 2**64

T = TypeVar("T")


class ShioParseError(ValueError):
    """Raised when a JSON value does not have the expected shape."""


def _as_mapping(data: Any, what: str) -> dict:
    if not isinstance(data, dict):
        raise ShioParseError(f"{what}: expected a JSON object, got {type(data).__name__}")
    return data


def _required(data: dict, key: str) -> Any:
    try:
        return data[key]
    except KeyError:
        raise ShioParseError(f"missing field `{key}`") from None


def _string(data: dict, key: str) -> str:
    value = _required(data, key)
    if not isinstance(value, str):
        raise ShioParseError(f"field `{key}`: expected a string")
    return value


def _u64(data: dict, key: str) -> int:
    value = _required(data, key)
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value < _U64_LIMIT:
        raise ShioParseError(f"field `{key}`: expected an unsigned 64-bit integer")
    return value


def _boolean(data: dict, key: str) -> bool:
    value = _required(data, key)
    if not isinstance(value, bool):
        raise ShioParseError(f"field `{key}`: expected a boolean")
    return value


def _list_of(data: dict, key: str, parse: Callable[[Any], T]) -> list[T]:
    if key not in data:
        return []
    value = data[key]
    if not isinstance(value, list):
        raise ShioParseError(f"field `{key}`: expected an array")
    return [parse(entry) for entry in value]


@dataclass
class ShioEventId:
    event_seq: str
    tx_digest: str

    @classmethod
    def from_json(cls, data: Any) -> "ShioEventId":
        data = _as_mapping(data, "event id")
        return cls(event_seq=_string(data, "eventSeq"), tx_digest=_string(data, "txDigest"))


@dataclass
class ShioEvent:
    event_type: str
    bcs: str  # base64 encoded
    event_id: ShioEventId
    package_id: str
    sender: str
    transaction_module: str
    parsed_json: Any = None

    @classmethod
    def from_json(cls, data: Any) -> "ShioEvent":
        data = _as_mapping(data, "event")
        return cls(
            event_type=_string(data, "type"),
            bcs=_string(data, "bcs"),
            event_id=ShioEventId.from_json(_required(data, "id")),
            package_id=_string(data, "packageId"),
            sender=_string(data, "sender"),
            transaction_module=_string(data, "transactionModule"),
            parsed_json=data.get("parsedJson"),
        )


@dataclass
class ShioObjectContent:
    data_type: str
    has_public_transfer: bool

    @classmethod
    def from_json(cls, data: Any) -> "ShioObjectContent":
        data = _as_mapping(data, "object content")
        return cls(
            data_type=_string(data, "dataType"),
            has_public_transfer=_boolean(data, "hasPublicTransfer"),
        )


@dataclass
class ShioObject:
    id: str
    object_type: str
    owner: Any
    content: ShioObjectContent
    object_bcs: str  # base64 encoded

    @classmethod
    def from_json(cls, data: Any) -> "ShioObject":
        data = _as_mapping(data, "object")
        return cls(
            id=_string(data, "id"),
            object_type=_string(data, "objectType"),
            owner=_required(data, "owner"),
            content=ShioObjectContent.from_json(_required(data, "content")),
            object_bcs=_string(data, "objectBcs"),
        )

    def data_type(self) -> str:
        return self.content.data_type

    def has_public_transfer(self) -> bool:
        return self.content.has_public_transfer


@dataclass
class SideEffects:
    gas_usage: int
    created_objects: list[ShioObject] = field(default_factory=list)
    mutated_objects: list[ShioObject] = field(default_factory=list)
    events: list[ShioEvent] = field(default_factory=list)

    @classmethod
    def from_json(cls, data: Any) -> "SideEffects":
        data = _as_mapping(data, "side effects")
        return cls(
            gas_usage=_u64(data, "gasUsage"),
            created_objects=_list_of(data, "createdObjects", ShioObject.from_json),
            mutated_objects=_list_of(data, "mutatedObjects", ShioObject.from_json),
            events=_list_of(data, "events", ShioEvent.from_json),
        )


class ShioItem:
    """One message from the feed; see the concrete subclasses."""

    TYPE_NAME = "dummy"

    def tx_digest(self) -> str:
        return self.TYPE_NAME

    def gas_price(self) -> int:
        return 0

    def deadline_timestamp_ms(self) -> int:
        return 0

    def events(self) -> list[ShioEvent]:
        return []

    def created_mutated_objects(self) -> list[ShioObject]:
        return []

    def type_name(self) -> str:
        return self.TYPE_NAME


@dataclass
class AuctionStarted(ShioItem):
    digest: str
    price: int
    deadline_ms: int
    side_effects: SideEffects

    TYPE_NAME = "auctionStarted"

    @classmethod
    def _from_json(cls, data: Any) -> "AuctionStarted":
        data = _as_mapping(data, "auctionStarted")
        return cls(
            digest=_string(data, "txDigest"),
            price=_u64(data, "gasPrice"),
            deadline_ms=_u64(data, "deadlineTimestampMs"),
            side_effects=SideEffects.from_json(_required(data, "sideEffects")),
        )

    def tx_digest(self) -> str:
        return self.digest

    def gas_price(self) -> int:
        return self.price

    def deadline_timestamp_ms(self) -> int:
        return self.deadline_ms

    def events(self) -> list[ShioEvent]:
        return list(self.side_effects.events)

    def created_mutated_objects(self) -> list[ShioObject]:
        return [*self.side_effects.created_objects, *self.side_effects.mutated_objects]


@dataclass
class AuctionEnded(ShioItem):
    digest: str
    winning_bid_amount: int

    TYPE_NAME = "auctionEnded"

    @classmethod
    def _from_json(cls, data: Any) -> "AuctionEnded":
        data = _as_mapping(data, "auctionEnded")
        return cls(digest=_string(data, "txDigest"), winning_bid_amount=_u64(data, "winningBidAmount"))


@dataclass
class Dummy(ShioItem):
    value: Any

    TYPE_NAME = "dummy"


_VARIANTS: dict[str, Callable[[Any], ShioItem]] = {
    AuctionStarted.TYPE_NAME: AuctionStarted._from_json,
    AuctionEnded.TYPE_NAME: AuctionEnded._from_json,
}


def _parse_variant(value: Any) -> ShioItem:
    data = _as_mapping(value, "shio item")
    if len(data) != 1:
        raise ShioParseError("expected an object with exactly one variant key")
    (tag, payload), = data.items()
    try:
        parse = _VARIANTS[tag]
    except KeyError:
        raise ShioParseError(f"unknown variant `{tag}`") from None
    return parse(payload)


def parse_shio_item(value: Any) -> ShioItem:
    """Decode a feed message; anything unrecognised becomes a Dummy item."""
    try:
        return _parse_variant(value)
    except ShioParseError:
        return Dummy(value)