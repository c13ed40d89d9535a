"""Decoded Move values and helpers for pulling typed fields out of structs."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class MoveExtractError(ValueError):
    """Raised when a struct field is missing or has an unexpected kind."""


class MoveKind(Enum):
    BOOL = "bool"
    U8 = "u8"
    U16 = "u16"
    U32 = "u32"
    U64 = "u64"
    U128 = "u128"
    U256 = "u256"
    ADDRESS = "address"
    SIGNER = "signer"
    VECTOR = "vector"
    STRUCT = "struct"


_INT_BITS = {
    MoveKind.U8: 8,
    MoveKind.U16: 16,
    MoveKind.U32: 32,
    MoveKind.U64: 64,
    MoveKind.U128: 128,
    MoveKind.U256: 256,
}

_ADDRESS_HEX_DIGITS = 64


def _normalize_address(value: Any) -> str:
    """Return an address as 0x followed by 64 lower-case hex digits."""
    if isinstance(value, (bytes, bytearray)):
        if len(value) != _ADDRESS_HEX_DIGITS // 2:
            raise ValueError("an address must be 32 bytes long")
        return "0x" + bytes(value).hex()
    if isinstance(value, str):
        digits = value[2:] if value.lower().startswith("0x") else value
        if not digits or len(digits) > _ADDRESS_HEX_DIGITS:
            raise ValueError(f"invalid address: {value!r}")
        try:
            int(digits, 16)
        except ValueError:
            raise ValueError(f"invalid address: {value!r}") from None
        return "0x" + digits.lower().rjust(_ADDRESS_HEX_DIGITS, "0")
    raise ValueError(f"invalid address: {value!r}")


@dataclass
class MoveValue:
    """A single annotated Move value tagged with its kind."""

    kind: MoveKind
    value: Any

    def __post_init__(self) -> None:
        kind = self.kind
        if kind is MoveKind.BOOL:
            if not isinstance(self.value, bool):
                raise ValueError("a bool value must be True or False")
        elif kind in _INT_BITS:
            bits = _INT_BITS[kind]
            if isinstance(self.value, bool) or not isinstance(self.value, int):
                raise ValueError(f"a {kind.value} value must be an integer")
            if not 0 <= self.value < 1 << bits:
                raise ValueError(f"{self.value} does not fit in {kind.value}")
        elif kind in (MoveKind.ADDRESS, MoveKind.SIGNER):
            self.value = _normalize_address(self.value)
        elif kind is MoveKind.VECTOR:
            items = list(self.value)
            if not all(isinstance(item, MoveValue) for item in items):
                raise ValueError("vector elements must be MoveValue instances")
            self.value = items
        elif kind is MoveKind.STRUCT:
            if not isinstance(self.value, MoveStruct):
                raise ValueError("a struct value must be a MoveStruct")


@dataclass
class MoveStruct:
    """A Move struct: its type and its named fields in declaration order."""

    type_: str
    fields: list[tuple[str, MoveValue]] = field(default_factory=list)

    def __post_init__(self) -> None:
        if isinstance(self.fields, Mapping):
            self.fields = list(self.fields.items())
        else:
            self.fields = [(name, value) for name, value in self.fields]


@dataclass
class SuiObject:
    """An on-chain object; initial_shared_version is set only for shared objects."""

    id: str
    initial_shared_version: int | None = None
    contents: MoveStruct | None = None

    @property
    def is_shared(self) -> bool:
        return self.initial_shared_version is not None


@dataclass(frozen=True)
class SharedObjectArg:
    id: str
    initial_shared_version: int
    mutable: bool


def extract_field_from_move_struct(move_struct: MoveStruct, field_name: str) -> MoveValue | None:
    """Return the value of the named field, or None when there is no such field."""
    return next((value for name, value in move_struct.fields if name == field_name), None)


def _field(move_struct: MoveStruct, field_name: str) -> MoveValue:
    value = extract_field_from_move_struct(move_struct, field_name)
    if value is None:
        raise MoveExtractError("field not found")
    return value


def _expect(value: MoveValue, kind: MoveKind, message: str) -> Any:
    if value.kind is not kind:
        raise MoveExtractError(message)
    return value.value


def extract_struct_from_move_struct(move_struct: MoveStruct, field_name: str) -> MoveStruct:
    return _expect(_field(move_struct, field_name), MoveKind.STRUCT, "expected struct")


def extract_vec_from_move_struct(move_struct: MoveStruct, field_name: str) -> list[MoveValue]:
    return list(_expect(_field(move_struct, field_name), MoveKind.VECTOR, "expected vector"))


def extract_object_id_from_move_struct(move_struct: MoveStruct, field_name: str) -> str:
    return _expect(_field(move_struct, field_name), MoveKind.ADDRESS, "expected address")


def extract_struct_array_from_move_struct(move_struct: MoveStruct, field_name: str) -> list[MoveStruct]:
    items = _expect(_field(move_struct, field_name), MoveKind.VECTOR, "expected array")
    return [_expect(item, MoveKind.STRUCT, "expected struct") for item in items]


def extract_u128_from_move_struct(move_struct: MoveStruct, field_name: str) -> int:
    return _expect(_field(move_struct, field_name), MoveKind.U128, "expected u128")


def extract_u64_from_move_struct(move_struct: MoveStruct, field_name: str) -> int:
    return _expect(_field(move_struct, field_name), MoveKind.U64, "expected u64")


def extract_u32_from_move_struct(move_struct: MoveStruct, field_name: str) -> int:
    return _expect(_field(move_struct, field_name), MoveKind.U32, "expected u32")


def extract_bool_from_move_struct(move_struct: MoveStruct, field_name: str) -> bool:
    return _expect(_field(move_struct, field_name), MoveKind.BOOL, "expected bool")


def extract_u64_vec_from_move_struct(move_struct: MoveStruct, field_name: str) -> list[int]:
    items = _expect(_field(move_struct, field_name), MoveKind.VECTOR, "expected vector")
    return [_expect(item, MoveKind.U64, "expected u64") for item in items]


def extract_u128_vec_from_move_struct(move_struct: MoveStruct, field_name: str) -> list[int]:
    items = _expect(_field(move_struct, field_name), MoveKind.VECTOR, "expected vector")
    return [_expect(item, MoveKind.U128, "expected u128") for item in items]


def shared_obj_arg(obj: SuiObject, mutable: bool) -> SharedObjectArg:
    """Build a shared-object argument; non-shared objects get version 0."""
    version = obj.initial_shared_version if obj.initial_shared_version is not None else 0
    return SharedObjectArg(id=obj.id, initial_shared_version=version, mutable=mutable)