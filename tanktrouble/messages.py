"""Binary message format: a fixed header followed by typed, named fields.

Integers travel in network byte order, strings are NUL terminated and arrays
carry a one-byte element count followed by their elements.
"""

from __future__ import annotations

import struct
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, Union

HEADER_LEN = 3
MAX_ARRAY_LENGTH = 255

_HEADER = struct.Struct(">BH")


class MessageError(ValueError):
    """Raised when a message cannot be encoded or decoded."""


class FieldType(Enum):
    """Wire type of a single value."""

    UINT8 = "B"
    UINT16 = "H"
    UINT32 = "I"
    UINT64 = "Q"
    FLOAT64 = "d"
    STRING = "s"

    @property
    def default(self) -> Any:
        if self is FieldType.STRING:
            return ""
        if self is FieldType.FLOAT64:
            return 0.0
        return 0

    def check(self, value: Any) -> Any:
        """Validate ``value`` for this type and return it normalised."""
        if self is FieldType.STRING:
            if not isinstance(value, str):
                raise MessageError(f"expected a string, got {value!r}")
            if "\0" in value:
                raise MessageError("string fields cannot contain NUL")
            return value
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            raise MessageError(f"expected a number for {self.name}, got {value!r}")
        if self is FieldType.FLOAT64:
            return float(value)
        if not isinstance(value, int):
            raise MessageError(f"expected an integer for {self.name}, got {value!r}")
        limit = 1 << (8 * _STRUCTS[self].size)
        if not 0 <= value < limit:
            raise MessageError(f"{value} does not fit in {self.name}")
        return value

    def encode(self, value: Any) -> bytes:
        if self is FieldType.STRING:
            return value.encode("utf-8") + b"\0"
        return _STRUCTS[self].pack(value)

    def decode(self, data: bytes, offset: int) -> tuple[Any, int]:
        """Read one value at ``offset``; return it with the offset after it."""
        if self is FieldType.STRING:
            end = data.find(b"\0", offset)
            if end < 0:
                raise MessageError("unterminated string field")
            try:
                text = data[offset:end].decode("utf-8")
            except UnicodeDecodeError as exc:
                raise MessageError(f"string field is not valid UTF-8: {exc}") from exc
            return text, end + 1
        packer = _STRUCTS[self]
        if offset + packer.size > len(data):
            raise MessageError(f"truncated {self.name} field")
        (value,) = packer.unpack_from(data, offset)
        return value, offset + packer.size


_STRUCTS = {t: struct.Struct(">" + t.value) for t in FieldType if t is not FieldType.STRING}


@dataclass(frozen=True)
class FixHeader:
    """Header in front of every message: its type and body length."""

    message_type: int
    message_len: int

    def pack(self) -> bytes:
        try:
            return _HEADER.pack(self.message_type, self.message_len)
        except struct.error as exc:
            raise MessageError(f"header out of range: {exc}") from exc


def read_header(data: bytes | bytearray | memoryview) -> FixHeader:
    """Decode the header at the start of ``data``."""
    if len(data) < HEADER_LEN:
        raise MessageError("not enough data for a message header")
    message_type, message_len = _HEADER.unpack_from(data, 0)
    return FixHeader(message_type, message_len)


@dataclass(frozen=True)
class ScalarField:
    """A single named value."""

    name: str
    type: FieldType

    def default(self) -> Any:
        return self.type.default

    def check(self, value: Any) -> Any:
        return self.type.check(value)

    def encode(self, value: Any) -> bytes:
        return self.type.encode(value)

    def decode(self, data: bytes, offset: int) -> tuple[Any, int]:
        return self.type.decode(data, offset)


@dataclass(frozen=True)
class ArrayField:
    """A named array whose elements are records of named values."""

    name: str
    element: tuple[tuple[str, FieldType], ...]

    def __post_init__(self) -> None:
        element = tuple((str(n), FieldType(t)) for n, t in self.element)
        names = [n for n, _ in element]
        if len(set(names)) != len(names):
            raise MessageError(f"duplicate element names in array {self.name!r}")
        object.__setattr__(self, "element", element)

    @property
    def element_names(self) -> tuple[str, ...]:
        return tuple(n for n, _ in self.element)

    def default(self) -> list[dict[str, Any]]:
        return []

    def check_element(self, element: Mapping[str, Any]) -> dict[str, Any]:
        """Validate one record, filling missing values with defaults."""
        if not isinstance(element, Mapping):
            raise MessageError(f"array elements must be mappings, got {element!r}")
        unknown = set(element) - set(self.element_names)
        if unknown:
            raise MessageError(f"unknown element fields {sorted(unknown)} in {self.name!r}")
        return {
            n: t.check(element[n]) if n in element else t.default
            for n, t in self.element
        }

    def check(self, value: Any) -> list[dict[str, Any]]:
        if isinstance(value, (str, bytes, Mapping)) or not isinstance(value, Iterable):
            raise MessageError(f"array {self.name!r} needs a sequence of records")
        elements = [self.check_element(e) for e in value]
        if len(elements) > MAX_ARRAY_LENGTH:
            raise MessageError(f"array {self.name!r} holds more than {MAX_ARRAY_LENGTH} elements")
        return elements

    def encode(self, value: list[dict[str, Any]]) -> bytes:
        parts = [bytes([len(value)])]
        for element in value:
            parts.extend(t.encode(element[n]) for n, t in self.element)
        return b"".join(parts)

    def decode(self, data: bytes, offset: int) -> tuple[list[dict[str, Any]], int]:
        if offset >= len(data):
            raise MessageError(f"truncated length of array {self.name!r}")
        count = data[offset]
        offset += 1
        elements = []
        for _ in range(count):
            element = {}
            for n, t in self.element:
                element[n], offset = t.decode(data, offset)
            elements.append(element)
        return elements, offset


Field = Union[ScalarField, ArrayField]


def _check_unique(fields: tuple[Field, ...]) -> None:
    names = [f.name for f in fields]
    if len(set(names)) != len(names):
        raise MessageError("duplicate field names in message")


@dataclass(frozen=True)
class MessageTemplate:
    """Ordered field layout from which empty messages are made."""

    fields: tuple[Field, ...] = ()

    def __post_init__(self) -> None:
        fields = tuple(self.fields)
        _check_unique(fields)
        object.__setattr__(self, "fields", fields)

    def new_message(self) -> Message:
        return Message(self.fields)


class Message:
    """Values of a message, accessed by field name."""

    def __init__(self, fields: Iterable[Field] = ()) -> None:
        fields = tuple(fields)
        _check_unique(fields)
        self._fields: dict[str, Field] = {f.name: f for f in fields}
        self._values: dict[str, Any] = {f.name: f.default() for f in fields}

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(self._fields)

    def __contains__(self, name: object) -> bool:
        return name in self._fields

    def __iter__(self) -> Iterator[str]:
        return iter(self._fields)

    def __getitem__(self, name: str) -> Any:
        value = self._values[name]
        if isinstance(self._fields[name], ArrayField):
            return [dict(e) for e in value]
        return value

    def __setitem__(self, name: str, value: Any) -> None:
        self._values[name] = self._fields[name].check(value)

    def get(self, name: str, default: Any = None) -> Any:
        return self[name] if name in self._fields else default

    def append(self, name: str, element: Mapping[str, Any]) -> None:
        """Add one record to the array field ``name``."""
        field = self._fields[name]
        if not isinstance(field, ArrayField):
            raise MessageError(f"field {name!r} is not an array")
        elements = self._values[name]
        if len(elements) >= MAX_ARRAY_LENGTH:
            raise MessageError(f"array {name!r} holds more than {MAX_ARRAY_LENGTH} elements")
        elements.append(field.check_element(element))

    def fill(self, data: bytes | bytearray | memoryview, offset: int = 0) -> int:
        """Decode all fields from ``data`` at ``offset``; return the offset after them."""
        data = bytes(data)
        decoded = {}
        for name, field in self._fields.items():
            decoded[name], offset = field.decode(data, offset)
        self._values.update(decoded)
        return offset

    def pack(self) -> bytes:
        return b"".join(f.encode(self._values[n]) for n, f in self._fields.items())

    def size(self) -> int:
        return len(self.pack())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Message):
            return NotImplemented
        return (
            tuple(self._fields.values()) == tuple(other._fields.values())
            and self._values == other._values
        )

    def __repr__(self) -> str:
        body = ", ".join(f"{n}={v!r}" for n, v in self._values.items())
        return f"Message({body})"