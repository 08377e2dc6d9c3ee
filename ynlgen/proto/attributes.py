"""Netlink attribute encoding and decoding for generated bindings.

Attributes use the netlink TLV layout: a native-endian ``u16`` length
(header included), a ``u16`` type, then the payload padded to a four byte
boundary.
"""

import struct
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any

NLA_ALIGNTO = 4
NLA_F_NESTED = 1 << 15
NLA_F_NET_BYTEORDER = 1 << 14
NLA_TYPE_MASK = ~(NLA_F_NESTED | NLA_F_NET_BYTEORDER) & 0xFFFF

_HEADER = struct.Struct("=HH")

_UINT_FORMATS = {
    8: "=B",
    16: "=H",
    32: "=I",
    64: "=Q",
}


class EncodeError(RuntimeError):
    """Raised when attributes cannot be packed."""


class DecodeError(RuntimeError):
    """Raised when an attribute stream is malformed."""


def align(length: int) -> int:
    """Round length up to the netlink attribute alignment."""
    return (length + NLA_ALIGNTO - 1) & ~(NLA_ALIGNTO - 1)


class AttributeEncoder:
    """Accumulates attributes and packs them with encode().

    Values are validated when packed, so an out of range integer surfaces as
    an EncodeError from encode() rather than from the individual setter.
    """

    def __init__(self) -> None:
        self._attrs: list[tuple[int, str, Any]] = []

    def uint8(self, typ: int, value: int) -> None:
        self._attrs.append((typ, _UINT_FORMATS[8], value))

    def uint16(self, typ: int, value: int) -> None:
        self._attrs.append((typ, _UINT_FORMATS[16], value))

    def uint32(self, typ: int, value: int) -> None:
        self._attrs.append((typ, _UINT_FORMATS[32], value))

    def uint64(self, typ: int, value: int) -> None:
        self._attrs.append((typ, _UINT_FORMATS[64], value))

    def string(self, typ: int, value: str) -> None:
        """Add a NUL terminated string attribute."""
        self._attrs.append((typ, "string", value))

    def binary(self, typ: int, value: bytes) -> None:
        self._attrs.append((typ, "binary", value))

    def __len__(self) -> int:
        return len(self._attrs)

    def encode(self) -> bytes:
        """Pack all accumulated attributes in insertion order."""
        buf = bytearray()
        for typ, fmt, value in self._attrs:
            payload = _payload(typ, fmt, value)
            length = _HEADER.size + len(payload)
            if length > 0xFFFF:
                raise EncodeError(f"attribute {typ}: payload of {len(payload)} bytes is too large")

            try:
                buf.extend(_HEADER.pack(length, typ))
            except struct.error as e:
                raise EncodeError(f"attribute type {typ!r}: {e}") from e

            buf.extend(payload)
            buf.extend(b"\x00" * (align(length) - length))

        return bytes(buf)


def _payload(typ: int, fmt: str, value: Any) -> bytes:
    if fmt == "string":
        if not isinstance(value, str):
            raise EncodeError(f"attribute {typ}: expected str, got {type(value).__name__}")
        return value.encode("utf-8") + b"\x00"

    if fmt == "binary":
        return bytes(value)

    try:
        return struct.pack(fmt, value)
    except struct.error as e:
        raise EncodeError(f"attribute {typ}: cannot pack {value!r}: {e}") from e


@dataclass(frozen=True)
class Attribute:
    """A single decoded netlink attribute."""

    type: int
    data: bytes

    def uint8(self) -> int:
        return self._uint(8)

    def uint16(self) -> int:
        return self._uint(16)

    def uint32(self) -> int:
        return self._uint(32)

    def uint64(self) -> int:
        return self._uint(64)

    def string(self) -> str:
        """Return the payload up to its NUL terminator."""
        return self.data.split(b"\x00", 1)[0].decode("utf-8")

    def binary(self) -> bytes:
        return self.data

    def _uint(self, bits: int) -> int:
        size = bits // 8
        if len(self.data) != size:
            raise DecodeError(
                f"attribute {self.type}: expected {size} bytes for u{bits}, got {len(self.data)}"
            )
        return struct.unpack(_UINT_FORMATS[bits], self.data)[0]


class AttributeDecoder:
    """Splits a packed attribute stream into Attributes.

    The whole stream is validated on construction; iterating yields the
    attributes in wire order.
    """

    def __init__(self, data: bytes) -> None:
        self._attrs = list(_split(data))

    def __iter__(self) -> Iterator[Attribute]:
        return iter(self._attrs)

    def __len__(self) -> int:
        return len(self._attrs)


def _split(data: bytes) -> Iterator[Attribute]:
    view = memoryview(data)
    offset = 0
    while offset < len(view):
        if len(view) - offset < _HEADER.size:
            raise DecodeError(f"truncated attribute header at offset {offset}")

        length, typ = _HEADER.unpack_from(view, offset)
        if length < _HEADER.size or offset + length > len(view):
            raise DecodeError(f"invalid attribute length {length} at offset {offset}")

        yield Attribute(type=typ & NLA_TYPE_MASK, data=bytes(view[offset + _HEADER.size : offset + length]))
        offset += align(length)
