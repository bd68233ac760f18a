"""Encoding and decoding of CoAP option headers."""

from __future__ import annotations

import enum
from dataclasses import dataclass

from .protocol import InvalidPacketError

PAYLOAD_MARKER = 0xFF

_EXT_BYTE = 13
_EXT_WORD = 14
_EXT_BYTE_BASE = 13
_EXT_WORD_BASE = 269
_MAX_FIELD = _EXT_WORD_BASE + 0xFFFF


class Boundary(enum.Enum):
    """What lies where an option header was expected, other than an option."""

    PAYLOAD_MARKER = "payload marker"
    END_OF_PACKET = "end of packet"


@dataclass(frozen=True)
class OptionHeader:
    """A decoded option header and where its value lies in the message."""

    delta: int
    length: int
    start: int
    value_start: int

    @property
    def header_length(self) -> int:
        return self.value_start - self.start

    @property
    def value_end(self) -> int:
        return self.value_start + self.length


@dataclass(frozen=True)
class Option:
    """One option of a message: its number, value and the value's offset.

    An offset of None means no option was found.
    """

    number: int = 0
    value: bytes = b""
    offset: int | None = None

    @property
    def end(self) -> int | None:
        """Offset just past the value, or None when nothing was found."""
        if self.offset is None:
            return None
        return self.offset + len(self.value)


def _read_field(data, nibble: int, pos: int, end: int, what: str) -> tuple[int, int]:
    if nibble < _EXT_BYTE:
        return nibble, pos
    if nibble == _EXT_BYTE:
        if pos + 1 > end:
            raise InvalidPacketError(f"truncated extended option {what}")
        return data[pos] + _EXT_BYTE_BASE, pos + 1
    if nibble == _EXT_WORD:
        if pos + 2 > end:
            raise InvalidPacketError(f"truncated extended option {what}")
        return ((data[pos] << 8) | data[pos + 1]) + _EXT_WORD_BASE, pos + 2
    raise InvalidPacketError(f"reserved option {what} nibble {nibble}")


def decode_option(data, start: int = 0, end: int | None = None) -> OptionHeader | Boundary:
    """Decode the option header at ``start``, reading no further than ``end``.

    Returns a Boundary when the end of the data or a payload marker is met.
    """
    if end is None:
        end = len(data)
    if start < 0 or end > len(data):
        raise ValueError("range lies outside the data")
    if start >= end:
        return Boundary.END_OF_PACKET
    first = data[start]
    if first == PAYLOAD_MARKER:
        return Boundary.PAYLOAD_MARKER
    pos = start + 1
    delta, pos = _read_field(data, first >> 4, pos, end, "delta")
    length, pos = _read_field(data, first & 0x0F, pos, end, "length")
    if pos + length > end:
        raise InvalidPacketError("option value runs past the end of the message")
    return OptionHeader(delta=delta, length=length, start=start, value_start=pos)


def _encode_field(value: int, what: str) -> tuple[int, bytes]:
    if not 0 <= value <= _MAX_FIELD:
        raise ValueError(f"option {what} out of range: {value}")
    if value < _EXT_BYTE_BASE:
        return value, b""
    if value < _EXT_WORD_BASE:
        return _EXT_BYTE, bytes([value - _EXT_BYTE_BASE])
    return _EXT_WORD, (value - _EXT_WORD_BASE).to_bytes(2, "big")


def option_header_length(delta: int, length: int) -> int:
    """Number of bytes the header for this delta and value length takes."""
    return (
        1
        + len(_encode_field(delta, "delta")[1])
        + len(_encode_field(length, "length")[1])
    )


def encode_option_header(delta: int, length: int) -> bytes:
    """Encode an option header for the given number delta and value length."""
    delta_nibble, delta_ext = _encode_field(delta, "delta")
    length_nibble, length_ext = _encode_field(length, "length")
    return bytes([(delta_nibble << 4) | length_nibble]) + delta_ext + length_ext