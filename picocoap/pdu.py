"""Reading and building CoAP messages directly on their binary form."""

from __future__ import annotations

import enum
from collections.abc import Iterator

from .options import (
    PAYLOAD_MARKER,
    Boundary,
    Option,
    OptionHeader,
    decode_option,
    encode_option_header,
)
from .protocol import (
    HEADER_LENGTH,
    MAX_TOKEN_LENGTH,
    Code,
    InsufficientBufferError,
    InvalidPacketError,
    MessageType,
    Version,
)

_MAX_OPTION_NUMBER = 0xFFFF
_MAX_OPTION_LENGTH = 0xFFFF


def _as_enum(kind: type[enum.IntEnum], value: int) -> int:
    try:
        return kind(value)
    except ValueError:
        return value


class Pdu:
    """A CoAP message held as bytes, limited to ``max_size`` bytes.

    A ``max_size`` of None places no limit on the message length.
    """

    def __init__(self, data: bytes = b"", max_size: int | None = None) -> None:
        if max_size is not None and max_size < 0:
            raise ValueError("max_size must not be negative")
        self._buf = bytearray(data)
        self.max_size = max_size

    @classmethod
    def new(cls, max_size: int | None = None) -> Pdu:
        """Create an empty message: a version 1 reset with no token (a ping)."""
        if max_size is not None and max_size < HEADER_LENGTH:
            raise InsufficientBufferError("a message needs at least 4 bytes")
        pdu = cls(bytes(HEADER_LENGTH), max_size)
        pdu.version = Version.V1
        pdu.type = MessageType.RST
        pdu.set_token(0, 0)
        pdu.code = Code.EMPTY
        pdu.mid = 0
        return pdu

    @classmethod
    def parse(cls, data: bytes, max_size: int | None = None) -> Pdu:
        """Wrap received bytes and check that they form a valid message."""
        pdu = cls(data, max_size)
        pdu.validate()
        return pdu

    def validate(self) -> None:
        """Raise InvalidPacketError unless the bytes form a valid message."""
        buf = self._buf
        if self.max_size is not None and len(buf) > self.max_size:
            raise InvalidPacketError("message is longer than its buffer")
        if len(buf) < HEADER_LENGTH:
            raise InvalidPacketError("message is shorter than its header")
        if self.version != Version.V1:
            raise InvalidPacketError(f"unsupported version {self.version}")
        if self.tkl > MAX_TOKEN_LENGTH:
            raise InvalidPacketError(f"token length {self.tkl} exceeds 8")
        pos = self._options_start()
        while True:
            found = decode_option(buf, pos)
            if found is Boundary.END_OF_PACKET:
                return
            if found is Boundary.PAYLOAD_MARKER:
                if pos + 1 == len(buf):
                    raise InvalidPacketError("payload marker without payload")
                return
            pos = found.value_end

    # Header fields

    def _byte(self, index: int) -> int:
        if len(self._buf) <= index:
            raise InvalidPacketError("message is shorter than its header")
        return self._buf[index]

    def _grow_to(self, size: int) -> None:
        if self.max_size is not None and self.max_size < size:
            raise InsufficientBufferError(f"message needs at least {size} bytes")
        if len(self._buf) < size:
            self._buf.extend(bytes(size - len(self._buf)))

    def _check_fits(self, size: int) -> None:
        if self.max_size is not None and size > self.max_size:
            raise InsufficientBufferError(
                f"message of {size} bytes exceeds the limit of {self.max_size}"
            )

    @property
    def version(self) -> int:
        """Protocol version from the header."""
        return _as_enum(Version, self._byte(0) >> 6)

    @version.setter
    def version(self, value: int) -> None:
        if not 0 <= value <= 0x03:
            raise ValueError(f"version out of range: {value}")
        self._grow_to(1)
        self._buf[0] = (value << 6) | (self._buf[0] & 0x3F)

    @property
    def type(self) -> MessageType:
        """Message type from the header."""
        return MessageType((self._byte(0) >> 4) & 0x03)

    @type.setter
    def type(self, value: int) -> None:
        if not 0 <= value <= 0x03:
            raise ValueError(f"message type out of range: {value}")
        self._grow_to(1)
        self._buf[0] = (value << 4) | (self._buf[0] & 0xCF)

    @property
    def tkl(self) -> int:
        """Token length from the header."""
        return self._byte(0) & 0x0F

    @property
    def code(self) -> int:
        """Message code from the header."""
        return _as_enum(Code, self._byte(1))

    @code.setter
    def code(self, value: int) -> None:
        if not 0 <= value <= 0xFF:
            raise ValueError(f"code out of range: {value}")
        self._grow_to(2)
        self._buf[1] = value

    @property
    def code_class(self) -> int:
        """Class part of the message code."""
        return self._byte(1) >> 5

    @property
    def code_detail(self) -> int:
        """Detail part of the message code."""
        return self._byte(1) & 0x1F

    @property
    def mid(self) -> int:
        """Message ID from the header."""
        return (self._byte(2) << 8) | self._byte(3)

    @mid.setter
    def mid(self, value: int) -> None:
        if not 0 <= value <= 0xFFFF:
            raise ValueError(f"message ID out of range: {value}")
        self._grow_to(HEADER_LENGTH)
        self._buf[2] = value >> 8
        self._buf[3] = value & 0xFF

    @property
    def token(self) -> int:
        """The token, read least significant byte first; 0 if it is cut short."""
        tkl = self.tkl
        if tkl > MAX_TOKEN_LENGTH:
            raise InvalidPacketError(f"token length {tkl} exceeds 8")
        if len(self._buf) < HEADER_LENGTH + tkl:
            return 0
        return int.from_bytes(self._buf[HEADER_LENGTH:HEADER_LENGTH + tkl], "little")

    def set_token(self, token: int, tkl: int) -> None:
        """Store the low ``tkl`` bytes of ``token``, moving the rest of the message."""
        if tkl < 0:
            raise ValueError("token length must not be negative")
        if not 0 <= token < 1 << 64:
            raise ValueError(f"token out of range: {token}")
        self._check_fits(HEADER_LENGTH + tkl)
        if tkl > MAX_TOKEN_LENGTH:
            raise InvalidPacketError(f"token length {tkl} exceeds 8")
        token_bytes = token.to_bytes(8, "little")[:tkl]
        buf = self._buf
        old = buf[0] & 0x0F if buf else 0
        if len(buf) > HEADER_LENGTH:
            new = buf[:HEADER_LENGTH] + token_bytes + buf[HEADER_LENGTH + old:]
        else:
            head = bytearray(buf)
            if tkl:
                head.extend(bytes(HEADER_LENGTH - len(head)))
            new = head + token_bytes
        if not new:
            new = bytearray(1)
        self._check_fits(len(new))
        new[0] = (new[0] & 0xF0) | tkl
        self._buf = new

    # Options and payload

    def _options_start(self) -> int:
        start = HEADER_LENGTH + self.tkl
        if len(self._buf) < start:
            raise InvalidPacketError("message is shorter than its header and token")
        return start

    def get_option(self, last: Option | None = None) -> Option:
        """Return the option after ``last``, or the first one when ``last`` is None.

        Where the payload follows, it comes back as an option numbered 0;
        past the end an Option with no offset is returned.
        """
        buf = self._buf
        if len(buf) < HEADER_LENGTH:
            return Option()
        if last is not None and last.offset is not None:
            number = last.number
            pos = last.end
        else:
            number = 0
            pos = HEADER_LENGTH + self.tkl
        if pos > len(buf) or pos <= 0:
            return Option()
        try:
            found = decode_option(buf, pos)
        except InvalidPacketError:
            return Option()
        if found is Boundary.PAYLOAD_MARKER:
            return Option(0, bytes(buf[pos + 1:]), pos + 1)
        if found is Boundary.END_OF_PACKET:
            return Option()
        return Option(
            number + found.delta,
            bytes(buf[found.value_start:found.value_end]),
            found.value_start,
        )

    def options(self) -> Iterator[Option]:
        """Yield the options in order, stopping at the payload or a malformed one."""
        buf = self._buf
        if len(buf) < HEADER_LENGTH:
            return
        pos = HEADER_LENGTH + self.tkl
        if pos > len(buf):
            return
        number = 0
        while True:
            try:
                found = decode_option(buf, pos)
            except InvalidPacketError:
                return
            if isinstance(found, Boundary):
                return
            number += found.delta
            yield Option(number, bytes(buf[found.value_start:found.value_end]), found.value_start)
            pos = found.value_end

    def get_option_by_num(self, number: int, occurrence: int = 0) -> Option:
        """Return the ``occurrence``-th option numbered ``number`` (counting from 0)."""
        seen = 0
        for option in self.options():
            if option.number == number:
                if seen == occurrence:
                    return option
                seen += 1
            elif option.number > number:
                break
        return Option()

    @property
    def payload(self) -> bytes:
        """The bytes after the payload marker, or b"" when there are none."""
        buf = self._buf
        if len(buf) < HEADER_LENGTH:
            return b""
        pos = HEADER_LENGTH + self.tkl
        if pos > len(buf):
            return b""
        while True:
            try:
                found = decode_option(buf, pos)
            except InvalidPacketError:
                return b""
            if found is Boundary.PAYLOAD_MARKER:
                return bytes(buf[pos + 1:])
            if found is Boundary.END_OF_PACKET:
                return b""
            pos = found.value_end

    def _locate(self, limit: int | None) -> tuple[int, int, OptionHeader | Boundary]:
        """Find where options end, or the first option numbered above ``limit``.

        Returns the offset, the number of the option before it and what lies there.
        """
        number = 0
        pos = self._options_start()
        while True:
            found = decode_option(self._buf, pos)
            if isinstance(found, Boundary):
                return pos, number, found
            if limit is not None and number + found.delta > limit:
                return pos, number, found
            number += found.delta
            pos = found.value_end

    def add_option(self, number: int, value: bytes) -> None:
        """Insert an option after every option with a number not above ``number``."""
        value = bytes(value)
        if not 0 <= number <= _MAX_OPTION_NUMBER:
            raise ValueError(f"option number out of range: {number}")
        if len(value) > _MAX_OPTION_LENGTH:
            raise ValueError(f"option value too long: {len(value)} bytes")
        buf = self._buf
        pos, previous, found = self._locate(number)
        header = encode_option_header(number - previous, len(value))
        if isinstance(found, OptionHeader):
            following = previous + found.delta
            tail = encode_option_header(following - number, found.length) + buf[found.value_start:]
        else:
            tail = buf[pos:]
        new = buf[:pos] + header + value + tail
        self._check_fits(len(new))
        self._buf = bytearray(new)

    def set_payload(self, payload: bytes) -> None:
        """Replace the payload; an empty payload removes it and its marker."""
        payload = bytes(payload)
        pos, _, _ = self._locate(None)
        new = self._buf[:pos]
        if payload:
            new += bytes([PAYLOAD_MARKER]) + payload
        self._check_fits(len(new))
        self._buf = bytearray(new)

    # Conversions

    def to_bytes(self) -> bytes:
        """The message as bytes."""
        return bytes(self._buf)

    def __bytes__(self) -> bytes:
        return self.to_bytes()

    def __len__(self) -> int:
        return len(self._buf)

    def __repr__(self) -> str:
        return f"Pdu({bytes(self._buf)!r}, max_size={self.max_size!r})"