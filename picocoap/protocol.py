"""CoAP protocol constants, enumerations and errors."""

from __future__ import annotations

import enum

# Transmission parameters (seconds, or counts where noted).
ACK_TIMEOUT = 2
ACK_RANDOM_FACTOR = 1.5
MAX_RETRANSMIT = 4
NSTART = 1
DEFAULT_LEISURE = 5
PROBING_RATE = 1

MAX_TRANSMIT_SPAN = 45
MAX_TRANSMIT_WAIT = 93
MAX_LATENCY = 100
PROCESSING_DELAY = 2
MAX_RTT = 202
EXCHANGE_LIFETIME = 247
NON_LIFETIME = 145

HEADER_LENGTH = 4
MAX_TOKEN_LENGTH = 8


class Version(enum.IntEnum):
    """Known protocol versions."""

    V1 = 1


class MessageType(enum.IntEnum):
    """The four message types."""

    CON = 0
    NON = 1
    ACK = 2
    RST = 3


class Code(enum.IntEnum):
    """Known request and response codes."""

    EMPTY = 0
    GET = 1
    POST = 2
    PUT = 3
    DELETE = 4
    CREATED = 65
    DELETED = 66
    VALID = 67
    CHANGED = 68
    CONTENT = 69
    CONTINUE = 95
    BAD_REQUEST = 128
    UNAUTHORIZED = 129
    BAD_OPTION = 130
    FORBIDDEN = 131
    NOT_FOUND = 132
    METHOD_NOT_ALLOWED = 133
    NOT_ACCEPTABLE = 134
    REQUEST_ENTITY_INCOMPLETE = 136
    PRECONDITION_FAILED = 140
    REQUEST_ENTITY_TOO_LARGE = 141
    UNSUPPORTED_CONTENT = 143
    INTERNAL_SERVER_ERROR = 160
    NOT_IMPLEMENTED = 161
    BAD_GATEWAY = 162
    SERVICE_UNAVAILABLE = 163
    GATEWAY_TIMEOUT = 164
    PROXYING_NOT_SUPPORTED = 165


class OptionNumber(enum.IntEnum):
    """Known option numbers."""

    IF_MATCH = 1
    URI_HOST = 3
    ETAG = 4
    IF_NONE_MATCH = 5
    OBSERVE = 6
    URI_PORT = 7
    LOCATION_PATH = 8
    URI_PATH = 11
    CONTENT_FORMAT = 12
    MAX_AGE = 14
    URI_QUERY = 15
    ACCEPT = 17
    LOCATION_QUERY = 20
    PROXY_URI = 35
    PROXY_SCHEME = 39
    SIZE1 = 60


class CoapError(Exception):
    """Base class for errors raised while reading or building messages."""


class InvalidPacketError(CoapError, ValueError):
    """The bytes do not form a well-formed message."""


class InsufficientBufferError(CoapError):
    """The message would not fit in the space allowed for it."""


def build_code(code_class: int, detail: int) -> int:
    """Combine a code class (0-7) and detail (0-31) into a message code."""
    if not 0 <= code_class <= 0x07:
        raise ValueError(f"code class out of range: {code_class}")
    if not 0 <= detail <= 0x1F:
        raise ValueError(f"code detail out of range: {detail}")
    return (code_class << 5) | detail


def split_code(code: int) -> tuple[int, int]:
    """Split a message code into its (class, detail) pair."""
    if not 0 <= code <= 0xFF:
        raise ValueError(f"code out of range: {code}")
    return code >> 5, code & 0x1F