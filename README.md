# picocoap

A small library for reading and writing CoAP (RFC 7252) messages. It works
on the message bytes themselves: a `Pdu` wraps a byte buffer, optionally
limited to a maximum size, and every field it reports or changes is read
from or written into those bytes.

## Installation

```
pip install picocoap
```

## Parsing a message

```python
from picocoap.pdu import Pdu
from picocoap.protocol import Code, MessageType, OptionNumber

raw = bytes([0x61, 0x45, 0xEE, 0xCC, 0xA2, 0xFF, 0x35, 0x36])
pdu = Pdu.parse(raw, len(raw))        # raises InvalidPacketError if malformed

assert pdu.type == MessageType.ACK
assert pdu.code == Code.CONTENT
print(pdu.code_class, pdu.code_detail)   # 2 5
print(pdu.mid, pdu.tkl, pdu.token)       # 61132 1 162
print(pdu.payload)                       # b'56'
```

The header fields `version`, `type`, `tkl`, `code`, `code_class`,
`code_detail`, `mid`, `token` and `payload` are properties. `version`,
`type` and `code` come back as members of `Version`, `MessageType` and
`Code` where the value is a known one, and as plain integers otherwise.
The token is read least significant byte first.

Options are returned as `picocoap.options.Option` values, holding the
option `number`, its `value` bytes and the `offset` of the value in the
message (None when nothing was found):

- `pdu.options()` yields the options in order, stopping at the payload.
- `pdu.get_option(last)` steps one option at a time; pass None for the
  first. When the payload marker is reached, the payload comes back as an
  option numbered 0.
- `pdu.get_option_by_num(OptionNumber.URI_PATH, 0)` returns the given
  occurrence (counting from 0) of an option number, or an empty `Option()`
  when there is none.

`pdu.validate()` checks a message in place; `Pdu.parse` is the same check
on freshly wrapped bytes.

## Building a message

```python
from picocoap.pdu import Pdu
from picocoap.protocol import Code, MessageType, OptionNumber

pdu = Pdu.new(64)                     # starts out as a CoAP ping (RST, empty)
pdu.type = MessageType.CON
pdu.code = Code.GET
pdu.mid = 0x37
pdu.set_token(0x2A25, 2)
pdu.add_option(OptionNumber.URI_PATH, b"1a")
pdu.add_option(OptionNumber.URI_PATH, b"temp")
pdu.add_option(OptionNumber.URI_QUERY, b"placeholder")
pdu.set_payload(b"99")

wire = bytes(pdu)                     # or pdu.to_bytes(); len(pdu) is its length
```

`Pdu.new()` with no size places no limit on the message length.
`set_token` may be called at any time; the options and payload are moved
to fit the new token length. Options may be added in any order: each is
placed after every option whose number is not above its own, and the delta
of the option that follows is rewritten. Options that share a number keep
the order in which they were added. `set_payload(b"")` removes the payload
and its marker.

## Errors

Failures from malformed or oversized messages raise a subclass of
`picocoap.protocol.CoapError`:

- `InvalidPacketError` (also a `ValueError`) — the bytes are not a
  well-formed CoAP message, or a token longer than 8 bytes was asked for.
- `InsufficientBufferError` — the change would make the message larger
  than the `max_size` the `Pdu` was given.

Field values outside their range (a message ID above 0xFFFF, a code above
0xFF, an option number or value length above 0xFFFF) raise `ValueError`.

## Lower-level helpers

`picocoap.options` holds the option codec: `decode_option` (returning an
`OptionHeader`, or a `Boundary` at the payload marker or end of data),
`encode_option_header` and `option_header_length`, with the
`PAYLOAD_MARKER` byte value.

`picocoap.protocol` holds the enums `Version`, `MessageType`, `Code` and
`OptionNumber`, the helpers `build_code(code_class, detail)` and
`split_code(code)`, and the protocol's transmission parameters as
constants (`ACK_TIMEOUT`, `MAX_RETRANSMIT`, `EXCHANGE_LIFETIME` and so on).

## What it does not do

picocoap only encodes and decodes messages. It opens no sockets, sends and
receives nothing, and does no retransmission, message matching, block
transfer or DTLS; the transmission parameters are provided as constants
for code that does.