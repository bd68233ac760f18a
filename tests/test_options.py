import pytest

from picocoap.options import (
    Boundary,
    Option,
    OptionHeader,
    decode_option,
    encode_option_header,
    option_header_length,
)
from picocoap.protocol import InvalidPacketError, OptionNumber

GET_PACKET = bytes(
    [
        0x40, 0x01, 0x00, 0x37, 0xB2, 0x31, 0x61, 0x04, 0x74, 0x65,
        0x6D, 0x70, 0x4D, 0x1B, 0x61, 0x33, 0x32, 0x63, 0x38, 0x35,
        0x62, 0x61, 0x39, 0x64, 0x64, 0x61, 0x34, 0x35, 0x38, 0x32,
        0x33, 0x62, 0x65, 0x34, 0x31, 0x36, 0x32, 0x34, 0x36, 0x63,
        0x66, 0x38, 0x62, 0x34, 0x33, 0x33, 0x62, 0x61, 0x61, 0x30,
        0x36, 0x38, 0x64, 0x37,
    ]
)


def test_decode_first_option_of_get_packet():
    header = decode_option(GET_PACKET, 4)
    assert header == OptionHeader(delta=OptionNumber.URI_PATH, length=2, start=4, value_start=5)
    assert header.header_length == 1


def test_decode_second_option_of_get_packet():
    header = decode_option(GET_PACKET, 7)
    assert (header.delta, header.length, header.value_start) == (0, 4, 8)


def test_decode_extended_length_option():
    header = decode_option(GET_PACKET, 12)
    assert header.delta == OptionNumber.URI_QUERY - OptionNumber.URI_PATH
    assert header.length == 40
    assert header.value_start == 14
    assert header.value_end == len(GET_PACKET)


def test_decode_at_end_reports_end_of_packet():
    assert decode_option(GET_PACKET, len(GET_PACKET)) is Boundary.END_OF_PACKET


def test_decode_payload_marker():
    data = bytes([0x61, 0x45, 0xEE, 0xCC, 0xA2, 0xFF, 0x35, 0x36])
    assert decode_option(data, 5) is Boundary.PAYLOAD_MARKER


def test_decode_respects_end_limit():
    with pytest.raises(InvalidPacketError):
        decode_option(GET_PACKET, 12, 20)


@pytest.mark.parametrize("data", [b"\xf0", b"\x0f", b"\xd0", b"\x0d", b"\xe0\x01", b"\x02\x00"])
def test_decode_malformed_headers(data):
    with pytest.raises(InvalidPacketError):
        decode_option(data)


def test_decode_rejects_range_outside_data():
    with pytest.raises(ValueError):
        decode_option(b"\x00", 0, 5)


def test_encode_pins_source_headers():
    assert encode_option_header(11, 2) == bytes([0xB2])
    assert encode_option_header(0, 4) == bytes([0x04])
    assert encode_option_header(4, 40) == bytes([0x4D, 0x1B])


BOUNDARY_VALUES = [0, 12, 13, 268, 269, 1000, 269 + 0xFFFF]


@pytest.mark.parametrize("delta", BOUNDARY_VALUES)
@pytest.mark.parametrize("length", [0, 12, 13, 268, 269, 300])
def test_encode_decode_round_trip(delta, length):
    header_bytes = encode_option_header(delta, length)
    data = header_bytes + bytes(length)
    header = decode_option(data)
    assert (header.delta, header.length) == (delta, length)
    assert header.header_length == len(header_bytes)
    assert header.value_end == len(data)


@pytest.mark.parametrize("delta", BOUNDARY_VALUES)
@pytest.mark.parametrize("length", BOUNDARY_VALUES)
def test_header_length_matches_encoding(delta, length):
    assert option_header_length(delta, length) == len(encode_option_header(delta, length))


@pytest.mark.parametrize("delta, length", [(-1, 0), (0, -1), (269 + 0x10000, 0), (0, 269 + 0x10000)])
def test_encode_rejects_out_of_range(delta, length):
    with pytest.raises(ValueError):
        encode_option_header(delta, length)
    with pytest.raises(ValueError):
        option_header_length(delta, length)


def test_option_end_follows_value():
    option = Option(number=OptionNumber.URI_PATH, value=GET_PACKET[5:7], offset=5)
    assert option.end == 7


def test_empty_option_has_no_end():
    assert Option().end is None