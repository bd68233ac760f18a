import pytest

from picocoap.protocol import (
    Code,
    build_code,
    split_code,
)


@pytest.mark.parametrize(
    "code_class, detail, expected",
    [
        (0, 0, Code.EMPTY),
        (0, 1, Code.GET),
        (0, 2, Code.POST),
        (2, 5, Code.CONTENT),
    ],
)
def test_build_code_matches_known_codes(code_class, detail, expected):
    assert build_code(code_class, detail) == expected


def test_split_code_content():
    assert split_code(Code.CONTENT) == (2, 5)


def test_split_code_get():
    assert split_code(Code.GET) == (0, 1)


def test_split_then_build_round_trips_every_byte():
    for code in range(256):
        assert build_code(*split_code(code)) == code


def test_build_then_split_round_trips():
    for code_class in range(8):
        for detail in range(32):
            assert split_code(build_code(code_class, detail)) == (code_class, detail)


@pytest.mark.parametrize("code_class, detail", [(8, 0), (0, 32), (-1, 0), (0, -1)])
def test_build_code_rejects_out_of_range(code_class, detail):
    with pytest.raises(ValueError):
        build_code(code_class, detail)


@pytest.mark.parametrize("code", [-1, 256])
def test_split_code_rejects_out_of_range(code):
    with pytest.raises(ValueError):
        split_code(code)