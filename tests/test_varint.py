import pytest

from sqlite_pages.errors import TruncatedVarintError
from sqlite_pages.varint import encode_varint, read_varint


@pytest.mark.parametrize(
    "data, value, size",
    [
        (b"\x00", 0, 1),
        (b"\x7f", 127, 1),
        (b"\x81\x00", 128, 2),
        (b"\x82\x2c", 300, 2),
        (b"\xff\x7f", 16383, 2),
        (b"\x81\x80\x00", 16384, 3),
        (b"\xff" * 9, 2**64 - 1, 9),
    ],
)
def test_read_varint(data, value, size):
    assert read_varint(data) == (value, size)


def test_read_varint_at_offset_ignores_trailing_bytes():
    assert read_varint(b"\xaa\x05\xff\xff", 1) == (5, 1)


@pytest.mark.parametrize("data", [b"", b"\x81", b"\x80\x80", b"\xff" * 8])
def test_read_varint_truncated(data):
    with pytest.raises(TruncatedVarintError):
        read_varint(data)


def test_read_varint_offset_past_end():
    with pytest.raises(TruncatedVarintError):
        read_varint(b"\x01", 1)


@pytest.mark.parametrize(
    "value, size",
    [
        (0, 1),
        (2**7 - 1, 1),
        (2**7, 2),
        (2**14, 3),
        (2**21, 4),
        (2**28, 5),
        (2**35, 6),
        (2**42, 7),
        (2**49, 8),
        (2**56 - 1, 8),
        (2**56, 9),
        (2**64 - 1, 9),
    ],
)
def test_varint_round_trip(value, size):
    encoded = encode_varint(value)
    assert len(encoded) == size
    assert read_varint(encoded) == (value, size)
    # decoding then re-encoding reproduces the original bytes
    assert encode_varint(read_varint(encoded)[0]) == encoded


@pytest.mark.parametrize("value", [-1, 2**64])
def test_encode_varint_out_of_range(value):
    with pytest.raises(ValueError):
        encode_varint(value)
