"""
SQLite varint codec.

A varint is 1-9 bytes, big-endian. The first eight bytes carry 7 bits each
and use the high bit as a continuation flag; a ninth byte carries all 8 bits.
"""

from typing import Tuple

from .errors import TruncatedVarintError

MAX_VARINT_SIZE = 9


def read_varint(data: bytes, offset: int = 0) -> Tuple[int, int]:
    """
    Read a varint from data at offset.

    Returns:
        Tuple of (value, bytes_consumed)

    Raises:
        TruncatedVarintError: if data ends while a continuation bit is set
    """
    result = 0

    for i in range(MAX_VARINT_SIZE):
        if offset + i >= len(data):
            raise TruncatedVarintError(f"varint at offset {offset} runs past end of {len(data)}-byte buffer")

        byte = data[offset + i]

        if i < 8:
            result = (result << 7) | (byte & 0x7F)
            if byte < 0x80:
                return result, i + 1
        else:
            # 9th byte uses all 8 bits
            result = (result << 8) | byte

    return result, MAX_VARINT_SIZE


def encode_varint(value: int) -> bytes:
    """Encode an unsigned 64-bit integer as a varint."""
    if value < 0 or value > 0xFFFFFFFFFFFFFFFF:
        raise ValueError(f"varint value out of range: {value}")

    if value > 0x00FFFFFFFFFFFFFF:
        # Needs the 9-byte form: low 8 bits go in the last byte
        out = bytearray(MAX_VARINT_SIZE)
        out[8] = value & 0xFF
        value >>= 8
        for i in range(7, -1, -1):
            out[i] = (value & 0x7F) | 0x80
            value >>= 7
        return bytes(out)

    groups = [value & 0x7F]
    value >>= 7
    while value:
        groups.append((value & 0x7F) | 0x80)
        value >>= 7
    return bytes(reversed(groups))
