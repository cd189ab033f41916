"""
SQLite serial types and column value decoding.

Serial types:
- 0: NULL
- 1: 8-bit signed integer
- 2: 16-bit big-endian signed integer
- 3: 24-bit big-endian signed integer
- 4: 32-bit big-endian signed integer
- 5: 48-bit big-endian signed integer
- 6: 64-bit big-endian signed integer
- 7: IEEE 754 64-bit float
- 8: integer 0
- 9: integer 1
- 10, 11: reserved
- N >= 12 even: BLOB of (N-12)/2 bytes
- N >= 13 odd: TEXT of (N-13)/2 bytes
"""

import enum
import struct
from typing import Any, NamedTuple, Union

from .errors import ReservedSerialTypeError


class StorageClass(enum.Enum):
    NULL = "NULL"
    INT8 = "INT8"
    INT16 = "INT16"
    INT24 = "INT24"
    INT32 = "INT32"
    INT48 = "INT48"
    INT64 = "INT64"
    FLOAT64 = "FLOAT64"
    ZERO = "ZERO"
    ONE = "ONE"
    BLOB = "BLOB"
    TEXT = "TEXT"


class SerialType(NamedTuple):
    """Decoded serial type information."""

    type_code: int
    storage_class: StorageClass
    byte_size: int

    @property
    def type_name(self) -> str:
        if self.storage_class in (StorageClass.BLOB, StorageClass.TEXT):
            return f"{self.storage_class.value}({self.byte_size})"
        return self.storage_class.value


class Value(NamedTuple):
    """A decoded column value tagged with its storage class."""

    storage_class: StorageClass
    value: Union[None, int, float, str, bytes]

    @property
    def is_null(self) -> bool:
        return self.storage_class is StorageClass.NULL


_FIXED = {
    0: (StorageClass.NULL, 0),
    1: (StorageClass.INT8, 1),
    2: (StorageClass.INT16, 2),
    3: (StorageClass.INT24, 3),
    4: (StorageClass.INT32, 4),
    5: (StorageClass.INT48, 6),
    6: (StorageClass.INT64, 8),
    7: (StorageClass.FLOAT64, 8),
    8: (StorageClass.ZERO, 0),
    9: (StorageClass.ONE, 0),
}

_INT_WIDTHS = {
    StorageClass.INT8: 1,
    StorageClass.INT16: 2,
    StorageClass.INT24: 3,
    StorageClass.INT32: 4,
    StorageClass.INT48: 6,
    StorageClass.INT64: 8,
}

_INT_FORMATS = {
    StorageClass.INT8: ">b",
    StorageClass.INT16: ">h",
    StorageClass.INT32: ">i",
    StorageClass.INT64: ">q",
}


def decode_serial_type(type_code: int) -> SerialType:
    """
    Decode a serial type code into its storage class and byte width.

    Raises:
        ReservedSerialTypeError: for codes 10 and 11
    """
    if type_code < 0:
        raise ValueError(f"serial type must be non-negative, got {type_code}")
    if type_code in _FIXED:
        storage_class, size = _FIXED[type_code]
        return SerialType(type_code, storage_class, size)
    if type_code in (10, 11):
        raise ReservedSerialTypeError(type_code)
    if type_code % 2 == 0:
        return SerialType(type_code, StorageClass.BLOB, (type_code - 12) // 2)
    return SerialType(type_code, StorageClass.TEXT, (type_code - 13) // 2)


def _decode_int(storage_class: StorageClass, raw: bytes) -> int:
    if storage_class is StorageClass.INT24:
        # Sign-extend 24-bit value
        pad = b"\xff" if raw[0] & 0x80 else b"\x00"
        return struct.unpack(">i", pad + raw)[0]
    if storage_class is StorageClass.INT48:
        # Sign-extend 48-bit value
        pad = b"\xff\xff" if raw[0] & 0x80 else b"\x00\x00"
        return struct.unpack(">q", pad + raw)[0]
    return struct.unpack(_INT_FORMATS[storage_class], raw)[0]


def decode_value(storage_class: StorageClass, raw: bytes, encoding: str = "utf-8") -> Value:
    """
    Decode a column's raw bytes according to its storage class.

    Args:
        storage_class: Resolved storage class of the column
        raw: Exactly the column's bytes
        encoding: Database text encoding, used for TEXT columns

    Returns:
        Value tagged with storage_class
    """
    value: Any

    if storage_class is StorageClass.NULL:
        value = None
    elif storage_class is StorageClass.ZERO:
        value = 0
    elif storage_class is StorageClass.ONE:
        value = 1
    elif storage_class in _INT_WIDTHS:
        width = _INT_WIDTHS[storage_class]
        if len(raw) != width:
            raise ValueError(f"{storage_class.value} needs {width} bytes, got {len(raw)}")
        value = _decode_int(storage_class, raw)
    elif storage_class is StorageClass.FLOAT64:
        if len(raw) != 8:
            raise ValueError(f"FLOAT64 needs 8 bytes, got {len(raw)}")
        value = struct.unpack(">d", raw)[0]
    elif storage_class is StorageClass.BLOB:
        value = bytes(raw)
    elif storage_class is StorageClass.TEXT:
        try:
            value = bytes(raw).decode(encoding)
        except UnicodeDecodeError:
            value = bytes(raw)  # Return as bytes if not valid in the database encoding
    else:
        raise ValueError(f"unhandled storage class: {storage_class!r}")

    return Value(storage_class, value)
