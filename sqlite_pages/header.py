"""
SQLite database file header (the first 100 bytes of page 1).

Only the fields needed to locate and decode pages are interpreted; the rest
are surfaced as-is for display.
"""

import struct
from typing import BinaryIO, NamedTuple

from .errors import NotADatabaseError, ShortReadError

DB_HEADER_SIZE = 100
MAGIC = b"SQLite format 3\x00"

TEXT_ENCODINGS = {
    1: "utf-8",
    2: "utf-16-le",
    3: "utf-16-be",
}


class DatabaseHeader(NamedTuple):
    """Parsed database file header."""

    page_size: int
    write_version: int
    read_version: int
    reserved_space: int
    file_change_counter: int
    page_count: int
    freelist_trunk: int
    freelist_count: int
    schema_cookie: int
    schema_format: int
    text_encoding: int
    user_version: int
    application_id: int
    version_valid_for: int
    sqlite_version: int

    @property
    def usable_size(self) -> int:
        return self.page_size - self.reserved_space

    @property
    def encoding(self) -> str:
        # 0 shows up in freshly created files that never stored text
        return TEXT_ENCODINGS.get(self.text_encoding, "utf-8")

    @property
    def sqlite_version_string(self) -> str:
        v = self.sqlite_version
        return f"{v // 1000000}.{(v // 1000) % 1000}.{v % 1000}"


def parse_database_header(data: bytes) -> DatabaseHeader:
    """
    Parse the 100-byte database header.

    Raises:
        NotADatabaseError: bad magic string or impossible page size
    """
    if len(data) < DB_HEADER_SIZE:
        raise NotADatabaseError(f"database header too short: {len(data)} bytes")
    if data[:16] != MAGIC:
        raise NotADatabaseError(f"bad magic string: {data[:16]!r}")

    page_size = struct.unpack(">H", data[16:18])[0]
    # 1 means 65536
    if page_size == 1:
        page_size = 65536
    if page_size < 512 or page_size & (page_size - 1):
        raise NotADatabaseError(f"invalid page size: {page_size}")

    write_version, read_version, reserved_space = data[18], data[19], data[20]
    (
        file_change_counter,
        page_count,
        freelist_trunk,
        freelist_count,
        schema_cookie,
        schema_format,
    ) = struct.unpack(">IIIIII", data[24:48])
    text_encoding, user_version = struct.unpack(">II", data[56:64])
    application_id = struct.unpack(">I", data[68:72])[0]
    version_valid_for, sqlite_version = struct.unpack(">II", data[92:100])

    return DatabaseHeader(
        page_size=page_size,
        write_version=write_version,
        read_version=read_version,
        reserved_space=reserved_space,
        file_change_counter=file_change_counter,
        page_count=page_count,
        freelist_trunk=freelist_trunk,
        freelist_count=freelist_count,
        schema_cookie=schema_cookie,
        schema_format=schema_format,
        text_encoding=text_encoding,
        user_version=user_version,
        application_id=application_id,
        version_valid_for=version_valid_for,
        sqlite_version=sqlite_version,
    )


def read_database_header(f: BinaryIO) -> DatabaseHeader:
    """Read and parse the header from the start of an open database file."""
    f.seek(0)
    data = f.read(DB_HEADER_SIZE)
    if len(data) < DB_HEADER_SIZE:
        raise ShortReadError(0, DB_HEADER_SIZE, len(data))
    return parse_database_header(data)
