"""Builders for hand-made database images with exact byte layouts."""

import sqlite3
import struct
from typing import List, Optional, Sequence, Tuple

from sqlite_pages.header import MAGIC
from sqlite_pages.varint import encode_varint

Column = Tuple[int, bytes]

NULL: Column = (0, b"")
ZERO: Column = (8, b"")
ONE: Column = (9, b"")


def int8(v: int) -> Column:
    return (1, struct.pack(">b", v))


def int16(v: int) -> Column:
    return (2, struct.pack(">h", v))


def real(v: float) -> Column:
    return (7, struct.pack(">d", v))


def text(s: str, encoding: str = "utf-8") -> Column:
    b = s.encode(encoding)
    return (13 + 2 * len(b), b)


def blob(b: bytes) -> Column:
    return (12 + 2 * len(b), b)


def record(columns: Sequence[Column]) -> bytes:
    """Record header (length varint + serial types) followed by the body."""
    types = b"".join(encode_varint(st) for st, _ in columns)
    body = b"".join(b for _, b in columns)
    n = 1
    while len(encode_varint(len(types) + n)) != n:
        n += 1
    return encode_varint(len(types) + n) + types + body


def table_cell(row_id: int, columns: Sequence[Column]) -> bytes:
    return raw_cell(row_id, record(columns))


def raw_cell(row_id: int, payload: bytes) -> bytes:
    return encode_varint(len(payload)) + encode_varint(row_id) + payload


def database_header(
    page_size: int = 4096,
    page_count: int = 1,
    text_encoding: int = 1,
    reserved: int = 0,
    version_valid_for: int = 1,
) -> bytes:
    header = bytearray(100)
    header[0:16] = MAGIC
    struct.pack_into(">H", header, 16, 1 if page_size == 65536 else page_size)
    header[18] = 1
    header[19] = 1
    header[20] = reserved
    header[21:24] = bytes([64, 32, 32])
    struct.pack_into(">I", header, 24, 1)  # file change counter
    struct.pack_into(">I", header, 28, page_count)
    struct.pack_into(">I", header, 44, 4)  # schema format
    struct.pack_into(">I", header, 56, text_encoding)
    struct.pack_into(">I", header, 92, version_valid_for)
    struct.pack_into(">I", header, 96, 3045001)
    return bytes(header)


def btree_page(
    cells: Sequence[bytes],
    page_size: int = 4096,
    page_num: int = 2,
    page_type: int = 0x0D,
    rightmost_ptr: Optional[int] = None,
) -> bytes:
    """A b-tree page with cells packed at the end, in pointer order."""
    page = bytearray(page_size)
    base = 100 if page_num == 1 else 0
    header_size = 12 if page_type in (0x02, 0x05) else 8

    content = page_size
    pointers = []
    for cell in cells:
        content -= len(cell)
        page[content : content + len(cell)] = cell
        pointers.append(content)

    struct.pack_into(">BHHHB", page, base, page_type, 0, len(cells), content % 65536, 0)
    if header_size == 12:
        struct.pack_into(">I", page, base + 8, rightmost_ptr or 0)
    for i, ptr in enumerate(pointers):
        struct.pack_into(">H", page, base + header_size + 2 * i, ptr)
    return bytes(page)


def build_database(pages: List[Sequence[bytes]], page_size: int = 4096, **header_kwargs) -> bytes:
    """A file whose pages are all leaf table pages holding the given cells."""
    out = bytearray()
    for num, cells in enumerate(pages, start=1):
        out += btree_page(cells, page_size, page_num=num)
    out[0:100] = database_header(page_size, page_count=len(pages), **header_kwargs)
    return bytes(out)


def create_sqlite_db(path, *statements, params=None) -> None:
    """Run statements against a fresh sqlite3 database and close it."""
    conn = sqlite3.connect(path)
    cursor = conn.cursor()
    for stmt in statements:
        cursor.execute(stmt)
    if params:
        sql, rows = params
        cursor.executemany(sql, rows)
    conn.commit()
    conn.close()


def sqlite_rows(path, sql: str) -> list:
    conn = sqlite3.connect(path)
    try:
        return conn.execute(sql).fetchall()
    finally:
        conn.close()
