"""
Locating and decoding b-tree page headers and their cell pointer arrays.

The first header byte is the page kind (2, 5, 10 or 13); anything else means
the page is not a b-tree page or the offset is wrong.

Page 1 starts with the 100-byte database header, so its B-tree header sits at
byte 100; every other page keeps it at byte 0. The cell pointer array is
anchored 8 bytes past the header start on every page type, and the offsets it
holds count from the start of the page (page 1 included).
"""

import logging
import struct
from typing import BinaryIO, List, NamedTuple, Optional

from .errors import ShortReadError, UnknownPageTypeError
from .header import DB_HEADER_SIZE

logger = logging.getLogger(__name__)

INTERIOR_INDEX = 2
INTERIOR_TABLE = 5
LEAF_INDEX = 10
LEAF_TABLE = 13

PAGE_KINDS = {
    INTERIOR_INDEX: "interior index",
    INTERIOR_TABLE: "interior table",
    LEAF_INDEX: "leaf index",
    LEAF_TABLE: "leaf table",
}

LEAF_HEADER_SIZE = 8
INTERIOR_HEADER_SIZE = 12


class PageHeader(NamedTuple):
    """One b-tree page header, as stored on disk."""

    page_type: int
    type_name: str
    first_freeblock: int
    cell_count: int
    cell_content_start: int
    fragmented_bytes: int
    rightmost_ptr: Optional[int]
    header_size: int

    @property
    def is_leaf_table(self) -> bool:
        return self.page_type == LEAF_TABLE


def read_at(f: BinaryIO, offset: int, size: int) -> bytes:
    """Read exactly size bytes at offset, or raise ShortReadError."""
    f.seek(offset)
    data = f.read(size)
    if len(data) < size:
        raise ShortReadError(offset, size, len(data))
    return data


def page_start(page_num: int, page_size: int) -> int:
    """File offset of the first byte of a page (1-indexed)."""
    if page_num < 1:
        raise ValueError(f"page numbers start at 1, got {page_num}")
    return (page_num - 1) * page_size


def page_header_offset(page_num: int, page_size: int) -> int:
    """File offset of a page's B-tree header."""
    if page_num == 1:
        return DB_HEADER_SIZE
    return page_start(page_num, page_size)


def parse_page_header(data: bytes, page_offset: int = 0) -> PageHeader:
    """
    Decode the page header that starts at page_offset in data.

    Raises:
        UnknownPageTypeError: type byte is not one of PAGE_KINDS
        ShortReadError: data ends inside the header
    """
    pos = page_offset
    if pos + LEAF_HEADER_SIZE > len(data):
        raise ShortReadError(pos, LEAF_HEADER_SIZE, max(len(data) - pos, 0))

    page_type = data[pos]
    if page_type not in PAGE_KINDS:
        raise UnknownPageTypeError(page_type, pos)

    first_freeblock, cell_count, cell_content_start, fragmented_bytes = struct.unpack(
        ">HHHB", data[pos + 1 : pos + 8]
    )

    if cell_content_start == 0:
        cell_content_start = 65536  # a 64 KiB page with an empty content area

    if page_type in (INTERIOR_INDEX, INTERIOR_TABLE):
        if pos + INTERIOR_HEADER_SIZE > len(data):
            raise ShortReadError(pos, INTERIOR_HEADER_SIZE, len(data) - pos)
        (rightmost_ptr,) = struct.unpack_from(">I", data, pos + LEAF_HEADER_SIZE)
        header_size = INTERIOR_HEADER_SIZE
    else:
        rightmost_ptr = None
        header_size = LEAF_HEADER_SIZE

    return PageHeader(
        page_type=page_type,
        type_name=PAGE_KINDS[page_type],
        first_freeblock=first_freeblock,
        cell_count=cell_count,
        cell_content_start=cell_content_start,
        fragmented_bytes=fragmented_bytes,
        rightmost_ptr=rightmost_ptr,
        header_size=header_size,
    )


def read_page_header(f: BinaryIO, page_size: int, page_num: int) -> PageHeader:
    """Read the B-tree header of a page (1-indexed) from an open database file."""
    offset = page_header_offset(page_num, page_size)
    f.seek(offset)
    data = f.read(INTERIOR_HEADER_SIZE)

    # Errors are re-raised with file offsets instead of buffer offsets
    try:
        return parse_page_header(data)
    except ShortReadError as e:
        raise ShortReadError(offset, e.expected, e.actual) from None
    except UnknownPageTypeError as e:
        raise UnknownPageTypeError(e.page_type, offset) from None


def read_cell_pointers(f: BinaryIO, header: PageHeader, page_size: int, page_num: int) -> List[int]:
    """
    Read the cell pointer array of a page.

    The array starts right after the 8-byte minimal header, including on
    interior pages, where the 4-byte right pointer is not skipped.

    Args:
        f: Open database file
        header: The page's parsed header
        page_size: Database page size
        page_num: Page number (1-indexed)

    Returns:
        List of page-relative cell offsets, exactly header.cell_count long
    """
    ptr_array_start = page_header_offset(page_num, page_size) + LEAF_HEADER_SIZE
    data = read_at(f, ptr_array_start, header.cell_count * 2)

    pointers = list(struct.unpack(f">{header.cell_count}H", data))

    for i, ptr in enumerate(pointers):
        if ptr >= page_size:
            logger.warning(f"Page {page_num}: cell pointer [{i}] = {ptr} lies outside the {page_size}-byte page")

    return pointers
