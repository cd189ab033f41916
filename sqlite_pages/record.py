"""
SQLite table leaf cell and record format parsing.

A table leaf cell is laid out as:
- varint payload length (header + body, excluding both leading varints)
- varint rowid
- record header: varint header length (counting itself), then one serial
  type varint per column
- record body: column values in header order
"""

from typing import BinaryIO, List, NamedTuple, Optional

from .errors import MalformedHeaderError, OverflowPayloadError, ShortReadError
from .page import page_start, read_at
from .serial import Value, decode_serial_type, decode_value
from .varint import MAX_VARINT_SIZE, read_varint

# Enough for a maximal payload length varint followed by a maximal rowid varint
RECORD_PREFIX_WINDOW = 2 * MAX_VARINT_SIZE


class RawRecord(NamedTuple):
    """The bytes of one table leaf cell plus its decoded length prefix."""

    cell_offset: int
    data: bytes
    payload_length: int
    payload_length_size: int
    row_id: int
    row_id_size: int

    @property
    def header_start(self) -> int:
        return self.payload_length_size + self.row_id_size


class RecordHeader(NamedTuple):
    """Parsed record header."""

    row_id: int
    header_length: int
    serial_types: List[int]
    header_end: int  # Index into RawRecord.data of the first body byte


class Row(NamedTuple):
    """A fully decoded table row."""

    row_id: int
    columns: List[Value]
    cell_offset: int = 0

    @property
    def values(self) -> list:
        return [c.value for c in self.columns]


def max_local_payload(usable_size: int) -> int:
    """Largest payload a table leaf cell stores without overflow pages."""
    return usable_size - 35


def read_raw_record(
    f: BinaryIO, cell_offset: int, page_size: int, page_num: int, usable_size: Optional[int] = None
) -> RawRecord:
    """
    Read one table leaf cell.

    The length prefix is decoded from a small window first, then the cell is
    re-read at its exact size.

    Args:
        f: Open database file
        cell_offset: Page-relative cell offset from the cell pointer array
        page_size: Database page size
        page_num: Page number (1-indexed)
        usable_size: Page size minus reserved space; enables the overflow check

    Raises:
        ShortReadError: the file ends inside the cell
        TruncatedVarintError: the length prefix is cut off
        OverflowPayloadError: the payload continues on overflow pages
    """
    offset = page_start(page_num, page_size) + cell_offset

    f.seek(offset)
    prefix = f.read(RECORD_PREFIX_WINDOW)
    if not prefix:
        raise ShortReadError(offset, RECORD_PREFIX_WINDOW, 0)

    payload_length, n1 = read_varint(prefix, 0)
    row_id, n2 = read_varint(prefix, n1)

    if usable_size is not None and payload_length > max_local_payload(usable_size):
        raise OverflowPayloadError(
            f"cell at offset {offset} (rowid {row_id}) has a {payload_length}-byte payload; "
            f"more than {max_local_payload(usable_size)} bytes spills onto overflow pages"
        )

    data = read_at(f, offset, payload_length + n1 + n2)

    return RawRecord(
        cell_offset=cell_offset,
        data=data,
        payload_length=payload_length,
        payload_length_size=n1,
        row_id=row_id,
        row_id_size=n2,
    )


def parse_record_header(raw: RawRecord) -> RecordHeader:
    """
    Parse the record header that follows the rowid varint.

    Raises:
        MalformedHeaderError: header length does not match its serial types
    """
    data = raw.data
    start = raw.header_start

    header_length, n = read_varint(data, start)
    if header_length < n:
        raise MalformedHeaderError(f"rowid {raw.row_id}: header length {header_length} is shorter than itself")

    end = start + header_length
    if end > len(data):
        raise MalformedHeaderError(
            f"rowid {raw.row_id}: header length {header_length} runs past the {raw.payload_length}-byte payload"
        )

    serial_types = []
    pos = start + n
    while pos < end:
        st, n = read_varint(data, pos)
        pos += n
        if pos > end:
            raise MalformedHeaderError(
                f"rowid {raw.row_id}: serial type varint overruns header length {header_length}"
            )
        serial_types.append(st)

    return RecordHeader(
        row_id=raw.row_id,
        header_length=header_length,
        serial_types=serial_types,
        header_end=end,
    )


def assemble_row(raw: RawRecord, header: RecordHeader, encoding: str = "utf-8") -> Row:
    """
    Decode every column of a record, in header order.

    Raises:
        MalformedHeaderError: the body is shorter than the serial types declare
        ReservedSerialTypeError: a column uses serial type 10 or 11
    """
    data = raw.data
    cursor = header.header_end
    columns = []

    for i, type_code in enumerate(header.serial_types):
        st = decode_serial_type(type_code)
        end = cursor + st.byte_size
        if end > len(data):
            raise MalformedHeaderError(
                f"rowid {header.row_id}: column {i} ({st.type_name}) needs bytes "
                f"{cursor}..{end} but the record is {len(data)} bytes"
            )
        columns.append(decode_value(st.storage_class, data[cursor:end], encoding))
        cursor = end

    return Row(row_id=header.row_id, columns=columns, cell_offset=raw.cell_offset)


def decode_record(raw: RawRecord, encoding: str = "utf-8") -> Row:
    """Parse the header of a raw record and assemble its row."""
    return assemble_row(raw, parse_record_header(raw), encoding)
