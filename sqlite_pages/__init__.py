"""
SQLite file format decoding library.

Provides utilities for parsing the database header, B-tree pages, cell
pointer arrays and records of a SQLite database file.
"""

from .errors import (
    DecodeError,
    MalformedHeaderError,
    NotADatabaseError,
    OverflowPayloadError,
    ReservedSerialTypeError,
    ShortReadError,
    TruncatedVarintError,
    UnknownPageTypeError,
    UnsupportedPageError,
)
from .header import (
    DB_HEADER_SIZE,
    DatabaseHeader,
    parse_database_header,
    read_database_header,
)
from .page import (
    PAGE_KINDS,
    PageHeader,
    page_header_offset,
    parse_page_header,
    read_cell_pointers,
    read_page_header,
)
from .reader import (
    CellError,
    DatabaseFile,
    DbInfo,
    PageRows,
    log_trace,
)
from .record import (
    RawRecord,
    RecordHeader,
    Row,
    assemble_row,
    decode_record,
    parse_record_header,
    read_raw_record,
)
from .schema import SchemaEntry, parse_schema, user_tables
from .serial import (
    SerialType,
    StorageClass,
    Value,
    decode_serial_type,
    decode_value,
)
from .varint import encode_varint, read_varint

__all__ = [
    # Errors
    "DecodeError",
    "ShortReadError",
    "TruncatedVarintError",
    "MalformedHeaderError",
    "UnknownPageTypeError",
    "ReservedSerialTypeError",
    "NotADatabaseError",
    "OverflowPayloadError",
    "UnsupportedPageError",
    # Varint
    "read_varint",
    "encode_varint",
    # Header
    "DB_HEADER_SIZE",
    "DatabaseHeader",
    "parse_database_header",
    "read_database_header",
    # Page
    "PAGE_KINDS",
    "PageHeader",
    "page_header_offset",
    "parse_page_header",
    "read_page_header",
    "read_cell_pointers",
    # Serial types
    "StorageClass",
    "SerialType",
    "Value",
    "decode_serial_type",
    "decode_value",
    # Record
    "RawRecord",
    "RecordHeader",
    "Row",
    "read_raw_record",
    "parse_record_header",
    "assemble_row",
    "decode_record",
    # Schema
    "SchemaEntry",
    "parse_schema",
    "user_tables",
    # Reader
    "DatabaseFile",
    "PageRows",
    "CellError",
    "DbInfo",
    "log_trace",
]
