from __future__ import annotations

import logging
import os
from types import TracebackType
from typing import Any, BinaryIO, Callable, Dict, List, NamedTuple, Optional, Union

from .errors import DecodeError, UnsupportedPageError
from .header import DatabaseHeader, read_database_header
from .page import PageHeader, read_cell_pointers, read_page_header
from .record import Row, decode_record, read_raw_record
from .schema import SchemaEntry, parse_schema

logger = logging.getLogger(__name__)

TraceCallback = Callable[[str, Dict[str, Any]], None]

SCHEMA_PAGE = 1


class CellError(NamedTuple):
    """A cell that could not be decoded; its siblings are unaffected."""

    cell_index: int
    cell_offset: int
    error: DecodeError


class PageRows(NamedTuple):
    """Everything decoded from one table leaf page."""

    page_num: int
    header: PageHeader
    rows: List[Row]
    errors: List[CellError]


class DbInfo(NamedTuple):
    page_size: int
    table_count: int
    page_count: int
    text_encoding: str


def log_trace(event: str, fields: Dict[str, Any]) -> None:
    """Trace callback that forwards decoder events to the package logger."""
    logger.debug("%s %s", event, " ".join(f"{k}={v}" for k, v in fields.items()))


class DatabaseFile:
    """
    Read-only access to the pages of a single SQLite database file.

    Holds one open file handle until close() (or the end of a with-block).
    Every call re-reads the bytes it needs; nothing is cached.

    Usage:
        with DatabaseFile("app.db") as db:
            for entry in db.schema():
                print(entry.name, entry.rootpage)
            rows = db.table_rows("users").rows
    """

    def __init__(self, path: Union[str, os.PathLike], *, trace: Optional[TraceCallback] = None) -> None:
        self.path = path
        self._trace = trace
        self._file: Optional[BinaryIO] = open(path, "rb")
        try:
            self.header: DatabaseHeader = read_database_header(self._file)
        except BaseException:
            self.close()
            raise
        self._emit("open", path=os.fspath(path), page_size=self.page_size, page_count=self.page_count)

    def __enter__(self) -> DatabaseFile:
        return self

    def __exit__(
        self,
        exc_type: Optional[type[BaseException]],
        exc_val: Optional[BaseException],
        exc_tb: Optional[TracebackType],
    ) -> None:
        self.close()

    def close(self) -> None:
        if self._file is not None:
            self._file.close()
            self._file = None

    @property
    def _f(self) -> BinaryIO:
        if self._file is None:
            raise ValueError("database file is closed")
        return self._file

    def _emit(self, event: str, **fields: Any) -> None:
        if self._trace is not None:
            self._trace(event, fields)

    @property
    def page_size(self) -> int:
        return self.header.page_size

    @property
    def page_count(self) -> int:
        # The in-header size is only trusted when it was written by a version
        # that keeps it current, i.e. version-valid-for matches the change counter.
        if self.header.page_count and self.header.version_valid_for == self.header.file_change_counter:
            return self.header.page_count
        return os.fstat(self._f.fileno()).st_size // self.page_size

    def page_header(self, page_num: int) -> PageHeader:
        header = read_page_header(self._f, self.page_size, page_num)
        self._emit(
            "page_header",
            page=page_num,
            type=header.type_name,
            cells=header.cell_count,
            content_start=header.cell_content_start,
        )
        return header

    def cell_pointers(self, page_num: int, header: Optional[PageHeader] = None) -> List[int]:
        if header is None:
            header = self.page_header(page_num)
        pointers = read_cell_pointers(self._f, header, self.page_size, page_num)
        self._emit("cell_pointers", page=page_num, pointers=pointers)
        return pointers

    def read_page(self, page_num: int) -> PageRows:
        """
        Decode every row stored on a table leaf page.

        A cell that fails to decode is recorded in PageRows.errors and the
        remaining cells are still decoded.

        Raises:
            UnsupportedPageError: the page is not a table leaf page
            DecodeError: the page header or cell pointer array is unreadable
        """
        header = self.page_header(page_num)
        if not header.is_leaf_table:
            raise UnsupportedPageError(
                f"page {page_num} is a {header.type_name} page; only leaf table pages are decoded"
            )

        pointers = self.cell_pointers(page_num, header)
        encoding = self.header.encoding
        rows: List[Row] = []
        errors: List[CellError] = []

        for i, ptr in enumerate(pointers):
            try:
                raw = read_raw_record(self._f, ptr, self.page_size, page_num, self.header.usable_size)
                row = decode_record(raw, encoding)
            except DecodeError as e:
                logger.warning(f"Page {page_num}: skipping cell [{i}] at offset {ptr}: {e}")
                errors.append(CellError(i, ptr, e))
                continue
            self._emit("row", page=page_num, cell=i, offset=ptr, rowid=row.row_id, columns=len(row.columns))
            rows.append(row)

        return PageRows(page_num=page_num, header=header, rows=rows, errors=errors)

    def read_rows(self, page_num: int) -> List[Row]:
        return self.read_page(page_num).rows

    def schema(self) -> List[SchemaEntry]:
        """Decode the schema table on page 1."""
        return parse_schema(self.read_rows(SCHEMA_PAGE))

    def find_table(self, name: str) -> SchemaEntry:
        for entry in self.schema():
            if entry.type == "table" and entry.name.lower() == name.lower():
                return entry
        raise KeyError(f"no such table: {name}")

    def table_rows(self, name: str) -> PageRows:
        """Decode the rows of a table whose b-tree is a single leaf page."""
        entry = self.find_table(name)
        self._emit("table", name=entry.name, rootpage=entry.rootpage)
        return self.read_page(entry.rootpage)

    def dbinfo(self) -> DbInfo:
        return DbInfo(
            page_size=self.page_size,
            table_count=self.page_header(SCHEMA_PAGE).cell_count,
            page_count=self.page_count,
            text_encoding=self.header.encoding,
        )
