"""
The schema table (sqlite_schema) stored in the b-tree rooted at page 1.

Each row is (type, name, tbl_name, rootpage, sql).
"""

from typing import Iterable, List, NamedTuple, Optional

from .errors import MalformedHeaderError
from .record import Row

SCHEMA_COLUMNS = ("type", "name", "tbl_name", "rootpage", "sql")


class SchemaEntry(NamedTuple):
    type: str
    name: str
    tbl_name: str
    rootpage: int
    sql: Optional[str]
    row_id: int

    @classmethod
    def from_row(cls, row: Row) -> "SchemaEntry":
        values = row.values
        if len(values) != len(SCHEMA_COLUMNS):
            raise MalformedHeaderError(
                f"schema row {row.row_id} has {len(values)} columns, expected {len(SCHEMA_COLUMNS)}"
            )
        obj_type, name, tbl_name, rootpage, sql = values
        for column, value in zip(SCHEMA_COLUMNS, (obj_type, name, tbl_name)):
            if not isinstance(value, str):
                raise MalformedHeaderError(f"schema row {row.row_id}: {column} is {type(value).__name__}, expected text")
        # Views and triggers have no b-tree; their rootpage is stored as 0 or NULL
        return cls(
            type=obj_type,
            name=name,
            tbl_name=tbl_name,
            rootpage=rootpage or 0,
            sql=sql,
            row_id=row.row_id,
        )

    @property
    def is_internal(self) -> bool:
        return self.name.startswith("sqlite_")


def parse_schema(rows: Iterable[Row]) -> List[SchemaEntry]:
    return [SchemaEntry.from_row(row) for row in rows]


def user_tables(entries: Iterable[SchemaEntry]) -> List[SchemaEntry]:
    """Tables as the sqlite3 shell's .tables lists them: no sqlite_ internals."""
    return [e for e in entries if e.type == "table" and not e.is_internal]
