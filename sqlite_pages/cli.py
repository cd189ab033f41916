#!/usr/bin/env python3
"""
Inspect the pages of a SQLite database file without SQLite.

Usage:
    sqlite-pages <db-file> .dbinfo
    sqlite-pages <db-file> .tables
    sqlite-pages <db-file> .rows <table>
    sqlite-pages <db-file> .page <page-num> [--cells]
"""

import argparse
import logging
import os
import sys
from typing import List, Optional

from .errors import DecodeError
from .reader import DatabaseFile, log_trace
from .record import Row
from .schema import user_tables

COMMANDS = (".dbinfo", ".tables", ".rows", ".page")


def setup_logging(verbose: bool = False):
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def format_value(value) -> str:
    if value is None:
        return ""
    if isinstance(value, bytes):
        return f"x'{value.hex()}'"
    return str(value)


def format_row(row: Row) -> str:
    return "|".join([str(row.row_id)] + [format_value(v) for v in row.values])


def cmd_dbinfo(db: DatabaseFile) -> None:
    info = db.dbinfo()
    print(f"database page size: {info.page_size}")
    print(f"number of tables: {info.table_count}")


def cmd_tables(db: DatabaseFile) -> None:
    print(" ".join(e.name for e in user_tables(db.schema())))


def cmd_rows(db: DatabaseFile, table: str) -> None:
    page = db.table_rows(table)
    for row in page.rows:
        print(format_row(row))
    for err in page.errors:
        print(f"Error: cell [{err.cell_index}] at offset {err.cell_offset}: {err.error}", file=sys.stderr)


def cmd_page(db: DatabaseFile, page_num: int, show_cells: bool) -> None:
    header = db.page_header(page_num)

    print(f"Page {page_num}")
    print("=" * 60)
    print(f"  Type:            0x{header.page_type:02x} ({header.type_name})")
    print(f"  Cell count:      {header.cell_count}")
    print(f"  Content start:   {header.cell_content_start}")
    print(f"  First freeblock: {header.first_freeblock}")
    print(f"  Fragmented:      {header.fragmented_bytes} bytes")
    print(f"  Header size:     {header.header_size} bytes")

    if header.rightmost_ptr is not None:
        print(f"  Rightmost ptr:   {header.rightmost_ptr}")

    if show_cells:
        pointers = db.cell_pointers(page_num, header)
        print(f"\nCell Pointers ({len(pointers)}):")
        print("-" * 40)
        for i, ptr in enumerate(pointers):
            print(f"  [{i:3d}] offset {ptr}")


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Inspect the pages of a SQLite database file")
    parser.add_argument("db_path", help="Path to database file")
    parser.add_argument("command", choices=COMMANDS, help="What to show")
    parser.add_argument("target", nargs="?", help="Table name for .rows, page number (1-indexed) for .page")
    parser.add_argument("--cells", action="store_true", help="Show cell pointer details (.page)")
    parser.add_argument("--trace", action="store_true", help="Log every decoded page, pointer array and row")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)

    setup_logging(args.verbose or args.trace)

    if args.command in (".rows", ".page") and args.target is None:
        parser.error(f"{args.command} needs a target")

    page_num = None
    if args.command == ".page":
        try:
            page_num = int(args.target)
        except ValueError:
            parser.error(f"invalid page number: {args.target}")

    if not os.path.exists(args.db_path):
        print(f"Error: Database not found: {args.db_path}", file=sys.stderr)
        return 1

    try:
        with DatabaseFile(args.db_path, trace=log_trace if args.trace else None) as db:
            if args.command == ".dbinfo":
                cmd_dbinfo(db)
            elif args.command == ".tables":
                cmd_tables(db)
            elif args.command == ".rows":
                cmd_rows(db, args.target)
            else:
                cmd_page(db, page_num, args.cells)
    except KeyError as e:
        print(f"Error: {e.args[0]}", file=sys.stderr)
        return 1
    except (DecodeError, OSError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
