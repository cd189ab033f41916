"""
Exceptions raised while decoding a database file.

Everything derives from DecodeError so callers can isolate a bad cell or page
with a single except clause.
"""


class DecodeError(Exception):
    pass


class ShortReadError(DecodeError):
    """The file ended before a read at a known offset could be satisfied."""

    def __init__(self, offset: int, expected: int, actual: int) -> None:
        super().__init__(f"short read at offset {offset}: wanted {expected} bytes, got {actual}")
        self.offset = offset
        self.expected = expected
        self.actual = actual


class TruncatedVarintError(DecodeError):
    pass


class MalformedHeaderError(DecodeError):
    pass


class UnknownPageTypeError(DecodeError):
    def __init__(self, page_type: int, offset: int) -> None:
        super().__init__(f"unknown page type 0x{page_type:02x} at offset {offset}")
        self.page_type = page_type
        self.offset = offset


class ReservedSerialTypeError(DecodeError):
    def __init__(self, type_code: int) -> None:
        super().__init__(f"reserved serial type {type_code}")
        self.type_code = type_code


class NotADatabaseError(DecodeError):
    pass


class OverflowPayloadError(DecodeError):
    pass


class UnsupportedPageError(DecodeError):
    pass
