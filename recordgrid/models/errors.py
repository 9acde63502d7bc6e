from __future__ import annotations

from enum import Enum

"""Load-time error family for the JSON -> table pipeline.

Every failure raised by the parser (and every failure the store records in
its error state) is a RecordGridError carrying a machine-readable ErrorKind
and a human message, so callers can catch broadly or branch on ``kind``.
"""

__all__ = [
    "ErrorKind",
    "RecordGridError",
    "ParseError",
    "FileSizeError",
    "NestingDepthError",
    "FileReadError",
]


class ErrorKind(Enum):
    """Machine-readable failure codes (UPPER_SNAKE, stable for UI branching)."""
    SIZE_LIMIT_EXCEEDED = "SIZE_LIMIT_EXCEEDED"
    EMPTY_INPUT = "EMPTY_INPUT"
    MALFORMED_JSON = "MALFORMED_JSON"
    WRONG_TOP_LEVEL_SHAPE = "WRONG_TOP_LEVEL_SHAPE"
    EMPTY_DATASET = "EMPTY_DATASET"
    INVALID_RECORD_SHAPE = "INVALID_RECORD_SHAPE"
    UNSUPPORTED_NESTED_ARRAY = "UNSUPPORTED_NESTED_ARRAY"
    NESTING_DEPTH_EXCEEDED = "NESTING_DEPTH_EXCEEDED"
    NO_COLUMNS_FOUND = "NO_COLUMNS_FOUND"
    FILE_READ_FAILURE = "FILE_READ_FAILURE"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


class RecordGridError(Exception):
    """Base exception for every load failure."""

    def __init__(self, kind: ErrorKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message

    @property
    def code(self) -> str:
        return self.kind.value


class ParseError(RecordGridError):
    """Raised when the input text cannot be turned into a DataSet."""

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        *,
        record_index: int | None = None,
        key: str | None = None,
    ) -> None:
        super().__init__(kind, message)
        self.record_index = record_index
        self.key = key


class FileSizeError(RecordGridError):
    """Raised when the encoded input is larger than the configured maximum."""

    def __init__(self, size: int, max_size: int) -> None:
        super().__init__(
            ErrorKind.SIZE_LIMIT_EXCEEDED,
            f"File size {size / 1024 / 1024:.2f}MB exceeds maximum allowed size "
            f"of {max_size / 1024 / 1024:.2f}MB",
        )
        self.size = size
        self.max_size = max_size


class NestingDepthError(ParseError):
    """Raised when a nested object goes deeper than max_nesting_depth."""

    def __init__(self, record_index: int, key: str, max_depth: int) -> None:
        super().__init__(
            ErrorKind.NESTING_DEPTH_EXCEEDED,
            f'Unsupported structure: deeply nested object at record {record_index}, '
            f'key "{key}". Maximum nesting depth is {max_depth}',
            record_index=record_index,
            key=key,
        )
        self.max_depth = max_depth


class FileReadError(RecordGridError):
    def __init__(self, message: str) -> None:
        super().__init__(ErrorKind.FILE_READ_FAILURE, message)
