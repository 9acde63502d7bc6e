"""recordgrid: load -> review -> correct -> export over JSON record arrays.

Parses a JSON array of flat records into a typed table, validates every cell
against its inferred type and per-column rules, and keeps the result in an
observable DataStore that supports cell-by-cell correction.
"""

from .models import (
    CellEdit,
    CellType,
    Column,
    DataSet,
    ErrorKind,
    RecordGridError,
    Row,
    RuleKind,
    StoreOptions,
    StoreStatus,
    ValidationError,
    ValidationRule,
)
from .parsing.reader import parse
from .services.file_source import LocalFile
from .services.store import DataStore
from .services.validation import validate_all_rows, validate_cell, validate_row

__all__ = [
    "DataStore",
    "LocalFile",
    "parse",
    "validate_cell",
    "validate_row",
    "validate_all_rows",
    "CellEdit",
    "CellType",
    "Column",
    "DataSet",
    "Row",
    "RuleKind",
    "StoreOptions",
    "StoreStatus",
    "ValidationError",
    "ValidationRule",
    "ErrorKind",
    "RecordGridError",
]
