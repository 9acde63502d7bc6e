"""Domain models for the JSON table store.

This package contains the data model shared by the parser, the validator and
the DataStore: columns, rows, data sets, rules, errors and store states.
"""

from .config_models import RuleKind, StoreOptions, ValidationRule
from .dataset import CellEdit, CellType, CellValue, Column, DataSet, DataSetMetadata
from .error_record import ErrorRecord
from .errors import (
    ErrorKind,
    FileReadError,
    FileSizeError,
    NestingDepthError,
    ParseError,
    RecordGridError,
)
from .row_data import Row
from .store_state import (
    ErrorState,
    IdleState,
    LoadedState,
    LoadingState,
    StoreState,
    StoreStatus,
)
from .validation_error import ValidationError

__all__ = [
    # Configuration models
    "RuleKind",
    "StoreOptions",
    "ValidationRule",
    # Table models
    "CellEdit",
    "CellType",
    "CellValue",
    "Column",
    "DataSet",
    "DataSetMetadata",
    "Row",
    "ValidationError",
    "ErrorRecord",
    # Errors
    "ErrorKind",
    "RecordGridError",
    "ParseError",
    "FileSizeError",
    "NestingDepthError",
    "FileReadError",
    # Store states
    "StoreStatus",
    "StoreState",
    "IdleState",
    "LoadingState",
    "LoadedState",
    "ErrorState",
]
