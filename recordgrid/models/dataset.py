from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Union

from .config_models import ValidationRule
from .row_data import Row

"""Table-level domain models: CellType, Column, DataSetMetadata, DataSet.

A DataSet is produced once per load and then replaced wholesale on every
edit; unchanged Row and Column objects are shared between successive
DataSets rather than copied.
"""

__all__ = [
    "CellType",
    "CellValue",
    "CellEdit",
    "Column",
    "DataSetMetadata",
    "DataSet",
]

CellValue = Union[str, int, float, bool, None]


class CellType(Enum):
    """Inferred column type."""
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    DATE = "date"


@dataclass(frozen=True)
class Column:
    """Inferred schema entry for one key of the input records."""
    key: str  # Record key (unique within a DataSet)
    label: str  # Display name derived from key
    type: CellType
    validation: list[ValidationRule] = field(default_factory=list)


@dataclass(frozen=True)
class DataSetMetadata:
    source_name: str
    row_count: int
    column_count: int
    imported_at: str  # ISO8601 UTC, 'Z' suffix


@dataclass(frozen=True)
class DataSet:
    """Typed table: ordered columns, ordered rows and import metadata."""
    columns: list[Column]
    rows: list[Row]
    metadata: DataSetMetadata


@dataclass(frozen=True)
class CellEdit:
    """One entry of a batch edit."""
    row_id: str
    column_key: str
    value: CellValue
