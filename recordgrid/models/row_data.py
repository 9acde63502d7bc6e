from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .validation_error import ValidationError

"""Row model for the JSON table store.

A Row is one input record: its cell values keyed by column key plus the
validation errors found for those cells. Edits never touch a Row in place;
they build a new Row with the same id.
"""

__all__ = [
    "Row",
]


@dataclass(frozen=True)
class Row:
    """One record after coercion and validation.

    ``errors`` only holds keys with at least one error; a missing key means
    the cell is valid.
    """
    id: str  # Opaque, unique within the process
    cells: dict[str, Any]  # Column key -> CellValue
    errors: dict[str, list[ValidationError]] = field(default_factory=dict)

    @property
    def has_errors(self) -> bool:
        return bool(self.errors)
