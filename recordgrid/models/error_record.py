from __future__ import annotations

import json
from dataclasses import asdict, dataclass

from .row_data import Row

"""ErrorRecord model for validation error reports.

Flattens the per-row ``errors`` mapping into one record per failed check so
a review tool (or a submission pipeline rejecting bad rows) can consume them
as JSON Lines. The key set of a serialized record is fixed.
"""

__all__ = [
    "ErrorRecord",
]


@dataclass(frozen=True)
class ErrorRecord:
    """One validation error, addressed by row and column.

    Attributes:
        row_id: Opaque id of the row holding the error
        row_index: 0-based position of the row in the DataSet
        column: Column key of the offending cell
        rule: Rule kind value (e.g. "min", "type")
        message: Human-readable error message
    """
    row_id: str
    row_index: int
    column: str
    rule: str
    message: str

    @staticmethod
    def from_row(row: Row, row_index: int) -> list[ErrorRecord]:
        """Expand a row's errors into records, in column-key order of the row."""
        records: list[ErrorRecord] = []
        for column_key, errors in row.errors.items():
            for err in errors:
                records.append(
                    ErrorRecord(
                        row_id=row.id,
                        row_index=row_index,
                        column=column_key,
                        rule=err.rule.value,
                        message=err.message,
                    )
                )
        return records

    def to_json_line(self) -> str:
        """Serialize to a single JSON line (no extra keys)."""
        return json.dumps(asdict(self), ensure_ascii=False)
