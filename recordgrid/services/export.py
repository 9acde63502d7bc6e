from __future__ import annotations

import pandas as pd

from ..models.dataset import CellValue, Column
from ..models.error_record import ErrorRecord
from ..models.row_data import Row

"""Export helpers: hand-off payloads for downstream consumers.

- export_rows: plain per-row value mappings (row id and errors stripped)
- to_dataframe: the same payload as a pandas DataFrame, columns in DataSet order
- collect_error_records / render_error_report: validation errors as JSON Lines
"""

__all__ = [
    "export_rows",
    "to_dataframe",
    "collect_error_records",
    "render_error_report",
]


def export_rows(rows: list[Row]) -> list[dict[str, CellValue]]:
    # cells をコピーして返す (呼び出し側の変更が Row に波及しない)
    return [dict(row.cells) for row in rows]


def to_dataframe(columns: list[Column], rows: list[Row]) -> pd.DataFrame:
    """Exported rows as a DataFrame.

    dtype=object keeps cell values exactly as stored (None stays None, ints are
    not widened to float).
    """
    return pd.DataFrame(
        {
            c.key: pd.Series([row.cells.get(c.key) for row in rows], dtype=object)
            for c in columns
        },
        index=pd.RangeIndex(len(rows)),
    )


def collect_error_records(rows: list[Row]) -> list[ErrorRecord]:
    records: list[ErrorRecord] = []
    for index, row in enumerate(rows):
        if row.errors:
            records.extend(ErrorRecord.from_row(row, index))
    return records


def render_error_report(records: list[ErrorRecord]) -> str:
    """Join records as JSON Lines (trailing newline when non-empty)."""
    if not records:
        return ""
    return "\n".join(r.to_json_line() for r in records) + "\n"
