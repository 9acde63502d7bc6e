from __future__ import annotations

from ..models.dataset import DataSet
from ..models.row_data import Row

"""Summary line rendering for loaded data sets.

Format:
SUMMARY rows={rows} columns={columns} invalid_rows={n} errors={n} source={name}

``errors`` counts cells with at least one error (one per row/column pair),
the same figure DataStore.get_error_count() reports.
"""

__all__ = [
    "count_errors",
    "count_invalid_rows",
    "render_summary_line",
]


def count_errors(rows: list[Row]) -> int:
    return sum(len(row.errors) for row in rows)


def count_invalid_rows(rows: list[Row]) -> int:
    return sum(1 for row in rows if row.errors)


def render_summary_line(data: DataSet) -> str:
    """Render a SUMMARY line for ``data``.

    Examples:
        >>> from recordgrid.models import DataSet, DataSetMetadata
        >>> meta = DataSetMetadata("people.json", 0, 0, "2025-01-01T00:00:00Z")
        >>> render_summary_line(DataSet(columns=[], rows=[], metadata=meta))
        'SUMMARY rows=0 columns=0 invalid_rows=0 errors=0 source=people.json'
    """
    return (
        f"SUMMARY rows={len(data.rows)} "
        f"columns={len(data.columns)} "
        f"invalid_rows={count_invalid_rows(data.rows)} "
        f"errors={count_errors(data.rows)} "
        f"source={data.metadata.source_name}"
    )
