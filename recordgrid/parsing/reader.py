from __future__ import annotations

import itertools
import json
import logging
import re
from datetime import UTC, datetime
from typing import Any

from ..models.config_models import DEFAULT_MAX_FILE_SIZE, DEFAULT_MAX_NESTING_DEPTH
from ..models.dataset import CellType, CellValue, Column, DataSet, DataSetMetadata
from ..models.errors import ErrorKind, FileSizeError, NestingDepthError, ParseError
from ..models.row_data import Row
from .dates import looks_like_date

"""JSON reader and schema inference.

Turns a JSON text blob into an (unvalidated) DataSet:

1. Structural checks, in order, stopping at the first failure:
   size -> empty -> JSON syntax -> top-level array -> non-empty ->
   record shapes -> no arrays at any depth -> nesting depth -> first record has keys
   (each of the last three passes covers every record before the next starts)
2. Columns come from the first record's keys, in their original order
3. Each column's type is the majority classification of its non-null values
4. Every record becomes a Row with exactly one cell per column

Rows leave this module with empty ``errors``; validation is a separate step.
"""

__all__ = [
    "parse",
    "infer_column_type",
    "detect_value_type",
    "format_label",
    "coerce_value",
    "generate_row_id",
]

logger = logging.getLogger(__name__)

_row_counter = itertools.count(1)


def _reject_constant(name: str) -> Any:
    # NaN / Infinity / -Infinity は JSON ではない
    raise ValueError(f"non-standard JSON constant: {name}")


def parse(
    text: str,
    *,
    max_file_size: int = DEFAULT_MAX_FILE_SIZE,
    max_nesting_depth: int = DEFAULT_MAX_NESTING_DEPTH,
    source_name: str = "unknown",
) -> DataSet:
    """Parse a JSON array of flat records into a DataSet.

    Parameters
    ----------
    text: raw JSON text
    max_file_size: UTF-8 byte limit for ``text``
    max_nesting_depth: deepest nested object allowed (record top level = 0)
    source_name: recorded in the DataSet metadata

    Raises
    ------
    RecordGridError subclass (FileSizeError, ParseError, NestingDepthError)
    """
    byte_size = len(text.encode("utf-8", errors="surrogatepass"))
    if byte_size > max_file_size:
        raise FileSizeError(byte_size, max_file_size)

    if not text.strip():
        raise ParseError(ErrorKind.EMPTY_INPUT, "File is empty")

    try:
        parsed = json.loads(text, parse_constant=_reject_constant)
    except (ValueError, RecursionError) as e:
        raise ParseError(
            ErrorKind.MALFORMED_JSON, "Invalid JSON: file could not be parsed"
        ) from e

    if not isinstance(parsed, list):
        raise ParseError(
            ErrorKind.WRONG_TOP_LEVEL_SHAPE,
            "Unsupported structure: expected a JSON array of objects",
        )

    if not parsed:
        raise ParseError(
            ErrorKind.EMPTY_DATASET, "Empty dataset: the JSON array contains no records"
        )

    for index, record in enumerate(parsed):
        if not isinstance(record, dict):
            raise ParseError(
                ErrorKind.INVALID_RECORD_SHAPE,
                f"Invalid record at index {index}: expected a flat object",
                record_index=index,
            )
    for index, record in enumerate(parsed):
        _reject_arrays(record, index)
    for index, record in enumerate(parsed):
        _check_depth(record, index, max_nesting_depth, 0)

    records: list[dict[str, Any]] = parsed
    column_keys = list(records[0].keys())
    if not column_keys:
        raise ParseError(
            ErrorKind.NO_COLUMNS_FOUND, "No columns found: the first record has no keys"
        )

    columns = [
        Column(key=key, label=format_label(key), type=infer_column_type(records, key))
        for key in column_keys
    ]
    rows = [
        Row(id=generate_row_id(index), cells=_build_cells(record, columns))
        for index, record in enumerate(records)
    ]
    logger.debug(
        "parsed source=%s rows=%d columns=%s",
        source_name,
        len(rows),
        [(c.key, c.type.value) for c in columns],
    )

    return DataSet(
        columns=columns,
        rows=rows,
        metadata=DataSetMetadata(
            source_name=source_name,
            row_count=len(rows),
            column_count=len(columns),
            imported_at=datetime.now(UTC).isoformat().replace("+00:00", "Z"),
        ),
    )


def _reject_arrays(obj: dict[str, Any], record_index: int) -> None:
    """Arrays are never allowed as values, however deep the object holding them.

    Walks depth-first in key order with an explicit stack (no depth cutoff).
    """
    stack = [iter(obj.items())]
    while stack:
        item = next(stack[-1], None)
        if item is None:
            stack.pop()
            continue
        key, value = item
        if isinstance(value, list):
            raise ParseError(
                ErrorKind.UNSUPPORTED_NESTED_ARRAY,
                f'Unsupported structure: array value at record {record_index}, '
                f'key "{key}". Only flat objects are supported',
                record_index=record_index,
                key=key,
            )
        if isinstance(value, dict):
            stack.append(iter(value.items()))


def _check_depth(
    obj: dict[str, Any], record_index: int, max_depth: int, current_depth: int
) -> None:
    for key, value in obj.items():
        if isinstance(value, dict):
            if current_depth >= max_depth:
                raise NestingDepthError(record_index, key, max_depth)
            _check_depth(value, record_index, max_depth, current_depth + 1)


def infer_column_type(records: list[dict[str, Any]], key: str) -> CellType:
    """Majority type of the non-null values at ``key``.

    Ties go to the classification seen first in row order; a column with no
    values at all is STRING.
    """
    type_counts: dict[CellType, int] = {}  # 挿入順 = 初出順
    for record in records:
        value = record.get(key)
        if value is None:
            continue
        detected = detect_value_type(value)
        type_counts[detected] = type_counts.get(detected, 0) + 1

    best_type = CellType.STRING
    best_count = 0
    for cell_type, count in type_counts.items():
        if count > best_count:
            best_type = cell_type
            best_count = count
    return best_type


def detect_value_type(value: Any) -> CellType:
    # bool は int のサブクラスなので先に判定
    if isinstance(value, bool):
        return CellType.BOOLEAN
    if isinstance(value, (int, float)):
        return CellType.NUMBER
    if isinstance(value, str) and looks_like_date(value):
        return CellType.DATE
    return CellType.STRING


_CAMEL_BOUNDARY = re.compile(r"([a-z])([A-Z])")
_SEPARATORS = re.compile(r"[_-]")
_WORD_START = re.compile(r"\b\w")


def format_label(key: str) -> str:
    """Human-readable label: "firstName" / "first_name" -> "First Name"."""
    label = _CAMEL_BOUNDARY.sub(r"\1 \2", key)
    label = _SEPARATORS.sub(" ", label)
    return _WORD_START.sub(lambda m: m.group(0).upper(), label)


def _build_cells(record: dict[str, Any], columns: list[Column]) -> dict[str, CellValue]:
    # 2件目以降の余分なキーは無視、欠落キーは None
    return {column.key: coerce_value(record.get(column.key)) for column in columns}


def coerce_value(value: Any) -> CellValue:
    """Map a raw JSON value to a storable cell value.

    Nested objects are stored as their compact JSON text; they never become
    sub-columns.
    """
    if value is None:
        return None
    if isinstance(value, (str, bool, int, float)):
        return value
    if isinstance(value, dict):
        return json.dumps(value, ensure_ascii=False, separators=(",", ":"))
    return str(value)


def generate_row_id(index: int) -> str:
    """Opaque row id, unique for the life of the process."""
    return f"row-{index}-{next(_row_counter)}"
