from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import replace
from typing import Any

import pandas as pd

from ..logging.init import log_summary
from ..models.config_models import StoreOptions, ValidationRule
from ..models.dataset import CellEdit, CellValue, Column, DataSet
from ..models.error_record import ErrorRecord
from ..models.errors import (
    ErrorKind,
    FileReadError,
    FileSizeError,
    RecordGridError,
)
from ..models.row_data import Row
from ..models.store_state import (
    ErrorState,
    IdleState,
    LoadedState,
    LoadingState,
    StoreState,
)
from ..parsing.reader import parse
from .export import collect_error_records, export_rows, to_dataframe
from .file_source import SourceFile
from .summary import count_errors, render_summary_line
from .validation import validate_all_rows, validate_cell

"""DataStore: observable, copy-on-write holder of the current DataSet.

Orchestrates parse -> validate on load and localized re-validation on edit.

- Every mutating call replaces the whole state object, then notifies
  subscribers once per replacement (load passes through LOADING first).
- Load failures never escape: they become ErrorState.
- Edits rebuild only the touched Row; all other Row objects, the columns list
  and the metadata are shared with the previous DataSet.
- A no-op edit (not loaded / unknown row / unknown column) changes nothing
  and notifies nobody.
"""

__all__ = [
    "DataStore",
    "Subscriber",
    "Unsubscribe",
]

logger = logging.getLogger(__name__)

Subscriber = Callable[[], None]
Unsubscribe = Callable[[], None]


def _apply_edit(row: Row, column: Column, value: CellValue) -> Row:
    """New Row with one cell replaced and that cell re-validated."""
    cells = {**row.cells, column.key: value}
    errors = dict(row.errors)
    cell_errors = validate_cell(value, column)
    if cell_errors:
        errors[column.key] = cell_errors
    else:
        # 空リストは保持しない
        errors.pop(column.key, None)
    return replace(row, cells=cells, errors=errors)


class DataStore:
    """Single-owner state machine over one DataSet.

    State transitions: idle → loading → (loaded | error); reset() → idle.
    """

    def __init__(self, options: StoreOptions | None = None) -> None:
        self._options = options if options is not None else StoreOptions()
        # options 側の dict/list を共有しない (add_validation_rules で拡張するため)
        self._validation_rules: dict[str, list[ValidationRule]] = {
            key: list(rules) for key, rules in self._options.validation_rules.items()
        }
        self._state: StoreState = IdleState()
        self._subscribers: dict[Subscriber, None] = {}

    @property
    def options(self) -> StoreOptions:
        return self._options

    @property
    def validation_rules(self) -> dict[str, list[ValidationRule]]:
        """Copy of the store-level rule set, per column key."""
        return {key: list(rules) for key, rules in self._validation_rules.items()}

    # -- State access ---------------------------------------------------

    def get_state(self) -> StoreState:
        return self._state

    def get_snapshot(self) -> StoreState:
        return self._state

    def get_data(self) -> DataSet | None:
        if isinstance(self._state, LoadedState):
            return self._state.data
        return None

    def get_rows(self) -> list[Row]:
        data = self.get_data()
        return data.rows if data is not None else []

    def get_columns(self) -> list[Column]:
        data = self.get_data()
        return data.columns if data is not None else []

    def get_row(self, row_id: str) -> Row | None:
        for row in self.get_rows():
            if row.id == row_id:
                return row
        return None

    def get_cell_value(self, row_id: str, column_key: str, default: Any = None) -> CellValue | Any:
        """Cell value, or ``default`` when the row or the column does not exist.

        A null cell returns None; pass a sentinel ``default`` to tell a missing
        row or column apart from a null cell (same contract as ``dict.get``).
        """
        row = self.get_row(row_id)
        if row is None or column_key not in row.cells:
            return default
        return row.cells[column_key]

    def get_error_count(self) -> int:
        """Number of (row, column) pairs carrying at least one error."""
        return count_errors(self.get_rows())

    def get_rows_with_errors(self) -> list[Row]:
        return [row for row in self.get_rows() if row.errors]

    def export_data(self) -> list[dict[str, CellValue]] | None:
        """Plain per-row value mappings, or None when nothing is loaded."""
        data = self.get_data()
        if data is None:
            return None
        return export_rows(data.rows)

    def export_frame(self) -> pd.DataFrame | None:
        data = self.get_data()
        if data is None:
            return None
        return to_dataframe(data.columns, data.rows)

    def get_error_report(self) -> list[ErrorRecord]:
        return collect_error_records(self.get_rows())

    # -- Loading --------------------------------------------------------

    def load(self, text: str, source_name: str = "unknown") -> None:
        """Parse, validate and store ``text``. Never raises a load failure.

        The outcome is observable only through the state: LoadedState on
        success, ErrorState otherwise.
        """
        self._set_state(LoadingState())
        self._set_state(self._build_state(text, source_name))

    load_from_string = load

    async def load_from_file(self, file: SourceFile) -> None:
        """Read ``file`` and load its content.

        The size is checked before reading, so oversized files are never read.
        Read failures end in ErrorState with FILE_READ_FAILURE.
        """
        self._set_state(LoadingState())
        max_size = self._options.max_file_size

        try:
            size = file.size
        except Exception as e:
            self._set_state(self._read_failure(file, e))
            return
        if size > max_size:
            logger.warning("file=%s rejected: size=%d max=%d", file.name, size, max_size)
            self._set_state(ErrorState(error=FileSizeError(size, max_size)))
            return

        try:
            text = await file.text()
        except Exception as e:
            self._set_state(self._read_failure(file, e))
            return

        self.load(text, file.name)

    def _build_state(self, text: str, source_name: str) -> LoadedState | ErrorState:
        try:
            data_set = parse(
                text,
                max_file_size=self._options.max_file_size,
                max_nesting_depth=self._options.max_nesting_depth,
                source_name=source_name,
            )
            columns = self._merge_validation_rules(data_set.columns)
            rows = validate_all_rows(data_set.rows, columns)
        except RecordGridError as e:
            logger.warning("load failed source=%s kind=%s: %s", source_name, e.code, e.message)
            return ErrorState(error=e)
        except Exception as e:
            logger.error("unexpected failure while loading source=%s", source_name, exc_info=True)
            return ErrorState(
                error=RecordGridError(ErrorKind.UNKNOWN_ERROR, str(e) or "An unknown error occurred")
            )

        data = replace(data_set, columns=columns, rows=rows)
        logger.info("loaded source=%s rows=%d", source_name, len(rows))
        summary_line = render_summary_line(data)
        log_summary(summary_line.removeprefix("SUMMARY "), logger)
        return LoadedState(data=data)

    def _read_failure(self, file: SourceFile, exc: Exception) -> ErrorState:
        name = getattr(file, "name", "unknown")
        logger.warning("file=%s read failed: %s", name, exc)
        return ErrorState(error=FileReadError(str(exc) or "Failed to read file"))

    # -- Editing --------------------------------------------------------

    def update_cell(self, row_id: str, column_key: str, value: CellValue) -> None:
        """Set one cell and re-validate only that cell.

        No-op (no state change, no notification) unless a DataSet is loaded
        and both the row and the column exist.
        """
        data = self.get_data()
        if data is None:
            return
        row_index = next((i for i, row in enumerate(data.rows) if row.id == row_id), None)
        if row_index is None:
            return
        column = next((c for c in data.columns if c.key == column_key), None)
        if column is None:
            return

        rows = list(data.rows)
        rows[row_index] = _apply_edit(rows[row_index], column, value)
        self._set_state(LoadedState(data=replace(data, rows=rows)))

    def batch_update_cells(self, edits: Iterable[CellEdit]) -> None:
        """Apply ``edits`` in order and commit them as one state change.

        Edits naming an unknown row or column are skipped. Later edits to the
        same row build on earlier ones.
        """
        data = self.get_data()
        if data is None:
            return

        rows = list(data.rows)
        index_by_id = {row.id: i for i, row in enumerate(rows)}
        columns_by_key = {column.key: column for column in data.columns}
        applied = 0
        skipped = 0
        for edit in edits:
            row_index = index_by_id.get(edit.row_id)
            column = columns_by_key.get(edit.column_key)
            if row_index is None or column is None:
                skipped += 1
                continue
            rows[row_index] = _apply_edit(rows[row_index], column, edit.value)
            applied += 1

        logger.debug("batch update applied=%d skipped=%d", applied, skipped)
        self._set_state(LoadedState(data=replace(data, rows=rows)))

    def add_validation_rules(self, column_key: str, rules: Iterable[ValidationRule]) -> None:
        """Append ``rules`` for ``column_key``.

        When a DataSet is loaded, every column's rule list is rebuilt from the
        store-level rule set and the whole table is re-validated.
        """
        self._validation_rules[column_key] = [
            *self._validation_rules.get(column_key, []),
            *rules,
        ]

        data = self.get_data()
        if data is None:
            return
        columns = self._rebuild_validation(data.columns)
        rows = validate_all_rows(data.rows, columns)
        logger.debug(
            "re-validated rows=%d after adding rules to column=%s", len(rows), column_key
        )
        self._set_state(LoadedState(data=replace(data, columns=columns, rows=rows)))

    # -- State management -----------------------------------------------

    def reset(self) -> None:
        self._set_state(IdleState())

    def subscribe(self, subscriber: Subscriber) -> Unsubscribe:
        """Register a zero-argument callback; returns an idempotent unsubscribe."""
        self._subscribers[subscriber] = None

        def unsubscribe() -> None:
            self._subscribers.pop(subscriber, None)

        return unsubscribe

    def _set_state(self, state: StoreState) -> None:
        self._state = state
        logger.debug("state -> %s", state.status.value)
        self._notify()

    def _notify(self) -> None:
        # コールバック内での unsubscribe に備えてコピーを走査
        for subscriber in list(self._subscribers):
            subscriber()

    def _merge_validation_rules(self, columns: list[Column]) -> list[Column]:
        """Append store-level rules after whatever rules a column already has."""
        merged: list[Column] = []
        for column in columns:
            rules = self._validation_rules.get(column.key)
            if not rules:
                merged.append(column)
                continue
            merged.append(replace(column, validation=[*column.validation, *rules]))
        return merged

    def _rebuild_validation(self, columns: list[Column]) -> list[Column]:
        """Columns whose rule list is exactly the store-level rule set."""
        rebuilt: list[Column] = []
        for column in columns:
            rules = self._validation_rules.get(column.key, [])
            if column.validation == rules:
                rebuilt.append(column)
                continue
            rebuilt.append(replace(column, validation=list(rules)))
        return rebuilt
