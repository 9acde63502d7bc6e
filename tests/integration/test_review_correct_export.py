from __future__ import annotations

import asyncio
import json
from pathlib import Path

from recordgrid.config.loader import load_options
from recordgrid.models import CellEdit, RuleKind, StoreStatus, ValidationRule
from recordgrid.services.export import render_error_report
from recordgrid.services.file_source import LocalFile
from recordgrid.services.store import DataStore

"""Load -> review -> correct -> export, end to end."""

RECORDS = [
    {"id": 1, "email": "ann@example.com", "age": 34, "signup": "2024-01-15", "vip": True},
    {"id": 2, "email": "bob-at-example", "age": -5, "signup": "2024-02-30", "vip": "maybe"},
    {"id": 3, "email": None, "age": "unknown", "signup": "03/01/2024", "vip": False},
    {"id": 4, "email": "dee@example.com", "age": 52, "signup": "2024-03-09", "vip": False},
]


def test_review_correct_export(write_options: Path, temp_workdir: Path, monkeypatch):
    monkeypatch.setenv("RECORDGRID_MAX_FILE_SIZE", "")
    monkeypatch.setenv("RECORDGRID_MAX_NESTING_DEPTH", "")
    data_file = temp_workdir / "data" / "signups.json"
    data_file.write_text(json.dumps(RECORDS), encoding="utf-8")

    store = DataStore(load_options(write_options))
    statuses: list[StoreStatus] = []
    store.subscribe(lambda: statuses.append(store.get_state().status))

    asyncio.run(store.load_from_file(LocalFile(data_file)))
    assert statuses[-1] is StoreStatus.LOADED

    # review
    invalid = store.get_rows_with_errors()
    assert [r.cells["id"] for r in invalid] == [2, 3]
    bob, cat = invalid
    assert set(bob.errors) == {"email", "age", "signup", "vip"}
    assert set(cat.errors) == {"email", "age"}
    assert store.get_error_count() == 6
    report = render_error_report(store.get_error_report())
    assert len(report.splitlines()) == 6

    # correct
    store.batch_update_cells(
        [
            CellEdit(bob.id, "email", "bob@example.com"),
            CellEdit(bob.id, "age", 45),
            CellEdit(bob.id, "signup", "2024-02-28"),
            CellEdit(bob.id, "vip", "no"),
            CellEdit(cat.id, "email", "cat@example.com"),
        ]
    )
    assert store.get_error_count() == 1
    store.update_cell(cat.id, "age", 29)
    assert store.get_error_count() == 0

    # tighten rules after the fact
    store.add_validation_rules("age", [ValidationRule(RuleKind.MAX, 50, "Too old for the promo")])
    assert [r.cells["id"] for r in store.get_rows_with_errors()] == [4]
    store.update_cell(store.get_rows()[3].id, "age", 50)

    # export
    exported = store.export_data()
    assert store.get_error_count() == 0
    assert exported[1] == {
        "id": 2,
        "email": "bob@example.com",
        "age": 45,
        "signup": "2024-02-28",
        "vip": "no",
    }
    assert [row["age"] for row in exported] == [34, 45, 29, 50]
    frame = store.export_frame()
    assert list(frame["id"]) == [1, 2, 3, 4]


def test_failed_reload_then_reset(loaded_store: DataStore):
    loaded_store.load('[{"a": [1, 2]}]', "arrays.json")
    state = loaded_store.get_state()
    assert state.status is StoreStatus.ERROR
    assert state.error.code == "UNSUPPORTED_NESTED_ARRAY"
    assert loaded_store.get_rows() == []

    loaded_store.reset()
    assert loaded_store.get_state().status is StoreStatus.IDLE
