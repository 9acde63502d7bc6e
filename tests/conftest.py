# Shared pytest fixtures
from __future__ import annotations
import json
import tempfile
from pathlib import Path

import pytest

from recordgrid.logging.init import reset_logging
from recordgrid.services.store import DataStore


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        monkeypatch.chdir(p)
        yield p


@pytest.fixture()
def sample_options_yaml() -> str:
    return """max_file_size: 1048576
max_nesting_depth: 2
validation_rules:
  age:
    - kind: min
      value: 0
    - kind: max
      value: 150
      message: Age looks wrong
  email:
    - kind: required
    - kind: pattern
      value: "^[^@]+@[^@]+$"
"""


@pytest.fixture()
def write_options(temp_workdir: Path, sample_options_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "options.yml"
    cfg.write_text(sample_options_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def people_records() -> list[dict]:
    return [
        {"name": "Alice", "age": 30, "active": True, "joined": "2024-01-15"},
        {"name": "Bob", "age": 25, "active": False, "joined": "2023-11-02"},
        {"name": "Carol", "age": 41, "active": True, "joined": "2022-06-30"},
        {"name": "Dave", "age": 19, "active": True, "joined": "2021-03-08"},
    ]


@pytest.fixture()
def people_json(people_records: list[dict]) -> str:
    return json.dumps(people_records)


@pytest.fixture()
def store() -> DataStore:
    return DataStore()


@pytest.fixture()
def loaded_store(store: DataStore, people_json: str) -> DataStore:
    store.load(people_json, "people.json")
    return store


@pytest.fixture()
def notifications(store: DataStore) -> list:
    """Statuses observed by a subscriber, one entry per notification."""
    seen: list = []
    store.subscribe(lambda: seen.append(store.get_state().status))
    return seen


@pytest.fixture()
def clean_logging():
    reset_logging()
    yield
    reset_logging()
