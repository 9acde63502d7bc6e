from __future__ import annotations
import pytest
from pathlib import Path
from recordgrid.config.loader import (
    ENV_MAX_FILE_SIZE,
    ENV_MAX_NESTING_DEPTH,
    ConfigError,
    load_options,
    options_from_dict,
)
from recordgrid.models import RuleKind, StoreOptions, ValidationRule


@pytest.fixture(autouse=True)
def _clear_env(monkeypatch):
    # setenv("") records the original value so dotenv writes are undone at teardown
    monkeypatch.setenv(ENV_MAX_FILE_SIZE, "")
    monkeypatch.setenv(ENV_MAX_NESTING_DEPTH, "")


def test_load_options_success(write_options: Path):
    options = load_options(write_options)
    assert options.max_file_size == 1048576
    assert options.max_nesting_depth == 2
    assert options.validation_rules["age"] == [
        ValidationRule(RuleKind.MIN, 0),
        ValidationRule(RuleKind.MAX, 150, "Age looks wrong"),
    ]
    assert [r.kind for r in options.validation_rules["email"]] == [RuleKind.REQUIRED, RuleKind.PATTERN]


def test_load_options_defaults_without_file():
    assert load_options() == StoreOptions()


def test_load_options_empty_file(temp_workdir: Path):
    path = temp_workdir / "config" / "empty.yml"
    path.write_text("", encoding="utf-8")
    assert load_options(path) == StoreOptions()


def test_load_options_missing_file(temp_workdir: Path):
    missing = temp_workdir / "config" / "not_exists.yml"
    with pytest.raises(ConfigError, match="not found"):
        load_options(missing)


def test_load_options_invalid_yaml(temp_workdir: Path):
    path = temp_workdir / "config" / "bad.yml"
    path.write_text("max_file_size: [1, 2\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="invalid yaml"):
        load_options(path)


def test_load_options_not_a_mapping(temp_workdir: Path):
    path = temp_workdir / "config" / "list.yml"
    path.write_text("- 1\n- 2\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="mapping"):
        load_options(path)


def test_load_options_extra_field(write_options: Path):
    text = write_options.read_text(encoding="utf-8") + "\nextra_field: not_allowed\n"
    write_options.write_text(text, encoding="utf-8")
    with pytest.raises(ConfigError) as e:
        load_options(write_options)
    assert "options validation failed" in str(e.value)


def test_load_options_unknown_rule_kind(write_options: Path):
    text = write_options.read_text(encoding="utf-8").replace("kind: required", "kind: unique")
    write_options.write_text(text, encoding="utf-8")
    with pytest.raises(ConfigError, match="options validation failed"):
        load_options(write_options)


def test_load_options_bad_pattern(temp_workdir: Path):
    path = temp_workdir / "config" / "pattern.yml"
    path.write_text('validation_rules:\n  code:\n    - kind: pattern\n      value: "([a-z"\n', encoding="utf-8")
    with pytest.raises(ConfigError, match="invalid rule for column 'code'"):
        load_options(path)


def test_env_overrides_file_values(write_options: Path, monkeypatch):
    monkeypatch.setenv(ENV_MAX_FILE_SIZE, "2048")
    monkeypatch.setenv(ENV_MAX_NESTING_DEPTH, "0")
    options = load_options(write_options)
    assert options.max_file_size == 2048
    assert options.max_nesting_depth == 0
    assert "age" in options.validation_rules


def test_env_override_must_be_integer(monkeypatch):
    monkeypatch.setenv(ENV_MAX_FILE_SIZE, "big")
    with pytest.raises(ConfigError, match="must be an integer"):
        load_options()


def test_env_override_file_size_must_be_positive(monkeypatch):
    monkeypatch.setenv(ENV_MAX_FILE_SIZE, "0")
    with pytest.raises(ConfigError, match="positive"):
        load_options()


def test_env_file_is_loaded(temp_workdir: Path):
    env_file = temp_workdir / ".env"
    env_file.write_text(f"{ENV_MAX_NESTING_DEPTH}=3\n", encoding="utf-8")
    options = load_options(env_file=env_file)
    assert options.max_nesting_depth == 3


def test_options_from_dict_partial():
    options = options_from_dict({"max_nesting_depth": 4})
    assert options.max_nesting_depth == 4
    assert options.max_file_size == StoreOptions().max_file_size
    assert options.validation_rules == {}
