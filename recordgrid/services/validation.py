from __future__ import annotations

import math
import re
from dataclasses import replace
from typing import Any

from ..models.config_models import RuleKind, ValidationRule
from ..models.dataset import CellType, CellValue, Column
from ..models.row_data import Row
from ..models.validation_error import ValidationError
from ..parsing.dates import parse_date

"""Cell / row validation service.

Pure functions: the same value, column and rules always produce the same
errors. A cell is checked in two independent passes:

1. Type conformance against ``column.type`` (skipped for None)
2. Every configured rule, in declaration order, each yielding at most one error

Both passes contribute to the same error list. Rules that do not apply to the
value's type (min on a string, pattern on a number, ...) are skipped, since
the type pass already reports the mismatch.
"""

__all__ = [
    "TYPE_MESSAGES",
    "validate_cell",
    "validate_row",
    "validate_all_rows",
]

TYPE_MESSAGES = {
    CellType.NUMBER: "Expected a number value",
    CellType.BOOLEAN: "Expected a boolean value",
    CellType.DATE: "Expected a valid date",
}
REQUIRED_MESSAGE = "This field is required"
PATTERN_MESSAGE = "Value does not match required pattern"

_BOOLEAN_STRINGS = frozenset({"true", "false", "yes", "no", "1", "0"})


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_numeric_string(value: str) -> bool:
    text = value.strip()
    # float() は "1_000" も受け付けるため除外
    if not text or "_" in text:
        return False
    try:
        number = float(text)
    except ValueError:
        return False
    return math.isfinite(number)


def _format_operand(operand: Any) -> str:
    # 5.0 -> "5" (整数値は小数点なしで表示)
    if isinstance(operand, float) and operand.is_integer():
        return str(int(operand))
    return str(operand)


def _conforms(value: CellValue, cell_type: CellType) -> bool:
    if cell_type is CellType.NUMBER:
        if _is_number(value):
            return True
        return isinstance(value, str) and _is_numeric_string(value)
    if cell_type is CellType.BOOLEAN:
        if isinstance(value, bool):
            return True
        return isinstance(value, str) and value.lower() in _BOOLEAN_STRINGS
    if cell_type is CellType.DATE:
        return isinstance(value, str) and parse_date(value) is not None
    return True


def _check_type(value: CellValue, column: Column) -> ValidationError | None:
    if value is None or _conforms(value, column.type):
        return None
    return ValidationError(
        rule=RuleKind.TYPE,
        message=TYPE_MESSAGES[column.type],
        column=column.key,
    )


def _check_rule(value: CellValue, rule: ValidationRule, column_key: str) -> ValidationError | None:
    operand = rule.value
    failed = False
    default_message = ""

    if rule.kind is RuleKind.REQUIRED:
        failed = value is None or value == ""
        default_message = REQUIRED_MESSAGE
    elif rule.kind in (RuleKind.MIN, RuleKind.MAX):
        if _is_number(value) and _is_number(operand):
            failed = value < operand if rule.kind is RuleKind.MIN else value > operand
            bound = "at least" if rule.kind is RuleKind.MIN else "at most"
            default_message = f"Value must be {bound} {_format_operand(operand)}"
    elif rule.kind is RuleKind.PATTERN:
        if isinstance(value, str) and isinstance(operand, str):
            failed = re.search(operand, value) is None
            default_message = PATTERN_MESSAGE
    elif rule.kind in (RuleKind.MIN_LENGTH, RuleKind.MAX_LENGTH):
        if isinstance(value, str) and _is_number(operand):
            if rule.kind is RuleKind.MIN_LENGTH:
                failed = len(value) < operand
            else:
                failed = len(value) > operand
            bound = "at least" if rule.kind is RuleKind.MIN_LENGTH else "at most"
            default_message = f"Value must be {bound} {_format_operand(operand)} characters"

    if not failed:
        return None
    return ValidationError(
        rule=rule.kind,
        message=rule.message if rule.message is not None else default_message,
        column=column_key,
    )


def validate_cell(value: CellValue, column: Column) -> list[ValidationError]:
    """Return every error for ``value`` under ``column``'s type and rules."""
    errors: list[ValidationError] = []

    type_error = _check_type(value, column)
    if type_error is not None:
        errors.append(type_error)

    for rule in column.validation:
        rule_error = _check_rule(value, rule, column.key)
        if rule_error is not None:
            errors.append(rule_error)

    return errors


def validate_row(row: Row, columns: list[Column]) -> dict[str, list[ValidationError]]:
    """Errors per column key; keys without errors are omitted."""
    errors: dict[str, list[ValidationError]] = {}
    for column in columns:
        cell_errors = validate_cell(row.cells.get(column.key), column)
        if cell_errors:
            errors[column.key] = cell_errors
    return errors


def validate_all_rows(rows: list[Row], columns: list[Column]) -> list[Row]:
    """New Row objects with ``errors`` recomputed; input rows are not touched."""
    return [replace(row, errors=validate_row(row, columns)) for row in rows]
