from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

"""Configuration dataclasses for the JSON table store.

ValidationRule is the declarative per-column constraint; StoreOptions bundles
the limits and rule set applied when a store parses and validates input.
Both are frozen: the store copies rule lists before extending them.
"""

__all__ = [
    "RuleKind",
    "ValidationRule",
    "StoreOptions",
    "DEFAULT_MAX_FILE_SIZE",
    "DEFAULT_MAX_NESTING_DEPTH",
]

DEFAULT_MAX_FILE_SIZE = 5 * 1024 * 1024  # 5MB
DEFAULT_MAX_NESTING_DEPTH = 1


class RuleKind(Enum):
    """Rule kinds a column can be configured with.

    TYPE is reserved for type-conformance errors produced by the validator;
    it cannot be configured as a rule.
    """
    REQUIRED = "required"
    MIN = "min"
    MAX = "max"
    PATTERN = "pattern"
    MIN_LENGTH = "min-length"
    MAX_LENGTH = "max-length"
    TYPE = "type"


@dataclass(frozen=True)
class ValidationRule:
    """Declarative constraint evaluated against a single cell value.

    ``value`` is the operand: a number for min/max/min-length/max-length,
    a regular expression string for pattern, unused for required.
    ``message`` overrides the default error message.
    """
    kind: RuleKind
    value: float | int | str | None = None
    message: str | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.kind, RuleKind):
            # "min-length" 等の文字列指定も受け付ける
            object.__setattr__(self, "kind", RuleKind(self.kind))
        if self.kind is RuleKind.TYPE:
            raise ValueError("'type' is reported by the validator and cannot be configured")
        if self.kind is RuleKind.PATTERN and isinstance(self.value, str):
            try:
                re.compile(self.value)
            except re.error as e:
                raise ValueError(f"invalid pattern {self.value!r}: {e}") from e

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ValidationRule:
        """Build a rule from its mapping form ``{kind, value?, message?}``."""
        return cls(
            kind=RuleKind(data["kind"]),
            value=data.get("value"),
            message=data.get("message"),
        )


@dataclass(frozen=True)
class StoreOptions:
    """Limits and rules applied by a DataStore at load time."""
    max_file_size: int = DEFAULT_MAX_FILE_SIZE  # bytes of UTF-8 encoded input
    max_nesting_depth: int = DEFAULT_MAX_NESTING_DEPTH  # record top level = 0
    validation_rules: dict[str, list[ValidationRule]] = field(default_factory=dict)
