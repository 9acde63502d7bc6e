from __future__ import annotations

from dataclasses import dataclass

from .config_models import RuleKind

__all__ = [
    "ValidationError",
]


@dataclass(frozen=True)
class ValidationError:
    """A single failed check on one cell (always row/column scoped)."""
    rule: RuleKind
    message: str
    column: str
