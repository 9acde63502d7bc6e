from __future__ import annotations

import re

import pandas as pd

"""Date recognition shared by schema inference and cell validation.

Both sides must agree on what counts as a date, so the parser and the
validator call the same ``parse_date``. Only full year-month-day layouts are
considered, so nothing is ever filled in from defaults or the current date.
pandas does the calendar check: "2024-02-30" or "13/01/2024" are rejected
rather than rolled over.
"""

__all__ = [
    "normalize_date_text",
    "parse_date",
    "looks_like_date",
]

# 推論対象の日付表記: ISO 日付 / ISO 日時 / MM/DD/YYYY
_DATE_PATTERNS = (
    re.compile(r"^[0-9]{4}-[0-9]{2}-[0-9]{2}\Z"),
    re.compile(r"^[0-9]{4}-[0-9]{2}-[0-9]{2}T[0-9]{2}:[0-9]{2}:[0-9]{2}"),
    re.compile(r"^[0-9]{2}/[0-9]{2}/[0-9]{4}\Z"),
)
_US_DATE = _DATE_PATTERNS[2]
_TZ_SPACE = re.compile(r"([0-9]) ([+-][0-9]{2}:[0-9]{2})\Z")


def normalize_date_text(value: str) -> str:
    """Drop the space before a trailing UTC offset.

    "2025-01-01T10:00:00 -01:00" -> "2025-01-01T10:00:00-01:00"
    """
    return _TZ_SPACE.sub(r"\1\2", value)


def _has_full_date(text: str) -> bool:
    return any(p.match(text) for p in _DATE_PATTERNS)


def parse_date(value: str) -> pd.Timestamp | None:
    """Parse ``value`` as a calendar date, returning None when it is not one."""
    text = normalize_date_text(value.strip())
    # 時刻のみ・月名のみ等は pandas が現在日付で補完するため受け付けない
    if not _has_full_date(text):
        return None
    try:
        if _US_DATE.match(text):
            ts = pd.to_datetime(text, format="%m/%d/%Y")
        else:
            ts = pd.Timestamp(text)
    except (ValueError, TypeError, OverflowError):
        return None
    if pd.isna(ts):
        return None
    return ts


def looks_like_date(value: str) -> bool:
    """True when ``value`` matches a known date layout and is a real date."""
    if not _has_full_date(value):
        return False
    return parse_date(value) is not None
