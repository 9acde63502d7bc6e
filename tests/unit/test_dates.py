from __future__ import annotations

import pytest

from recordgrid.parsing.dates import looks_like_date, normalize_date_text, parse_date


def test_normalize_date_text_drops_space_before_offset():
    assert normalize_date_text("2025-01-01T10:00:00 -01:00") == "2025-01-01T10:00:00-01:00"
    assert normalize_date_text("2025-01-01T10:00:00 +05:30") == "2025-01-01T10:00:00+05:30"
    assert normalize_date_text("2025-01-01") == "2025-01-01"


@pytest.mark.parametrize(
    "value",
    ["2024-01-15", "2024-02-29", "01/15/2024", "2025-01-01T10:00:00", "2025-01-01T10:00:00 -01:00"],
)
def test_parse_date_accepts_calendar_dates(value):
    assert parse_date(value) is not None


@pytest.mark.parametrize(
    "value",
    ["", "   ", "2023-02-29", "2024-13-01", "02/30/2024", "hello", "now", "today", "NaT"],
)
def test_parse_date_rejects_non_dates(value):
    assert parse_date(value) is None


def test_parse_date_mm_dd_yyyy_is_month_first():
    ts = parse_date("03/04/2024")
    assert (ts.year, ts.month, ts.day) == (2024, 3, 4)


def test_looks_like_date_requires_known_layout():
    assert looks_like_date("2024-01-15")
    assert looks_like_date("12/31/2023")
    # parseable, but not one of the inferred layouts
    assert not looks_like_date("15 January 2024")
    assert not looks_like_date("2024-01-15 ")


@pytest.mark.parametrize("value", ["3pm", "Jan", "10:00", "4th", "T10", "10:00 31", "January 5, 2024"])
def test_parse_date_rejects_partial_dates(value):
    # 欠けた年月日を補完しない
    assert parse_date(value) is None
