from __future__ import annotations

import pytest

from app.utils.validators import (
    as_number,
    clamp_probability,
    is_valid_color,
    is_valid_email,
    optional_text,
    sanitize_text,
)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [(-20, 0), (0, 0), (55.4, 55), (100, 100), (250, 100), (None, 0), ("75", 75), ("abc", 0), (float("nan"), 0)],
)
def test_clamp_probability_stays_within_bounds(raw, expected):
    assert clamp_probability(raw) == expected


def test_as_number_treats_missing_and_junk_as_zero():
    assert as_number(None) == 0.0
    assert as_number(True) == 0.0
    assert as_number("3.5") == 3.5
    assert as_number({}) == 0.0


def test_email_and_color_checks():
    assert is_valid_email("jane.doe@example.com")
    assert not is_valid_email("jane@")
    assert not is_valid_email("")
    assert is_valid_color("#3B82F6")
    assert is_valid_color("#fff")
    assert not is_valid_color("blue")


def test_sanitize_text_strips_null_and_trims():
    assert sanitize_text("  hello\x00world  ") == "helloworld"
    assert sanitize_text(None) == ""
    assert optional_text("   ") is None
