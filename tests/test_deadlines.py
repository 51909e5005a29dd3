"""Tests for deadline parsing."""

from __future__ import annotations

from datetime import date, timedelta

import pytest

from meeting_governance.deadlines import next_friday, parse_deadline

# 2025-01-15 is a Wednesday
WEDNESDAY = date(2025, 1, 15)
FRIDAY = date(2025, 1, 17)
SATURDAY = date(2025, 1, 18)


class TestAbsoluteFormats:
    def test_month_day_uses_current_year(self) -> None:
        result = parse_deadline("12/20")
        assert result == date(date.today().year, 12, 20)

    def test_month_day_with_reference_date(self) -> None:
        assert parse_deadline("3/5", today=WEDNESDAY) == date(2025, 3, 5)

    def test_full_date(self) -> None:
        assert parse_deadline("2025/01/15") == date(2025, 1, 15)

    def test_full_date_single_digit_parts(self) -> None:
        assert parse_deadline("2026/2/3") == date(2026, 2, 3)

    def test_surrounding_whitespace_is_ignored(self) -> None:
        assert parse_deadline("  2025/01/15 ") == date(2025, 1, 15)

    @pytest.mark.parametrize("text", ["2/30", "13/01", "0/10", "2025/02/29", "2025/13/01"])
    def test_invalid_calendar_dates(self, text: str) -> None:
        """Days are validated against the month instead of rolling over."""
        assert parse_deadline(text, today=WEDNESDAY) is None

    def test_leap_day_in_leap_year(self) -> None:
        assert parse_deadline("2/29", today=date(2024, 6, 1)) == date(2024, 2, 29)

    def test_two_digit_year_rejected(self) -> None:
        assert parse_deadline("25/01/15") is None


class TestRelativeTokens:
    @pytest.mark.parametrize("text", ["来週", "next week", "Next Week"])
    def test_next_week(self, text: str) -> None:
        assert parse_deadline(text, today=WEDNESDAY) == WEDNESDAY + timedelta(days=7)

    def test_next_week_default_today(self) -> None:
        assert parse_deadline("来週") == date.today() + timedelta(days=7)

    @pytest.mark.parametrize("text", ["今週中", "by end of this week"])
    def test_end_of_week_is_friday(self, text: str) -> None:
        assert parse_deadline(text, today=WEDNESDAY) == FRIDAY

    def test_end_of_week_default_today_is_a_friday(self) -> None:
        result = parse_deadline("今週中")
        assert result is not None
        assert result.weekday() == 4

    def test_end_of_week_on_friday_is_today(self) -> None:
        assert parse_deadline("今週中", today=FRIDAY) == FRIDAY

    def test_end_of_week_on_saturday_is_next_friday(self) -> None:
        assert parse_deadline("今週中", today=SATURDAY) == date(2025, 1, 24)

    def test_next_friday_never_in_the_past(self) -> None:
        for offset in range(7):
            today = WEDNESDAY + timedelta(days=offset)
            friday = next_friday(today)
            assert friday.weekday() == 4
            assert 0 <= (friday - today).days < 7


class TestUnparseable:
    @pytest.mark.parametrize("text", ["", "   ", "未定", "TBD", "soon", "12-20", None])
    def test_returns_none(self, text: str | None) -> None:
        assert parse_deadline(text) is None
