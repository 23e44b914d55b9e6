"""Unit tests for duration parsing and humanizing."""

from datetime import timedelta

import pytest

from reporting.durations import ReportDuration, humanize_duration, parse_duration


class TestParsing:
    """Test both supported duration grammars."""

    def test_iso_hours(self) -> None:
        duration = parse_duration("PT1H")
        assert duration.milliseconds == 3_600_000
        assert duration.days == 0
        assert duration.months == 0

    def test_iso_date_and_time_parts(self) -> None:
        duration = parse_duration("P1DT2H30M")
        assert duration.days == 1
        assert duration.milliseconds == (2 * 60 + 30) * 60_000

    def test_iso_weeks_count_as_days(self) -> None:
        assert parse_duration("P2W").days == 14

    def test_iso_years_count_as_months(self) -> None:
        assert parse_duration("P1Y2M").months == 14

    def test_iso_fractional_seconds(self) -> None:
        assert parse_duration("PT1.5S").milliseconds == 1500

    def test_iso_is_case_insensitive(self) -> None:
        assert parse_duration("pt30m").milliseconds == 30 * 60_000

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("30s", timedelta(seconds=30)),
            ("15m", timedelta(minutes=15)),
            ("1h", timedelta(hours=1)),
            ("7d", timedelta(days=7)),
            ("2w", timedelta(weeks=2)),
        ],
    )
    def test_short_form(self, value: str, expected: timedelta) -> None:
        assert parse_duration(value).to_timedelta() == expected

    @pytest.mark.parametrize("value", ["", "P", "PT", "P1DT", "1x", "hour", "1.5h", "PT-1H"])
    def test_invalid(self, value: str) -> None:
        with pytest.raises(ValueError):
            parse_duration(value)

    def test_negative_iso(self) -> None:
        assert parse_duration("-PT1H").total_milliseconds() == -3_600_000


class TestLookback:
    """Test fixed-length conversion used for lookback windows."""

    def test_month_counts_thirty_days(self) -> None:
        assert parse_duration("P1M").to_timedelta() == timedelta(days=30)

    def test_year_counts_365_days(self) -> None:
        assert parse_duration("P1Y").to_timedelta() == timedelta(days=365)

    def test_year_and_month(self) -> None:
        assert parse_duration("P1Y1M").to_timedelta() == timedelta(days=395)


class TestHumanize:
    """Test approximate natural-language rendering."""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("PT10S", "a few seconds"),
            ("PT45S", "a minute"),
            ("PT1M", "a minute"),
            ("PT30M", "30 minutes"),
            ("PT45M", "an hour"),
            ("PT1H", "an hour"),
            ("PT80M", "an hour"),
            ("PT2H", "2 hours"),
            ("PT12H", "12 hours"),
            ("PT22H", "a day"),
            ("P1D", "a day"),
            ("P2D", "2 days"),
            ("P7D", "7 days"),
            ("7d", "7 days"),
            ("P1M", "a month"),
            ("P3M", "3 months"),
            ("P1Y", "a year"),
            ("P2Y", "2 years"),
            ("1h", "an hour"),
        ],
    )
    def test_humanize(self, value: str, expected: str) -> None:
        assert humanize_duration(value) == expected

    def test_humanize_is_lossy(self) -> None:
        """Different durations can read the same."""
        assert humanize_duration("PT60M") == humanize_duration("PT80M")

    def test_duration_is_immutable(self) -> None:
        duration = ReportDuration.from_string("PT1H")
        with pytest.raises(Exception):
            duration.milliseconds = 0  # type: ignore[misc]
