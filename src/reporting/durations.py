"""Report lookback durations.

Report definitions store their time window as a duration string, either an
ISO 8601 duration ("PT1H", "P7D", "P1M") or the short relative form used by
dashboards ("30m", "1h", "7d").

Durations keep calendar months apart from fixed-length time so that
humanizing stays close to what users typed. Converting to a ``timedelta``
is necessarily approximate: a month counts as 30 days and a year as 365.
"""

import math
import re
from datetime import timedelta

from pydantic import BaseModel, ConfigDict

_ISO_PATTERN = re.compile(
    r"^(?P<sign>[-+])?P"
    r"(?:(?P<years>\d+(?:[.,]\d+)?)Y)?"
    r"(?:(?P<months>\d+(?:[.,]\d+)?)M)?"
    r"(?:(?P<weeks>\d+(?:[.,]\d+)?)W)?"
    r"(?:(?P<days>\d+(?:[.,]\d+)?)D)?"
    r"(?:T"
    r"(?:(?P<hours>\d+(?:[.,]\d+)?)H)?"
    r"(?:(?P<minutes>\d+(?:[.,]\d+)?)M)?"
    r"(?:(?P<seconds>\d+(?:[.,]\d+)?)S)?"
    r")?$",
    re.IGNORECASE,
)
_SHORT_PATTERN = re.compile(r"^(?P<amount>[0-9]+)(?P<unit>[smhdw])$")

_MS_PER_SECOND = 1000
_MS_PER_MINUTE = 60 * _MS_PER_SECOND
_MS_PER_HOUR = 60 * _MS_PER_MINUTE
_MS_PER_DAY = 24 * _MS_PER_HOUR

_SHORT_UNITS_MS = {
    "s": _MS_PER_SECOND,
    "m": _MS_PER_MINUTE,
    "h": _MS_PER_HOUR,
}
_SHORT_UNITS_DAYS = {"d": 1, "w": 7}

# Relative time thresholds, each the first value rounded into the next unit
_SECONDS_THRESHOLD = 45
_MINUTES_THRESHOLD = 45
_HOURS_THRESHOLD = 22
_DAYS_THRESHOLD = 26
_MONTHS_THRESHOLD = 11


def _number(value: str | None) -> float:
    if not value:
        return 0.0
    return float(value.replace(",", "."))


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _days_to_months(days: float) -> float:
    # 400 years have 146097 days
    return days * 4800 / 146097


def _months_to_days(months: float) -> float:
    return months * 146097 / 4800


class ReportDuration(BaseModel):
    """A parsed lookback duration.

    ``months`` carries years and months, ``days`` carries weeks and days and
    ``milliseconds`` carries the time part.
    """

    model_config = ConfigDict(frozen=True)

    months: float = 0
    days: float = 0
    milliseconds: float = 0

    @classmethod
    def from_string(cls, value: str) -> "ReportDuration":
        """Parse an ISO 8601 or short-form duration.

        Raises:
            ValueError: If the value matches neither grammar or is empty.
        """
        text = (value or "").strip()

        short = _SHORT_PATTERN.match(text)
        if short:
            amount = int(short.group("amount"))
            unit = short.group("unit")
            if unit in _SHORT_UNITS_DAYS:
                return cls(days=amount * _SHORT_UNITS_DAYS[unit])
            return cls(milliseconds=amount * _SHORT_UNITS_MS[unit])

        iso = _ISO_PATTERN.match(text)
        if not iso or text.upper() in ("P", "PT") or text.upper().endswith("T"):
            raise ValueError(f"Invalid duration: {value!r}")

        parts = iso.groupdict()
        if not any(parts[key] for key in parts if key != "sign"):
            raise ValueError(f"Invalid duration: {value!r}")

        sign = -1 if parts["sign"] == "-" else 1
        months = _number(parts["years"]) * 12 + _number(parts["months"])
        days = _number(parts["weeks"]) * 7 + _number(parts["days"])
        milliseconds = (
            _number(parts["hours"]) * _MS_PER_HOUR
            + _number(parts["minutes"]) * _MS_PER_MINUTE
            + _number(parts["seconds"]) * _MS_PER_SECOND
        )
        return cls(months=sign * months, days=sign * days, milliseconds=sign * milliseconds)

    def total_milliseconds(self) -> float:
        """Fixed-length size of the duration, counting 30-day months and 365-day years."""
        whole_years = math.trunc(self.months / 12)
        remaining_months = self.months - whole_years * 12
        return (
            self.milliseconds
            + self.days * _MS_PER_DAY
            + remaining_months * 30 * _MS_PER_DAY
            + whole_years * 365 * _MS_PER_DAY
        )

    def to_timedelta(self) -> timedelta:
        """Lookback window as a ``timedelta``."""
        return timedelta(milliseconds=self.total_milliseconds())

    def as_unit(self, unit: str) -> float:
        """Express the duration in a single unit.

        Month and year conversions go through the average Gregorian month,
        smaller units through whole days per month.
        """
        if unit in ("months", "years"):
            days = self.days + self.milliseconds / _MS_PER_DAY
            months = self.months + _days_to_months(days)
            return months if unit == "months" else months / 12

        days = self.days + _round_half_up(_months_to_days(self.months))
        conversions = {
            "days": days + self.milliseconds / _MS_PER_DAY,
            "hours": days * 24 + self.milliseconds / _MS_PER_HOUR,
            "minutes": days * 1440 + self.milliseconds / _MS_PER_MINUTE,
            "seconds": days * 86400 + self.milliseconds / _MS_PER_SECOND,
        }
        if unit not in conversions:
            raise ValueError(f"Unknown unit: {unit}")
        return conversions[unit]

    def humanize(self) -> str:
        """Approximate natural-language span, e.g. "an hour" or "2 days".

        Lossy: "PT80M" and "PT1H" both read "an hour".
        """
        seconds = _round_half_up(abs(self.as_unit("seconds")))
        minutes = _round_half_up(abs(self.as_unit("minutes")))
        hours = _round_half_up(abs(self.as_unit("hours")))
        days = _round_half_up(abs(self.as_unit("days")))
        months = _round_half_up(abs(self.as_unit("months")))
        years = _round_half_up(abs(self.as_unit("years")))

        if seconds < _SECONDS_THRESHOLD:
            return "a few seconds"
        if minutes <= 1:
            return "a minute"
        if minutes < _MINUTES_THRESHOLD:
            return f"{minutes} minutes"
        if hours <= 1:
            return "an hour"
        if hours < _HOURS_THRESHOLD:
            return f"{hours} hours"
        if days <= 1:
            return "a day"
        if days < _DAYS_THRESHOLD:
            return f"{days} days"
        if months <= 1:
            return "a month"
        if months < _MONTHS_THRESHOLD:
            return f"{months} months"
        if years <= 1:
            return "a year"
        return f"{years} years"


def parse_duration(value: str) -> ReportDuration:
    """Parse a stored duration string."""
    return ReportDuration.from_string(value)


def humanize_duration(value: str) -> str:
    """Humanize a stored duration string."""
    return ReportDuration.from_string(value).humanize()
