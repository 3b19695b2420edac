from __future__ import annotations

from ._error import ChronoError

# =============================================================================
# Supported Range
# =============================================================================
# Gregorian calendar only, no timezones, no leap seconds. Every conversion is
# anchored at the Unix epoch (1970-01-01T00:00:00.000) and stops at the end of
# MAX_YEAR.
# =============================================================================

EPOCH_YEAR = 1970
MIN_YEAR = EPOCH_YEAR
MAX_YEAR = 4000

MS_IN_SEC = 1000
MS_IN_MIN = 60 * MS_IN_SEC
MS_IN_HOUR = 60 * MS_IN_MIN
MS_IN_DAY = 24 * MS_IN_HOUR
MS_IN_WEEK = 7 * MS_IN_DAY

# Days in a 400-year Gregorian cycle, used for year estimation.
DAYS_IN_400_YEARS = 146097

_MONTH_LENGTHS = (31, 28, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)
_LEAP_MONTH_LENGTHS = (31, 29, 31, 30, 31, 30, 31, 31, 30, 31, 30, 31)


def _cumulative(lengths: tuple[int, ...]) -> tuple[int, ...]:
    out = [0]
    for n in lengths[:-1]:
        out.append(out[-1] + n)
    return tuple(out)


_DAYS_BEFORE_MONTH = _cumulative(_MONTH_LENGTHS)
_LEAP_DAYS_BEFORE_MONTH = _cumulative(_LEAP_MONTH_LENGTHS)


def is_leap_year(year: int) -> bool:
    return year % 4 == 0 and (year % 100 != 0 or year % 400 == 0)


def days_in_year(year: int) -> int:
    return 366 if is_leap_year(year) else 365


def days_in_month(year: int, month: int) -> int:
    """Canonical day count of `month` (1-12) in `year`."""
    if not 1 <= month <= 12:
        raise ChronoError.range(f"month {month} outside 1..12")
    lengths = _LEAP_MONTH_LENGTHS if is_leap_year(year) else _MONTH_LENGTHS
    return lengths[month - 1]


def days_before_month(year: int, month: int) -> int:
    if not 1 <= month <= 12:
        raise ChronoError.range(f"month {month} outside 1..12")
    table = _LEAP_DAYS_BEFORE_MONTH if is_leap_year(year) else _DAYS_BEFORE_MONTH
    return table[month - 1]


def _leap_years_through(year: int) -> int:
    """Number of leap years in 1..year (proleptic Gregorian)."""
    return year // 4 - year // 100 + year // 400


def days_before_year(year: int) -> int:
    """Days between the epoch and January 1st of `year`."""
    leaps = _leap_years_through(year - 1) - _leap_years_through(EPOCH_YEAR - 1)
    return 365 * (year - EPOCH_YEAR) + leaps


# Last representable millisecond: 4000-12-31T23:59:59.999.
MAX_UNIXTIME = days_before_year(MAX_YEAR + 1) * MS_IN_DAY - 1
