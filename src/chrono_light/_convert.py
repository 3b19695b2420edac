from __future__ import annotations

from ._calendar import (
    DAYS_IN_400_YEARS,
    EPOCH_YEAR,
    MAX_UNIXTIME,
    MAX_YEAR,
    MIN_YEAR,
    MS_IN_DAY,
    MS_IN_HOUR,
    MS_IN_MIN,
    MS_IN_SEC,
    days_before_month,
    days_before_year,
    days_in_month,
)
from ._error import ChronoError
from ._types import VALID, DateField, DateTime, ValidationResult, ValidationStatus

# =============================================================================
# Field Overflow
# =============================================================================
# Fields above their nominal maximum are carried into the next larger unit:
#   - month: divmod(month - 1, 12) carries whole years
#   - day:   counted linearly from the start of the (carried) month, so
#            2022-01-32 lands on 2022-02-01 without any per-month loop
#   - hour/minute/second/ms: summed as milliseconds
#
# The normalization is closed form, so arbitrarily large fields cannot cause
# unbounded work. The only bound on overflow is that the carried result must
# still lie inside [MIN_YEAR, MAX_YEAR].
#
# Underflow (month or day 0, any negative field) has no carry-down meaning and
# is rejected.
# =============================================================================

_FIELD_MINIMUMS = (
    (DateField.MONTH, 1),
    (DateField.DAY, 1),
    (DateField.HOUR, 0),
    (DateField.MINUTE, 0),
    (DateField.SECOND, 0),
    (DateField.MS, 0),
)

_FIELD_MAXIMUMS = (
    (DateField.HOUR, 23),
    (DateField.MINUTE, 59),
    (DateField.SECOND, 59),
    (DateField.MS, 999),
)


def _check_underflow(dt: DateTime) -> None:
    for f, minimum in _FIELD_MINIMUMS:
        value = dt.get(f)
        if value < minimum:
            raise ChronoError.underflow(f"{f} {value} is below its minimum of {minimum}", f)


def to_unixtime(dt: DateTime) -> int:
    """Convert `dt` to milliseconds since the epoch.

    Overflowing fields are carried. Raises ChronoError with kind "underflow"
    for month/day 0 or negative fields, and kind "range" when the carried
    date falls outside the supported years.
    """
    _check_underflow(dt)

    year_carry, month_index = divmod(dt.month - 1, 12)
    year = dt.year + year_carry
    if not MIN_YEAR <= year <= MAX_YEAR:
        raise ChronoError.range(
            f"year {year} outside supported range {MIN_YEAR}..{MAX_YEAR}", DateField.YEAR
        )

    days = days_before_year(year) + days_before_month(year, month_index + 1) + dt.day - 1
    ts = (
        days * MS_IN_DAY
        + dt.hour * MS_IN_HOUR
        + dt.minute * MS_IN_MIN
        + dt.second * MS_IN_SEC
        + dt.ms
    )
    if ts > MAX_UNIXTIME:
        raise ChronoError.range(f"{dt} carries past the end of year {MAX_YEAR}", DateField.YEAR)
    return ts


def to_unixtime_opt(dt: DateTime) -> int | None:
    """Like `to_unixtime`, but returns None instead of raising."""
    try:
        return to_unixtime(dt)
    except ChronoError:
        return None


def _year_from_days(days: int) -> int:
    # Estimate from the average Gregorian year, then correct by at most a
    # couple of steps either way.
    year = EPOCH_YEAR + days * 400 // DAYS_IN_400_YEARS
    while days_before_year(year) > days:
        year -= 1
    while days_before_year(year + 1) <= days:
        year += 1
    return year


def from_unixtime(ts: int) -> DateTime:
    """Decompose milliseconds since the epoch into calendar fields."""
    if not 0 <= ts <= MAX_UNIXTIME:
        raise ChronoError.range(f"timestamp {ts} outside supported range 0..{MAX_UNIXTIME}")

    days, ms_of_day = divmod(ts, MS_IN_DAY)
    hour, rem = divmod(ms_of_day, MS_IN_HOUR)
    minute, rem = divmod(rem, MS_IN_MIN)
    second, ms = divmod(rem, MS_IN_SEC)

    year = _year_from_days(days)
    day_of_year = days - days_before_year(year)

    month = 1
    while month < 12 and day_of_year >= days_before_month(year, month + 1):
        month += 1
    day = day_of_year - days_before_month(year, month) + 1

    return DateTime(
        year=year, month=month, day=day, hour=hour, minute=minute, second=second, ms=ms
    )


def validate(dt: DateTime) -> ValidationResult:
    """Strict range check, no overflow tolerance.

    The year is checked first (OUT_OF_SCOPE); the remaining fields are checked
    in descending order of size and the first offender is reported (INVALID).
    """
    if not MIN_YEAR <= dt.year <= MAX_YEAR:
        return ValidationResult(ValidationStatus.OUT_OF_SCOPE, DateField.YEAR)
    if not 1 <= dt.month <= 12:
        return ValidationResult(ValidationStatus.INVALID, DateField.MONTH)
    if not 1 <= dt.day <= days_in_month(dt.year, dt.month):
        return ValidationResult(ValidationStatus.INVALID, DateField.DAY)
    for f, maximum in _FIELD_MAXIMUMS:
        if not 0 <= dt.get(f) <= maximum:
            return ValidationResult(ValidationStatus.INVALID, f)
    return VALID


def ms_between(from_: DateTime, to: DateTime) -> int:
    """Signed millisecond delta from `from_` to `to`."""
    return to_unixtime(to) - to_unixtime(from_)
