from __future__ import annotations

import dataclasses
import re
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from ._calendar import MS_IN_DAY, MS_IN_HOUR, MS_IN_MIN, MS_IN_SEC, MS_IN_WEEK
from ._error import ChronoError

# Upper bound on (unit, multiplier) pairs per schedule.
MAX_SCHEDULE_ITEMS = 16


class DateField(Enum):
    YEAR = "year"
    MONTH = "month"
    DAY = "day"
    HOUR = "hour"
    MINUTE = "minute"
    SECOND = "second"
    MS = "ms"

    def __str__(self) -> str:
        return self.value


_DATETIME_RE = re.compile(
    r"^(\d{4})-(\d{2})-(\d{2})"
    r"(?:[T ](\d{2}):(\d{2})(?::(\d{2})(?:\.(\d{1,3}))?)?)?$"
)


@dataclass(frozen=True, slots=True, order=True)
class DateTime:
    """Calendar date and time, UTC-less, millisecond precision.

    Nominal ranges: year 1970-4000, month 1-12, day 1-days_in_month,
    hour 0-23, minute/second 0-59, ms 0-999. Values above the nominal
    maximum are carried into the next larger unit on conversion
    (2022-01-32 is 2022-02-01). Month or day 0 is rejected.
    """

    year: int
    month: int
    day: int
    hour: int = 0
    minute: int = 0
    second: int = 0
    ms: int = 0

    @classmethod
    def parse(cls, text: str) -> DateTime:
        """Parse ``YYYY-MM-DD[THH:MM[:SS[.mmm]]]``."""
        m = _DATETIME_RE.match(text.strip())
        if not m:
            raise ChronoError.parse(f"invalid datetime: {text!r}")
        year, month, day, hour, minute, second, frac = m.groups()
        return cls(
            year=int(year),
            month=int(month),
            day=int(day),
            hour=int(hour or 0),
            minute=int(minute or 0),
            second=int(second or 0),
            ms=int(frac.ljust(3, "0")) if frac else 0,
        )

    @classmethod
    def from_datetime(cls, dt: datetime) -> DateTime:
        """Take the wall-clock fields of `dt`; any tzinfo is ignored."""
        return cls(
            year=dt.year,
            month=dt.month,
            day=dt.day,
            hour=dt.hour,
            minute=dt.minute,
            second=dt.second,
            ms=dt.microsecond // 1000,
        )

    def to_datetime(self) -> datetime:
        """Naive stdlib datetime. Fields must already be in nominal range."""
        return datetime(
            self.year, self.month, self.day, self.hour, self.minute, self.second, self.ms * 1000
        )

    def replace(self, **changes: int) -> DateTime:
        return dataclasses.replace(self, **changes)

    def get(self, f: DateField) -> int:
        return getattr(self, f.value)

    def __str__(self) -> str:
        return (
            f"{self.year:04d}-{self.month:02d}-{self.day:02d}"
            f"T{self.hour:02d}:{self.minute:02d}:{self.second:02d}.{self.ms:03d}"
        )


class Frequency(Enum):
    MS = "ms"
    SECOND = "second"
    MINUTE = "minute"
    HOUR = "hour"
    DAY = "day"
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"

    @property
    def duration_ms(self) -> int | None:
        """Fixed duration in ms, None for calendar-relative units."""
        return _FREQUENCY_MS.get(self)

    @property
    def is_calendar_relative(self) -> bool:
        return self in (Frequency.MONTH, Frequency.YEAR)

    @property
    def plural(self) -> str:
        return "ms" if self is Frequency.MS else f"{self.value}s"

    @classmethod
    def try_parse(cls, s: str) -> Frequency | None:
        return _FREQUENCY_PARSE.get(s.lower())

    def __str__(self) -> str:
        return self.value


_FREQUENCY_MS = {
    Frequency.MS: 1,
    Frequency.SECOND: MS_IN_SEC,
    Frequency.MINUTE: MS_IN_MIN,
    Frequency.HOUR: MS_IN_HOUR,
    Frequency.DAY: MS_IN_DAY,
    Frequency.WEEK: MS_IN_WEEK,
}

_FREQUENCY_PARSE: dict[str, Frequency] = {
    "ms": Frequency.MS,
    "millisecond": Frequency.MS,
    "milliseconds": Frequency.MS,
    "second": Frequency.SECOND,
    "seconds": Frequency.SECOND,
    "minute": Frequency.MINUTE,
    "minutes": Frequency.MINUTE,
    "hour": Frequency.HOUR,
    "hours": Frequency.HOUR,
    "day": Frequency.DAY,
    "days": Frequency.DAY,
    "week": Frequency.WEEK,
    "weeks": Frequency.WEEK,
    "month": Frequency.MONTH,
    "months": Frequency.MONTH,
    "year": Frequency.YEAR,
    "years": Frequency.YEAR,
}


ScheduleItem = tuple[Frequency, int]


@dataclass(frozen=True, slots=True)
class Schedule:
    """Recurring trigger: `start`, advanced by every item in order, up to `end`.

    Each advancement step applies all `items` in sequence. A schedule with no
    items fires once, at `start`.
    """

    start: DateTime
    items: tuple[ScheduleItem, ...] = ()
    end: DateTime | None = None

    def __post_init__(self) -> None:
        for item in self.items:
            if not isinstance(item, (tuple, list)):
                raise ChronoError.schedule(f"expected (frequency, multiplier), got {item!r}")
        items = tuple(tuple(item) for item in self.items)
        if len(items) > MAX_SCHEDULE_ITEMS:
            raise ChronoError.schedule(
                f"too many schedule items ({len(items)}), at most {MAX_SCHEDULE_ITEMS}"
            )
        for item in items:
            if len(item) != 2:
                raise ChronoError.schedule(f"expected (frequency, multiplier), got {item!r}")
            freq, multiplier = item
            if not isinstance(freq, Frequency):
                raise ChronoError.schedule(f"unknown frequency: {freq!r}")
            if isinstance(multiplier, bool) or not isinstance(multiplier, int) or multiplier < 1:
                raise ChronoError.schedule(
                    f"multiplier must be a positive integer, got {multiplier!r}"
                )
        object.__setattr__(self, "items", items)

    @property
    def is_fixed_step(self) -> bool:
        """True when every item has a constant duration."""
        return all(not freq.is_calendar_relative for freq, _ in self.items)

    @property
    def step_ms(self) -> int | None:
        """Combined step length in ms, None if any item is calendar-relative."""
        if not self.is_fixed_step:
            return None
        return sum(multiplier * (freq.duration_ms or 0) for freq, multiplier in self.items)

    @property
    def is_calendar_step(self) -> bool:
        """True when every item is a month or year step."""
        return bool(self.items) and all(freq.is_calendar_relative for freq, _ in self.items)

    def __str__(self) -> str:
        from ._display import display

        return display(self)


class ValidationStatus(Enum):
    VALID = "valid"
    # Year outside the supported range.
    OUT_OF_SCOPE = "out_of_scope"
    INVALID = "invalid"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class ValidationResult:
    status: ValidationStatus
    field: DateField | None = None

    @property
    def is_valid(self) -> bool:
        return self.status is ValidationStatus.VALID

    def __bool__(self) -> bool:
        return self.is_valid

    def __str__(self) -> str:
        if self.field is None:
            return str(self.status)
        return f"{self.status} ({self.field})"


VALID = ValidationResult(ValidationStatus.VALID)
