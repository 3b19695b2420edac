from __future__ import annotations

from collections.abc import Iterator

from ._calendar import (
    EPOCH_YEAR,
    MAX_UNIXTIME,
    MAX_YEAR,
    MIN_YEAR,
    MS_IN_DAY,
    MS_IN_HOUR,
    MS_IN_MIN,
    MS_IN_SEC,
    MS_IN_WEEK,
    days_in_month,
    is_leap_year,
)
from ._codec import (
    TypeInfo,
    decode_datetime,
    decode_schedule,
    encode_datetime,
    encode_schedule,
    type_info,
)
from ._convert import from_unixtime, ms_between, to_unixtime, to_unixtime_opt, validate
from ._error import ChronoError, ChronoErrorKind
from ._occurrence import between as _between
from ._occurrence import matches as _matches
from ._occurrence import next_n_occurrences as _next_n_occurrences
from ._occurrence import next_occurrence as _next_occurrence
from ._occurrence import next_occurrence_ms as _next_occurrence_ms
from ._occurrence import occurrences as _occurrences
from ._occurrence import past_triggers as _past_triggers
from ._types import (
    MAX_SCHEDULE_ITEMS,
    DateField,
    DateTime,
    Frequency,
    Schedule,
    ScheduleItem,
    ValidationResult,
    ValidationStatus,
)


class Calendar:
    """Timezone-less Gregorian calendar for years 1970-4000.

    The handle holds no state; every method is a pure function of its
    arguments and may be called from any thread.

    >>> c = create_calendar()
    >>> schedule = Schedule(
    ...     start=DateTime(2020, 4, 30),
    ...     items=((Frequency.YEAR, 1),),
    ...     end=DateTime(2025, 4, 30),
    ... )
    >>> c.next_occurrence_ms(c.from_unixtime(1650412800000), schedule)
    864000000

    `to_unixtime` raises ChronoError on month/day 0; use `validate` or
    `to_unixtime_opt` for input that may be malformed.
    """

    __slots__ = ()

    @classmethod
    def create(cls) -> Calendar:
        return cls()

    def is_leap_year(self, year: int) -> bool:
        return is_leap_year(year)

    def days_in_month(self, year: int, month: int) -> int:
        return days_in_month(year, month)

    def to_unixtime(self, dt: DateTime) -> int:
        return to_unixtime(dt)

    def to_unixtime_opt(self, dt: DateTime) -> int | None:
        return to_unixtime_opt(dt)

    def from_unixtime(self, ts: int) -> DateTime:
        return from_unixtime(ts)

    def validate(self, dt: DateTime) -> ValidationResult:
        return validate(dt)

    def ms_between(self, from_: DateTime, to: DateTime) -> int:
        return ms_between(from_, to)

    def next_occurrence_ms(self, now: DateTime, schedule: Schedule) -> int | None:
        return _next_occurrence_ms(now, schedule)

    def next_occurrence(self, now: DateTime, schedule: Schedule) -> DateTime | None:
        return _next_occurrence(now, schedule)

    def next_n_occurrences(self, now: DateTime, schedule: Schedule, n: int) -> list[DateTime]:
        return _next_n_occurrences(schedule, now, n)

    def matches(self, dt: DateTime, schedule: Schedule) -> bool:
        return _matches(schedule, dt)

    def occurrences(self, from_: DateTime, schedule: Schedule) -> Iterator[DateTime]:
        """Returns a lazy iterator of occurrences strictly after `from_`.

        Stops at the schedule's `end` (inclusive) or at the end of year 4000.
        """
        return _occurrences(schedule, from_)

    def between(self, from_: DateTime, to: DateTime, schedule: Schedule) -> Iterator[DateTime]:
        """Returns a bounded iterator of occurrences where `from_ < occurrence <= to`."""
        return _between(schedule, from_, to)

    def past_triggers(
        self, last_run: DateTime | None, now: DateTime, schedule: Schedule
    ) -> tuple[list[int], int | None]:
        return _past_triggers(last_run, now, schedule)

    def __repr__(self) -> str:
        return "Calendar()"


def create_calendar() -> Calendar:
    return Calendar.create()


__all__ = [
    "Calendar",
    "create_calendar",
    "ChronoError",
    "ChronoErrorKind",
    "DateField",
    "DateTime",
    "Frequency",
    "Schedule",
    "ScheduleItem",
    "ValidationResult",
    "ValidationStatus",
    "TypeInfo",
    "is_leap_year",
    "days_in_month",
    "to_unixtime",
    "to_unixtime_opt",
    "from_unixtime",
    "validate",
    "ms_between",
    "encode_datetime",
    "decode_datetime",
    "encode_schedule",
    "decode_schedule",
    "type_info",
    "EPOCH_YEAR",
    "MIN_YEAR",
    "MAX_YEAR",
    "MAX_UNIXTIME",
    "MAX_SCHEDULE_ITEMS",
    "MS_IN_SEC",
    "MS_IN_MIN",
    "MS_IN_HOUR",
    "MS_IN_DAY",
    "MS_IN_WEEK",
]
