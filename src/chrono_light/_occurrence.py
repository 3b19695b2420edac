from __future__ import annotations

import itertools
import logging
from collections.abc import Iterator

from ._calendar import MAX_UNIXTIME, MAX_YEAR, MS_IN_DAY
from ._convert import from_unixtime, to_unixtime, to_unixtime_opt
from ._types import DateTime, Frequency, Schedule, ScheduleItem

logger = logging.getLogger(__name__)

# =============================================================================
# Occurrence Model
# =============================================================================
# Occurrence k of a schedule is its start advanced by k steps. One step
# applies every (unit, multiplier) item in order to a working date:
#   - fixed units (ms .. week) add multiplier * duration to the working
#     instant, which normalizes the working date
#   - month/year add to the working date's month/year field without
#     normalizing it; the conversion engine carries any overflow when the
#     candidate is converted (Jan 31 + 1 month -> Feb 31 -> Mar 3)
#
# So from Jan 31, (day 1, month 1) fires Mar 1 while (month 1, day 1) fires
# Mar 4 (Feb 31 carries to Mar 3, plus a day).
#
# Occurrences are strictly increasing in k. Three cases:
#   - fixed-only schedules: k = ceil(gap / step), exact
#   - calendar-only schedules: the working date is never normalized, so
#     occurrence k is the start with k * months and k * years added to its
#     fields. It never drifts after a carry (a yearly schedule on Feb 29
#     fires Mar 1 in common years and Feb 29 again in leap years). The walk
#     starts from k = gap // longest_possible_step
#   - mixed schedules: each step depends on the date the previous one
#     produced, so the walk goes one step at a time from the start. A mixed
#     step is at least a month long, which bounds the walk to the months in
#     the supported range.
#
# The first occurrence at or after `now` is the answer; if it lies past `end`
# or past year MAX_YEAR the schedule is exhausted.
# =============================================================================


def _fixed_candidates(t0: int, step_ms: int, target: int) -> Iterator[int]:
    k = 0
    if target > t0:
        k = -(-(target - t0) // step_ms)
        logger.debug("fixed step of %d ms, jumping to step %d", step_ms, k)
    ts = t0 + k * step_ms
    while ts <= MAX_UNIXTIME:
        yield ts
        ts += step_ms


def _calendar_candidates(
    start: DateTime, t0: int, items: tuple[ScheduleItem, ...], target: int
) -> Iterator[int]:
    months = sum(n for freq, n in items if freq is Frequency.MONTH)
    years = sum(n for freq, n in items if freq is Frequency.YEAR)
    k = 0
    if target > t0:
        k = (target - t0) // ((years * 366 + months * 31) * MS_IN_DAY)
    while True:
        ts = to_unixtime_opt(
            start.replace(year=start.year + k * years, month=start.month + k * months)
        )
        if ts is None:
            return
        yield ts
        k += 1


def _advance(dt: DateTime, items: tuple[ScheduleItem, ...]) -> DateTime | None:
    """Apply one step to `dt`, None once it leaves the supported range."""
    for freq, multiplier in items:
        match freq:
            case Frequency.MONTH:
                dt = dt.replace(month=dt.month + multiplier)
            case Frequency.YEAR:
                dt = dt.replace(year=dt.year + multiplier)
            case _:
                ts = to_unixtime_opt(dt)
                if ts is None:
                    return None
                ts += multiplier * (freq.duration_ms or 0)
                if ts > MAX_UNIXTIME:
                    return None
                dt = from_unixtime(ts)
    return dt


def _stepped_candidates(
    start: DateTime, t0: int, items: tuple[ScheduleItem, ...]
) -> Iterator[int]:
    yield t0
    dt = start
    while True:
        nxt = _advance(dt, items)
        ts = to_unixtime_opt(nxt) if nxt is not None else None
        if nxt is None or ts is None:
            return
        yield ts
        dt = nxt


def _iter_from(schedule: Schedule, target: int) -> Iterator[int]:
    """Epoch ms of every occurrence at or after `target`, in order."""
    t0 = to_unixtime(schedule.start)
    end = to_unixtime(schedule.end) if schedule.end is not None else None

    if not schedule.items:
        if t0 >= target and (end is None or t0 <= end):
            yield t0
        else:
            logger.debug("single-shot schedule at %s already passed", schedule.start)
        return

    step_ms = schedule.step_ms
    if step_ms is not None:
        candidates = _fixed_candidates(t0, step_ms, target)
    elif schedule.is_calendar_step:
        candidates = _calendar_candidates(schedule.start, t0, schedule.items, target)
    else:
        candidates = _stepped_candidates(schedule.start, t0, schedule.items)

    for ts in candidates:
        if end is not None and ts > end:
            logger.debug("schedule from %s exhausted at end %s", schedule.start, schedule.end)
            return
        if ts >= target:
            yield ts
    logger.debug("schedule from %s runs past year %d", schedule.start, MAX_YEAR)


# --- Public API ---


def next_occurrence_ms(now: DateTime, schedule: Schedule) -> int | None:
    """Milliseconds from `now` until the next trigger at or after `now`.

    Returns 0 when `now` is itself an occurrence and None once the schedule
    has ended.
    """
    tn = to_unixtime(now)
    ts = next(_iter_from(schedule, tn), None)
    if ts is None:
        return None
    return ts - tn


def next_occurrence(now: DateTime, schedule: Schedule) -> DateTime | None:
    tn = to_unixtime(now)
    ts = next(_iter_from(schedule, tn), None)
    return from_unixtime(ts) if ts is not None else None


def next_n_occurrences(schedule: Schedule, now: DateTime, n: int) -> list[DateTime]:
    tn = to_unixtime(now)
    return [from_unixtime(ts) for ts in itertools.islice(_iter_from(schedule, tn), n)]


def matches(schedule: Schedule, dt: DateTime) -> bool:
    ts = to_unixtime(dt)
    return next(_iter_from(schedule, ts), None) == ts


def occurrences(schedule: Schedule, from_: DateTime) -> Iterator[DateTime]:
    """Returns a lazy iterator of occurrences strictly after `from_`.

    The iterator stops at the schedule's `end` (inclusive) or at the end of
    the supported range, whichever comes first.
    """
    for ts in _iter_from(schedule, to_unixtime(from_) + 1):
        yield from_unixtime(ts)


def between(schedule: Schedule, from_: DateTime, to: DateTime) -> Iterator[DateTime]:
    """Returns a bounded iterator of occurrences where `from_ < occurrence <= to`."""
    limit = to_unixtime(to)
    for ts in _iter_from(schedule, to_unixtime(from_) + 1):
        if ts > limit:
            return
        yield from_unixtime(ts)


def past_triggers(
    last_run: DateTime | None, now: DateTime, schedule: Schedule
) -> tuple[list[int], int | None]:
    """Catch up on triggers missed since `last_run`.

    Returns the epoch ms of every occurrence in ``(last_run, now]`` (from the
    schedule start when `last_run` is None), and the delay from `now` until
    the following occurrence, or None if there is none.

    Every trigger in the window is materialized in one list, so a fine-grained
    schedule with `last_run=None` far from its start produces a very large
    list. Callers should persist and pass `last_run`.
    """
    tn = to_unixtime(now)
    lower = to_unixtime(last_run) + 1 if last_run is not None else 0
    triggers: list[int] = []
    for ts in _iter_from(schedule, lower):
        if ts > tn:
            return triggers, ts - tn
        triggers.append(ts)
    return triggers, None
