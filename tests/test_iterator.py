"""Iterator-specific tests for `occurrences()` and `between()` methods.

These tests verify Python-specific iterator behavior beyond conformance tests:
- Laziness (generators don't evaluate eagerly)
- Early termination
- Generator protocol (__iter__ and __next__)
- Integration with itertools
"""

from __future__ import annotations

import itertools
from collections.abc import Iterator

from chrono_light import Calendar, DateTime, Frequency, Schedule

_DAILY_9AM = Schedule(start=DateTime(2026, 1, 1, 9), items=((Frequency.DAY, 1),))


# =============================================================================
# Laziness Tests
# =============================================================================


class TestLaziness:
    def test_occurrences_is_lazy(self, calendar: Calendar) -> None:
        """A schedule running to year 4000 should not be expanded up front."""
        every_ms = Schedule(start=DateTime(2026, 1, 1), items=((Frequency.MS, 1),))

        it = calendar.occurrences(DateTime(2026, 2, 1), every_ms)

        first = list(itertools.islice(it, 1))
        assert first == [DateTime(2026, 2, 1, 0, 0, 0, 1)]

    def test_between_is_lazy(self, calendar: Calendar) -> None:
        it = calendar.between(DateTime(2026, 2, 1), DateTime(2026, 12, 31, 23, 59), _DAILY_9AM)

        first_three = list(itertools.islice(it, 3))
        assert len(first_three) == 3


# =============================================================================
# Early Termination Tests
# =============================================================================


class TestEarlyTermination:
    def test_occurrences_early_termination_with_islice(self, calendar: Calendar) -> None:
        results = list(itertools.islice(calendar.occurrences(DateTime(2026, 2, 1), _DAILY_9AM), 5))

        assert len(results) == 5
        assert results[0] == DateTime(2026, 2, 1, 9)

    def test_occurrences_early_termination_with_takewhile(self, calendar: Calendar) -> None:
        cutoff = calendar.to_unixtime(DateTime(2026, 2, 5))

        results = list(
            itertools.takewhile(
                lambda dt: calendar.to_unixtime(dt) < cutoff,
                calendar.occurrences(DateTime(2026, 2, 1), _DAILY_9AM),
            )
        )

        # Feb 1, 2, 3, 4 at 09:00 (4 occurrences before Feb 5 00:00)
        assert len(results) == 4

    def test_occurrences_stop_at_end(self, calendar: Calendar) -> None:
        schedule = Schedule(
            start=DateTime(2026, 1, 1, 9),
            items=((Frequency.DAY, 1),),
            end=DateTime(2026, 1, 10, 9),
        )

        results = list(calendar.occurrences(DateTime(2026, 1, 5), schedule))

        assert results[0] == DateTime(2026, 1, 5, 9)
        assert results[-1] == DateTime(2026, 1, 10, 9)
        assert len(results) == 6


# =============================================================================
# Iterator Protocol Tests
# =============================================================================


class TestIteratorProtocol:
    def test_occurrences_is_iterator(self, calendar: Calendar) -> None:
        it = calendar.occurrences(DateTime(2026, 2, 1), _DAILY_9AM)

        assert isinstance(it, Iterator)
        assert iter(it) is it
        assert next(it) == DateTime(2026, 2, 1, 9)
        assert next(it) == DateTime(2026, 2, 2, 9)

    def test_occurrences_strictly_after_from(self, calendar: Calendar) -> None:
        it = calendar.occurrences(DateTime(2026, 2, 1, 9), _DAILY_9AM)
        results = list(itertools.islice(it, 1))

        assert results == [DateTime(2026, 2, 2, 9)]

    def test_single_shot_schedule(self, calendar: Calendar) -> None:
        once = Schedule(start=DateTime(2026, 3, 1))

        assert list(calendar.occurrences(DateTime(2026, 1, 1), once)) == [DateTime(2026, 3, 1)]
        assert list(calendar.occurrences(DateTime(2026, 3, 1), once)) == []


# =============================================================================
# Between Tests
# =============================================================================


class TestBetween:
    def test_between_excludes_from_includes_to(self, calendar: Calendar) -> None:
        results = list(
            calendar.between(DateTime(2026, 2, 1, 9), DateTime(2026, 2, 4, 9), _DAILY_9AM)
        )

        assert results == [
            DateTime(2026, 2, 2, 9),
            DateTime(2026, 2, 3, 9),
            DateTime(2026, 2, 4, 9),
        ]

    def test_between_empty_range(self, calendar: Calendar) -> None:
        results = list(
            calendar.between(DateTime(2026, 2, 1, 10), DateTime(2026, 2, 2, 8), _DAILY_9AM)
        )

        assert results == []

    def test_between_monthly(self, calendar: Calendar) -> None:
        monthly = Schedule(start=DateTime(2026, 1, 15), items=((Frequency.MONTH, 1),))

        results = list(calendar.between(DateTime(2026, 1, 1), DateTime(2026, 12, 31), monthly))

        assert len(results) == 12
        assert all(dt.day == 15 for dt in results)
