from __future__ import annotations

import json
from datetime import datetime, timedelta
from pathlib import Path

import pytest

from chrono_light import Calendar, DateTime, Frequency, Schedule, create_calendar

CASES_PATH = Path(__file__).parent / "cases.json"

_EPOCH = datetime(1970, 1, 1)


def load_cases() -> dict:  # type: ignore[type-arg]
    with open(CASES_PATH) as f:
        return json.load(f)


def parse_dt(s: str | None) -> DateTime | None:
    """Parse '2022-03-29T05:01:29.162', passing None through."""
    return DateTime.parse(s) if s is not None else None


def schedule_from_case(tc: dict) -> Schedule:  # type: ignore[type-arg]
    start = DateTime.parse(tc["start"])
    items = tuple((Frequency(unit), n) for unit, n in tc["items"])
    return Schedule(start=start, items=items, end=parse_dt(tc["end"]))


def stdlib_ms(dt: datetime) -> int:
    """Reference epoch ms computed with the standard library."""
    return (dt - _EPOCH) // timedelta(milliseconds=1)


@pytest.fixture(scope="session")
def cases() -> dict:  # type: ignore[type-arg]
    return load_cases()


@pytest.fixture(scope="session")
def calendar() -> Calendar:
    return create_calendar()
