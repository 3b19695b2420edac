from __future__ import annotations

from ._types import Frequency, Schedule


def display(schedule: Schedule) -> str:
    if not schedule.items:
        out = f"once at {schedule.start}"
    else:
        parts = [_display_item(freq, multiplier) for freq, multiplier in schedule.items]
        out = "every " + ", ".join(parts) + f" from {schedule.start}"

    if schedule.end is not None:
        out += f" until {schedule.end}"

    return out


def _display_item(freq: Frequency, multiplier: int) -> str:
    if multiplier == 1 and freq is not Frequency.MS:
        return f"1 {freq}"
    return f"{multiplier} {freq.plural}"
