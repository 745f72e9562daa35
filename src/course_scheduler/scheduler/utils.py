"""Utility functions for schedule generation."""

import math
import re
from collections import Counter
from fnmatch import fnmatchcase
from typing import Iterable

from .models import Conflict, Day, TimeSlot

_DAY_LOOKUP = {
    "m": Day.MONDAY,
    "mon": Day.MONDAY,
    "monday": Day.MONDAY,
    "t": Day.TUESDAY,
    "tu": Day.TUESDAY,
    "tue": Day.TUESDAY,
    "tues": Day.TUESDAY,
    "tuesday": Day.TUESDAY,
    "w": Day.WEDNESDAY,
    "wed": Day.WEDNESDAY,
    "wednesday": Day.WEDNESDAY,
    "r": Day.THURSDAY,
    "th": Day.THURSDAY,
    "thu": Day.THURSDAY,
    "thur": Day.THURSDAY,
    "thurs": Day.THURSDAY,
    "thursday": Day.THURSDAY,
    "f": Day.FRIDAY,
    "fri": Day.FRIDAY,
    "friday": Day.FRIDAY,
}


def ceil_div(numerator: int, denominator: int) -> int:
    """Integer ceiling division."""
    return math.ceil(numerator / denominator)


def parse_day(value: str) -> Day | None:
    """Parse a day name or registrar code ("R" is Thursday).

    Args:
        value: Day text like "Monday", "tue" or "R"

    Returns:
        Day, or None if the text is not a recognised day
    """
    return _DAY_LOOKUP.get(value.strip().lower())


def parse_days(value: str | None) -> list[Day]:
    """Parse a comma-separated list of day names, skipping unknown entries.

    A single token made only of registrar codes ("MWF", "TR") is expanded
    letter by letter.
    """
    if not value:
        return []

    days: list[Day] = []
    for token in re.split(r"[,;/]", str(value)):
        token = token.strip()
        if not token:
            continue
        day = parse_day(token)
        if day is None and re.fullmatch(r"[MTWRF]+", token):
            for letter in token:
                expanded = parse_day(letter)
                if expanded and expanded not in days:
                    days.append(expanded)
            continue
        if day and day not in days:
            days.append(day)
    return days


def format_slot(slot: TimeSlot | None) -> str:
    """Human-readable slot label, e.g. "MW 09:30-10:50"."""
    if slot is None:
        return "unscheduled"
    return f"{slot.day_codes} {slot.start_time}-{slot.end_time}"


def matches_code(code: str, pattern: str) -> bool:
    """Match a course code against a shell-style pattern, ignoring case and spacing."""
    normalized_code = " ".join(code.upper().split())
    normalized_pattern = " ".join(pattern.upper().split())
    return fnmatchcase(normalized_code, normalized_pattern)


def count_conflicts_by_type(conflicts: Iterable[Conflict]) -> dict[str, int]:
    """Count conflicts per conflict type value."""
    counts = Counter(conflict.type.value for conflict in conflicts)
    return dict(sorted(counts.items()))
