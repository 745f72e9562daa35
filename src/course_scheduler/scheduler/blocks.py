"""Standard university block detection.

Standard blocks:
- Monday/Wednesday/Friday: 50 minutes, starting before 3:00 PM
- Tuesday/Thursday: 75 minutes, starting before 2:30 PM

Anything else (including a pattern that mixes both day groups) is a
restricted block and must be taught in one of the designated block rooms.
"""

from .constants import (
    MWF_LATEST_START,
    MWF_STANDARD_DURATION,
    TR_LATEST_START,
    TR_STANDARD_DURATION,
)
from .models import Day, TimeSlot, minutes_to_time

MWF_DAYS = frozenset({Day.MONDAY, Day.WEDNESDAY, Day.FRIDAY})
TR_DAYS = frozenset({Day.TUESDAY, Day.THURSDAY})


def _block_rule(slot: TimeSlot) -> tuple[int, int] | None:
    """Return (standard duration, latest start) for the slot's day group.

    None means the slot mixes MWF and TR days.
    """
    days = set(slot.days)
    if days <= MWF_DAYS:
        return MWF_STANDARD_DURATION, MWF_LATEST_START
    if days <= TR_DAYS:
        return TR_STANDARD_DURATION, TR_LATEST_START
    return None


def is_restricted_block(slot: TimeSlot, course_duration: int | None = None) -> bool:
    """Check whether a placement falls outside the standard blocks.

    The duration test passes when either the course duration or the slot
    duration equals the standard length for the day group.

    Args:
        slot: Time slot of the placement
        course_duration: Course meeting length in minutes (defaults to the slot's)

    Returns:
        True if the placement is a restricted (block-busting) placement
    """
    rule = _block_rule(slot)
    if rule is None:
        return True

    standard_duration, latest_start = rule
    duration = slot.duration if course_duration is None else course_duration
    standard_length = standard_duration in (duration, slot.duration)
    return not standard_length or slot.start >= latest_start


def restricted_block_reason(slot: TimeSlot, course_duration: int | None = None) -> str:
    """Explain why a placement is a restricted block ("" when it is standard)."""
    rule = _block_rule(slot)
    if rule is None:
        return "mixes MWF and TR days (non-standard pattern)"

    standard_duration, latest_start = rule
    duration = slot.duration if course_duration is None else course_duration
    reasons = []
    if standard_duration not in (duration, slot.duration):
        reasons.append(f"duration is {duration} min (should be {standard_duration} min)")
    if slot.start >= latest_start:
        cutoff = minutes_to_time(latest_start)
        reasons.append(f"starts at/after {cutoff} (should start before {cutoff})")
    return " and ".join(reasons)
