"""Time-grid catalog: the fixed set of lecture and discussion slots."""

from ..exceptions import CatalogError
from .constants import (
    DURATION_TOLERANCE,
    LATE_DISCUSSION_START,
    PROTECTED_HOUR_END,
    PROTECTED_HOUR_START,
)
from .models import Day, DiscussionDays, TimeSlot
from .utils import parse_days

# Lecture slots: (id, start, end, day codes, morning, afternoon)
# No class starts before 09:30.
LECTURE_SLOT_SPECS = [
    # 50-minute standard blocks
    ("mwf-1000-1050", "10:00", "10:50", "MWF", True, False),
    ("mwf-1100-1150", "11:00", "11:50", "MWF", True, False),
    ("mwf-1300-1350", "13:00", "13:50", "MWF", False, True),
    ("mwf-1400-1450", "14:00", "14:50", "MWF", False, True),
    ("mw-1000-1050", "10:00", "10:50", "MW", True, False),
    ("mw-1200-1250", "12:00", "12:50", "MW", False, True),
    ("mw-1400-1450", "14:00", "14:50", "MW", False, True),
    ("tr-0930-1020", "09:30", "10:20", "TR", True, False),
    ("tr-1100-1150", "11:00", "11:50", "TR", True, False),
    ("tr-1400-1450", "14:00", "14:50", "TR", False, True),
    # 75-minute blocks
    ("tr-0930-1045", "09:30", "10:45", "TR", True, False),
    ("tr-1100-1215", "11:00", "12:15", "TR", True, False),
    ("tr-1230-1345", "12:30", "13:45", "TR", False, True),
    ("tr-1530-1645", "15:30", "16:45", "TR", False, True),
    ("mw-1400-1515", "14:00", "15:15", "MW", False, True),
    # 80-minute slots
    ("mw-0930-1050", "09:30", "10:50", "MW", True, False),
    ("tr-0930-1050", "09:30", "10:50", "TR", True, False),
    ("mw-1000-1120", "10:00", "11:20", "MW", True, False),
    ("tr-1100-1220", "11:00", "12:20", "TR", True, False),
    ("tr-1230-1350", "12:30", "13:50", "TR", False, True),
    ("mw-1400-1520", "14:00", "15:20", "MW", False, True),
    ("tr-1400-1520", "14:00", "15:20", "TR", False, True),
    ("mw-1530-1650", "15:30", "16:50", "MW", False, True),
    ("tr-1530-1650", "15:30", "16:50", "TR", False, True),
    # 150-minute seminars (capstones, workshops)
    ("m-1530-1800", "15:30", "18:00", "M", False, False),
    ("t-1530-1800", "15:30", "18:00", "T", False, False),
    ("w-1530-1800", "15:30", "18:00", "W", False, False),
    ("r-1530-1800", "15:30", "18:00", "R", False, False),
    ("w-0930-1200", "09:30", "12:00", "W", False, False),
    ("w-1400-1630", "14:00", "16:30", "W", False, False),
    ("f-0930-1200", "09:30", "12:00", "F", False, False),
    ("f-1400-1630", "14:00", "16:30", "F", False, False),
]

DISCUSSION_START_TIMES = ["09:30", "11:00", "12:30", "14:00", "15:30", "17:00"]
DISCUSSION_DURATIONS = [50, 75]

DISCUSSION_DAY_RESTRICTIONS = {
    DiscussionDays.ANY: list(Day),
    DiscussionDays.TUESDAY_THURSDAY: [Day.TUESDAY, Day.THURSDAY],
    DiscussionDays.THURSDAY_ONLY: [Day.THURSDAY],
}


def _build_lecture_slots() -> list[TimeSlot]:
    slots = []
    for slot_id, start, end, codes, morning, afternoon in LECTURE_SLOT_SPECS:
        slots.append(
            TimeSlot.from_times(
                slot_id,
                start,
                end,
                parse_days(codes),
                preferred_morning=morning,
                preferred_afternoon=afternoon,
            )
        )
    return slots


def _build_discussion_slots() -> list[TimeSlot]:
    slots = []
    for day in Day:
        for start in DISCUSSION_START_TIMES:
            hours, minutes = (int(part) for part in start.split(":"))
            start_minutes = hours * 60 + minutes
            for duration in DISCUSSION_DURATIONS:
                slots.append(
                    TimeSlot(
                        id=f"disc-{day.code.lower()}-{hours:02d}{minutes:02d}-{duration}",
                        start=start_minutes,
                        end=start_minutes + duration,
                        days=(day,),
                        preferred_morning=start_minutes < 12 * 60,
                        preferred_afternoon=start_minutes >= 12 * 60,
                    )
                )
    return slots


def is_protected_hour(slot: TimeSlot) -> bool:
    """Check whether a slot intersects the Monday 12:30-13:30 protected hour."""
    if Day.MONDAY not in slot.days:
        return False
    return slot.start < PROTECTED_HOUR_END and PROTECTED_HOUR_START < slot.end


class TimeSlotCatalog:
    """Read-only catalog of lecture and discussion time slots."""

    def __init__(
        self,
        lecture_slots: list[TimeSlot],
        discussion_slots: list[TimeSlot] | None = None,
    ):
        self.lecture_slots: tuple[TimeSlot, ...] = tuple(lecture_slots)
        self.discussion_slots: tuple[TimeSlot, ...] = tuple(discussion_slots or [])
        self._by_id: dict[str, TimeSlot] = {}
        for slot in self.lecture_slots + self.discussion_slots:
            if slot.id in self._by_id:
                raise CatalogError("duplicate time slot id", slot.id)
            self._by_id[slot.id] = slot

    def __len__(self) -> int:
        return len(self._by_id)

    def get(self, slot_id: str) -> TimeSlot | None:
        return self._by_id.get(slot_id)

    def find_suitable_slots(
        self,
        duration: int,
        sessions_per_week: int,
        allow_friday: bool = False,
    ) -> list[TimeSlot]:
        """Find lecture slots for a course meeting pattern.

        Args:
            duration: Minutes per meeting
            sessions_per_week: Number of meetings per week (must equal the slot's day count)
            allow_friday: Whether slots that meet on Friday are allowed

        Returns:
            Matching slots in catalog order
        """
        slots = []
        for slot in self.lecture_slots:
            if abs(slot.duration - duration) > DURATION_TOLERANCE:
                continue
            if not allow_friday and Day.FRIDAY in slot.days:
                continue
            if len(slot.days) != sessions_per_week:
                continue
            slots.append(slot)
        return slots

    def find_discussion_slots(
        self,
        days: DiscussionDays,
        duration: int,
        avoid_thursday_after_5pm: bool = True,
    ) -> list[TimeSlot]:
        """Find single-day discussion slots for a day restriction and duration."""
        allowed_days = DISCUSSION_DAY_RESTRICTIONS[days]
        slots = []
        for slot in self.discussion_slots:
            if abs(slot.duration - duration) > DURATION_TOLERANCE:
                continue
            if not all(day in allowed_days for day in slot.days):
                continue
            if (
                avoid_thursday_after_5pm
                and Day.THURSDAY in slot.days
                and slot.start >= LATE_DISCUSSION_START
            ):
                continue
            slots.append(slot)
        return slots


DEFAULT_CATALOG = TimeSlotCatalog(_build_lecture_slots(), _build_discussion_slots())


def default_catalog() -> TimeSlotCatalog:
    """Return the built-in time grid."""
    return DEFAULT_CATALOG
