"""Greedy fallback scheduler."""

import logging

from .models import (
    Course,
    ScheduledSection,
    UnscheduledReason,
    UnscheduledSection,
)
from .ranking import SlotRanker
from .rooms import RoomCatalog
from .tracker import PlacementTracker
from .utils import format_slot

logger = logging.getLogger(__name__)


class GreedyScheduler:
    """First-fit placement without backtracking.

    Only the critical constraints are enforced (faculty unavailable days,
    faculty double-booking, room double-booking). Cohort, parenting and
    elective-cap violations are left to the conflict rule engine.
    """

    def __init__(
        self,
        ranker: SlotRanker,
        rooms: RoomCatalog,
        tracker: PlacementTracker,
        courses_by_id: dict[str, Course],
    ):
        self.ranker = ranker
        self.rooms = rooms
        self.tracker = tracker
        self.courses_by_id = courses_by_id

    def run(
        self, sections: list[ScheduledSection]
    ) -> tuple[list[ScheduledSection], list[UnscheduledSection]]:
        """Place each section in the first clearing candidate slot.

        Args:
            sections: Priority-ordered unplaced sections

        Returns:
            Tuple of (placed sections, sections that could not be placed)
        """
        logger.info(f"Starting greedy scheduler for {len(sections)} sections")
        self.tracker.clear()
        unscheduled: list[UnscheduledSection] = []

        for section in sections:
            course = self.courses_by_id[section.course_id]
            if not self._place(section, course, unscheduled):
                logger.warning(f"Could not schedule {course.code} ({section.id})")

        logger.info(
            f"Greedy scheduler placed {len(self.tracker.placed)} of {len(sections)} sections"
        )
        return list(self.tracker.placed), unscheduled

    def _place(
        self,
        section: ScheduledSection,
        course: Course,
        unscheduled: list[UnscheduledSection],
    ) -> bool:
        slots = self.ranker.candidate_slots(section, course, self.tracker)
        duration = course.meeting_duration(section.kind)
        found_room = False

        for slot in slots:
            room = self.rooms.suggest_best_room(
                course, section.enrollment_cap, slot, self.tracker.placed, duration
            )
            if room is None:
                continue
            found_room = True

            candidate = section.place(slot, room)
            if self.tracker.violates_hard_constraints(candidate, course, critical_only=True):
                continue

            self.tracker.place(candidate)
            logger.debug(f"Greedy scheduled: {course.code} - {format_slot(slot)}")
            return True

        if not slots:
            reason = UnscheduledReason.NO_TIME_SLOT
            details = "No catalog time slot matches the meeting pattern and faculty days"
        elif not found_room:
            reason = UnscheduledReason.NO_ROOM_AVAILABLE
            details = f"No free room in any of {len(slots)} candidate slots"
        else:
            reason = UnscheduledReason.CONSTRAINT_VIOLATION
            details = "Every candidate slot double-books the faculty member or room"

        unscheduled.append(
            UnscheduledSection(
                section_id=section.id,
                course_id=course.id,
                course_code=course.code,
                kind=section.kind,
                reason=reason,
                details=details,
            )
        )
        return False
