"""Placement state and incremental hard-constraint checks."""

import logging
from collections import defaultdict
from enum import Enum

from .config.policy import SchedulingPolicy
from .models import Course, Faculty, ScheduledSection, SectionKind

logger = logging.getLogger(__name__)


class HardViolation(str, Enum):
    """Hard constraints checked before a placement is accepted."""

    CANNOT_TEACH_DAY = "cannot_teach_day"
    FACULTY_DOUBLE_BOOKED = "faculty_double_booked"
    ROOM_DOUBLE_BOOKED = "room_double_booked"
    COHORT_OVERLAP = "cohort_overlap"
    PARENTING_PARTNER = "parenting_partner"
    ELECTIVE_CAP = "elective_cap"


def build_partner_map(faculty: list[Faculty]) -> dict[str, set[str]]:
    """Build a symmetric faculty -> parenting partners map.

    A declaration on either side links both faculty members. References
    to unknown faculty are logged and ignored.
    """
    known = {f.id for f in faculty}
    partners: dict[str, set[str]] = defaultdict(set)
    for member in faculty:
        partner_id = member.parenting_partner_id
        if not partner_id:
            continue
        if partner_id not in known:
            logger.warning(
                f"Faculty {member.id} lists unknown parenting partner {partner_id}"
            )
            continue
        if partner_id == member.id:
            continue
        partners[member.id].add(partner_id)
        partners[partner_id].add(member.id)
    return dict(partners)


class PlacementTracker:
    """Tracks placed sections for one scheduling run.

    Sections are placed and removed in LIFO order, matching the
    depth-first search that drives it.
    """

    def __init__(
        self,
        courses_by_id: dict[str, Course],
        faculty_by_id: dict[str, Faculty],
        policy: SchedulingPolicy,
        max_electives_per_slot: int,
        partner_map: dict[str, set[str]] | None = None,
    ):
        self.courses_by_id = courses_by_id
        self.faculty_by_id = faculty_by_id
        self.policy = policy
        self.max_electives_per_slot = max_electives_per_slot
        self.partner_map = partner_map or {}

        self.placed: list[ScheduledSection] = []
        self._by_faculty: dict[str, list[ScheduledSection]] = defaultdict(list)
        self._by_room: dict[str, list[ScheduledSection]] = defaultdict(list)

    def __len__(self) -> int:
        return len(self.placed)

    def place(self, section: ScheduledSection) -> None:
        """Record a placed section."""
        if not section.is_placed:
            raise ValueError(f"Section {section.id} has no time slot or room")
        self.placed.append(section)
        self._by_faculty[section.faculty_id].append(section)
        self._by_room[section.room.id].append(section)

    def pop(self) -> ScheduledSection:
        """Remove and return the most recently placed section."""
        section = self.placed.pop()
        self._by_faculty[section.faculty_id].pop()
        self._by_room[section.room.id].pop()
        return section

    def clear(self) -> None:
        self.placed.clear()
        self._by_faculty.clear()
        self._by_room.clear()

    def course_sections(
        self, course_id: str, kind: SectionKind | None = None
    ) -> list[ScheduledSection]:
        """Placed sections of a course, optionally of one kind."""
        return [
            s
            for s in self.placed
            if s.course_id == course_id and (kind is None or s.kind == kind)
        ]

    def overlapping(self, section: ScheduledSection) -> list[ScheduledSection]:
        """Placed sections whose slot overlaps the given section's slot."""
        return [s for s in self.placed if s.time_slot.overlaps(section.time_slot)]

    def find_violation(
        self,
        section: ScheduledSection,
        course: Course,
        critical_only: bool = False,
    ) -> HardViolation | None:
        """Return the first hard constraint a candidate placement breaks.

        Args:
            section: Candidate section with time slot and room set
            course: Course of the section
            critical_only: Only check faculty days and double-booking

        Returns:
            The violated constraint, or None if the placement is allowed
        """
        slot = section.time_slot
        member = self.faculty_by_id.get(section.faculty_id)

        if member is not None and member.cannot_teach(slot):
            return HardViolation.CANNOT_TEACH_DAY

        for existing in self._by_faculty.get(section.faculty_id, []):
            if existing.time_slot.overlaps(slot):
                return HardViolation.FACULTY_DOUBLE_BOOKED

        for existing in self._by_room.get(section.room.id, []):
            if existing.time_slot.overlaps(slot):
                return HardViolation.ROOM_DOUBLE_BOOKED

        if critical_only:
            return None

        if self.policy.is_exclusive_cohort(course.cohort):
            cohort = course.cohort.strip()
            for existing in self.placed:
                existing_course = self.courses_by_id.get(existing.course_id)
                if existing_course is None or not existing_course.cohort:
                    continue
                if existing_course.cohort.strip() == cohort and existing.time_slot.overlaps(slot):
                    return HardViolation.COHORT_OVERLAP

        for partner_id in self.partner_map.get(section.faculty_id, ()):
            for existing in self._by_faculty.get(partner_id, []):
                if existing.time_slot.overlaps(slot):
                    return HardViolation.PARENTING_PARTNER

        if course.is_elective and self.max_electives_per_slot > 0:
            electives = 0
            for existing in self.placed:
                existing_course = self.courses_by_id.get(existing.course_id)
                if (
                    existing_course is not None
                    and existing_course.is_elective
                    and existing.time_slot.overlaps(slot)
                ):
                    electives += 1
            if electives >= self.max_electives_per_slot:
                return HardViolation.ELECTIVE_CAP

        return None

    def violates_hard_constraints(
        self, section: ScheduledSection, course: Course, critical_only: bool = False
    ) -> bool:
        return self.find_violation(section, course, critical_only) is not None
