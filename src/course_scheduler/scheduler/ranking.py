"""Candidate time-slot generation and ranking."""

from .config.policy import SchedulingPolicy
from .constants import (
    DAY_SPREAD_BONUS,
    DAY_SPREAD_MIN_EXISTING,
    DISTRIBUTION_BASE_SCORE,
    EXACT_MATCH_PENALTY,
    SAME_DAY_PENALTY,
)
from .models import (
    Course,
    Faculty,
    ScheduledSection,
    SchedulerConfig,
    SectionKind,
    TimeSlot,
)
from .timeslots import TimeSlotCatalog, is_protected_hour
from .tracker import PlacementTracker


def rank_by_preference(slots: list[TimeSlot], faculty: Faculty) -> list[TimeSlot]:
    """Sort slots by the faculty member's summed preference score, best first."""
    return sorted(slots, key=lambda slot: -faculty.preference_score(slot))


def distribution_score(
    slot: TimeSlot, siblings: list[ScheduledSection], spread: bool = False
) -> int:
    """Anti-clustering score of a slot against already placed sibling lectures.

    Starts at 100; an existing sibling at the same start time on a shared
    day costs 50, reusing any day already taken by a sibling costs 20.
    Courses that should spread across days earn 30 for a fresh day once
    three siblings are placed.
    """
    score = DISTRIBUTION_BASE_SCORE
    if not siblings:
        return score

    used_days = {day for s in siblings for day in s.time_slot.days}

    exact_match = any(
        s.time_slot.start == slot.start and s.time_slot.shares_day(slot) for s in siblings
    )
    if exact_match:
        score -= EXACT_MATCH_PENALTY

    uses_existing_day = any(day in used_days for day in slot.days)
    if uses_existing_day:
        score -= SAME_DAY_PENALTY

    if spread and len(siblings) >= DAY_SPREAD_MIN_EXISTING and not uses_existing_day:
        score += DAY_SPREAD_BONUS

    return score


def rank_by_distribution(
    slots: list[TimeSlot], siblings: list[ScheduledSection], spread: bool = False
) -> list[TimeSlot]:
    if not siblings:
        return list(slots)
    return sorted(slots, key=lambda slot: -distribution_score(slot, siblings, spread))


def rank_by_discussion_overlap(
    slots: list[TimeSlot], discussions: list[ScheduledSection]
) -> list[TimeSlot]:
    """Sort slots by how many placed sibling discussions they overlap, fewest first."""
    if not discussions:
        return list(slots)
    return sorted(
        slots,
        key=lambda slot: sum(1 for d in discussions if d.time_slot.overlaps(slot)),
    )


class SlotRanker:
    """Builds the ordered candidate slot list for a section.

    Later sorts take precedence over earlier ones since every sort is
    stable: distribution outranks faculty preference, which outranks
    the elective mix and discussion overlap.
    """

    def __init__(
        self,
        catalog: TimeSlotCatalog,
        config: SchedulerConfig,
        policy: SchedulingPolicy,
        faculty_by_id: dict[str, Faculty],
    ):
        self.catalog = catalog
        self.config = config
        self.policy = policy
        self.faculty_by_id = faculty_by_id

    def base_slots(self, section: ScheduledSection, course: Course) -> list[TimeSlot]:
        """Catalog slots matching the section's meeting pattern."""
        if section.is_discussion:
            return self.catalog.find_discussion_slots(
                course.discussion_days,
                course.discussion_duration,
                self.config.avoid_thursday_discussions_after_5pm,
            )
        return self.catalog.find_suitable_slots(
            course.duration,
            course.sessions_per_week,
            self.config.allow_friday_electives,
        )

    def _rank_by_elective_mix(
        self, slots: list[TimeSlot], course: Course, tracker: PlacementTracker
    ) -> list[TimeSlot]:
        """Prefer slots where overlapping electives are of the other level."""

        def mix_key(slot: TimeSlot) -> tuple[int, int]:
            same_level = 0
            other_level = 0
            for existing in tracker.placed:
                existing_course = tracker.courses_by_id.get(existing.course_id)
                if existing_course is None or not existing_course.is_elective:
                    continue
                if existing_course.id == course.id or not existing.time_slot.overlaps(slot):
                    continue
                if existing_course.level == course.level:
                    same_level += 1
                else:
                    other_level += 1
            return (same_level, -other_level)

        return sorted(slots, key=mix_key)

    def candidate_slots(
        self, section: ScheduledSection, course: Course, tracker: PlacementTracker
    ) -> list[TimeSlot]:
        """Ranked candidate slots for a section given the current placements.

        Args:
            section: Section to place
            course: Course of the section
            tracker: Current placements

        Returns:
            Slots to try, best first
        """
        slots = self.base_slots(section, course)

        if section.is_discussion:
            discussions = tracker.course_sections(course.id, SectionKind.DISCUSSION)
            slots = rank_by_discussion_overlap(slots, discussions)

        if self.config.restricted_hour_enabled and course.is_core:
            slots = [slot for slot in slots if not is_protected_hour(slot)]

        if self.config.prefer_mixed_electives and course.is_elective:
            slots = self._rank_by_elective_mix(slots, course, tracker)

        member = self.faculty_by_id.get(section.faculty_id)
        if member is not None:
            slots = [slot for slot in slots if not member.cannot_teach(slot)]
            slots = rank_by_preference(slots, member)

        if not section.is_discussion:
            siblings = tracker.course_sections(course.id, SectionKind.LECTURE)
            spread = course.spread_across_days or self.policy.wants_spread(course.code)
            slots = rank_by_distribution(slots, siblings, spread)

        return slots
