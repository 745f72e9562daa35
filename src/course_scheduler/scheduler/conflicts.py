"""Conflict rule engine for finished schedules.

Each rule scans the placed sections independently, so several rules may
fire on the same pair of sections. Severity is fixed per conflict type.
Unplaced sections are ignored.
"""

from collections import defaultdict
from itertools import combinations

from .blocks import is_restricted_block, restricted_block_reason
from .config.policy import SchedulingPolicy
from .models import (
    Conflict,
    ConflictType,
    Course,
    CourseLevel,
    Faculty,
    ScheduledSection,
)
from .timeslots import is_protected_hour
from .tracker import build_partner_map
from .utils import format_slot, matches_code


class ConflictDetector:
    """Runs every conflict rule over a list of sections."""

    def __init__(
        self,
        courses: list[Course],
        faculty: list[Faculty],
        policy: SchedulingPolicy | None = None,
    ):
        self.courses_by_id = {c.id: c for c in courses}
        self.faculty_by_id = {f.id: f for f in faculty}
        self.policy = policy or SchedulingPolicy()
        self.partner_map = build_partner_map(faculty)

    def detect(self, sections: list[ScheduledSection]) -> list[Conflict]:
        """Detect all conflicts.

        Args:
            sections: Sections of a schedule (unplaced ones are skipped)

        Returns:
            Conflicts in rule order
        """
        placed = [s for s in sections if s.is_placed]

        conflicts: list[Conflict] = []
        conflicts.extend(self._room_double_booking(placed))
        conflicts.extend(self._faculty_double_booking(placed))
        conflicts.extend(self._hard_constraints(placed))
        conflicts.extend(self._cohort_overlaps(placed))
        conflicts.extend(self._protected_hour(placed))
        conflicts.extend(self._core_overlaps(placed))
        conflicts.extend(self._avoided_days(placed))
        conflicts.extend(self._elective_overload(placed))
        conflicts.extend(self._core_offerings(placed))
        conflicts.extend(self._parenting_partners(placed))
        conflicts.extend(self._room_capacity(placed))
        conflicts.extend(self._block_rooms(placed))
        conflicts.extend(self._section_clustering(placed))
        conflicts.extend(self._cross_course_overlaps(placed))
        return conflicts

    def _code(self, section: ScheduledSection) -> str:
        course = self.courses_by_id.get(section.course_id)
        return course.code if course else section.course_id

    def _label(self, section: ScheduledSection) -> str:
        return f"{self._code(section)} ({format_slot(section.time_slot)})"

    def _pairs_grouped_by(
        self, sections: list[ScheduledSection], key
    ) -> list[tuple[ScheduledSection, ScheduledSection]]:
        """Overlapping section pairs that share a grouping key."""
        groups: dict[str, list[ScheduledSection]] = defaultdict(list)
        for section in sections:
            groups[key(section)].append(section)

        pairs = []
        for group in groups.values():
            for first, second in combinations(group, 2):
                if first.time_slot.overlaps(second.time_slot):
                    pairs.append((first, second))
        return pairs

    def _room_double_booking(self, sections: list[ScheduledSection]) -> list[Conflict]:
        conflicts = []
        for first, second in self._pairs_grouped_by(sections, lambda s: s.room.id):
            conflicts.append(
                Conflict.create(
                    ConflictType.ROOM_DOUBLE_BOOKED,
                    f"room-{first.id}-{second.id}",
                    f"Room {first.room.name} is double-booked: "
                    f"{self._label(first)} and {self._label(second)}",
                    [first.id, second.id],
                    [first.course_id, second.course_id],
                )
            )
        return conflicts

    def _faculty_double_booking(self, sections: list[ScheduledSection]) -> list[Conflict]:
        conflicts = []
        for first, second in self._pairs_grouped_by(sections, lambda s: s.faculty_id):
            member = self.faculty_by_id.get(first.faculty_id)
            name = member.name if member else first.faculty_id
            conflicts.append(
                Conflict.create(
                    ConflictType.FACULTY_DOUBLE_BOOKED,
                    f"faculty-{first.id}-{second.id}",
                    f"{name} is double-booked: {self._label(first)} and {self._label(second)}",
                    [first.id, second.id],
                    [first.course_id, second.course_id],
                )
            )
        return conflicts

    def _hard_constraints(self, sections: list[ScheduledSection]) -> list[Conflict]:
        conflicts = []
        for section in sections:
            member = self.faculty_by_id.get(section.faculty_id)
            if member is None:
                continue
            for constraint in member.hard_constraints:
                if not constraint.blocks(section.time_slot):
                    continue
                detail = constraint.description or (
                    "cannot teach on " + ", ".join(d.value for d in constraint.days)
                )
                conflicts.append(
                    Conflict.create(
                        ConflictType.HARD_CONSTRAINT_VIOLATED,
                        f"hard-{section.id}-{constraint.id}",
                        f"Hard constraint violated for {member.name}: {detail}",
                        [section.id],
                        [section.course_id],
                    )
                )
        return conflicts

    def _cohort_overlaps(self, sections: list[ScheduledSection]) -> list[Conflict]:
        conflicts = []
        for first, second in combinations(sections, 2):
            if not first.time_slot.overlaps(second.time_slot):
                continue
            course1 = self.courses_by_id.get(first.course_id)
            course2 = self.courses_by_id.get(second.course_id)
            if course1 is None or course2 is None:
                continue

            shared = [c.label for c in course1.target_students if c in course2.target_students]
            if (
                self.policy.is_exclusive_cohort(course1.cohort)
                and course2.cohort
                and course1.cohort.strip() == course2.cohort.strip()
            ):
                shared.append(f"cohort {course1.cohort.strip()}")
            if not shared:
                continue

            conflicts.append(
                Conflict.create(
                    ConflictType.STUDENT_COHORT_OVERLAP,
                    f"cohort-{first.id}-{second.id}",
                    f"Student cohort conflict ({', '.join(shared)}): "
                    f"{self._label(first)} and {self._label(second)}",
                    [first.id, second.id],
                    [course1.id, course2.id],
                )
            )
        return conflicts

    def _protected_hour(self, sections: list[ScheduledSection]) -> list[Conflict]:
        if not self.policy.restricted_hour_enabled:
            return []
        conflicts = []
        for section in sections:
            course = self.courses_by_id.get(section.course_id)
            if course is None or not course.is_core:
                continue
            if is_protected_hour(section.time_slot):
                conflicts.append(
                    Conflict.create(
                        ConflictType.RESTRICTED_HOUR_CONFLICT,
                        f"protected-hour-{section.id}",
                        f"Core course {course.code} scheduled during the protected hour "
                        "(Monday 12:30-13:30)",
                        [section.id],
                        [course.id],
                    )
                )
        return conflicts

    def _core_overlaps(self, sections: list[ScheduledSection]) -> list[Conflict]:
        by_level: dict[CourseLevel, list[ScheduledSection]] = defaultdict(list)
        for section in sections:
            course = self.courses_by_id.get(section.course_id)
            if course is not None and course.is_core:
                by_level[course.level].append(section)

        conflicts = []
        rules = [
            (CourseLevel.UNDERGRADUATE, ConflictType.CORE_OVERLAP_UNDERGRAD, "Undergraduate"),
            (CourseLevel.GRADUATE, ConflictType.CORE_OVERLAP_GRAD, "Graduate"),
        ]
        for level, conflict_type, label in rules:
            for first, second in combinations(by_level.get(level, []), 2):
                if not first.time_slot.overlaps(second.time_slot):
                    continue
                conflicts.append(
                    Conflict.create(
                        conflict_type,
                        f"core-{level.name.lower()}-{first.id}-{second.id}",
                        f"{label} core courses overlap: "
                        f"{self._label(first)} and {self._label(second)}",
                        [first.id, second.id],
                        [first.course_id, second.course_id],
                    )
                )
        return conflicts

    def _avoided_days(self, sections: list[ScheduledSection]) -> list[Conflict]:
        conflicts = []
        for section in sections:
            member = self.faculty_by_id.get(section.faculty_id)
            if member is None:
                continue
            for preference in member.preferences:
                if preference.avoids(section.time_slot):
                    conflicts.append(
                        Conflict.create(
                            ConflictType.SOFT_PREFERENCE_VIOLATED,
                            f"preference-{section.id}-{preference.id}",
                            f"{member.name} prefers to avoid teaching "
                            f"{self._label(section)}",
                            [section.id],
                            [section.course_id],
                        )
                    )
        return conflicts

    def _elective_overload(self, sections: list[ScheduledSection]) -> list[Conflict]:
        threshold = self.policy.max_electives_per_slot
        if threshold <= 0:
            return []

        groups: dict[tuple, list[ScheduledSection]] = defaultdict(list)
        for section in sections:
            course = self.courses_by_id.get(section.course_id)
            if course is not None and course.is_elective:
                groups[section.time_slot.key].append(section)

        conflicts = []
        for (days, _start), group in groups.items():
            if len(group) <= threshold:
                continue
            slot = group[0].time_slot
            day_codes = "".join(day.code for day in days)
            conflicts.append(
                Conflict.create(
                    ConflictType.TOO_MANY_ELECTIVES_SAME_SLOT,
                    f"electives-{day_codes}-{slot.start_time}",
                    f"{len(group)} electives scheduled at {day_codes} {slot.start_time} "
                    f"(more than {threshold})",
                    [s.id for s in group],
                    sorted({s.course_id for s in group}),
                )
            )
        return conflicts

    def _core_offerings(self, sections: list[ScheduledSection]) -> list[Conflict]:
        by_course: dict[str, list[ScheduledSection]] = defaultdict(list)
        for section in sections:
            course = self.courses_by_id.get(section.course_id)
            if course is not None and course.is_core and not section.is_discussion:
                by_course[course.id].append(section)

        conflicts = []
        for course_id, course_sections in by_course.items():
            code = self.courses_by_id[course_id].code
            section_ids = [s.id for s in course_sections]
            if not any(s.time_slot.preferred_morning for s in course_sections):
                conflicts.append(
                    Conflict.create(
                        ConflictType.NO_MORNING_CORE_OFFERING,
                        f"no-morning-{course_id}",
                        f"Core course {code} has no morning offering",
                        section_ids,
                        [course_id],
                    )
                )
            if not any(s.time_slot.preferred_afternoon for s in course_sections):
                conflicts.append(
                    Conflict.create(
                        ConflictType.NO_AFTERNOON_CORE_OFFERING,
                        f"no-afternoon-{course_id}",
                        f"Core course {code} has no afternoon offering",
                        section_ids,
                        [course_id],
                    )
                )
        return conflicts

    def _parenting_partners(self, sections: list[ScheduledSection]) -> list[Conflict]:
        conflicts = []
        for first, second in combinations(sections, 2):
            if second.faculty_id not in self.partner_map.get(first.faculty_id, ()):
                continue
            if not first.time_slot.overlaps(second.time_slot):
                continue
            conflicts.append(
                Conflict.create(
                    ConflictType.PARENTING_PARTNER_CONFLICT,
                    f"parenting-{first.id}-{second.id}",
                    "Faculty members who share parenting are scheduled at the same time: "
                    f"{self._label(first)} and {self._label(second)}",
                    [first.id, second.id],
                    [first.course_id, second.course_id],
                )
            )
        return conflicts

    def _room_capacity(self, sections: list[ScheduledSection]) -> list[Conflict]:
        ratio = self.policy.under_utilization_ratio
        min_capacity = self.policy.under_utilization_min_capacity

        conflicts = []
        for section in sections:
            capacity = section.room.capacity
            enrollment = (
                section.actual_enrollment
                if section.actual_enrollment is not None
                else section.enrollment_cap
            )
            if enrollment > capacity:
                conflicts.append(
                    Conflict.create(
                        ConflictType.ROOM_OVER_CAPACITY,
                        f"over-capacity-{section.id}",
                        f"Enrollment ({enrollment}) exceeds capacity of "
                        f"{section.room.name} ({capacity})",
                        [section.id],
                        [section.course_id],
                    )
                )
            if enrollment < capacity * ratio and capacity > min_capacity:
                conflicts.append(
                    Conflict.create(
                        ConflictType.ROOM_UNDER_UTILIZED,
                        f"under-utilized-{section.id}",
                        f"{section.room.name} is under-utilized "
                        f"({enrollment} students in a {capacity}-seat room)",
                        [section.id],
                        [section.course_id],
                    )
                )
        return conflicts

    def _block_rooms(self, sections: list[ScheduledSection]) -> list[Conflict]:
        block_rooms = self.policy.block_room_ids
        if not block_rooms:
            return []

        conflicts = []
        for section in sections:
            course = self.courses_by_id.get(section.course_id)
            if course is None:
                continue
            duration = course.meeting_duration(section.kind)
            restricted = is_restricted_block(section.time_slot, duration)
            in_block_room = section.room.id in block_rooms

            if restricted and not in_block_room:
                reason = restricted_block_reason(section.time_slot, duration)
                conflicts.append(
                    Conflict.create(
                        ConflictType.BLOCK_VIOLATION,
                        f"block-{section.id}",
                        f"{self._label(section)} is outside the standard blocks "
                        f"({reason}) but is in {section.room.name}",
                        [section.id],
                        [course.id],
                    )
                )
            elif in_block_room and not restricted:
                conflicts.append(
                    Conflict.create(
                        ConflictType.BLOCK_ROOM_MISUSE,
                        f"block-room-{section.id}",
                        f"{self._label(section)} follows the standard blocks but occupies "
                        f"block room {section.room.name}",
                        [section.id],
                        [course.id],
                    )
                )
        return conflicts

    def _section_clustering(self, sections: list[ScheduledSection]) -> list[Conflict]:
        groups: dict[tuple, list[ScheduledSection]] = defaultdict(list)
        for section in sections:
            course = self.courses_by_id.get(section.course_id)
            if course is None or course.number_of_sections < 2 or section.is_discussion:
                continue
            groups[(course.id, section.time_slot.key)].append(section)

        conflicts = []
        for (course_id, _key), group in groups.items():
            if len(group) < 2:
                continue
            slot = group[0].time_slot
            conflicts.append(
                Conflict.create(
                    ConflictType.SECTION_CLUSTERING,
                    f"clustering-{course_id}-{slot.day_codes}-{slot.start_time}",
                    f"{len(group)} sections of {self.courses_by_id[course_id].code} "
                    f"share {format_slot(slot)}",
                    [s.id for s in group],
                    [course_id],
                )
            )
        return conflicts

    def _cross_course_overlaps(self, sections: list[ScheduledSection]) -> list[Conflict]:
        conflicts = []
        for index, rule in enumerate(self.policy.cross_course_rules):
            discussions = [
                s
                for s in sections
                if s.is_discussion and matches_code(self._code(s), rule.discussion_course)
            ]
            others = [s for s in sections if matches_code(self._code(s), rule.other_course)]
            for discussion in discussions:
                for other in others:
                    if other.course_id == discussion.course_id:
                        continue
                    if not discussion.time_slot.overlaps(other.time_slot):
                        continue
                    detail = rule.description or (
                        f"{rule.discussion_course} discussions should not overlap "
                        f"{rule.other_course}"
                    )
                    conflicts.append(
                        Conflict.create(
                            ConflictType.CROSS_COURSE_OVERLAP,
                            f"cross-{index}-{discussion.id}-{other.id}",
                            f"{detail}: {self._label(discussion)} and {self._label(other)}",
                            [discussion.id, other.id],
                            [discussion.course_id, other.course_id],
                        )
                    )
        return conflicts


def detect_conflicts(
    sections: list[ScheduledSection],
    courses: list[Course],
    faculty: list[Faculty],
    policy: SchedulingPolicy | None = None,
) -> list[Conflict]:
    """Re-validate a schedule, e.g. after manual edits."""
    return ConflictDetector(courses, faculty, policy).detect(sections)
