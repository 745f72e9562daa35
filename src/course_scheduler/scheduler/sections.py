"""Section synthesis: expand courses into lecture and discussion sections."""

import logging

from .models import Course, ScheduledSection, SectionKind
from .timeslots import TimeSlotCatalog
from .utils import ceil_div

logger = logging.getLogger(__name__)


def lecture_section_id(course_id: str, number: int) -> str:
    return f"{course_id}-section-{number}"


def discussion_section_id(course_id: str, number: int) -> str:
    return f"{course_id}-discussion-{number}"


def synthesize_sections(courses: list[Course]) -> list[ScheduledSection]:
    """Create unplaced sections for every course.

    Each course yields ``number_of_sections`` lectures sharing the
    enrollment cap, and the actual enrollment when known, evenly (rounded up). Discussions are grouped under
    their lectures in consecutive blocks of
    ``ceil(number_of_discussions / number_of_sections)``.

    Args:
        courses: Courses to expand

    Returns:
        Flat list of sections with no time slot or room
    """
    sections: list[ScheduledSection] = []

    for course in courses:
        if course.number_of_sections < 1:
            logger.warning(
                f"Skipping {course.code}: number_of_sections is {course.number_of_sections}"
            )
            continue

        lecture_cap = ceil_div(course.enrollment_cap, course.number_of_sections)
        lecture_enrollment = (
            ceil_div(course.actual_enrollment, course.number_of_sections)
            if course.actual_enrollment is not None
            else None
        )
        for number in range(1, course.number_of_sections + 1):
            sections.append(
                ScheduledSection(
                    id=lecture_section_id(course.id, number),
                    course_id=course.id,
                    section_number=number,
                    kind=SectionKind.LECTURE,
                    faculty_id=course.faculty_id,
                    enrollment_cap=lecture_cap,
                    actual_enrollment=lecture_enrollment,
                )
            )

        total = course.number_of_discussions
        if total <= 0:
            continue

        per_lecture = ceil_div(total, course.number_of_sections)
        discussion_cap = course.students_per_discussion or ceil_div(
            course.enrollment_cap, total
        )
        for lecture_index in range(course.number_of_sections):
            count = min(per_lecture, total - lecture_index * per_lecture)
            for offset in range(max(0, count)):
                number = lecture_index * per_lecture + offset + 1
                sections.append(
                    ScheduledSection(
                        id=discussion_section_id(course.id, number),
                        course_id=course.id,
                        section_number=number,
                        kind=SectionKind.DISCUSSION,
                        faculty_id=course.faculty_id,
                        enrollment_cap=discussion_cap,
                        parent_section_number=lecture_index + 1,
                    )
                )

    return sections


def count_candidate_slots(course: Course, catalog: TimeSlotCatalog, allow_friday: bool) -> int:
    """Number of lecture slots matching a course meeting pattern."""
    return len(
        catalog.find_suitable_slots(course.duration, course.sessions_per_week, allow_friday)
    )


def prioritize_sections(
    sections: list[ScheduledSection],
    courses_by_id: dict[str, Course],
    catalog: TimeSlotCatalog,
    allow_friday: bool = False,
) -> list[ScheduledSection]:
    """Order sections for search: core first, most constrained first, larger first.

    The sort is stable, so ties keep synthesis order.
    """

    def sort_key(section: ScheduledSection) -> tuple[bool, int, int]:
        course = courses_by_id[section.course_id]
        candidates = count_candidate_slots(course, catalog, allow_friday)
        return (not course.is_core, candidates, -section.enrollment_cap)

    return sorted(sections, key=sort_key)
