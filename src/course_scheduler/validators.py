"""Input validation for scheduling runs."""

from collections import Counter

from .scheduler.models import Course, Faculty, SchedulerConfig

MAX_SESSIONS_PER_WEEK = 5


def validate_course(course: Course) -> list[str]:
    """Validate the numeric fields of a single course.

    Args:
        course: Course to validate

    Returns:
        List of error messages (empty when the course is valid)
    """
    errors = []
    label = course.code or course.id

    if course.number_of_sections < 1:
        errors.append(
            f"Course {label}: number of sections must be at least 1, "
            f"got {course.number_of_sections}"
        )

    if course.enrollment_cap < 0:
        errors.append(f"Course {label}: negative enrollment cap: {course.enrollment_cap}")

    if course.duration <= 0:
        errors.append(f"Course {label}: duration must be positive, got {course.duration}")

    if not 1 <= course.sessions_per_week <= MAX_SESSIONS_PER_WEEK:
        errors.append(
            f"Course {label}: sessions per week must be between 1 and "
            f"{MAX_SESSIONS_PER_WEEK}, got {course.sessions_per_week}"
        )

    if course.number_of_discussions < 0:
        errors.append(
            f"Course {label}: negative number of discussions: {course.number_of_discussions}"
        )

    if course.number_of_discussions > 0 and course.discussion_duration <= 0:
        errors.append(
            f"Course {label}: discussion duration must be positive, "
            f"got {course.discussion_duration}"
        )

    return errors


def _duplicates(ids: list[str]) -> list[str]:
    return sorted(item for item, count in Counter(ids).items() if count > 1)


def validate_faculty_references(
    courses: list[Course], faculty: list[Faculty]
) -> list[str]:
    """Check cross references between courses and faculty.

    Returns:
        List of warning messages
    """
    warnings = []
    by_id = {f.id: f for f in faculty}

    for course in courses:
        if course.faculty_id not in by_id:
            warnings.append(
                f"Course {course.code} references unknown faculty '{course.faculty_id}'"
            )

    for member in faculty:
        partner_id = member.parenting_partner_id
        if not partner_id or partner_id == member.id:
            continue
        partner = by_id.get(partner_id)
        if partner is None:
            warnings.append(
                f"Faculty {member.name} lists unknown parenting partner '{partner_id}'"
            )
        elif partner.parenting_partner_id != member.id:
            warnings.append(
                f"Parenting partnership between {member.name} and {partner.name} "
                "is only declared on one side"
            )

    return warnings


def validate_generation_input(
    config: SchedulerConfig | None,
    courses: list[Course],
    faculty: list[Faculty],
) -> tuple[list[str], list[str]]:
    """Validate everything a scheduling run needs before it starts.

    Args:
        config: Run options
        courses: Courses to schedule
        faculty: Faculty members

    Returns:
        Tuple of (errors, warnings)
    """
    errors: list[str] = []
    warnings: list[str] = []

    if config is None:
        errors.append("Missing scheduler configuration")
    elif config.backtrack_time_limit <= 0:
        errors.append(
            f"Backtracking time limit must be positive, got {config.backtrack_time_limit}"
        )

    if not courses:
        errors.append("No courses to schedule")

    for course in courses:
        errors.extend(validate_course(course))

    for course_id in _duplicates([c.id for c in courses]):
        errors.append(f"Duplicate course id: {course_id}")

    for faculty_id in _duplicates([f.id for f in faculty]):
        errors.append(f"Duplicate faculty id: {faculty_id}")

    warnings.extend(validate_faculty_references(courses, faculty))

    return errors, warnings
