"""Loading scheduling input and saved schedules from disk."""

import json
import logging
import re
from pathlib import Path
from typing import Any

import pandas as pd

from .exceptions import InvalidInputError
from .scheduler.models import (
    Course,
    CourseLevel,
    CourseType,
    Faculty,
    FacultyPreference,
    HardConstraint,
    Priority,
    RoomType,
    Schedule,
    SchedulerConfig,
    StudentCohort,
)
from .scheduler.utils import parse_days

logger = logging.getLogger(__name__)

TARGET_PROGRAM_PATTERN = re.compile(r"(MPP|BA|Minor|Cert)\s*Year\s*(\d)", re.IGNORECASE)
PROGRAM_ONLY_PATTERN = re.compile(r"(MPP|BA|Minor|Cert)", re.IGNORECASE)

# Keywords in course notes that request a room class
ROOM_KEYWORDS = {
    "dell": RoomType.LARGE_LECTURE,
    "rouss": RoomType.MEDIUM,
    "pavilion": RoomType.SMALL,
}


def _read_json(path: str | Path) -> Any:
    with open(path, encoding="utf-8") as f:
        try:
            return json.load(f)
        except json.JSONDecodeError as e:
            raise InvalidInputError([f"Invalid JSON in {path}: {e}"]) from e


def load_input(path: str | Path) -> tuple[SchedulerConfig, list[Course], list[Faculty]]:
    """Load a scheduling input document.

    The document is a JSON object with ``config``, ``courses`` and
    ``faculty`` keys, as written by ``write_input``.

    Args:
        path: Path to the JSON file

    Returns:
        Tuple of (config, courses, faculty)

    Raises:
        InvalidInputError: If the document is missing keys or holds bad values
    """
    data = _read_json(path)

    if not isinstance(data, dict):
        raise InvalidInputError(["Input document must be a JSON object"])

    missing = [key for key in ("config", "courses", "faculty") if key not in data]
    if missing:
        raise InvalidInputError([f"Missing '{key}' section" for key in missing])

    try:
        config = SchedulerConfig.from_dict(data["config"])
        courses = [Course.from_dict(c) for c in data["courses"]]
        faculty = [Faculty.from_dict(f) for f in data["faculty"]]
    except (KeyError, TypeError, ValueError) as e:
        raise InvalidInputError([f"Malformed input in {path}: {e!r}"]) from e

    return config, courses, faculty


def write_input(
    config: SchedulerConfig,
    courses: list[Course],
    faculty: list[Faculty],
    output_path: str | Path,
) -> None:
    """Write a scheduling input document readable by ``load_input``."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    document = {
        "config": config.to_dict(),
        "courses": [c.to_dict() for c in courses],
        "faculty": [f.to_dict() for f in faculty],
    }
    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(document, f, indent=2, ensure_ascii=False)


def load_schedule(path: str | Path) -> Schedule:
    """Load a schedule from a schedule JSON or an exported generation result.

    Raises:
        InvalidInputError: If the file holds no schedule
    """
    data = _read_json(path)

    if isinstance(data, dict) and "sections" not in data and "schedule" in data:
        data = data["schedule"]

    if not isinstance(data, dict) or "sections" not in data:
        raise InvalidInputError([f"No schedule found in {path}"])

    try:
        return Schedule.from_dict(data)
    except (KeyError, TypeError, ValueError) as e:
        raise InvalidInputError([f"Malformed schedule in {path}: {e!r}"]) from e


def safe_int(value: Any, default: int = 0) -> int:
    """Convert a spreadsheet cell to int, falling back on blanks and junk."""
    if value is None or pd.isna(value):
        return default
    try:
        return int(float(value))
    except (ValueError, TypeError):
        return default


def safe_str(value: Any, default: str = "") -> str:
    """Convert a spreadsheet cell to a stripped string."""
    if value is None or pd.isna(value):
        return default
    return str(value).strip()


def read_table(path: str | Path) -> pd.DataFrame:
    """Read the first sheet of an Excel workbook, or a CSV file."""
    path = Path(path)
    if path.suffix.lower() == ".csv":
        df = pd.read_csv(path)
    else:
        df = pd.read_excel(path, sheet_name=0)
    df.columns = [str(col).strip() for col in df.columns]
    return df


def parse_course_type(value: str) -> CourseType:
    """Map free-text course types onto CourseType; anything unknown is an elective."""
    text = value.lower()
    if "core" in text:
        return CourseType.CORE
    if "capstone" in text:
        return CourseType.CAPSTONE
    if "advanced" in text:
        return CourseType.ADVANCED_PROJECT
    return CourseType.ELECTIVE


def parse_course_level(value: str) -> CourseLevel | None:
    text = value.lower()
    if text.startswith("grad"):
        return CourseLevel.GRADUATE
    if text.startswith("under"):
        return CourseLevel.UNDERGRADUATE
    return None


def parse_target_programs(value: str) -> list[StudentCohort]:
    """Parse "MPP Year 1, BA Year 3" style cohort lists.

    A bare program name means year 1; unrecognised entries are skipped.
    """
    cohorts: list[StudentCohort] = []
    for entry in value.split(","):
        entry = entry.strip()
        if not entry:
            continue
        match = TARGET_PROGRAM_PATTERN.search(entry)
        if match:
            cohort = StudentCohort(program=match.group(1).upper(), year=int(match.group(2)))
        else:
            program = PROGRAM_ONLY_PATTERN.search(entry)
            if not program:
                continue
            cohort = StudentCohort(program=program.group(1).upper(), year=1)
        if cohort not in cohorts:
            cohorts.append(cohort)
    return cohorts


def parse_preferred_room(notes: str) -> RoomType | None:
    text = notes.lower()
    for keyword, room_type in ROOM_KEYWORDS.items():
        if keyword in text:
            return room_type
    return None


def find_faculty_by_name(name: str, faculty: list[Faculty]) -> Faculty | None:
    """Case-insensitive substring match of a name against faculty names."""
    needle = name.strip().lower()
    if not needle:
        return None
    for member in faculty:
        if needle in member.name.lower():
            return member
    return None


def read_faculty_table(path: str | Path) -> list[Faculty]:
    """Read faculty preferences from a spreadsheet.

    Columns: facultyName, email, preferredDays, cannotTeachDays,
    shareParentingWith. Days are comma-separated short or full names.
    Parenting partners are given by name and resolved to faculty ids.

    Args:
        path: CSV or Excel file

    Returns:
        Faculty members with ids ``faculty-1``, ``faculty-2``, ...
    """
    df = read_table(path)
    if "facultyName" not in df.columns:
        raise InvalidInputError([f"Faculty table {path} has no 'facultyName' column"])

    faculty: list[Faculty] = []
    partner_names: dict[str, str] = {}

    for index, row in enumerate(df.to_dict("records"), start=1):
        name = safe_str(row.get("facultyName"))
        if not name:
            logger.warning(f"Skipping faculty row {index}: empty name")
            continue

        faculty_id = f"faculty-{index}"
        preferred = parse_days(safe_str(row.get("preferredDays")))
        cannot_text = safe_str(row.get("cannotTeachDays"))
        cannot = parse_days(cannot_text)

        preferences = []
        if preferred or cannot:
            preferences.append(
                FacultyPreference(
                    id=f"pref-{index}",
                    priority=Priority.MEDIUM,
                    preferred_days=preferred,
                    avoid_days=cannot,
                )
            )

        constraints = []
        if cannot:
            constraints.append(
                HardConstraint(
                    id=f"constraint-{index}",
                    days=cannot,
                    description=f"Cannot teach on {cannot_text}",
                )
            )

        partner = safe_str(row.get("shareParentingWith"))
        if partner:
            partner_names[faculty_id] = partner

        faculty.append(
            Faculty(
                id=faculty_id,
                name=name,
                email=safe_str(row.get("email")) or None,
                preferences=preferences,
                hard_constraints=constraints,
            )
        )

    for member in faculty:
        partner_name = partner_names.get(member.id)
        if not partner_name:
            continue
        partner = find_faculty_by_name(partner_name, [f for f in faculty if f.id != member.id])
        if partner is None:
            logger.warning(f"Parenting partner '{partner_name}' of {member.name} not found")
            continue
        member.parenting_partner_id = partner.id

    return faculty


def read_course_table(path: str | Path, faculty: list[Faculty]) -> list[Course]:
    """Read course data from a spreadsheet.

    Columns: code, name, type, level, faculty, enrollmentCap,
    numberOfSections, numberOfDiscussions, duration, sessionsPerWeek,
    targetPrograms, cohort, notes.

    Args:
        path: CSV or Excel file
        faculty: Faculty members to match the ``faculty`` column against

    Returns:
        Courses with ids ``course-1``, ``course-2``, ...
    """
    df = read_table(path)
    missing = [col for col in ("code", "type", "faculty") if col not in df.columns]
    if missing:
        raise InvalidInputError(
            [f"Course table {path} has no '{col}' column" for col in missing]
        )

    courses: list[Course] = []
    for index, row in enumerate(df.to_dict("records"), start=1):
        code = safe_str(row.get("code"))
        if not code:
            logger.warning(f"Skipping course row {index}: empty code")
            continue

        faculty_name = safe_str(row.get("faculty"))
        member = find_faculty_by_name(faculty_name, faculty)
        if member is None:
            logger.warning(f"No faculty matches '{faculty_name}' for {code}")
            faculty_id = f"faculty-unknown-{index}"
        else:
            faculty_id = member.id

        notes = safe_str(row.get("notes"))
        courses.append(
            Course(
                id=f"course-{index}",
                code=code,
                name=safe_str(row.get("name"), code),
                type=parse_course_type(safe_str(row.get("type"))),
                faculty_id=faculty_id,
                enrollment_cap=safe_int(row.get("enrollmentCap")),
                number_of_sections=safe_int(row.get("numberOfSections"), 1),
                duration=safe_int(row.get("duration"), 75),
                sessions_per_week=safe_int(row.get("sessionsPerWeek"), 2),
                level=parse_course_level(safe_str(row.get("level"))),
                number_of_discussions=safe_int(row.get("numberOfDiscussions")),
                target_students=parse_target_programs(safe_str(row.get("targetPrograms"))),
                preferred_room=parse_preferred_room(notes),
                cohort=safe_str(row.get("cohort")) or None,
                notes=notes,
            )
        )

    return courses
