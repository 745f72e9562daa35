"""Data models for the course section scheduling system."""

import re
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Any, Self

from ..exceptions import CatalogError
from .constants import GRADUATE_COURSE_THRESHOLD, PRIORITY_WEIGHTS


def time_to_minutes(time: str) -> int:
    """Convert an "HH:MM" string to minutes since midnight."""
    hours, minutes = time.strip().split(":")
    return int(hours) * 60 + int(minutes)


def minutes_to_time(minutes: int) -> str:
    """Convert minutes since midnight to an "HH:MM" string."""
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


class Day(str, Enum):
    """Teaching days of the week."""

    MONDAY = "Monday"
    TUESDAY = "Tuesday"
    WEDNESDAY = "Wednesday"
    THURSDAY = "Thursday"
    FRIDAY = "Friday"

    @property
    def code(self) -> str:
        """Single-letter registrar code (M, T, W, R, F)."""
        return DAY_CODES[self]

    @property
    def index(self) -> int:
        """Position in the week, Monday = 0."""
        return list(Day).index(self)


DAY_CODES = {
    Day.MONDAY: "M",
    Day.TUESDAY: "T",
    Day.WEDNESDAY: "W",
    Day.THURSDAY: "R",
    Day.FRIDAY: "F",
}


class Semester(str, Enum):
    """Academic semester."""

    FALL = "Fall"
    SPRING = "Spring"


class CourseType(str, Enum):
    """Kind of course, drives ordering and room rules."""

    CORE = "Core"
    ELECTIVE = "Elective"
    CAPSTONE = "Capstone"
    ADVANCED_PROJECT = "Advanced Project"


class CourseLevel(str, Enum):
    """Course level derived from the course-code number."""

    UNDERGRADUATE = "Undergraduate"
    GRADUATE = "Graduate"


class RoomType(str, Enum):
    """Room classes in the room catalog."""

    LARGE_LECTURE = "large_lecture"
    MEDIUM = "medium"
    SMALL = "small"
    REGISTRAR = "registrar"


class Priority(str, Enum):
    """Priority tier of a faculty soft preference."""

    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"

    @property
    def weight(self) -> int:
        return PRIORITY_WEIGHTS[self.value]


class HardConstraintType(str, Enum):
    """Supported faculty hard constraints."""

    CANNOT_TEACH_DAY = "cannot_teach_day"


class DiscussionDays(str, Enum):
    """Day restriction for a course's discussion sections."""

    ANY = "any"
    TUESDAY_THURSDAY = "tuesday-thursday"
    THURSDAY_ONLY = "thursday-only"


class SectionKind(str, Enum):
    """Whether a section is a lecture or a discussion."""

    LECTURE = "lecture"
    DISCUSSION = "discussion"


class Severity(str, Enum):
    """Conflict severity."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"


class ConflictType(str, Enum):
    """Kinds of conflicts reported by the rule engine."""

    ROOM_DOUBLE_BOOKED = "Room Double Booked"
    FACULTY_DOUBLE_BOOKED = "Faculty Double Booked"
    HARD_CONSTRAINT_VIOLATED = "Hard Constraint Violated"
    STUDENT_COHORT_OVERLAP = "Student Cohort Overlap"
    RESTRICTED_HOUR_CONFLICT = "Restricted Hour Conflict"
    CORE_OVERLAP_UNDERGRAD = "Undergraduate Core Overlap"
    CORE_OVERLAP_GRAD = "Graduate Core Overlap"
    BLOCK_VIOLATION = "Restricted-Block Violation"
    SOFT_PREFERENCE_VIOLATED = "Faculty Preference Violated"
    TOO_MANY_ELECTIVES_SAME_SLOT = "Too Many Electives in Same Slot"
    NO_MORNING_CORE_OFFERING = "No Morning Core Offering"
    NO_AFTERNOON_CORE_OFFERING = "No Afternoon Core Offering"
    PARENTING_PARTNER_CONFLICT = "Parenting Partner Conflict"
    BLOCK_ROOM_MISUSE = "Restricted-Block Room Misuse"
    SECTION_CLUSTERING = "Section Clustering"
    CROSS_COURSE_OVERLAP = "Cross-Course Overlap"
    ROOM_OVER_CAPACITY = "Room Over Capacity"
    ROOM_UNDER_UTILIZED = "Room Under Utilized"


# Severity is fixed per conflict type
CONFLICT_SEVERITY = {
    ConflictType.ROOM_DOUBLE_BOOKED: Severity.ERROR,
    ConflictType.FACULTY_DOUBLE_BOOKED: Severity.ERROR,
    ConflictType.HARD_CONSTRAINT_VIOLATED: Severity.ERROR,
    ConflictType.STUDENT_COHORT_OVERLAP: Severity.ERROR,
    ConflictType.RESTRICTED_HOUR_CONFLICT: Severity.ERROR,
    ConflictType.CORE_OVERLAP_UNDERGRAD: Severity.ERROR,
    ConflictType.CORE_OVERLAP_GRAD: Severity.ERROR,
    ConflictType.BLOCK_VIOLATION: Severity.ERROR,
    ConflictType.SOFT_PREFERENCE_VIOLATED: Severity.WARNING,
    ConflictType.TOO_MANY_ELECTIVES_SAME_SLOT: Severity.WARNING,
    ConflictType.NO_MORNING_CORE_OFFERING: Severity.WARNING,
    ConflictType.NO_AFTERNOON_CORE_OFFERING: Severity.WARNING,
    ConflictType.PARENTING_PARTNER_CONFLICT: Severity.WARNING,
    ConflictType.BLOCK_ROOM_MISUSE: Severity.WARNING,
    ConflictType.SECTION_CLUSTERING: Severity.WARNING,
    ConflictType.CROSS_COURSE_OVERLAP: Severity.WARNING,
    ConflictType.ROOM_OVER_CAPACITY: Severity.INFO,
    ConflictType.ROOM_UNDER_UTILIZED: Severity.INFO,
}


class ScheduleStatus(str, Enum):
    """Lifecycle status of a schedule."""

    DRAFT = "draft"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    PUBLISHED = "published"


class UnscheduledReason(str, Enum):
    """Reasons why a section could not be placed."""

    NO_TIME_SLOT = "no_time_slot"
    NO_ROOM_AVAILABLE = "no_room_available"
    CONSTRAINT_VIOLATION = "constraint_violation"


class SchedulingStrategy(str, Enum):
    """Search strategy that produced a schedule."""

    BACKTRACKING = "backtracking"
    GREEDY = "greedy"


@dataclass(frozen=True)
class TimeSlot:
    """A catalog time slot: a set of weekdays with a start and end time.

    Times are minutes since midnight. Two slots overlap when they share
    at least one day and their [start, end) intervals intersect.
    """

    id: str
    start: int
    end: int
    days: tuple[Day, ...]
    preferred_morning: bool = False
    preferred_afternoon: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "days", tuple(Day(d) for d in self.days))
        if self.end <= self.start:
            raise CatalogError("end time must be after start time", self.id)
        if not self.days:
            raise CatalogError("time slot has no days", self.id)

    @classmethod
    def from_times(
        cls,
        slot_id: str,
        start_time: str,
        end_time: str,
        days: list[Day] | tuple[Day, ...],
        preferred_morning: bool = False,
        preferred_afternoon: bool = False,
    ) -> Self:
        """Create a slot from "HH:MM" strings."""
        return cls(
            id=slot_id,
            start=time_to_minutes(start_time),
            end=time_to_minutes(end_time),
            days=tuple(days),
            preferred_morning=preferred_morning,
            preferred_afternoon=preferred_afternoon,
        )

    @property
    def duration(self) -> int:
        return self.end - self.start

    @property
    def start_time(self) -> str:
        return minutes_to_time(self.start)

    @property
    def end_time(self) -> str:
        return minutes_to_time(self.end)

    @property
    def day_codes(self) -> str:
        """Registrar day pattern, e.g. "MW" or "TR"."""
        return "".join(day.code for day in self.days)

    @property
    def key(self) -> tuple[tuple[Day, ...], int]:
        """Identity of a (days, start) pattern, ignoring the slot id."""
        return (self.days, self.start)

    def shares_day(self, other: "TimeSlot") -> bool:
        return any(day in other.days for day in self.days)

    def overlaps(self, other: "TimeSlot") -> bool:
        """Check whether two slots share a day and intersect in time."""
        if not self.shares_day(other):
            return False
        return self.start < other.end and other.start < self.end

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "start_time": self.start_time,
            "end_time": self.end_time,
            "days": [day.value for day in self.days],
            "preferred_morning": self.preferred_morning,
            "preferred_afternoon": self.preferred_afternoon,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        return cls.from_times(
            data["id"],
            data["start_time"],
            data["end_time"],
            [Day(d) for d in data["days"]],
            preferred_morning=data.get("preferred_morning", False),
            preferred_afternoon=data.get("preferred_afternoon", False),
        )


@dataclass(frozen=True)
class Room:
    """A physical (or registrar-assigned) room."""

    id: str
    name: str
    type: RoomType
    capacity: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "type", RoomType(self.type))
        if self.capacity <= 0:
            raise CatalogError(f"capacity must be positive, got {self.capacity}", self.id)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type.value,
            "capacity": self.capacity,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        return cls(
            id=data["id"],
            name=data.get("name", data["id"]),
            type=RoomType(data["type"]),
            capacity=int(data["capacity"]),
        )


@dataclass
class FacultyPreference:
    """A soft preference: days a faculty member would like or avoid."""

    id: str
    priority: Priority = Priority.MEDIUM
    preferred_days: list[Day] = field(default_factory=list)
    avoid_days: list[Day] = field(default_factory=list)

    def score(self, slot: TimeSlot) -> int:
        """Signed preference score of a slot (+weight preferred, -weight avoided)."""
        weight = self.priority.weight
        total = 0
        if any(day in self.preferred_days for day in slot.days):
            total += weight
        if self.avoids(slot):
            total -= weight
        return total

    def avoids(self, slot: TimeSlot) -> bool:
        return any(day in self.avoid_days for day in slot.days)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "priority": self.priority.value,
            "preferred_days": [d.value for d in self.preferred_days],
            "avoid_days": [d.value for d in self.avoid_days],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        return cls(
            id=data["id"],
            priority=Priority(data.get("priority", "medium")),
            preferred_days=[Day(d) for d in data.get("preferred_days", [])],
            avoid_days=[Day(d) for d in data.get("avoid_days", [])],
        )


@dataclass
class HardConstraint:
    """A faculty constraint that must never be violated."""

    id: str
    days: list[Day] = field(default_factory=list)
    description: str = ""
    type: HardConstraintType = HardConstraintType.CANNOT_TEACH_DAY

    def blocks(self, slot: TimeSlot) -> bool:
        """Check whether this constraint forbids the given slot."""
        if self.type == HardConstraintType.CANNOT_TEACH_DAY:
            return any(day in self.days for day in slot.days)
        return False

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type.value,
            "days": [d.value for d in self.days],
            "description": self.description,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        return cls(
            id=data["id"],
            days=[Day(d) for d in data.get("days", [])],
            description=data.get("description", ""),
            type=HardConstraintType(data.get("type", "cannot_teach_day")),
        )


@dataclass
class Faculty:
    """A faculty member with soft preferences and hard constraints."""

    id: str
    name: str
    email: str | None = None
    preferences: list[FacultyPreference] = field(default_factory=list)
    hard_constraints: list[HardConstraint] = field(default_factory=list)
    parenting_partner_id: str | None = None

    def blocking_constraint(self, slot: TimeSlot) -> HardConstraint | None:
        """Return the first hard constraint that forbids the slot, if any."""
        for constraint in self.hard_constraints:
            if constraint.blocks(slot):
                return constraint
        return None

    def cannot_teach(self, slot: TimeSlot) -> bool:
        return self.blocking_constraint(slot) is not None

    def preference_score(self, slot: TimeSlot) -> int:
        """Sum of all preference scores for a slot."""
        return sum(pref.score(slot) for pref in self.preferences)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "preferences": [p.to_dict() for p in self.preferences],
            "hard_constraints": [c.to_dict() for c in self.hard_constraints],
            "parenting_partner_id": self.parenting_partner_id,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        return cls(
            id=data["id"],
            name=data.get("name", data["id"]),
            email=data.get("email"),
            preferences=[
                FacultyPreference.from_dict(p) for p in data.get("preferences", [])
            ],
            hard_constraints=[
                HardConstraint.from_dict(c) for c in data.get("hard_constraints", [])
            ],
            parenting_partner_id=data.get("parenting_partner_id"),
        )


@dataclass(frozen=True)
class StudentCohort:
    """A group of students identified by program and year."""

    program: str
    year: int
    count: int = field(default=0, compare=False)

    @property
    def label(self) -> str:
        return f"{self.program} Year {self.year}"

    def to_dict(self) -> dict[str, Any]:
        return {"program": self.program, "year": self.year, "count": self.count}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        return cls(
            program=data["program"],
            year=int(data["year"]),
            count=int(data.get("count", 0)),
        )


def course_level_from_code(code: str) -> CourseLevel:
    """Derive the course level from the first number in a course code."""
    match = re.search(r"\d+", code)
    number = int(match.group(0)) if match else 0
    if number >= GRADUATE_COURSE_THRESHOLD:
        return CourseLevel.GRADUATE
    return CourseLevel.UNDERGRADUATE


@dataclass
class Course:
    """A course to be scheduled, with its pre-assigned faculty member."""

    id: str
    code: str
    name: str
    type: CourseType
    faculty_id: str
    enrollment_cap: int
    number_of_sections: int = 1
    duration: int = 75
    sessions_per_week: int = 2
    level: CourseLevel | None = None
    number_of_discussions: int = 0
    students_per_discussion: int | None = None
    discussion_duration: int = 75
    discussion_days: DiscussionDays = DiscussionDays.ANY
    target_students: list[StudentCohort] = field(default_factory=list)
    preferred_room: RoomType | None = None
    cohort: str | None = None
    spread_across_days: bool = False
    candidate_faculty_ids: list[str] = field(default_factory=list)
    actual_enrollment: int | None = None
    notes: str = ""

    def __post_init__(self) -> None:
        if self.level is None:
            self.level = course_level_from_code(self.code)

    @property
    def is_core(self) -> bool:
        return self.type == CourseType.CORE

    @property
    def is_elective(self) -> bool:
        return self.type == CourseType.ELECTIVE

    def meeting_duration(self, kind: SectionKind) -> int:
        """Meeting length in minutes for a lecture or discussion section."""
        if kind == SectionKind.DISCUSSION:
            return self.discussion_duration
        return self.duration

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "code": self.code,
            "name": self.name,
            "type": self.type.value,
            "level": self.level.value if self.level else None,
            "faculty_id": self.faculty_id,
            "enrollment_cap": self.enrollment_cap,
            "number_of_sections": self.number_of_sections,
            "duration": self.duration,
            "sessions_per_week": self.sessions_per_week,
            "number_of_discussions": self.number_of_discussions,
            "students_per_discussion": self.students_per_discussion,
            "discussion_duration": self.discussion_duration,
            "discussion_days": self.discussion_days.value,
            "target_students": [c.to_dict() for c in self.target_students],
            "preferred_room": self.preferred_room.value if self.preferred_room else None,
            "cohort": self.cohort,
            "spread_across_days": self.spread_across_days,
            "candidate_faculty_ids": self.candidate_faculty_ids,
            "actual_enrollment": self.actual_enrollment,
            "notes": self.notes,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        level = data.get("level")
        preferred_room = data.get("preferred_room")
        return cls(
            id=data["id"],
            code=data["code"],
            name=data.get("name", data["code"]),
            type=CourseType(data["type"]),
            faculty_id=data["faculty_id"],
            enrollment_cap=int(data["enrollment_cap"]),
            number_of_sections=int(data.get("number_of_sections", 1)),
            duration=int(data.get("duration", 75)),
            sessions_per_week=int(data.get("sessions_per_week", 2)),
            level=CourseLevel(level) if level else None,
            number_of_discussions=int(data.get("number_of_discussions") or 0),
            students_per_discussion=data.get("students_per_discussion"),
            discussion_duration=int(data.get("discussion_duration", 75)),
            discussion_days=DiscussionDays(data.get("discussion_days", "any")),
            target_students=[
                StudentCohort.from_dict(c) for c in data.get("target_students", [])
            ],
            preferred_room=RoomType(preferred_room) if preferred_room else None,
            cohort=data.get("cohort"),
            spread_across_days=data.get("spread_across_days", False),
            candidate_faculty_ids=list(data.get("candidate_faculty_ids", [])),
            actual_enrollment=data.get("actual_enrollment"),
            notes=data.get("notes", ""),
        )


@dataclass
class Conflict:
    """A rule violation found in a finished schedule."""

    id: str
    type: ConflictType
    severity: Severity
    description: str
    affected_sections: list[str] = field(default_factory=list)
    affected_courses: list[str] = field(default_factory=list)

    @classmethod
    def create(
        cls,
        conflict_type: ConflictType,
        conflict_id: str,
        description: str,
        affected_sections: list[str],
        affected_courses: list[str] | None = None,
    ) -> Self:
        """Create a conflict with the fixed severity of its type."""
        return cls(
            id=conflict_id,
            type=conflict_type,
            severity=CONFLICT_SEVERITY[conflict_type],
            description=description,
            affected_sections=list(affected_sections),
            affected_courses=list(affected_courses or []),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "type": self.type.value,
            "severity": self.severity.value,
            "description": self.description,
            "affected_sections": self.affected_sections,
            "affected_courses": self.affected_courses,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        return cls(
            id=data["id"],
            type=ConflictType(data["type"]),
            severity=Severity(data["severity"]),
            description=data.get("description", ""),
            affected_sections=list(data.get("affected_sections", [])),
            affected_courses=list(data.get("affected_courses", [])),
        )


@dataclass
class ScheduledSection:
    """A lecture or discussion section, placed once it has a slot and room."""

    id: str
    course_id: str
    section_number: int
    kind: SectionKind
    faculty_id: str
    enrollment_cap: int
    parent_section_number: int | None = None
    actual_enrollment: int | None = None
    time_slot: TimeSlot | None = None
    room: Room | None = None
    conflicts: list[Conflict] = field(default_factory=list)

    @property
    def is_discussion(self) -> bool:
        return self.kind == SectionKind.DISCUSSION

    @property
    def is_placed(self) -> bool:
        return self.time_slot is not None and self.room is not None

    def place(self, time_slot: TimeSlot, room: Room) -> "ScheduledSection":
        """Return a placed copy of this section."""
        return replace(self, time_slot=time_slot, room=room, conflicts=[])

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "course_id": self.course_id,
            "section_number": self.section_number,
            "kind": self.kind.value,
            "parent_section_number": self.parent_section_number,
            "faculty_id": self.faculty_id,
            "enrollment_cap": self.enrollment_cap,
            "actual_enrollment": self.actual_enrollment,
            "time_slot": self.time_slot.to_dict() if self.time_slot else None,
            "room": self.room.to_dict() if self.room else None,
            "conflicts": [c.id for c in self.conflicts],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        time_slot = data.get("time_slot")
        room = data.get("room")
        return cls(
            id=data["id"],
            course_id=data["course_id"],
            section_number=int(data["section_number"]),
            kind=SectionKind(data.get("kind", "lecture")),
            faculty_id=data["faculty_id"],
            enrollment_cap=int(data["enrollment_cap"]),
            parent_section_number=data.get("parent_section_number"),
            actual_enrollment=data.get("actual_enrollment"),
            time_slot=TimeSlot.from_dict(time_slot) if time_slot else None,
            room=Room.from_dict(room) if room else None,
        )


@dataclass
class UnscheduledSection:
    """A section that could not be placed."""

    section_id: str
    course_id: str
    course_code: str
    kind: SectionKind
    reason: UnscheduledReason
    details: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "section_id": self.section_id,
            "course_id": self.course_id,
            "course_code": self.course_code,
            "kind": self.kind.value,
            "reason": self.reason.value,
            "details": self.details,
        }


@dataclass
class SchedulerConfig:
    """Per-run scheduling options."""

    semester: Semester
    year: int
    allow_friday_electives: bool = False
    restricted_hour_enabled: bool = True
    max_electives_per_slot: int = 2
    prefer_mixed_electives: bool = False
    avoid_thursday_discussions_after_5pm: bool = True
    backtrack_time_limit: float = 10.0

    def to_dict(self) -> dict[str, Any]:
        return {
            "semester": self.semester.value,
            "year": self.year,
            "allow_friday_electives": self.allow_friday_electives,
            "restricted_hour_enabled": self.restricted_hour_enabled,
            "max_electives_per_slot": self.max_electives_per_slot,
            "prefer_mixed_electives": self.prefer_mixed_electives,
            "avoid_thursday_discussions_after_5pm": self.avoid_thursday_discussions_after_5pm,
            "backtrack_time_limit": self.backtrack_time_limit,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        return cls(
            semester=Semester(data["semester"]),
            year=int(data["year"]),
            allow_friday_electives=data.get("allow_friday_electives", False),
            restricted_hour_enabled=data.get("restricted_hour_enabled", True),
            max_electives_per_slot=int(data.get("max_electives_per_slot", 2)),
            prefer_mixed_electives=data.get("prefer_mixed_electives", False),
            avoid_thursday_discussions_after_5pm=data.get(
                "avoid_thursday_discussions_after_5pm", True
            ),
            backtrack_time_limit=float(data.get("backtrack_time_limit", 10.0)),
        )


@dataclass
class Schedule:
    """A complete schedule: placed sections plus detected conflicts."""

    id: str
    name: str
    semester: Semester
    year: int
    sections: list[ScheduledSection] = field(default_factory=list)
    conflicts: list[Conflict] = field(default_factory=list)
    status: ScheduleStatus = ScheduleStatus.DRAFT
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "semester": self.semester.value,
            "year": self.year,
            "status": self.status.value,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
            "sections": [s.to_dict() for s in self.sections],
            "conflicts": [c.to_dict() for c in self.conflicts],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        conflicts = [Conflict.from_dict(c) for c in data.get("conflicts", [])]
        by_id = {c.id: c for c in conflicts}
        sections = []
        for section_data in data.get("sections", []):
            section = ScheduledSection.from_dict(section_data)
            section.conflicts = [
                by_id[cid] for cid in section_data.get("conflicts", []) if cid in by_id
            ]
            sections.append(section)
        now = datetime.now().isoformat()
        return cls(
            id=data["id"],
            name=data.get("name", data["id"]),
            semester=Semester(data["semester"]),
            year=int(data["year"]),
            sections=sections,
            conflicts=conflicts,
            status=ScheduleStatus(data.get("status", "draft")),
            created_at=datetime.fromisoformat(data.get("created_at", now)),
            updated_at=datetime.fromisoformat(data.get("updated_at", now)),
        )


@dataclass
class ScheduleStatistics:
    """Summary counts for a generated schedule."""

    total_sections: int = 0
    scheduled_sections: int = 0
    unscheduled_sections: int = 0
    total_conflicts: int = 0
    error_conflicts: int = 0
    warning_conflicts: int = 0
    info_conflicts: int = 0
    conflicts_by_type: dict[str, int] = field(default_factory=dict)
    strategy: SchedulingStrategy = SchedulingStrategy.BACKTRACKING
    search_time_seconds: float = 0.0

    @property
    def scheduling_rate(self) -> float:
        if self.total_sections == 0:
            return 0.0
        return self.scheduled_sections / self.total_sections

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_sections": self.total_sections,
            "scheduled_sections": self.scheduled_sections,
            "unscheduled_sections": self.unscheduled_sections,
            "scheduling_rate": self.scheduling_rate,
            "total_conflicts": self.total_conflicts,
            "error_conflicts": self.error_conflicts,
            "warning_conflicts": self.warning_conflicts,
            "info_conflicts": self.info_conflicts,
            "conflicts_by_type": self.conflicts_by_type,
            "strategy": self.strategy.value,
            "search_time_seconds": round(self.search_time_seconds, 3),
        }


@dataclass
class ScheduleGenerationResult:
    """Result of one scheduling run."""

    success: bool
    schedule: Schedule | None = None
    statistics: ScheduleStatistics | None = None
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    unscheduled_sections: list[UnscheduledSection] = field(default_factory=list)
    strategy: SchedulingStrategy | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            "success": self.success,
            "strategy": self.strategy.value if self.strategy else None,
            "schedule": self.schedule.to_dict() if self.schedule else None,
            "statistics": self.statistics.to_dict() if self.statistics else None,
            "errors": self.errors,
            "warnings": self.warnings,
            "unscheduled_sections": [u.to_dict() for u in self.unscheduled_sections],
        }
