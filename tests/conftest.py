"""Test fixtures for the course scheduler tests."""

import itertools

import pytest

from course_scheduler.scheduler.models import (
    Course,
    CourseType,
    Faculty,
    FacultyPreference,
    HardConstraint,
    Priority,
    Room,
    RoomType,
    ScheduledSection,
    SchedulerConfig,
    SectionKind,
    Semester,
    TimeSlot,
)
from course_scheduler.scheduler.rooms import RoomCatalog
from course_scheduler.scheduler.timeslots import TimeSlotCatalog
from course_scheduler.scheduler.utils import parse_days


@pytest.fixture
def config():
    """Default run configuration for Fall 2025."""
    return SchedulerConfig(semester=Semester.FALL, year=2025)


@pytest.fixture
def make_slot():
    """Factory for time slots: make_slot("TR", "09:30", "10:45")."""

    def _make(days: str, start: str, end: str, slot_id: str | None = None, **kwargs):
        slot_id = slot_id or f"{days.lower()}-{start.replace(':', '')}-{end.replace(':', '')}"
        return TimeSlot.from_times(slot_id, start, end, parse_days(days), **kwargs)

    return _make


@pytest.fixture
def make_course():
    """Factory for courses with unique ids c1, c2, ..."""
    counter = itertools.count(1)

    def _make(
        code: str = "LPPS 3010",
        type: CourseType = CourseType.ELECTIVE,
        faculty_id: str = "f1",
        enrollment_cap: int = 30,
        **kwargs,
    ):
        kwargs.setdefault("id", f"c{next(counter)}")
        kwargs.setdefault("name", f"Course {code}")
        kwargs.setdefault("duration", 75)
        kwargs.setdefault("sessions_per_week", 2)
        return Course(
            code=code,
            type=type,
            faculty_id=faculty_id,
            enrollment_cap=enrollment_cap,
            **kwargs,
        )

    return _make


@pytest.fixture
def make_faculty():
    """Factory for faculty members with optional day constraints."""

    def _make(
        faculty_id: str = "f1",
        name: str | None = None,
        cannot_teach: str = "",
        avoid: str = "",
        preferred: str = "",
        priority: Priority = Priority.MEDIUM,
        partner: str | None = None,
    ):
        preferences = []
        if avoid or preferred:
            preferences.append(
                FacultyPreference(
                    id=f"pref-{faculty_id}",
                    priority=priority,
                    preferred_days=parse_days(preferred),
                    avoid_days=parse_days(avoid),
                )
            )
        constraints = []
        if cannot_teach:
            constraints.append(
                HardConstraint(id=f"hc-{faculty_id}", days=parse_days(cannot_teach))
            )
        return Faculty(
            id=faculty_id,
            name=name or f"Professor {faculty_id.upper()}",
            preferences=preferences,
            hard_constraints=constraints,
            parenting_partner_id=partner,
        )

    return _make


@pytest.fixture
def place():
    """Factory for already placed sections."""

    def _make(
        section_id: str,
        course: Course,
        slot: TimeSlot,
        room: Room,
        kind: SectionKind = SectionKind.LECTURE,
        number: int = 1,
        faculty_id: str | None = None,
        enrollment_cap: int | None = None,
        actual_enrollment: int | None = None,
    ):
        return ScheduledSection(
            id=section_id,
            course_id=course.id,
            section_number=number,
            kind=kind,
            faculty_id=faculty_id or course.faculty_id,
            enrollment_cap=course.enrollment_cap if enrollment_cap is None else enrollment_cap,
            actual_enrollment=actual_enrollment,
            time_slot=slot,
            room=room,
        )

    return _make


@pytest.fixture
def room_a():
    return Room(id="room-a", name="Room A", type=RoomType.MEDIUM, capacity=48)


@pytest.fixture
def room_b():
    return Room(id="room-b", name="Room B", type=RoomType.MEDIUM, capacity=48)


@pytest.fixture
def two_rooms(room_a, room_b):
    """Two interchangeable standard rooms, no block rooms."""
    return RoomCatalog([room_a, room_b], block_room_ids=[])


@pytest.fixture
def one_room(room_a):
    return RoomCatalog([room_a], block_room_ids=[])


@pytest.fixture
def tr_morning(make_slot):
    return make_slot("TR", "09:30", "10:45", "tr-0930-1045", preferred_morning=True)


@pytest.fixture
def tr_late_morning(make_slot):
    return make_slot("TR", "11:00", "12:15", "tr-1100-1215", preferred_morning=True)


@pytest.fixture
def single_slot_catalog(tr_morning):
    """A catalog holding only Tuesday/Thursday 09:30-10:45."""
    return TimeSlotCatalog([tr_morning])


@pytest.fixture
def two_slot_catalog(tr_morning, tr_late_morning):
    return TimeSlotCatalog([tr_morning, tr_late_morning])
