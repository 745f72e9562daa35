"""End-to-end tests for CourseScheduler."""

import itertools
from dataclasses import replace

import pytest

from course_scheduler.scheduler import CourseScheduler, generate_schedule
from course_scheduler.scheduler.config import SchedulingPolicy
from course_scheduler.scheduler.models import (
    ConflictType,
    CourseType,
    Room,
    RoomType,
    SchedulingStrategy,
    Severity,
    UnscheduledReason,
)
from course_scheduler.scheduler.rooms import RoomCatalog
from course_scheduler.scheduler.scheduler import (
    FRIDAY_ADVISORY,
    NO_SLOTS_ERROR,
    RELAX_ADVISORY,
)
from course_scheduler.scheduler.timeslots import TimeSlotCatalog, default_catalog


@pytest.fixture
def three_rooms():
    return RoomCatalog(
        [Room(id=f"r{i}", name=f"Room {i}", type=RoomType.MEDIUM, capacity=40) for i in range(1, 4)],
        block_room_ids=[],
    )


class TestSuccessfulRuns:
    """Runs where backtracking finds a complete placement."""

    def test_trivial_fit(self, config, make_course, make_faculty, single_slot_catalog, one_room):
        course = make_course()
        scheduler = CourseScheduler(
            config, [course], [make_faculty()], catalog=single_slot_catalog, rooms=one_room
        )

        result = scheduler.generate()

        assert result.success
        assert result.strategy == SchedulingStrategy.BACKTRACKING
        assert result.errors == []
        assert result.unscheduled_sections == []
        assert result.schedule.name == "Fall 2025 Schedule"
        assert result.schedule.id.startswith("schedule-")
        assert result.schedule.conflicts == []
        assert result.statistics.total_sections == 1
        assert result.statistics.scheduling_rate == 1.0

        section = result.schedule.sections[0]
        assert section.time_slot.id == "tr-0930-1045"
        assert section.room.id == "room-a"

    def test_exclusive_cohort_spread_over_slots(
        self, config, make_course, make_faculty, two_slot_catalog, two_rooms
    ):
        courses = [
            make_course(faculty_id="f1", cohort="MPP Year 1"),
            make_course(faculty_id="f2", cohort="MPP Year 1"),
        ]
        faculty = [make_faculty("f1"), make_faculty("f2")]

        result = CourseScheduler(
            config, courses, faculty, catalog=two_slot_catalog, rooms=two_rooms
        ).generate()

        assert result.strategy == SchedulingStrategy.BACKTRACKING
        assert {s.time_slot.id for s in result.schedule.sections} == {
            "tr-0930-1045",
            "tr-1100-1215",
        }
        assert result.statistics.conflicts_by_type.get(ConflictType.STUDENT_COHORT_OVERLAP.value) is None

    def test_elective_cap_from_config(
        self, config, make_course, make_faculty, two_slot_catalog, two_rooms
    ):
        courses = [make_course(faculty_id="f1"), make_course(faculty_id="f2")]
        faculty = [make_faculty("f1"), make_faculty("f2")]
        config = replace(config, max_electives_per_slot=1)

        result = CourseScheduler(
            config, courses, faculty, catalog=two_slot_catalog, rooms=two_rooms
        ).generate()

        assert result.strategy == SchedulingStrategy.BACKTRACKING
        assert len({s.time_slot.id for s in result.schedule.sections}) == 2

    def test_protected_hour_respected(self, config, make_course, make_faculty, make_slot, one_room):
        noon = make_slot("MW", "12:00", "12:50")
        late_morning = make_slot("TR", "11:00", "11:50")
        catalog = TimeSlotCatalog([noon, late_morning])
        core = make_course(type=CourseType.CORE, duration=50)

        enabled = CourseScheduler(
            config, [core], [make_faculty()], catalog=catalog, rooms=one_room
        ).generate()
        disabled = CourseScheduler(
            replace(config, restricted_hour_enabled=False),
            [core],
            [make_faculty()],
            catalog=catalog,
            rooms=one_room,
        ).generate()

        assert enabled.schedule.sections[0].time_slot.id == late_morning.id
        assert disabled.schedule.sections[0].time_slot.id == noon.id
        assert not any(
            c.type == ConflictType.RESTRICTED_HOUR_CONFLICT for c in disabled.schedule.conflicts
        )

    def test_generate_schedule(self, config, make_course, make_faculty, single_slot_catalog, one_room):
        result = generate_schedule(
            config, [make_course()], [make_faculty()], catalog=single_slot_catalog, rooms=one_room
        )
        assert result.success


class TestFallback:
    """Runs that fall back to the greedy scheduler."""

    def test_forced_double_booking(
        self, config, make_course, make_faculty, single_slot_catalog, two_rooms
    ):
        courses = [make_course(), make_course()]

        result = CourseScheduler(
            config, courses, [make_faculty()], catalog=single_slot_catalog, rooms=two_rooms
        ).generate()

        assert result.success
        assert result.strategy == SchedulingStrategy.GREEDY
        assert len(result.schedule.sections) == 1
        assert [u.reason for u in result.unscheduled_sections] == [
            UnscheduledReason.CONSTRAINT_VIOLATION
        ]
        assert result.statistics.unscheduled_sections == 1
        assert result.statistics.scheduling_rate == 0.5
        # The engine never produces a faculty double-booking
        assert result.schedule.conflicts == []

    def test_exclusive_cohort_overlap_reported(
        self, config, make_course, make_faculty, single_slot_catalog, two_rooms
    ):
        courses = [
            make_course(code="LPPS 3010", type=CourseType.CORE, faculty_id="f1", cohort="MPP1"),
            make_course(code="LPPS 3020", type=CourseType.CORE, faculty_id="f2", cohort="MPP1"),
        ]
        faculty = [make_faculty("f1"), make_faculty("f2")]

        result = CourseScheduler(
            config, courses, faculty, catalog=single_slot_catalog, rooms=two_rooms
        ).generate()

        assert result.success
        assert result.strategy == SchedulingStrategy.GREEDY
        assert len(result.schedule.sections) == 2
        cohort = [
            c
            for c in result.schedule.conflicts
            if c.type == ConflictType.STUDENT_COHORT_OVERLAP
        ]
        assert len(cohort) == 1
        assert cohort[0].severity == Severity.ERROR
        assert result.statistics.error_conflicts >= 1

    def test_timeout_marks_unscheduled(
        self, config, make_course, make_faculty, single_slot_catalog, two_rooms
    ):
        ticks = itertools.count(0, 100)
        courses = [make_course(), make_course()]

        result = CourseScheduler(
            config,
            courses,
            [make_faculty()],
            catalog=single_slot_catalog,
            rooms=two_rooms,
            clock=lambda: next(ticks),
        ).generate()

        assert result.strategy == SchedulingStrategy.GREEDY
        assert result.statistics.search_time_seconds > config.backtrack_time_limit
        assert len(result.unscheduled_sections) == 1
        assert result.unscheduled_sections[0].details.endswith(" (backtracking timed out)")

    def test_elective_overload_reported_as_warning(
        self, config, make_course, make_faculty, single_slot_catalog, three_rooms
    ):
        courses = [make_course(faculty_id=f"f{i}") for i in range(1, 4)]
        faculty = [make_faculty(f"f{i}") for i in range(1, 4)]

        result = CourseScheduler(
            config, courses, faculty, catalog=single_slot_catalog, rooms=three_rooms
        ).generate()

        assert result.strategy == SchedulingStrategy.GREEDY
        assert len(result.schedule.sections) == 3
        assert any("3 electives" in w for w in result.warnings)
        assert result.statistics.warning_conflicts == 1

    def test_conflicts_attached_to_sections(
        self, config, make_course, make_faculty, single_slot_catalog, three_rooms
    ):
        courses = [make_course(faculty_id=f"f{i}") for i in range(1, 4)]
        faculty = [make_faculty(f"f{i}") for i in range(1, 4)]

        result = CourseScheduler(
            config, courses, faculty, catalog=single_slot_catalog, rooms=three_rooms
        ).generate()

        for section in result.schedule.sections:
            assert [c.type for c in section.conflicts] == [
                ConflictType.TOO_MANY_ELECTIVES_SAME_SLOT
            ]


class TestTotalFailure:
    """Runs where nothing can be placed."""

    def test_no_slots(self, config, make_course, make_faculty, single_slot_catalog, one_room):
        course = make_course(duration=200)

        result = CourseScheduler(
            config, [course], [make_faculty()], catalog=single_slot_catalog, rooms=one_room
        ).generate()

        assert not result.success
        assert result.schedule is None
        assert result.errors == [NO_SLOTS_ERROR]
        assert result.warnings == [FRIDAY_ADVISORY, RELAX_ADVISORY]
        assert [u.reason for u in result.unscheduled_sections] == [UnscheduledReason.NO_TIME_SLOT]

    def test_no_friday_advisory_when_friday_allowed(
        self, config, make_course, make_faculty, single_slot_catalog, one_room
    ):
        course = make_course(duration=200)
        config = replace(config, allow_friday_electives=True)

        result = CourseScheduler(
            config, [course], [make_faculty()], catalog=single_slot_catalog, rooms=one_room
        ).generate()

        assert result.warnings == [RELAX_ADVISORY]


class TestPolicyOverrides:
    """Run options applied over the institution policy."""

    def test_config_overrides_policy(self, config, make_course, make_faculty):
        policy = SchedulingPolicy(max_electives_per_slot=5)
        scheduler = CourseScheduler(
            replace(config, max_electives_per_slot=1, restricted_hour_enabled=False),
            [make_course()],
            [make_faculty()],
            policy=policy,
        )

        assert scheduler.policy.max_electives_per_slot == 1
        assert not scheduler.policy.restricted_hour_enabled
        assert policy.max_electives_per_slot == 5


class TestBuiltInCatalog:
    """Runs over the built-in time grid and room inventory."""

    def test_no_room_or_faculty_double_booking(self, config, make_course, make_faculty):
        courses = [
            make_course(code="LPPS 3010", type=CourseType.CORE, faculty_id="f1", number_of_sections=2),
            make_course(code="LPPS 3020", type=CourseType.CORE, faculty_id="f2", cohort="BA Year 2"),
            make_course(code="LPPS 3030", faculty_id="f1", number_of_discussions=2),
            make_course(code="LPPS 4010", faculty_id="f3", number_of_sections=2),
            make_course(code="LPPS 4020", faculty_id="f2", duration=50),
            make_course(code="LPPA 7110", type=CourseType.CORE, faculty_id="f3", cohort="BA Year 2"),
        ]
        faculty = [make_faculty("f1"), make_faculty("f2"), make_faculty("f3")]

        result = CourseScheduler(
            config, courses, faculty, catalog=default_catalog(), rooms=RoomCatalog()
        ).generate()

        assert result.success
        sections = result.schedule.sections
        assert len(sections) + len(result.unscheduled_sections) == 10
        for i, first in enumerate(sections):
            for second in sections[i + 1 :]:
                if not first.time_slot.overlaps(second.time_slot):
                    continue
                assert first.room.id != second.room.id
                assert first.faculty_id != second.faculty_id
