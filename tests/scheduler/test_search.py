"""Tests for backtracking search and the greedy fallback."""

import itertools

import pytest

from course_scheduler.scheduler.config import SchedulingPolicy
from course_scheduler.scheduler.greedy import GreedyScheduler
from course_scheduler.scheduler.models import UnscheduledReason
from course_scheduler.scheduler.ranking import SlotRanker
from course_scheduler.scheduler.search import (
    BacktrackingSearch,
    Infeasible,
    InfeasibleReason,
)
from course_scheduler.scheduler.sections import synthesize_sections
from course_scheduler.scheduler.timeslots import TimeSlotCatalog
from course_scheduler.scheduler.tracker import PlacementTracker, build_partner_map


@pytest.fixture
def build(config):
    """Build (search, greedy) for a catalog, room catalog, courses and faculty."""

    def _build(catalog, rooms, courses, faculty, time_limit=10.0, clock=None):
        courses_by_id = {c.id: c for c in courses}
        faculty_by_id = {f.id: f for f in faculty}
        policy = SchedulingPolicy()

        def tracker():
            return PlacementTracker(
                courses_by_id, faculty_by_id, policy, 2, build_partner_map(faculty)
            )

        ranker = SlotRanker(catalog, config, policy, faculty_by_id)
        kwargs = {"clock": clock} if clock else {}
        search = BacktrackingSearch(
            ranker, rooms, tracker(), courses_by_id, time_limit, **kwargs
        )
        greedy = GreedyScheduler(ranker, rooms, tracker(), courses_by_id)
        return search, greedy

    return _build


class TestBacktrackingSearch:
    """Tests for BacktrackingSearch.run."""

    def test_trivial_fit(self, build, single_slot_catalog, one_room, make_course, make_faculty):
        course = make_course()
        search, _ = build(single_slot_catalog, one_room, [course], [make_faculty()])

        placed = search.run(synthesize_sections([course]))

        assert not isinstance(placed, Infeasible)
        assert len(placed) == 1
        assert placed[0].time_slot.id == "tr-0930-1045"
        assert placed[0].room.id == "room-a"

    def test_input_sections_stay_unplaced(
        self, build, single_slot_catalog, one_room, make_course, make_faculty
    ):
        course = make_course()
        sections = synthesize_sections([course])
        search, _ = build(single_slot_catalog, one_room, [course], [make_faculty()])

        search.run(sections)

        assert not sections[0].is_placed

    def test_exhausted(self, build, single_slot_catalog, two_rooms, make_course, make_faculty):
        courses = [make_course(), make_course()]
        search, _ = build(single_slot_catalog, two_rooms, courses, [make_faculty()])

        outcome = search.run(synthesize_sections(courses))

        assert isinstance(outcome, Infeasible)
        assert outcome.reason == InfeasibleReason.EXHAUSTED
        assert len(search.tracker) == 0

    def test_timeout(self, build, single_slot_catalog, one_room, make_course, make_faculty):
        ticks = itertools.count(0, 100)
        course = make_course()
        search, _ = build(
            single_slot_catalog,
            one_room,
            [course],
            [make_faculty()],
            time_limit=10.0,
            clock=lambda: next(ticks),
        )

        outcome = search.run(synthesize_sections([course]))

        assert isinstance(outcome, Infeasible)
        assert outcome.reason == InfeasibleReason.TIMED_OUT
        assert outcome.elapsed_seconds > 10.0

    def test_undoes_earlier_choice(self, build, make_slot, one_room, make_course, make_faculty):
        tr = make_slot("TR", "09:30", "10:45")
        mw = make_slot("MW", "09:30", "10:45")
        catalog = TimeSlotCatalog([tr, mw])
        first = make_course(faculty_id="f1")
        second = make_course(faculty_id="f2")
        faculty = [make_faculty("f1"), make_faculty("f2", cannot_teach="Monday, Wednesday")]
        search, _ = build(catalog, one_room, [first, second], faculty)

        placed = search.run(synthesize_sections([first, second]))

        assert not isinstance(placed, Infeasible)
        slots = {s.course_id: s.time_slot.id for s in placed}
        assert slots == {first.id: mw.id, second.id: tr.id}
        assert search.nodes_visited > 3


class TestGreedyScheduler:
    """Tests for GreedyScheduler.run."""

    def test_no_time_slot(self, build, single_slot_catalog, one_room, make_course, make_faculty):
        course = make_course(duration=200)
        _, greedy = build(single_slot_catalog, one_room, [course], [make_faculty()])

        placed, unscheduled = greedy.run(synthesize_sections([course]))

        assert placed == []
        assert unscheduled[0].reason == UnscheduledReason.NO_TIME_SLOT
        assert unscheduled[0].course_code == course.code

    def test_no_room_available(
        self, build, single_slot_catalog, one_room, make_course, make_faculty
    ):
        courses = [make_course(faculty_id="f1"), make_course(faculty_id="f2")]
        faculty = [make_faculty("f1"), make_faculty("f2")]
        _, greedy = build(single_slot_catalog, one_room, courses, faculty)

        placed, unscheduled = greedy.run(synthesize_sections(courses))

        assert len(placed) == 1
        assert [u.reason for u in unscheduled] == [UnscheduledReason.NO_ROOM_AVAILABLE]

    def test_constraint_violation(
        self, build, single_slot_catalog, two_rooms, make_course, make_faculty
    ):
        courses = [make_course(), make_course()]
        _, greedy = build(single_slot_catalog, two_rooms, courses, [make_faculty()])

        placed, unscheduled = greedy.run(synthesize_sections(courses))

        assert len(placed) == 1
        assert unscheduled[0].reason == UnscheduledReason.CONSTRAINT_VIOLATION
        assert unscheduled[0].section_id == f"{courses[1].id}-section-1"

    def test_cohort_rules_not_enforced(
        self, build, single_slot_catalog, two_rooms, make_course, make_faculty
    ):
        courses = [
            make_course(faculty_id="f1", cohort="MPP Year 1"),
            make_course(faculty_id="f2", cohort="MPP Year 1"),
        ]
        faculty = [make_faculty("f1"), make_faculty("f2")]
        search, greedy = build(single_slot_catalog, two_rooms, courses, faculty)
        sections = synthesize_sections(courses)

        assert isinstance(search.run(sections), Infeasible)

        placed, unscheduled = greedy.run(sections)

        assert len(placed) == 2
        assert unscheduled == []
