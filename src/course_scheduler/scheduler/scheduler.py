"""Main course scheduler: search, fallback and schedule assembly."""

import logging
import time
import uuid
from datetime import datetime
from typing import Callable

from .config.policy import SchedulingPolicy
from .conflicts import ConflictDetector
from .greedy import GreedyScheduler
from .models import (
    Conflict,
    Course,
    Faculty,
    Schedule,
    ScheduledSection,
    ScheduleGenerationResult,
    ScheduleStatistics,
    ScheduleStatus,
    SchedulerConfig,
    SchedulingStrategy,
    Severity,
    UnscheduledSection,
)
from .ranking import SlotRanker
from .rooms import RoomCatalog
from .search import BacktrackingSearch, Infeasible, InfeasibleReason
from .sections import prioritize_sections, synthesize_sections
from .timeslots import TimeSlotCatalog, default_catalog
from .tracker import PlacementTracker, build_partner_map
from .utils import count_conflicts_by_type

logger = logging.getLogger(__name__)

NO_SLOTS_ERROR = "Unable to generate a schedule. No valid time slots available."
FRIDAY_ADVISORY = "Try allowing Friday electives to open more time slots."
RELAX_ADVISORY = "Consider relaxing faculty day constraints or adding rooms."


class CourseScheduler:
    """
    Course section scheduler using backtracking search with a greedy fallback.

    One instance owns the mutable placement state of one run; create a
    new instance per run. Catalogs are only read.
    """

    def __init__(
        self,
        config: SchedulerConfig,
        courses: list[Course],
        faculty: list[Faculty],
        catalog: TimeSlotCatalog | None = None,
        rooms: RoomCatalog | None = None,
        policy: SchedulingPolicy | None = None,
        clock: Callable[[], float] = time.monotonic,
    ):
        """
        Initialize the scheduler.

        Args:
            config: Per-run options.
            courses: Courses to schedule (pre-assigned faculty).
            faculty: Faculty members referenced by the courses.
            catalog: Time-grid catalog. Defaults to the built-in grid.
            rooms: Room catalog. Defaults to the built-in rooms with the
                   policy's block rooms.
            policy: Institution policy. Defaults to SchedulingPolicy().
            clock: Monotonic clock used for the backtracking deadline.
        """
        self.config = config
        self.courses = list(courses)
        self.faculty = list(faculty)
        self.catalog = catalog or default_catalog()
        base_policy = policy or SchedulingPolicy()
        # Run options win over the institution defaults
        self.policy = base_policy.with_overrides(
            max_electives_per_slot=config.max_electives_per_slot,
            restricted_hour_enabled=config.restricted_hour_enabled,
        )
        self.rooms = rooms or RoomCatalog(block_room_ids=self.policy.block_room_ids)
        self.clock = clock

        self.courses_by_id = {c.id: c for c in self.courses}
        self.faculty_by_id = {f.id: f for f in self.faculty}
        self.partner_map = build_partner_map(self.faculty)

    def _new_tracker(self) -> PlacementTracker:
        return PlacementTracker(
            self.courses_by_id,
            self.faculty_by_id,
            self.policy,
            self.config.max_electives_per_slot,
            self.partner_map,
        )

    def generate(self) -> ScheduleGenerationResult:
        """
        Generate a schedule.

        Returns:
            ScheduleGenerationResult with the schedule on success, or
            errors and advisories when nothing could be placed.
        """
        sections = synthesize_sections(self.courses)
        ordered = prioritize_sections(
            sections,
            self.courses_by_id,
            self.catalog,
            self.config.allow_friday_electives,
        )

        logger.info(
            f"Scheduling {len(ordered)} sections from {len(self.courses)} courses "
            f"with {self.config.backtrack_time_limit}s time limit"
        )

        ranker = SlotRanker(self.catalog, self.config, self.policy, self.faculty_by_id)
        search = BacktrackingSearch(
            ranker,
            self.rooms,
            self._new_tracker(),
            self.courses_by_id,
            self.config.backtrack_time_limit,
            clock=self.clock,
        )
        outcome = search.run(ordered)

        unscheduled: list[UnscheduledSection] = []
        search_time = 0.0
        if isinstance(outcome, Infeasible):
            search_time = outcome.elapsed_seconds
            logger.warning(
                f"Backtracking failed ({outcome.reason.value}), falling back to greedy"
            )
            greedy = GreedyScheduler(
                ranker, self.rooms, self._new_tracker(), self.courses_by_id
            )
            placed, unscheduled = greedy.run(ordered)
            if outcome.reason == InfeasibleReason.TIMED_OUT:
                for entry in unscheduled:
                    entry.details += " (backtracking timed out)"
            strategy = SchedulingStrategy.GREEDY
        else:
            placed = outcome
            strategy = SchedulingStrategy.BACKTRACKING

        if ordered and not placed:
            logger.error("No sections could be placed")
            return ScheduleGenerationResult(
                success=False,
                errors=[NO_SLOTS_ERROR],
                warnings=self._advisories(),
                unscheduled_sections=unscheduled,
                strategy=strategy,
            )

        schedule = self._assemble(placed)
        statistics = self._statistics(
            schedule, len(ordered), strategy, search_time, len(unscheduled)
        )
        warnings = [c.description for c in schedule.conflicts if c.severity == Severity.WARNING]

        logger.info(
            f"Scheduled {statistics.scheduled_sections} of {statistics.total_sections} "
            f"sections using {strategy.value} ({statistics.total_conflicts} conflicts)"
        )

        return ScheduleGenerationResult(
            success=True,
            schedule=schedule,
            statistics=statistics,
            warnings=warnings,
            unscheduled_sections=unscheduled,
            strategy=strategy,
        )

    def _advisories(self) -> list[str]:
        advisories = []
        if not self.config.allow_friday_electives:
            advisories.append(FRIDAY_ADVISORY)
        advisories.append(RELAX_ADVISORY)
        return advisories

    def _assemble(self, placed: list[ScheduledSection]) -> Schedule:
        """Wrap placed sections into a schedule and attach detected conflicts."""
        detector = ConflictDetector(self.courses, self.faculty, self.policy)
        conflicts = detector.detect(placed)
        attach_conflicts(placed, conflicts)

        now = datetime.now()
        return Schedule(
            id=f"schedule-{uuid.uuid4().hex[:12]}",
            name=f"{self.config.semester.value} {self.config.year} Schedule",
            semester=self.config.semester,
            year=self.config.year,
            sections=placed,
            conflicts=conflicts,
            status=ScheduleStatus.DRAFT,
            created_at=now,
            updated_at=now,
        )

    def _statistics(
        self,
        schedule: Schedule,
        total_sections: int,
        strategy: SchedulingStrategy,
        search_time: float,
        unscheduled_count: int,
    ) -> ScheduleStatistics:
        conflicts = schedule.conflicts
        return ScheduleStatistics(
            total_sections=total_sections,
            scheduled_sections=len(schedule.sections),
            unscheduled_sections=unscheduled_count,
            total_conflicts=len(conflicts),
            error_conflicts=sum(1 for c in conflicts if c.severity == Severity.ERROR),
            warning_conflicts=sum(1 for c in conflicts if c.severity == Severity.WARNING),
            info_conflicts=sum(1 for c in conflicts if c.severity == Severity.INFO),
            conflicts_by_type=count_conflicts_by_type(conflicts),
            strategy=strategy,
            search_time_seconds=search_time,
        )


def attach_conflicts(sections: list[ScheduledSection], conflicts: list[Conflict]) -> None:
    """Set each section's conflict list from the detected conflicts."""
    by_section: dict[str, list[Conflict]] = {s.id: [] for s in sections}
    for conflict in conflicts:
        for section_id in conflict.affected_sections:
            if section_id in by_section:
                by_section[section_id].append(conflict)
    for section in sections:
        section.conflicts = by_section[section.id]


def generate_schedule(
    config: SchedulerConfig,
    courses: list[Course],
    faculty: list[Faculty],
    catalog: TimeSlotCatalog | None = None,
    rooms: RoomCatalog | None = None,
    policy: SchedulingPolicy | None = None,
) -> ScheduleGenerationResult:
    """
    Generate a schedule with a fresh scheduler instance.

    Args:
        config: Per-run options.
        courses: Courses to schedule.
        faculty: Faculty members.
        catalog: Optional time-grid catalog.
        rooms: Optional room catalog.
        policy: Optional institution policy.

    Returns:
        ScheduleGenerationResult.
    """
    scheduler = CourseScheduler(config, courses, faculty, catalog, rooms, policy)
    return scheduler.generate()
