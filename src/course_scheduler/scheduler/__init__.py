"""Course section scheduling engine.

This package assigns every course section a time slot and a room using a
backtracking search under a wall-clock time limit, falling back to a greedy
first-fit pass when the search gives up. A separate rule engine
re-validates finished schedules and reports typed, severity-tagged
conflicts.

Main classes:
- CourseScheduler: Runs one scheduling pass
- ConflictDetector: Conflict rule engine
- TimeSlotCatalog / RoomCatalog: Read-only catalogs
- ConfigLoader: Loads rooms.csv and policy.json from a directory

Usage:
    from course_scheduler.scheduler import CourseScheduler, SchedulerConfig, Semester

    config = SchedulerConfig(semester=Semester.FALL, year=2025)
    result = CourseScheduler(config, courses, faculty).generate()
"""

from .blocks import is_restricted_block, restricted_block_reason
from .config import ConfigLoader, CrossCourseRule, SchedulingPolicy
from .conflicts import ConflictDetector, detect_conflicts
from .constants import DEFAULT_TIME_LIMIT
from .models import (
    Conflict,
    ConflictType,
    Course,
    CourseLevel,
    CourseType,
    Day,
    DiscussionDays,
    Faculty,
    FacultyPreference,
    HardConstraint,
    Priority,
    Room,
    RoomType,
    Schedule,
    ScheduledSection,
    ScheduleGenerationResult,
    ScheduleStatistics,
    SchedulerConfig,
    SchedulingStrategy,
    SectionKind,
    Semester,
    Severity,
    StudentCohort,
    TimeSlot,
    UnscheduledReason,
    UnscheduledSection,
)
from .repository import JSONScheduleRepository, ScheduleRepository, academic_year, version_name
from .rooms import RoomCatalog
from .scheduler import CourseScheduler, generate_schedule
from .search import Infeasible, InfeasibleReason
from .sections import prioritize_sections, synthesize_sections
from .timeslots import TimeSlotCatalog, default_catalog, is_protected_hour
from .workload import AssignmentWeights, balance_workload

__all__ = [
    # Main scheduler
    "CourseScheduler",
    "generate_schedule",
    "ConflictDetector",
    "detect_conflicts",
    "balance_workload",
    "AssignmentWeights",
    # Catalogs and configuration
    "ConfigLoader",
    "CrossCourseRule",
    "RoomCatalog",
    "SchedulingPolicy",
    "TimeSlotCatalog",
    "default_catalog",
    # Persistence
    "JSONScheduleRepository",
    "ScheduleRepository",
    "academic_year",
    "version_name",
    # Models
    "Conflict",
    "ConflictType",
    "Course",
    "CourseLevel",
    "CourseType",
    "Day",
    "DiscussionDays",
    "Faculty",
    "FacultyPreference",
    "HardConstraint",
    "Infeasible",
    "InfeasibleReason",
    "Priority",
    "Room",
    "RoomType",
    "Schedule",
    "ScheduledSection",
    "ScheduleGenerationResult",
    "ScheduleStatistics",
    "SchedulerConfig",
    "SchedulingStrategy",
    "SectionKind",
    "Semester",
    "Severity",
    "StudentCohort",
    "TimeSlot",
    "UnscheduledReason",
    "UnscheduledSection",
    # Constants
    "DEFAULT_TIME_LIMIT",
    # Utilities
    "is_protected_hour",
    "is_restricted_block",
    "restricted_block_reason",
    "prioritize_sections",
    "synthesize_sections",
]
