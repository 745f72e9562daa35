"""Course scheduler - constraint-based course section scheduling."""

from .exceptions import CatalogError, InvalidInputError, PolicyError, SchedulerError
from .exporters import ExcelExporter, JSONExporter, get_exporter
from .loaders import load_input, load_schedule, read_course_table, read_faculty_table
from .scheduler import (
    ConflictDetector,
    CourseScheduler,
    Schedule,
    ScheduleGenerationResult,
    SchedulerConfig,
    generate_schedule,
)
from .validators import validate_generation_input

__version__ = "0.1.0"

__all__ = [
    "CourseScheduler",
    "ConflictDetector",
    "Schedule",
    "ScheduleGenerationResult",
    "SchedulerConfig",
    "generate_schedule",
    "validate_generation_input",
    "load_input",
    "load_schedule",
    "read_course_table",
    "read_faculty_table",
    "ExcelExporter",
    "JSONExporter",
    "get_exporter",
    "SchedulerError",
    "InvalidInputError",
    "CatalogError",
    "PolicyError",
]
