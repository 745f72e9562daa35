"""Configuration loaders for the scheduler."""

from .loader import ConfigLoader
from .policy import CrossCourseRule, SchedulingPolicy
from .rooms import DEFAULT_ROOMS, RoomConfig

__all__ = [
    "ConfigLoader",
    "CrossCourseRule",
    "DEFAULT_ROOMS",
    "RoomConfig",
    "SchedulingPolicy",
]
