"""Schedule persistence behind an injected repository interface."""

import json
from abc import ABC, abstractmethod
from datetime import date, datetime
from pathlib import Path

from .models import Schedule


def version_name(day: date) -> str:
    """Date-based version name, e.g. "Schedule 2025-03-14"."""
    return f"Schedule {day:%Y-%m-%d}"


def academic_year(day: date) -> str:
    """Academic year (July to June) containing a date, e.g. "2024-2025"."""
    start = day.year if day.month >= 7 else day.year - 1
    return f"{start}-{start + 1}"


class ScheduleRepository(ABC):
    """Base class for schedule stores."""

    @abstractmethod
    def create(self, schedule: Schedule) -> Schedule:
        """Store a new schedule.

        Raises:
            FileExistsError: If a schedule with the same id exists
        """
        pass

    @abstractmethod
    def get(self, schedule_id: str) -> Schedule | None:
        """Load a schedule, or None if it does not exist."""
        pass

    @abstractmethod
    def update(self, schedule: Schedule) -> Schedule:
        """Replace a stored schedule and bump its ``updated_at``.

        Raises:
            KeyError: If the schedule does not exist
        """
        pass

    @abstractmethod
    def delete(self, schedule_id: str) -> bool:
        """Delete a schedule. Returns whether anything was removed."""
        pass

    @abstractmethod
    def list(self) -> list[Schedule]:
        """All stored schedules, newest first."""
        pass


class JSONScheduleRepository(ScheduleRepository):
    """Stores one JSON file per schedule in a directory."""

    def __init__(self, directory: str | Path, indent: int = 2):
        self.directory = Path(directory)
        self.indent = indent

    def _path(self, schedule_id: str) -> Path:
        if not schedule_id or "/" in schedule_id or "\\" in schedule_id:
            raise ValueError(f"Invalid schedule id: {schedule_id!r}")
        return self.directory / f"{schedule_id}.json"

    def _write(self, schedule: Schedule) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)
        with open(self._path(schedule.id), "w", encoding="utf-8") as f:
            json.dump(schedule.to_dict(), f, indent=self.indent, ensure_ascii=False)

    def create(self, schedule: Schedule) -> Schedule:
        if self._path(schedule.id).exists():
            raise FileExistsError(f"Schedule {schedule.id} already exists")
        self._write(schedule)
        return schedule

    def get(self, schedule_id: str) -> Schedule | None:
        path = self._path(schedule_id)
        if not path.exists():
            return None
        with open(path, encoding="utf-8") as f:
            return Schedule.from_dict(json.load(f))

    def update(self, schedule: Schedule) -> Schedule:
        if not self._path(schedule.id).exists():
            raise KeyError(schedule.id)
        schedule.updated_at = datetime.now()
        self._write(schedule)
        return schedule

    def delete(self, schedule_id: str) -> bool:
        path = self._path(schedule_id)
        if not path.exists():
            return False
        path.unlink()
        return True

    def list(self) -> list[Schedule]:
        if not self.directory.exists():
            return []
        schedules = []
        for path in sorted(self.directory.glob("*.json")):
            with open(path, encoding="utf-8") as f:
                schedules.append(Schedule.from_dict(json.load(f)))
        return sorted(schedules, key=lambda s: s.updated_at, reverse=True)
