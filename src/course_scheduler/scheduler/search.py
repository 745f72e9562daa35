"""Backtracking search over section placements."""

import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable

from .models import Course, ScheduledSection
from .ranking import SlotRanker
from .rooms import RoomCatalog
from .tracker import PlacementTracker

logger = logging.getLogger(__name__)


class InfeasibleReason(str, Enum):
    """Why the backtracking search gave up."""

    TIMED_OUT = "timed_out"
    EXHAUSTED = "exhausted"


@dataclass(frozen=True)
class Infeasible:
    """Negative search outcome. Not an error: the caller falls back to greedy."""

    reason: InfeasibleReason
    elapsed_seconds: float


class _DeadlineExceeded(Exception):
    """Unwinds the recursion once the wall-clock time limit is spent."""


class BacktrackingSearch:
    """Depth-first search placing sections one at a time.

    For each section the ranked candidate slots are tried in order; the
    first slot with a free room that clears every hard constraint is
    taken and the search recurses on the next section. On failure the
    placement is undone and the next candidate is tried. The deadline is
    checked at the top of every recursive call.
    """

    def __init__(
        self,
        ranker: SlotRanker,
        rooms: RoomCatalog,
        tracker: PlacementTracker,
        courses_by_id: dict[str, Course],
        time_limit: float,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ranker = ranker
        self.rooms = rooms
        self.tracker = tracker
        self.courses_by_id = courses_by_id
        self.time_limit = time_limit
        self.clock = clock
        self._deadline = 0.0
        self.nodes_visited = 0

    def run(self, sections: list[ScheduledSection]) -> list[ScheduledSection] | Infeasible:
        """Search for a complete placement.

        Args:
            sections: Priority-ordered unplaced sections

        Returns:
            Placed sections in placement order, or Infeasible
        """
        self.tracker.clear()
        self.nodes_visited = 0
        started = self.clock()
        self._deadline = started + self.time_limit

        try:
            found = self._search(sections, 0)
        except _DeadlineExceeded:
            elapsed = self.clock() - started
            self.tracker.clear()
            logger.warning(
                f"Backtracking timed out after {elapsed:.2f}s "
                f"({self.nodes_visited} nodes visited)"
            )
            return Infeasible(InfeasibleReason.TIMED_OUT, elapsed)

        elapsed = self.clock() - started
        if not found:
            self.tracker.clear()
            logger.warning(f"Backtracking exhausted all candidates in {elapsed:.2f}s")
            return Infeasible(InfeasibleReason.EXHAUSTED, elapsed)

        logger.info(f"Backtracking placed {len(sections)} sections in {elapsed:.2f}s")
        return list(self.tracker.placed)

    def _search(self, sections: list[ScheduledSection], index: int) -> bool:
        if self.clock() - self._deadline > 0:
            raise _DeadlineExceeded()
        self.nodes_visited += 1

        if index >= len(sections):
            return True

        section = sections[index]
        course = self.courses_by_id[section.course_id]
        duration = course.meeting_duration(section.kind)

        for slot in self.ranker.candidate_slots(section, course, self.tracker):
            room = self.rooms.suggest_best_room(
                course, section.enrollment_cap, slot, self.tracker.placed, duration
            )
            if room is None:
                continue

            candidate = section.place(slot, room)
            if self.tracker.violates_hard_constraints(candidate, course):
                continue

            self.tracker.place(candidate)
            if self._search(sections, index + 1):
                return True
            self.tracker.pop()

        return False
