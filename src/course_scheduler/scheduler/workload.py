"""Optional faculty workload balancing pass (OR-Tools CP-SAT).

Runs before section synthesis and only when the caller asks for it:
courses listing ``candidate_faculty_ids`` may be moved to another
candidate so that teaching loads even out.
"""

import logging
from dataclasses import dataclass, replace

from ortools.sat.python import cp_model

from .constants import (
    DEFAULT_WORKLOAD_TIME_LIMIT,
    MAX_TRACKED_LOAD,
    WORKLOAD_PENALTY_SCALE,
)
from .models import Course, Faculty

logger = logging.getLogger(__name__)


@dataclass
class AssignmentWeights:
    """Objective weights for the workload pass."""

    workload_equity: float = 0.35
    historical_consistency: float = 0.10


def load_penalty(load: int) -> int:
    """Exponential load penalty 2^k - 1, growing linearly past the tracked range."""
    if load <= MAX_TRACKED_LOAD:
        return WORKLOAD_PENALTY_SCALE * (2**load - 1)
    base = 2**MAX_TRACKED_LOAD
    return WORKLOAD_PENALTY_SCALE * (base - 1 + (load - MAX_TRACKED_LOAD) * base)


def _candidates(course: Course, known: set[str]) -> list[str]:
    """Pre-assigned faculty first, then known alternative candidates."""
    options = [course.faculty_id]
    for faculty_id in course.candidate_faculty_ids:
        if faculty_id in known and faculty_id not in options:
            options.append(faculty_id)
    return options


def balance_workload(
    courses: list[Course],
    faculty: list[Faculty],
    weights: AssignmentWeights | None = None,
    time_limit: float = DEFAULT_WORKLOAD_TIME_LIMIT,
) -> list[Course]:
    """Reassign faculty among candidates to even out section loads.

    Minimizes ``workload_equity * sum(penalty(load))`` plus
    ``historical_consistency`` per course moved off its pre-assigned
    faculty member. A faculty load is the number of lecture sections.

    Args:
        courses: Courses to balance (not modified)
        faculty: Known faculty members
        weights: Objective weights
        time_limit: Solver time limit in seconds

    Returns:
        New Course objects with the chosen faculty ids
    """
    weights = weights or AssignmentWeights()
    known = {f.id for f in faculty}
    options = {course.id: _candidates(course, known) for course in courses}

    if all(len(choices) == 1 for choices in options.values()):
        return [replace(course) for course in courses]

    model = cp_model.CpModel()

    # (course_id, faculty_id) -> BoolVar
    x: dict[tuple[str, str], cp_model.IntVar] = {}
    for course in courses:
        course_vars = []
        for faculty_id in options[course.id]:
            var = model.NewBoolVar(f"assign_{course.id}_{faculty_id}")
            x[(course.id, faculty_id)] = var
            course_vars.append(var)
        model.AddExactlyOne(course_vars)

    faculty_ids = sorted({fid for choices in options.values() for fid in choices})
    penalties = []
    for faculty_id in faculty_ids:
        terms = [
            (course.number_of_sections, x[(course.id, faculty_id)])
            for course in courses
            if (course.id, faculty_id) in x
        ]
        max_load = sum(sections for sections, _ in terms)
        load = model.NewIntVar(0, max_load, f"load_{faculty_id}")
        model.Add(load == sum(sections * var for sections, var in terms))

        table = [load_penalty(k) for k in range(max_load + 1)]
        penalty = model.NewIntVar(0, table[-1], f"penalty_{faculty_id}")
        model.AddElement(load, table, penalty)
        penalties.append(penalty)

    moved = [
        x[(course.id, faculty_id)]
        for course in courses
        for faculty_id in options[course.id][1:]
    ]

    equity_weight = round(weights.workload_equity * 100)
    history_weight = round(weights.historical_consistency * 100) * WORKLOAD_PENALTY_SCALE
    model.Minimize(equity_weight * sum(penalties) + history_weight * sum(moved))

    solver = cp_model.CpSolver()
    solver.parameters.max_time_in_seconds = time_limit
    solver.parameters.log_search_progress = False

    status = solver.Solve(model)
    if status not in (cp_model.OPTIMAL, cp_model.FEASIBLE):
        logger.warning(
            f"Workload balancing found no solution ({solver.StatusName(status)}), "
            "keeping pre-assigned faculty"
        )
        return [replace(course) for course in courses]

    balanced = []
    reassigned = 0
    for course in courses:
        chosen = next(
            fid for fid in options[course.id] if solver.Value(x[(course.id, fid)])
        )
        if chosen != course.faculty_id:
            reassigned += 1
            logger.debug(f"Reassigned {course.code}: {course.faculty_id} -> {chosen}")
        balanced.append(replace(course, faculty_id=chosen))

    logger.info(
        f"Workload balancing reassigned {reassigned} of {len(courses)} courses "
        f"({solver.StatusName(status)})"
    )
    return balanced
