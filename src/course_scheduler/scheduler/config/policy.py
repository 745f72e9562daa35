"""Institution scheduling policy loader."""

import json
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Self

from ...exceptions import PolicyError
from ..constants import (
    DEFAULT_BLOCK_ROOM_IDS,
    DEFAULT_ELECTIVE_COHORT_TAGS,
    DEFAULT_MAX_ELECTIVES_PER_SLOT,
    UNDER_UTILIZATION_MIN_CAPACITY,
    UNDER_UTILIZATION_RATIO,
)
from ..utils import matches_code

# Courses whose sections should be spread across as many days as possible
DEFAULT_SPREAD_COURSE_CODES = ["LPPP 7750"]


@dataclass(frozen=True)
class CrossCourseRule:
    """Discussions of one course must not overlap sections of another course."""

    discussion_course: str
    other_course: str
    description: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "discussion_course": self.discussion_course,
            "other_course": self.other_course,
            "description": self.description,
        }


@dataclass
class SchedulingPolicy:
    """Declarative institution data used by room assignment and the rule engine."""

    block_room_ids: frozenset[str] = DEFAULT_BLOCK_ROOM_IDS
    spread_course_codes: list[str] = field(
        default_factory=lambda: list(DEFAULT_SPREAD_COURSE_CODES)
    )
    elective_cohort_tags: list[str] = field(
        default_factory=lambda: list(DEFAULT_ELECTIVE_COHORT_TAGS)
    )
    cross_course_rules: list[CrossCourseRule] = field(default_factory=list)
    max_electives_per_slot: int = DEFAULT_MAX_ELECTIVES_PER_SLOT
    restricted_hour_enabled: bool = True
    under_utilization_ratio: float = UNDER_UTILIZATION_RATIO
    under_utilization_min_capacity: int = UNDER_UTILIZATION_MIN_CAPACITY

    def is_exclusive_cohort(self, cohort: str | None) -> bool:
        """Check whether a cohort tag makes its courses mutually exclusive."""
        if not cohort or not cohort.strip():
            return False
        exempt = {tag.strip().lower() for tag in self.elective_cohort_tags}
        return cohort.strip().lower() not in exempt

    def wants_spread(self, course_code: str) -> bool:
        return any(matches_code(course_code, p) for p in self.spread_course_codes)

    def with_overrides(
        self,
        max_electives_per_slot: int | None = None,
        restricted_hour_enabled: bool | None = None,
    ) -> "SchedulingPolicy":
        """Return a copy with per-run values applied."""
        changes: dict[str, Any] = {}
        if max_electives_per_slot is not None:
            changes["max_electives_per_slot"] = max_electives_per_slot
        if restricted_hour_enabled is not None:
            changes["restricted_hour_enabled"] = restricted_hour_enabled
        return replace(self, **changes)

    def to_dict(self) -> dict[str, Any]:
        return {
            "block_room_ids": sorted(self.block_room_ids),
            "spread_course_codes": self.spread_course_codes,
            "elective_cohort_tags": self.elective_cohort_tags,
            "cross_course_rules": [r.to_dict() for r in self.cross_course_rules],
            "max_electives_per_slot": self.max_electives_per_slot,
            "restricted_hour_enabled": self.restricted_hour_enabled,
            "under_utilization_ratio": self.under_utilization_ratio,
            "under_utilization_min_capacity": self.under_utilization_min_capacity,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any], path: str | None = None) -> Self:
        """Build a policy from a dictionary, using defaults for missing keys.

        Raises:
            PolicyError: If a value has the wrong shape
        """
        if not isinstance(data, dict):
            raise PolicyError("policy must be a JSON object", path)

        defaults = cls()
        try:
            rules = [
                CrossCourseRule(
                    discussion_course=rule["discussion_course"],
                    other_course=rule["other_course"],
                    description=rule.get("description", ""),
                )
                for rule in data.get("cross_course_rules", [])
            ]
            policy = cls(
                block_room_ids=frozenset(
                    data.get("block_room_ids", defaults.block_room_ids)
                ),
                spread_course_codes=list(
                    data.get("spread_course_codes", defaults.spread_course_codes)
                ),
                elective_cohort_tags=list(
                    data.get("elective_cohort_tags", defaults.elective_cohort_tags)
                ),
                cross_course_rules=rules,
                max_electives_per_slot=int(
                    data.get("max_electives_per_slot", defaults.max_electives_per_slot)
                ),
                restricted_hour_enabled=bool(
                    data.get("restricted_hour_enabled", defaults.restricted_hour_enabled)
                ),
                under_utilization_ratio=float(
                    data.get("under_utilization_ratio", defaults.under_utilization_ratio)
                ),
                under_utilization_min_capacity=int(
                    data.get(
                        "under_utilization_min_capacity",
                        defaults.under_utilization_min_capacity,
                    )
                ),
            )
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise PolicyError(str(e), path) from e

        if policy.max_electives_per_slot < 0:
            raise PolicyError("max_electives_per_slot must not be negative", path)
        if not 0 <= policy.under_utilization_ratio <= 1:
            raise PolicyError("under_utilization_ratio must be between 0 and 1", path)
        return policy

    @classmethod
    def load(cls, path: Path) -> Self:
        """Load a policy from a JSON file."""
        with open(path, encoding="utf-8") as f:
            try:
                data = json.load(f)
            except json.JSONDecodeError as e:
                raise PolicyError(f"invalid JSON: {e}", str(path)) from e
        return cls.from_dict(data, path=str(path))
