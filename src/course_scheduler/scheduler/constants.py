"""Constants for schedule generation."""

# Backtracking wall-clock time limit in seconds
DEFAULT_TIME_LIMIT = 10.0

# Allowed difference between a course duration and a catalog slot duration (minutes)
DURATION_TOLERANCE = 10

# Course codes numbered at or above this are graduate level (e.g. "LPPA 7110")
GRADUATE_COURSE_THRESHOLD = 5000

# Faculty preference weight per priority tier
PRIORITY_WEIGHTS = {
    "high": 3,
    "medium": 2,
    "low": 1,
}

# Anti-clustering scores for sibling lecture sections
DISTRIBUTION_BASE_SCORE = 100
EXACT_MATCH_PENALTY = 50
SAME_DAY_PENALTY = 20
DAY_SPREAD_BONUS = 30
# Spread bonus applies once this many sibling sections are already placed
DAY_SPREAD_MIN_EXISTING = 3

# Room assignment thresholds (enrollment)
CORE_LARGE_ROOM_THRESHOLD = 48
SMALL_ROOM_THRESHOLD = 20
MEDIUM_ROOM_THRESHOLD = 48
LARGE_ROOM_THRESHOLD = 60

# Standard university blocks
MWF_STANDARD_DURATION = 50
MWF_LATEST_START = 15 * 60  # must start before 3:00 PM
TR_STANDARD_DURATION = 75
TR_LATEST_START = 14 * 60 + 30  # must start before 2:30 PM

# Protected institutional hour (Monday 12:30-13:30), no core courses
PROTECTED_HOUR_START = 12 * 60 + 30
PROTECTED_HOUR_END = 13 * 60 + 30

# Thursday discussions starting at/after this are avoided when configured
LATE_DISCUSSION_START = 17 * 60

DEFAULT_MAX_ELECTIVES_PER_SLOT = 2

# Rule 12: a room is under-utilized when enrollment < ratio * capacity
UNDER_UTILIZATION_RATIO = 0.5
UNDER_UTILIZATION_MIN_CAPACITY = 20

# Rooms reserved for classes outside the standard blocks
DEFAULT_BLOCK_ROOM_IDS = frozenset(
    {
        "rouss-403",
        "monroe-120",
        "pavilion-viii-blockbust",
    }
)

# Cohort tags that do not make courses mutually exclusive
DEFAULT_ELECTIVE_COHORT_TAGS = ["G/U Electives", "Elective", "Electives"]

# Workload balancing (CP-SAT) defaults
DEFAULT_WORKLOAD_TIME_LIMIT = 5.0
WORKLOAD_PENALTY_SCALE = 10
# Loads above this are clamped in the penalty table
MAX_TRACKED_LOAD = 12
