"""
Configuration constants for the workout engine.

Fixed policy (status values, the priority tier table, difficulty ranking)
lives here as ``Final`` constants.  Soft defaults (default set configuration,
custom-workout defaults) can be overridden through engine.yaml; see
core/engine/config_loader.py.
"""

from dataclasses import dataclass
from functools import lru_cache
from typing import Final

from .engine.config_loader import load_engine_config

# =============================================================================
# LIFECYCLE STATUS VALUES
# =============================================================================

WORKOUT_DRAFT: Final[str] = "draft"
WORKOUT_IN_PROGRESS: Final[str] = "in_progress"
WORKOUT_PAUSED: Final[str] = "paused"
WORKOUT_COMPLETED: Final[str] = "completed"

WORKOUT_STATUSES: Final[tuple[str, ...]] = (
    WORKOUT_DRAFT,
    WORKOUT_IN_PROGRESS,
    WORKOUT_PAUSED,
    WORKOUT_COMPLETED,
)

SET_PENDING: Final[str] = "pending"
SET_COMPLETED: Final[str] = "completed"
SET_FAILED: Final[str] = "failed"

SET_STATUSES: Final[tuple[str, ...]] = (SET_PENDING, SET_COMPLETED, SET_FAILED)
RESOLVED_SET_STATUSES: Final[frozenset[str]] = frozenset({SET_COMPLETED, SET_FAILED})

# =============================================================================
# PRIORITY TIERS (fixed policy, not configurable)
# =============================================================================


@dataclass(frozen=True)
class PriorityTier:
    """Set count and target-rep sequence for one priority level."""

    sets: int
    reps: tuple[int, ...]

    def reps_for_set(self, set_number: int) -> int:
        """Target reps for a 1-based set number, clamped to the last entry."""
        return self.reps[min(set_number - 1, len(self.reps) - 1)]


PRIORITY_TIERS: Final[dict[str, PriorityTier]] = {
    "high": PriorityTier(sets=4, reps=(6, 8, 10, 12)),
    "medium": PriorityTier(sets=3, reps=(8, 10, 12)),
    "low": PriorityTier(sets=2, reps=(12, 15)),
}

DEFAULT_PRIORITY: Final[str] = "medium"


def tier_for_priority(priority: str | None) -> PriorityTier:
    """Return the tier for a priority; unknown values fall back to medium."""
    return PRIORITY_TIERS.get(priority or DEFAULT_PRIORITY, PRIORITY_TIERS[DEFAULT_PRIORITY])


# =============================================================================
# DIFFICULTY & MECHANICS
# =============================================================================

DIFFICULTY_LEVELS: Final[tuple[str, ...]] = ("beginner", "intermediate", "expert")

DIFFICULTY_RANK: Final[dict[str, int]] = {
    "beginner": 1,
    "intermediate": 2,
    "expert": 3,
}
DEFAULT_DIFFICULTY_RANK: Final[int] = 2  # Missing/unknown difficulty sorts as intermediate

# Requirement categories compared against Exercise.mechanic; anything else
# is compared against Exercise.category.
MECHANIC_CATEGORIES: Final[frozenset[str]] = frozenset({"compound", "isolation"})

# =============================================================================
# SET & WORKOUT DEFAULTS (overridable via engine.yaml)
# =============================================================================

DEFAULT_WEIGHT: Final[float] = 0.0
DEFAULT_REST_SECONDS: Final[int] = 60

CUSTOM_CATEGORY: Final[str] = "custom"
CUSTOM_DEFAULT_DURATION: Final[int] = 60  # minutes
CUSTOM_DEFAULT_DIFFICULTY: Final[str] = "intermediate"

DUPLICATE_NAME_SUFFIX: Final[str] = " (Copy)"


@dataclass(frozen=True)
class SetDefaults:
    """Weight and rest applied to sets the caller does not configure.

    Set count and target reps always come from the priority tier.
    """

    weight: float = DEFAULT_WEIGHT
    rest_seconds: int = DEFAULT_REST_SECONDS


@dataclass(frozen=True)
class CustomWorkoutDefaults:
    """Defaults for workouts assembled from a caller-supplied exercise list."""

    category: str = CUSTOM_CATEGORY
    estimated_duration: int = CUSTOM_DEFAULT_DURATION
    difficulty: str = CUSTOM_DEFAULT_DIFFICULTY


@lru_cache(maxsize=1)
def default_set_config() -> SetDefaults:
    """Set defaults from engine.yaml ``set_defaults``, falling back to constants."""
    raw = load_engine_config().get("set_defaults", {}) or {}
    return SetDefaults(
        weight=float(raw.get("weight", DEFAULT_WEIGHT)),
        rest_seconds=int(raw.get("rest_seconds", DEFAULT_REST_SECONDS)),
    )


@lru_cache(maxsize=1)
def custom_workout_defaults() -> CustomWorkoutDefaults:
    """Custom-workout defaults from engine.yaml ``custom_workout``."""
    raw = load_engine_config().get("custom_workout", {}) or {}
    return CustomWorkoutDefaults(
        category=str(raw.get("category", CUSTOM_CATEGORY)),
        estimated_duration=int(raw.get("estimated_duration", CUSTOM_DEFAULT_DURATION)),
        difficulty=str(raw.get("difficulty", CUSTOM_DEFAULT_DIFFICULTY)),
    )
