"""
Derived metrics over workouts: set progress and collection statistics.

workout_progress() is the single source of truth for whether a workout is
finished.  A failed set is resolved (it counts toward completion) but is
not counted as completed, so failures cap the percentage below 100.
"""

import math
from collections import Counter
from collections.abc import Iterable
from dataclasses import dataclass, field

from .config import (
    SET_COMPLETED,
    WORKOUT_COMPLETED,
    WORKOUT_DRAFT,
    WORKOUT_IN_PROGRESS,
    WORKOUT_PAUSED,
)
from .models import ProgressSnapshot, Workout, WorkoutExercise


def percent(part: int, whole: int) -> int:
    """
    Integer percentage of ``part`` in ``whole``, rounding halves up.

    Returns 0 when ``whole`` is 0.
    """
    if whole <= 0:
        return 0
    return int(math.floor(100 * part / whole + 0.5))


def workout_progress(workout: Workout) -> ProgressSnapshot:
    """
    Compute set progress for a workout.

    Args:
        workout: Workout to inspect

    Returns:
        ProgressSnapshot where
          total_sets      = sets across all exercises
          completed_sets  = sets with status "completed" (failed excluded)
          percentage      = round(100 × completed / total), 0 if no sets
          is_completed    = at least one set and every set resolved
    """
    total = 0
    completed = 0
    resolved = 0
    for _, s in workout.iter_sets():
        total += 1
        if s.status == SET_COMPLETED:
            completed += 1
        if s.is_resolved:
            resolved += 1

    return ProgressSnapshot(
        completed_sets=completed,
        total_sets=total,
        percentage=percent(completed, total),
        is_completed=total > 0 and resolved == total,
    )


@dataclass(frozen=True)
class WorkoutStats:
    """Counts of workouts per lifecycle status."""

    total: int
    draft: int
    in_progress: int
    paused: int
    completed: int

    @property
    def completion_rate(self) -> int:
        """Completed workouts as a percentage of all workouts."""
        return percent(self.completed, self.total)


def workout_stats(workouts: Iterable[Workout]) -> WorkoutStats:
    """Tally workouts by status."""
    counts = Counter(w.status for w in workouts)
    return WorkoutStats(
        total=sum(counts.values()),
        draft=counts[WORKOUT_DRAFT],
        in_progress=counts[WORKOUT_IN_PROGRESS],
        paused=counts[WORKOUT_PAUSED],
        completed=counts[WORKOUT_COMPLETED],
    )


@dataclass
class ExerciseStats:
    """Breakdown of the exercises placed in a workout."""

    total_exercises: int = 0
    by_muscle_group: dict[str, int] = field(default_factory=dict)
    by_equipment: dict[str, int] = field(default_factory=dict)
    by_difficulty: dict[str, int] = field(default_factory=dict)
    by_category: dict[str, int] = field(default_factory=dict)


def exercise_stats(workout_exercises: Iterable[WorkoutExercise]) -> ExerciseStats:
    """
    Count workout exercises by primary muscle, equipment, level and category.

    An exercise with several primary muscles is counted once per muscle.
    """
    muscles: Counter[str] = Counter()
    equipment: Counter[str] = Counter()
    levels: Counter[str] = Counter()
    categories: Counter[str] = Counter()
    n = 0
    for we in workout_exercises:
        ex = we.exercise
        n += 1
        muscles.update(sorted(ex.primary_muscles))
        equipment[ex.equipment] += 1
        levels[ex.level] += 1
        categories[ex.category] += 1

    return ExerciseStats(
        total_exercises=n,
        by_muscle_group=dict(muscles),
        by_equipment=dict(equipment),
        by_difficulty=dict(levels),
        by_category=dict(categories),
    )
