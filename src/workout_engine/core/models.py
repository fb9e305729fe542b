"""
Data models for workout-engine.

Exercise, ExerciseRequirement and WorkoutTemplate are read-only seed data.
Workout is the aggregate root: it exclusively owns its WorkoutExercises,
which in turn own their WorkoutSets.  Only the assembler and the session
state machine mutate a Workout.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal

from .config import (
    DIFFICULTY_LEVELS,
    PRIORITY_TIERS,
    RESOLVED_SET_STATUSES,
    SET_STATUSES,
    WORKOUT_DRAFT,
    WORKOUT_STATUSES,
)

Priority = Literal["low", "medium", "high"]
Mechanic = Literal["compound", "isolation"]
Level = Literal["beginner", "intermediate", "expert"]
SetStatus = Literal["pending", "completed", "failed"]
WorkoutStatus = Literal["draft", "in_progress", "paused", "completed"]

# Injectable time source; engine operations stamp transitions with clock().
Clock = Callable[[], datetime]


def current_time(clock: Clock | None = None) -> datetime:
    """Return clock() or, without a clock, the local wall-clock time."""
    return clock() if clock is not None else datetime.now()


@dataclass(frozen=True)
class Exercise:
    """
    One record of the external exercise catalog.

    ``name`` is the unique key.  ``mechanic`` is None for records that are
    neither compound nor isolation movements (stretches, most cardio).
    """

    name: str
    primary_muscles: frozenset[str]
    secondary_muscles: frozenset[str] = frozenset()
    equipment: str = ""
    mechanic: Mechanic | None = None
    category: str = "strength"
    level: Level = "beginner"
    force: str | None = None
    instructions: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        # Accept any iterable of muscle names from callers.
        object.__setattr__(self, "primary_muscles", frozenset(self.primary_muscles))
        object.__setattr__(self, "secondary_muscles", frozenset(self.secondary_muscles))
        object.__setattr__(self, "instructions", tuple(self.instructions))
        if not self.name or not self.name.strip():
            raise ValueError("Exercise.name must be non-empty")
        if self.mechanic is not None and self.mechanic not in ("compound", "isolation"):
            raise ValueError(f"Invalid mechanic: {self.mechanic!r}")
        if self.level not in DIFFICULTY_LEVELS:
            raise ValueError(f"Invalid level: {self.level!r}")

    @property
    def muscles(self) -> frozenset[str]:
        """Primary and secondary muscles together."""
        return self.primary_muscles | self.secondary_muscles


@dataclass(frozen=True)
class ExerciseRequirement:
    """
    One line item of a template: how many exercises of a category to pick
    for a set of muscle groups, and at which priority.
    """

    category: str
    muscle_groups: tuple[str, ...]
    count: int
    priority: Priority = "medium"

    def __post_init__(self) -> None:
        object.__setattr__(self, "muscle_groups", tuple(self.muscle_groups))
        if self.count < 0:
            raise ValueError("ExerciseRequirement.count must be non-negative")
        if self.priority not in PRIORITY_TIERS:
            raise ValueError(f"Invalid priority: {self.priority!r}")


@dataclass(frozen=True)
class WorkoutTemplate:
    """A named recipe of exercise requirements used to generate workouts."""

    id: str
    name: str
    category: str
    description: str = ""
    target_muscles: tuple[str, ...] = ()
    estimated_duration: int = 60  # minutes
    difficulty: Level = "intermediate"
    exercise_requirements: tuple[ExerciseRequirement, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "target_muscles", tuple(self.target_muscles))
        object.__setattr__(self, "exercise_requirements", tuple(self.exercise_requirements))

    @property
    def total_exercises(self) -> int:
        """Number of exercises the template asks for across all requirements."""
        return sum(r.count for r in self.exercise_requirements)


@dataclass
class WorkoutSet:
    """
    A single set within a workout exercise.

    ``actual_reps`` and ``completed_at`` stay None while the set is pending
    and are both filled once it resolves (completed or failed).
    """

    id: str
    set_number: int  # 1-based, contiguous within the owning exercise
    target_reps: int
    actual_reps: int | None = None
    weight: float = 0.0
    rest_seconds: int = 60
    status: SetStatus = "pending"
    completed_at: datetime | None = None
    notes: str = ""
    previous_weight: float = 0.0

    def __post_init__(self) -> None:
        """Validate set data."""
        if self.set_number < 1:
            raise ValueError("set_number must be 1 or greater")
        if self.target_reps < 0:
            raise ValueError("target_reps must be non-negative")
        if self.actual_reps is not None and self.actual_reps < 0:
            raise ValueError("actual_reps must be non-negative")
        if self.weight < 0:
            raise ValueError("weight must be non-negative")
        if self.rest_seconds < 0:
            raise ValueError("rest_seconds must be non-negative")
        if self.status not in SET_STATUSES:
            raise ValueError(f"Invalid set status: {self.status!r}")

    @property
    def is_resolved(self) -> bool:
        """True once the set is completed or failed."""
        return self.status in RESOLVED_SET_STATUSES


@dataclass
class WorkoutExercise:
    """An exercise placed in a workout, with the sets it owns."""

    id: str
    exercise: Exercise
    sets: list[WorkoutSet] = field(default_factory=list)
    priority: Priority = "medium"
    notes: str = ""

    def find_set(self, set_id: str) -> WorkoutSet | None:
        """Return the set with the given id, or None."""
        for s in self.sets:
            if s.id == set_id:
                return s
        return None


@dataclass
class Workout:
    """
    The aggregate root: an ordered list of exercises and its lifecycle.

    ``started_at`` is written once, on draft → in_progress.
    ``completed_at`` is written once, when the last set resolves.
    """

    id: str
    name: str
    created_at: datetime
    description: str = ""
    category: str = "custom"
    target_muscles: set[str] = field(default_factory=set)
    estimated_duration: int = 60  # minutes
    difficulty: Level = "intermediate"
    exercises: list[WorkoutExercise] = field(default_factory=list)
    status: WorkoutStatus = WORKOUT_DRAFT  # type: ignore[assignment]
    started_at: datetime | None = None
    completed_at: datetime | None = None
    created_by: str | None = None

    def __post_init__(self) -> None:
        """Validate workout data."""
        self.target_muscles = set(self.target_muscles)
        if self.status not in WORKOUT_STATUSES:
            raise ValueError(f"Invalid workout status: {self.status!r}")
        if self.estimated_duration < 0:
            raise ValueError("estimated_duration must be non-negative")

    @property
    def total_sets(self) -> int:
        """Number of sets across all exercises."""
        return sum(len(ex.sets) for ex in self.exercises)

    def find_exercise(self, exercise_id: str) -> WorkoutExercise | None:
        """Return the workout exercise with the given id, or None."""
        for ex in self.exercises:
            if ex.id == exercise_id:
                return ex
        return None

    def iter_sets(self):
        """Yield (workout_exercise, set) pairs in workout order."""
        for ex in self.exercises:
            for s in ex.sets:
                yield ex, s


@dataclass(frozen=True)
class ProgressSnapshot:
    """Derived completion state of a workout."""

    completed_sets: int
    total_sets: int
    percentage: int
    is_completed: bool


@dataclass
class SetsConfig:
    """
    Caller-supplied set configuration for one exercise.

    Unset fields fall back to the priority tier (set count, reps) and the
    configured set defaults (weight, rest).
    """

    sets: int | None = None
    reps: list[int] | None = None
    weight: float | None = None
    rest_seconds: int | None = None
    priority: Priority = "medium"

    def __post_init__(self) -> None:
        if self.sets is not None and self.sets < 1:
            raise ValueError("sets must be 1 or greater")
        if self.reps is not None and any(r < 0 for r in self.reps):
            raise ValueError("reps must be non-negative")
        if self.weight is not None and self.weight < 0:
            raise ValueError("weight must be non-negative")
        if self.rest_seconds is not None and self.rest_seconds < 0:
            raise ValueError("rest_seconds must be non-negative")
        if self.priority not in PRIORITY_TIERS:
            raise ValueError(f"Invalid priority: {self.priority!r}")


@dataclass
class TemplateOverrides:
    """Optional per-generation changes to a template's workout fields."""

    name: str | None = None
    description: str | None = None
    estimated_duration: int | None = None
    difficulty: Level | None = None
    created_by: str | None = None


@dataclass
class CustomWorkoutSpec:
    """Everything needed to assemble a workout without a template."""

    name: str
    exercises: list[tuple[Exercise, SetsConfig]] = field(default_factory=list)
    description: str = ""
    target_muscles: list[str] = field(default_factory=list)
    estimated_duration: int | None = None
    difficulty: Level | None = None
    created_by: str | None = None
