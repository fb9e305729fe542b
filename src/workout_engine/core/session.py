"""
Session state machine: drive a workout through its lifecycle.

    draft ──start──▶ in_progress ◀──resume── paused
                        │  └──────pause──────▶ ┘
                        └── last set resolved ──▶ completed (terminal)

Completion is never a user action: complete_set() and fail_set() check
progress after every mutation and close the workout once every set is
resolved.  Every operation checks its guards before touching the workout.
"""

from __future__ import annotations

from datetime import datetime

from .config import (
    SET_COMPLETED,
    SET_FAILED,
    SET_PENDING,
    WORKOUT_COMPLETED,
    WORKOUT_DRAFT,
    WORKOUT_IN_PROGRESS,
    WORKOUT_PAUSED,
)
from .errors import IllegalStateError, NotFoundError, ValidationError
from .metrics import workout_progress
from .models import Clock, Workout, WorkoutExercise, WorkoutSet, current_time


def _require_status(workout: Workout, allowed: tuple[str, ...], action: str) -> None:
    if workout.status not in allowed:
        raise IllegalStateError(action, workout.status)


def start(workout: Workout, clock: Clock | None = None) -> Workout:
    """
    Begin a draft workout: draft → in_progress, stamping ``started_at``.

    Raises:
        IllegalStateError: If the workout is not a draft (including a second start)
    """
    _require_status(workout, (WORKOUT_DRAFT,), "start")
    workout.status = WORKOUT_IN_PROGRESS  # type: ignore[assignment]
    workout.started_at = current_time(clock)
    return workout


def pause(workout: Workout) -> Workout:
    """in_progress → paused."""
    _require_status(workout, (WORKOUT_IN_PROGRESS,), "pause")
    workout.status = WORKOUT_PAUSED  # type: ignore[assignment]
    return workout


def resume(workout: Workout) -> Workout:
    """paused → in_progress."""
    _require_status(workout, (WORKOUT_PAUSED,), "resume")
    workout.status = WORKOUT_IN_PROGRESS  # type: ignore[assignment]
    return workout


def find_set(workout: Workout, exercise_id: str, set_id: str) -> tuple[WorkoutExercise, WorkoutSet]:
    """
    Locate a set by its composite key.

    Args:
        workout: Workout to search
        exercise_id: WorkoutExercise id
        set_id: WorkoutSet id within that exercise

    Returns:
        (workout_exercise, set)

    Raises:
        NotFoundError: If either id does not resolve
    """
    we = workout.find_exercise(exercise_id)
    if we is None:
        raise NotFoundError(f"Exercise '{exercise_id}' is not in workout '{workout.id}'")
    s = we.find_set(set_id)
    if s is None:
        raise NotFoundError(f"Set '{set_id}' is not in exercise '{exercise_id}'")
    return we, s


def next_pending_set(workout: Workout) -> tuple[WorkoutExercise, WorkoutSet] | None:
    """Return the first pending set in workout order, or None if all are resolved."""
    for we, s in workout.iter_sets():
        if s.status == SET_PENDING:
            return we, s
    return None


def finish_if_resolved(workout: Workout, now: datetime) -> bool:
    """
    Close the workout if every set is resolved.

    Returns:
        True if this call moved the workout to completed
    """
    if workout.status == WORKOUT_COMPLETED:
        return False
    if not workout_progress(workout).is_completed:
        return False
    workout.status = WORKOUT_COMPLETED  # type: ignore[assignment]
    workout.completed_at = now
    return True


_SET_EVENT_STATES = (WORKOUT_DRAFT, WORKOUT_IN_PROGRESS, WORKOUT_PAUSED)


def complete_set(
    workout: Workout,
    exercise_id: str,
    set_id: str,
    *,
    reps: int,
    weight: float | None = None,
    notes: str = "",
    clock: Clock | None = None,
) -> Workout:
    """
    Record a completed set, closing the workout if it was the last pending one.

    Args:
        workout: Workout being tracked
        exercise_id: WorkoutExercise id
        set_id: WorkoutSet id
        reps: Reps actually performed
        weight: Weight used; keeps the set's planned weight when None
        notes: Free-text notes for the set
        clock: Time source for ``completed_at``

    Returns:
        The same workout, mutated

    Raises:
        NotFoundError: Unknown exercise or set id
        IllegalStateError: The workout is already completed
        ValidationError: Negative reps or weight
    """
    _require_status(workout, _SET_EVENT_STATES, "record a set on")
    _, s = find_set(workout, exercise_id, set_id)
    if reps is None or reps < 0:
        raise ValidationError("Reps must be non-negative", {"reps": f"invalid reps: {reps!r}"})
    if weight is not None and weight < 0:
        raise ValidationError("Weight must be non-negative", {"weight": f"invalid weight: {weight!r}"})

    now = current_time(clock)
    if weight is not None:
        s.previous_weight = s.weight
        s.weight = float(weight)
    s.actual_reps = int(reps)
    s.status = SET_COMPLETED  # type: ignore[assignment]
    s.completed_at = now
    s.notes = notes or ""

    finish_if_resolved(workout, now)
    return workout


def fail_set(
    workout: Workout,
    exercise_id: str,
    set_id: str,
    reason: str = "",
    *,
    reps: int = 0,
    clock: Clock | None = None,
) -> Workout:
    """
    Mark a set as failed (or skipped).  A failed set still counts as resolved.

    ``actual_reps`` records ``reps`` (0 by default) so a resolved set always
    carries a rep count.

    Raises:
        NotFoundError: Unknown exercise or set id
        IllegalStateError: The workout is already completed
    """
    _require_status(workout, _SET_EVENT_STATES, "record a set on")
    _, s = find_set(workout, exercise_id, set_id)
    if reps < 0:
        raise ValidationError("Reps must be non-negative", {"reps": f"invalid reps: {reps!r}"})

    now = current_time(clock)
    s.actual_reps = int(reps)
    s.status = SET_FAILED  # type: ignore[assignment]
    s.completed_at = now
    s.notes = reason or ""

    finish_if_resolved(workout, now)
    return workout


def elapsed_seconds(workout: Workout, clock: Clock | None = None) -> int | None:
    """
    Seconds between ``started_at`` and ``completed_at`` (or now, if still open).

    Returns None for a workout that was never started.
    """
    if workout.started_at is None:
        return None
    end = workout.completed_at or current_time(clock)
    return max(0, int((end - workout.started_at).total_seconds()))
