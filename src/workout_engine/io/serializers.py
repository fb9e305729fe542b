"""
JSON-compatible conversion and text parsing for workout data.

Converts models to plain dicts (timestamps as ISO-8601 strings) for the
CLI's --json output, and parses the compact set notation used when adding
an exercise from the command line.
"""

import re
from datetime import datetime
from typing import Any

from ..core.errors import ValidationError
from ..core.models import (
    Exercise,
    Priority,
    ProgressSnapshot,
    SetsConfig,
    Workout,
    WorkoutExercise,
    WorkoutSet,
)


def validate_non_negative(value: int | float, name: str) -> int | float:
    """
    Validate that a value is non-negative.

    Raises:
        ValidationError: If value is negative
    """
    if value < 0:
        raise ValidationError(f"{name} must be non-negative, got {value}", {name: "negative"})
    return value


def validate_positive(value: int | float, name: str) -> int | float:
    """
    Validate that a value is positive.

    Raises:
        ValidationError: If value is not positive
    """
    if value <= 0:
        raise ValidationError(f"{name} must be positive, got {value}", {name: "not positive"})
    return value


def validate_non_blank(value: str | None, name: str) -> str:
    """
    Validate that a string has non-whitespace content.

    Returns:
        The stripped string

    Raises:
        ValidationError: If value is None, empty or whitespace
    """
    if value is None or not str(value).strip():
        raise ValidationError(f"{name} is required", {name: "blank"})
    return str(value).strip()


def _iso(ts: datetime | None) -> str | None:
    return ts.isoformat() if ts is not None else None


def exercise_to_dict(exercise: Exercise) -> dict[str, Any]:
    """Convert an Exercise to a JSON-compatible dict (muscles sorted)."""
    return {
        "name": exercise.name,
        "primary_muscles": sorted(exercise.primary_muscles),
        "secondary_muscles": sorted(exercise.secondary_muscles),
        "equipment": exercise.equipment,
        "mechanic": exercise.mechanic,
        "category": exercise.category,
        "level": exercise.level,
    }


def set_to_dict(s: WorkoutSet) -> dict[str, Any]:
    """Convert a WorkoutSet to a JSON-compatible dict."""
    return {
        "id": s.id,
        "set_number": s.set_number,
        "target_reps": s.target_reps,
        "actual_reps": s.actual_reps,
        "weight": s.weight,
        "rest_seconds": s.rest_seconds,
        "status": s.status,
        "completed_at": _iso(s.completed_at),
        "notes": s.notes,
    }


def workout_exercise_to_dict(we: WorkoutExercise) -> dict[str, Any]:
    """Convert a WorkoutExercise (with its sets) to a JSON-compatible dict."""
    return {
        "id": we.id,
        "exercise": exercise_to_dict(we.exercise),
        "priority": we.priority,
        "notes": we.notes,
        "sets": [set_to_dict(s) for s in we.sets],
    }


def workout_to_dict(workout: Workout) -> dict[str, Any]:
    """
    Convert a Workout to a JSON-compatible dict.

    ``target_muscles`` is emitted sorted so output is stable.
    """
    return {
        "id": workout.id,
        "name": workout.name,
        "description": workout.description,
        "category": workout.category,
        "target_muscles": sorted(workout.target_muscles),
        "estimated_duration": workout.estimated_duration,
        "difficulty": workout.difficulty,
        "status": workout.status,
        "created_at": _iso(workout.created_at),
        "started_at": _iso(workout.started_at),
        "completed_at": _iso(workout.completed_at),
        "created_by": workout.created_by,
        "exercises": [workout_exercise_to_dict(we) for we in workout.exercises],
    }


def progress_to_dict(progress: ProgressSnapshot) -> dict[str, Any]:
    """Convert a ProgressSnapshot to a JSON-compatible dict."""
    return {
        "completed_sets": progress.completed_sets,
        "total_sets": progress.total_sets,
        "percentage": progress.percentage,
        "is_completed": progress.is_completed,
    }


def parse_sets_config(text: str, priority: Priority = "medium") -> SetsConfig:
    """
    Parse a compact set-configuration string.

    Format: <reps> [+Wkg] [/ Rs]
    where <reps> is one of
      NxM         M sets of N reps           e.g. "10x3"
      A,B,C       one set per listed value   e.g. "8,10,12"
      M           M sets, reps from the priority tier   e.g. "4"
      (empty)     everything from the priority tier

    Examples:
        "10x3 +20kg / 90s"  → 3 sets of 10 reps, 20 kg, 90 s rest
        "8,10,12 / 60s"     → 3 sets of 8, 10, 12 reps, 60 s rest
        "4"                 → 4 sets, tier reps
        "+15kg"             → tier sets and reps at 15 kg

    Args:
        text: Set configuration string
        priority: Priority tier for anything the string leaves out

    Returns:
        SetsConfig

    Raises:
        ValidationError: If the string cannot be parsed
    """
    rest: int | None = None
    weight: float | None = None
    body = (text or "").strip()

    # Optional rest suffix:  / Ns
    m = re.search(r"\s*/\s*(\d+)\s*s?\s*$", body)
    if m:
        rest = int(m.group(1))
        body = body[: m.start()].strip()

    # Optional weight suffix:  +W.Wkg
    m = re.search(r"\+\s*([0-9]+(?:\.[0-9]+)?)\s*(?:kg)?\s*$", body, re.IGNORECASE)
    if m:
        weight = float(m.group(1))
        body = body[: m.start()].strip()

    sets: int | None = None
    reps: list[int] | None = None
    if body:
        m_x = re.fullmatch(r"(\d+)\s*[xX×]\s*(\d+)", body)
        m_list = re.fullmatch(r"\d+(?:\s*,\s*\d+)+", body)
        m_bare = re.fullmatch(r"\d+", body)
        if m_x:
            reps = [int(m_x.group(1))]
            sets = int(m_x.group(2))
        elif m_list:
            reps = [int(p) for p in body.split(",")]
            sets = len(reps)
        elif m_bare:
            sets = int(body)
        else:
            raise ValidationError(
                f"Invalid sets format: '{text}'.\n"
                "Use: NxM [+Wkg] [/ Rs] (e.g. 10x3 +20kg / 90s), "
                "a rep list (e.g. 8,10,12 / 60s), or a set count (e.g. 4).",
                {"sets": "unparseable"},
            )
        if sets < 1:
            raise ValidationError(f"Set count must be at least 1: {sets}", {"sets": "zero"})

    return SetsConfig(sets=sets, reps=reps, weight=weight, rest_seconds=rest, priority=priority)
