"""
Workout assembler: build Workout aggregates.

Workouts come from two places:
- a template, whose requirements are filled from the catalog by the matcher;
- a caller-supplied list of (exercise, sets config) pairs.

Either way every set is created here, once, pending, with its target reps
taken from the priority tier table.  Sets are never added to or removed from
an exercise afterwards; only whole exercises can be added or removed.
"""

from __future__ import annotations

import uuid
from collections.abc import Iterable, Sequence

from .catalog.registry import default_catalog, get_template
from .config import (
    DUPLICATE_NAME_SUFFIX,
    SET_PENDING,
    WORKOUT_COMPLETED,
    WORKOUT_DRAFT,
    custom_workout_defaults,
    default_set_config,
    tier_for_priority,
)
from .errors import IllegalStateError, NotFoundError, ValidationError
from .matcher import RandomSource, match
from .models import (
    Clock,
    CustomWorkoutSpec,
    Exercise,
    SetsConfig,
    TemplateOverrides,
    Workout,
    WorkoutExercise,
    WorkoutSet,
    WorkoutTemplate,
    current_time,
)
from .session import finish_if_resolved

# =============================================================================
# IDS
# =============================================================================


def new_id(prefix: str) -> str:
    """Return a fresh id such as ``workout_3f2a…``."""
    return f"{prefix}_{uuid.uuid4().hex}"


# =============================================================================
# SETS & EXERCISES
# =============================================================================


def build_sets(priority: str, config: SetsConfig | None = None) -> list[WorkoutSet]:
    """
    Materialise the sets for one exercise.

    Set count and target reps come from the priority tier (high 4 × 6/8/10/12,
    medium 3 × 8/10/12, low 2 × 12/15), with reps indexed by set number and
    clamped to the last entry.  ``config`` may override the set count, the rep
    sequence (also clamped), the weight and the rest.

    Args:
        priority: "low" | "medium" | "high"
        config: Optional caller overrides

    Returns:
        Pending sets numbered 1..n
    """
    tier = tier_for_priority(priority)
    defaults = default_set_config()

    count = tier.sets
    reps_seq: Sequence[int] = tier.reps
    weight = defaults.weight
    rest = defaults.rest_seconds
    if config is not None:
        if config.sets:
            count = config.sets
        if config.reps:
            reps_seq = config.reps
        if config.weight is not None:
            weight = config.weight
        if config.rest_seconds is not None:
            rest = config.rest_seconds

    return [
        WorkoutSet(
            id=new_id("set"),
            set_number=n,
            target_reps=reps_seq[min(n - 1, len(reps_seq) - 1)],
            actual_reps=None,
            weight=float(weight),
            rest_seconds=int(rest),
            status=SET_PENDING,  # type: ignore[arg-type]
        )
        for n in range(1, count + 1)
    ]


def create_workout_exercise(
    exercise: Exercise,
    priority: str,
    config: SetsConfig | None = None,
) -> WorkoutExercise:
    """Wrap a catalog exercise with freshly built sets."""
    return WorkoutExercise(
        id=new_id("exercise"),
        exercise=exercise,
        sets=build_sets(priority, config),
        priority=priority,  # type: ignore[arg-type]
    )


# =============================================================================
# FROM TEMPLATE
# =============================================================================


def generate_from_template(
    template: WorkoutTemplate,
    overrides: TemplateOverrides | None = None,
    catalog: Iterable[Exercise] | None = None,
    rng: RandomSource | None = None,
    clock: Clock | None = None,
) -> Workout:
    """
    Generate a draft workout from a template.

    Each requirement is filled by the matcher; a requirement whose qualifying
    pool is smaller than its count contributes the whole pool.

    Args:
        template: Template to expand
        overrides: Optional name/description/duration/difficulty/author
        catalog: Exercises to choose from; defaults to the bundled catalog
        rng: Random source for exercise selection
        clock: Time source for ``created_at``

    Returns:
        Workout in draft status whose target muscles are the template's
        target muscles plus every requirement muscle group
    """
    ov = overrides or TemplateOverrides()
    pool = list(catalog) if catalog is not None else default_catalog().all()

    workout = Workout(
        id=new_id("workout"),
        name=ov.name or template.name,
        description=ov.description if ov.description is not None else template.description,
        category=template.category,
        target_muscles=set(template.target_muscles),
        estimated_duration=(
            ov.estimated_duration if ov.estimated_duration is not None else template.estimated_duration
        ),
        difficulty=ov.difficulty or template.difficulty,
        status=WORKOUT_DRAFT,  # type: ignore[arg-type]
        created_at=current_time(clock),
        created_by=ov.created_by,
    )

    for requirement in template.exercise_requirements:
        workout.target_muscles.update(requirement.muscle_groups)
        for exercise in match(requirement, pool, rng):
            workout.exercises.append(create_workout_exercise(exercise, requirement.priority))

    return workout


def generate_from_template_id(
    template_id: str,
    overrides: TemplateOverrides | None = None,
    templates: Sequence[WorkoutTemplate] | None = None,
    catalog: Iterable[Exercise] | None = None,
    rng: RandomSource | None = None,
    clock: Clock | None = None,
) -> Workout:
    """
    Look up a template by id and generate a workout from it.

    Raises:
        TemplateNotFoundError: If the id is unknown
    """
    template = get_template(template_id, templates)
    return generate_from_template(template, overrides, catalog, rng, clock)


# =============================================================================
# CUSTOM WORKOUTS
# =============================================================================


def workout_validation_errors(spec: CustomWorkoutSpec) -> dict[str, str]:
    """Return ``{field: message}`` for everything wrong with ``spec`` (empty if valid)."""
    errors: dict[str, str] = {}
    if not spec.name or not spec.name.strip():
        errors["name"] = "Workout name is required"
    if not spec.exercises:
        errors["exercises"] = "At least one exercise is required"
    if spec.estimated_duration is not None and spec.estimated_duration < 1:
        errors["estimated_duration"] = "Duration must be at least 1 minute"
    return errors


def _append_exercise(workout: Workout, exercise: Exercise, config: SetsConfig | None) -> WorkoutExercise:
    priority = config.priority if config is not None else "medium"
    we = create_workout_exercise(exercise, priority, config)
    workout.exercises.append(we)
    # Monotonic: muscles are added, never removed.
    workout.target_muscles.update(exercise.primary_muscles)
    return we


def create_custom_workout(spec: CustomWorkoutSpec, clock: Clock | None = None) -> Workout:
    """
    Assemble a draft workout from a caller-supplied exercise list.

    Raises:
        ValidationError: Blank name, empty exercise list, or duration < 1
    """
    errors = workout_validation_errors(spec)
    if errors:
        raise ValidationError("; ".join(errors.values()), errors)

    defaults = custom_workout_defaults()
    workout = Workout(
        id=new_id("workout"),
        name=spec.name.strip(),
        description=spec.description or "",
        category=defaults.category,
        target_muscles=set(spec.target_muscles),
        estimated_duration=(
            spec.estimated_duration if spec.estimated_duration is not None else defaults.estimated_duration
        ),
        difficulty=spec.difficulty or defaults.difficulty,  # type: ignore[arg-type]
        status=WORKOUT_DRAFT,  # type: ignore[arg-type]
        created_at=current_time(clock),
        created_by=spec.created_by,
    )
    for exercise, config in spec.exercises:
        _append_exercise(workout, exercise, config)
    return workout


# =============================================================================
# EDITING
# =============================================================================


def add_exercise(
    workout: Workout,
    exercise: Exercise,
    sets_config: SetsConfig | None = None,
) -> Workout:
    """
    Append an exercise with new pending sets.

    ``target_muscles`` gains the exercise's primary muscles.

    Raises:
        IllegalStateError: The workout is completed
    """
    if workout.status == WORKOUT_COMPLETED:
        raise IllegalStateError("add an exercise to", workout.status)
    _append_exercise(workout, exercise, sets_config)
    return workout


def remove_exercise(workout: Workout, exercise_id: str, clock: Clock | None = None) -> Workout:
    """
    Remove an exercise (and its sets) from a workout.

    ``target_muscles`` is left as is.  If every remaining set is already
    resolved, the workout is completed (drafts included, as with set events).

    Raises:
        NotFoundError: Unknown exercise id
        IllegalStateError: The workout is completed
    """
    if workout.status == WORKOUT_COMPLETED:
        raise IllegalStateError("remove an exercise from", workout.status)
    we = workout.find_exercise(exercise_id)
    if we is None:
        raise NotFoundError(f"Exercise '{exercise_id}' is not in workout '{workout.id}'")

    workout.exercises.remove(we)
    finish_if_resolved(workout, current_time(clock))
    return workout


def duplicate_workout(workout: Workout, clock: Clock | None = None) -> Workout:
    """
    Copy a workout into a new draft.

    Every id is regenerated, every set is reset to pending (reps, completion
    time and notes cleared; target reps, weight and rest kept) and the copy's
    name gets a " (Copy)" suffix.  The source workout is not touched.
    """
    return Workout(
        id=new_id("workout"),
        name=f"{workout.name}{DUPLICATE_NAME_SUFFIX}",
        description=workout.description,
        category=workout.category,
        target_muscles=set(workout.target_muscles),
        estimated_duration=workout.estimated_duration,
        difficulty=workout.difficulty,
        exercises=[
            WorkoutExercise(
                id=new_id("exercise"),
                exercise=we.exercise,
                sets=[
                    WorkoutSet(
                        id=new_id("set"),
                        set_number=s.set_number,
                        target_reps=s.target_reps,
                        actual_reps=None,
                        weight=s.weight,
                        rest_seconds=s.rest_seconds,
                        status=SET_PENDING,  # type: ignore[arg-type]
                        completed_at=None,
                        notes="",
                        previous_weight=s.previous_weight,
                    )
                    for s in we.sets
                ],
                priority=we.priority,
                notes=we.notes,
            )
            for we in workout.exercises
        ],
        status=WORKOUT_DRAFT,  # type: ignore[arg-type]
        created_at=current_time(clock),
        started_at=None,
        completed_at=None,
        created_by=workout.created_by,
    )
