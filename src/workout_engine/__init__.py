"""
workout-engine: generate workouts from templates, assemble custom workouts,
and track a workout session set by set.

Typical use:

    import random
    from workout_engine import WorkoutEngine

    engine = WorkoutEngine(rng=random.Random(7))
    workout = engine.generate_from_template("push-1")
    engine.start(workout)
    ex = workout.exercises[0]
    engine.complete_set(workout, ex.id, ex.sets[0].id, reps=8, weight=60)
    engine.progress(workout)
"""

from .core.assembler import (
    add_exercise,
    create_custom_workout,
    duplicate_workout,
    generate_from_template,
    generate_from_template_id,
    remove_exercise,
)
from .core.catalog import ExerciseCatalog, default_catalog, default_templates, get_template
from .core.engine.service import WorkoutEngine
from .core.errors import (
    IllegalStateError,
    NotFoundError,
    TemplateNotFoundError,
    ValidationError,
    WorkoutEngineError,
)
from .core.matcher import match
from .core.metrics import workout_progress
from .core.models import (
    CustomWorkoutSpec,
    Exercise,
    ExerciseRequirement,
    ProgressSnapshot,
    SetsConfig,
    TemplateOverrides,
    Workout,
    WorkoutExercise,
    WorkoutSet,
    WorkoutTemplate,
)
from .core.session import complete_set, fail_set, pause, resume, start
from .core.store import WorkoutStore

__version__ = "0.1.0"

__all__ = [
    "CustomWorkoutSpec",
    "Exercise",
    "ExerciseCatalog",
    "ExerciseRequirement",
    "IllegalStateError",
    "NotFoundError",
    "ProgressSnapshot",
    "SetsConfig",
    "TemplateNotFoundError",
    "TemplateOverrides",
    "ValidationError",
    "Workout",
    "WorkoutEngine",
    "WorkoutEngineError",
    "WorkoutExercise",
    "WorkoutSet",
    "WorkoutStore",
    "WorkoutTemplate",
    "add_exercise",
    "complete_set",
    "create_custom_workout",
    "default_catalog",
    "default_templates",
    "duplicate_workout",
    "fail_set",
    "generate_from_template",
    "generate_from_template_id",
    "get_template",
    "match",
    "pause",
    "remove_exercise",
    "resume",
    "start",
    "workout_progress",
]
