"""
WorkoutEngine: one object exposing the whole engine API.

The engine binds its collaborators (exercise catalog, templates, random
source, clock) and otherwise holds no state: every method takes the workout
to operate on and returns it.
"""

from __future__ import annotations

from collections.abc import Sequence

from .. import assembler, session
from ..catalog.registry import ExerciseCatalog, default_catalog, default_templates, get_template
from ..matcher import RandomSource
from ..metrics import workout_progress
from ..models import (
    Clock,
    CustomWorkoutSpec,
    Exercise,
    ProgressSnapshot,
    SetsConfig,
    TemplateOverrides,
    Workout,
    WorkoutTemplate,
)


class WorkoutEngine:
    """
    Workout generation, editing and session tracking.

    Args:
        catalog: Exercise catalog; defaults to the bundled one
        templates: Template seed data; defaults to the bundled templates
        rng: Random source for template matching (``random.Random(seed)``
            gives repeatable workouts)
        clock: Time source for timestamps
    """

    def __init__(
        self,
        catalog: ExerciseCatalog | None = None,
        templates: Sequence[WorkoutTemplate] | None = None,
        rng: RandomSource | None = None,
        clock: Clock | None = None,
    ):
        self.catalog = catalog if catalog is not None else default_catalog()
        self.templates = list(templates) if templates is not None else default_templates()
        self.rng = rng
        self.clock = clock

    # -- templates ------------------------------------------------------------

    def get_template(self, template_id: str) -> WorkoutTemplate:
        return get_template(template_id, self.templates)

    def generate_from_template(
        self,
        template_id: str,
        overrides: TemplateOverrides | None = None,
    ) -> Workout:
        """Generate a draft workout; raises TemplateNotFoundError for unknown ids."""
        return assembler.generate_from_template_id(
            template_id,
            overrides,
            templates=self.templates,
            catalog=self.catalog,
            rng=self.rng,
            clock=self.clock,
        )

    # -- assembly -------------------------------------------------------------

    def create_custom_workout(self, spec: CustomWorkoutSpec) -> Workout:
        return assembler.create_custom_workout(spec, clock=self.clock)

    def add_exercise(
        self,
        workout: Workout,
        exercise: Exercise | str,
        sets_config: SetsConfig | None = None,
    ) -> Workout:
        """Add an exercise, given as a record or as a catalog name."""
        if isinstance(exercise, str):
            exercise = self.catalog.get(exercise)
        return assembler.add_exercise(workout, exercise, sets_config)

    def remove_exercise(self, workout: Workout, exercise_id: str) -> Workout:
        return assembler.remove_exercise(workout, exercise_id, clock=self.clock)

    def duplicate(self, workout: Workout) -> Workout:
        return assembler.duplicate_workout(workout, clock=self.clock)

    # -- session --------------------------------------------------------------

    def start(self, workout: Workout) -> Workout:
        return session.start(workout, clock=self.clock)

    def pause(self, workout: Workout) -> Workout:
        return session.pause(workout)

    def resume(self, workout: Workout) -> Workout:
        return session.resume(workout)

    def complete_set(
        self,
        workout: Workout,
        exercise_id: str,
        set_id: str,
        *,
        reps: int,
        weight: float | None = None,
        notes: str = "",
    ) -> Workout:
        return session.complete_set(
            workout, exercise_id, set_id, reps=reps, weight=weight, notes=notes, clock=self.clock
        )

    def fail_set(
        self, workout: Workout, exercise_id: str, set_id: str, reason: str = "", *, reps: int = 0
    ) -> Workout:
        return session.fail_set(workout, exercise_id, set_id, reason, reps=reps, clock=self.clock)

    def progress(self, workout: Workout) -> ProgressSnapshot:
        return workout_progress(workout)
