"""
Unit tests for the workout engine core.

Covers the matcher, assembler, session state machine, progress calculator,
filters, store, serializers and config loader against a small hand-built
catalog.  Selection is made deterministic with ``random.Random`` or a
first-k stub.
"""

import random
from datetime import datetime, timedelta

import pytest

from workout_engine.core.assembler import (
    add_exercise,
    build_sets,
    create_custom_workout,
    duplicate_workout,
    generate_from_template,
    generate_from_template_id,
    remove_exercise,
)
from workout_engine.core.catalog.registry import ExerciseCatalog, get_template
from workout_engine.core.config import PRIORITY_TIERS, tier_for_priority
from workout_engine.core.engine.config_loader import deep_merge, load_engine_config
from workout_engine.core.errors import (
    IllegalStateError,
    NotFoundError,
    TemplateNotFoundError,
    ValidationError,
)
from workout_engine.core.filters import (
    filter_templates_by_category,
    filter_workouts,
    search_exercises,
    sort_workouts,
    total_template_exercises,
)
from workout_engine.core.matcher import exercise_matches_requirement, match
from workout_engine.core.metrics import exercise_stats, percent, workout_progress, workout_stats
from workout_engine.core.models import (
    CustomWorkoutSpec,
    Exercise,
    ExerciseRequirement,
    SetsConfig,
    TemplateOverrides,
    Workout,
    WorkoutTemplate,
)
from workout_engine.core.session import (
    complete_set,
    elapsed_seconds,
    fail_set,
    next_pending_set,
    pause,
    resume,
    start,
)
from workout_engine.core.store import WorkoutStore
from workout_engine.io.serializers import (
    parse_sets_config,
    validate_non_blank,
    validate_positive,
    workout_to_dict,
)

# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------

T0 = datetime(2024, 3, 1, 18, 0, 0)


class FakeClock:
    """Clock that advances one minute per call."""

    def __init__(self, start: datetime = T0):
        self.now = start

    def __call__(self) -> datetime:
        current = self.now
        self.now = self.now + timedelta(minutes=1)
        return current


class FirstK:
    """Random source that always picks the first k items."""

    def sample(self, population, k):
        return list(population)[:k]


def _ex(name, primary, secondary=(), mechanic="compound", category="strength", equipment="barbell", level="beginner"):
    return Exercise(
        name=name,
        primary_muscles=frozenset(primary),
        secondary_muscles=frozenset(secondary),
        equipment=equipment,
        mechanic=mechanic,
        category=category,
        level=level,
    )


BENCH = _ex("Bench Press", ["chest"], ["shoulders", "triceps"])
OHP = _ex("Overhead Press", ["shoulders"], ["triceps"])
FLYES = _ex("Dumbbell Flyes", ["chest"], mechanic="isolation", equipment="dumbbell")
LATERAL = _ex("Lateral Raise", ["shoulders"], mechanic="isolation", equipment="dumbbell")
PUSHDOWN = _ex("Triceps Pushdown", ["triceps"], mechanic="isolation", equipment="cable")
SQUAT = _ex("Barbell Squat", ["quadriceps"], ["glutes"], level="intermediate")
TREADMILL = _ex("Treadmill", ["quadriceps"], mechanic=None, category="cardio", equipment="machine")
STRETCH = _ex("Chest Stretch", ["chest"], mechanic=None, category="stretching", equipment="body only")

CATALOG = ExerciseCatalog([BENCH, OHP, FLYES, LATERAL, PUSHDOWN, SQUAT, TREADMILL, STRETCH])


def _template(*requirements, template_id="t-1"):
    return WorkoutTemplate(
        id=template_id,
        name="Test Template",
        category="Body Parts",
        description="for tests",
        target_muscles=("chest",),
        estimated_duration=45,
        difficulty="beginner",
        exercise_requirements=requirements,
    )


def _custom(*exercises, name="Custom", clock=None) -> Workout:
    spec = CustomWorkoutSpec(name=name, exercises=[(ex, SetsConfig()) for ex in exercises])
    return create_custom_workout(spec, clock=clock)


# ===========================================================================
# Matcher
# ===========================================================================


class TestMatcher:
    """Selection predicate and random draw."""

    def test_compound_matches_mechanic(self):
        req = ExerciseRequirement("compound", ("chest",), 1)
        assert exercise_matches_requirement(BENCH, req)
        assert not exercise_matches_requirement(FLYES, req)

    def test_secondary_muscle_qualifies(self):
        req = ExerciseRequirement("compound", ("triceps",), 1)
        assert exercise_matches_requirement(BENCH, req)

    def test_non_mechanic_category_matches_exercise_category(self):
        req = ExerciseRequirement("cardio", ("quadriceps",), 1)
        assert exercise_matches_requirement(TREADMILL, req)
        assert not exercise_matches_requirement(SQUAT, req)

    def test_empty_category_matches_any(self):
        req = ExerciseRequirement("", ("chest",), 5)
        pool = match(req, CATALOG, FirstK())
        assert {e.name for e in pool} == {"Bench Press", "Dumbbell Flyes", "Chest Stretch"}

    def test_no_muscle_overlap_excluded(self):
        req = ExerciseRequirement("isolation", ("biceps",), 2)
        assert match(req, CATALOG, random.Random(1)) == []

    def test_pool_smaller_than_count_returns_whole_pool(self):
        req = ExerciseRequirement("isolation", ("chest",), 4)
        assert match(req, CATALOG, random.Random(3)) == [FLYES]

    def test_selection_is_distinct_and_sized(self):
        req = ExerciseRequirement("isolation", ("chest", "shoulders", "triceps"), 2)
        picked = match(req, CATALOG, random.Random(42))
        assert len(picked) == 2
        assert len({e.name for e in picked}) == 2

    def test_same_seed_same_selection(self):
        req = ExerciseRequirement("isolation", ("chest", "shoulders", "triceps"), 2)
        a = match(req, CATALOG, random.Random(7))
        b = match(req, CATALOG, random.Random(7))
        assert a == b

    def test_zero_count_selects_nothing(self):
        req = ExerciseRequirement("compound", ("chest",), 0)
        assert match(req, CATALOG) == []


# ===========================================================================
# Assembler
# ===========================================================================


class TestBuildSets:
    """Priority tiers and caller overrides."""

    @pytest.mark.parametrize(
        "priority, reps",
        [("high", [6, 8, 10, 12]), ("medium", [8, 10, 12]), ("low", [12, 15])],
    )
    def test_tier_table(self, priority, reps):
        sets = build_sets(priority)
        assert [s.target_reps for s in sets] == reps
        assert [s.set_number for s in sets] == list(range(1, len(reps) + 1))
        assert all(s.status == "pending" and s.actual_reps is None for s in sets)

    def test_unknown_priority_falls_back_to_medium(self):
        assert tier_for_priority("extreme") == PRIORITY_TIERS["medium"]

    def test_extra_sets_clamp_to_last_rep(self):
        sets = build_sets("low", SetsConfig(sets=4, priority="low"))
        assert [s.target_reps for s in sets] == [12, 15, 15, 15]

    def test_config_overrides_weight_rest_and_reps(self):
        sets = build_sets("medium", SetsConfig(sets=3, reps=[10], weight=20, rest_seconds=90))
        assert [s.target_reps for s in sets] == [10, 10, 10]
        assert all(s.weight == 20.0 and s.rest_seconds == 90 for s in sets)

    def test_ids_are_unique(self):
        sets = build_sets("high") + build_sets("high")
        assert len({s.id for s in sets}) == len(sets)


class TestGenerateFromTemplate:
    """Template expansion."""

    def test_builds_draft_from_requirements(self):
        template = _template(
            ExerciseRequirement("compound", ("chest", "shoulders"), 2, "high"),
            ExerciseRequirement("isolation", ("triceps",), 1, "low"),
        )
        w = generate_from_template(template, catalog=CATALOG, rng=FirstK(), clock=FakeClock())

        assert w.status == "draft"
        assert w.started_at is None and w.completed_at is None
        assert w.created_at == T0
        assert [we.exercise.name for we in w.exercises] == ["Bench Press", "Overhead Press", "Triceps Pushdown"]
        assert [len(we.sets) for we in w.exercises] == [4, 4, 2]
        assert [we.priority for we in w.exercises] == ["high", "high", "low"]

    def test_target_muscles_include_requirement_groups(self):
        template = _template(ExerciseRequirement("isolation", ("triceps",), 1))
        w = generate_from_template(template, catalog=CATALOG, rng=FirstK())
        assert w.target_muscles == {"chest", "triceps"}

    def test_copies_template_fields(self):
        w = generate_from_template(_template(), catalog=CATALOG)
        assert (w.name, w.category, w.estimated_duration, w.difficulty) == (
            "Test Template",
            "Body Parts",
            45,
            "beginner",
        )
        assert w.exercises == []

    def test_overrides_apply(self):
        ov = TemplateOverrides(name="Mine", estimated_duration=30, difficulty="expert", created_by="sam")
        w = generate_from_template(_template(), ov, catalog=CATALOG)
        assert (w.name, w.estimated_duration, w.difficulty, w.created_by) == ("Mine", 30, "expert", "sam")

    def test_unknown_template_id_raises(self):
        with pytest.raises(TemplateNotFoundError) as exc:
            generate_from_template_id("nope", templates=[_template()], catalog=CATALOG)
        assert exc.value.template_id == "nope"
        assert "t-1" in str(exc.value)

    def test_template_not_found_is_not_found(self):
        with pytest.raises(NotFoundError):
            get_template("missing", [_template()])


class TestCustomWorkout:
    """Custom assembly and validation."""

    def test_creates_draft_with_defaults(self):
        w = _custom(BENCH, SQUAT, clock=FakeClock())
        assert w.status == "draft"
        assert w.category == "custom"
        assert w.estimated_duration == 60
        assert w.difficulty == "intermediate"
        assert w.total_sets == 6
        assert w.target_muscles == {"chest", "quadriceps"}

    def test_blank_name_rejected(self):
        with pytest.raises(ValidationError) as exc:
            create_custom_workout(CustomWorkoutSpec(name="   ", exercises=[(BENCH, SetsConfig())]))
        assert "name" in exc.value.errors

    def test_empty_exercise_list_rejected(self):
        with pytest.raises(ValidationError) as exc:
            create_custom_workout(CustomWorkoutSpec(name="Leg day"))
        assert set(exc.value.errors) == {"exercises"}

    def test_both_errors_reported(self):
        with pytest.raises(ValidationError) as exc:
            create_custom_workout(CustomWorkoutSpec(name=""))
        assert set(exc.value.errors) == {"name", "exercises"}

    def test_priority_from_sets_config(self):
        spec = CustomWorkoutSpec(name="x", exercises=[(BENCH, SetsConfig(priority="high"))])
        w = create_custom_workout(spec)
        assert w.exercises[0].priority == "high"
        assert len(w.exercises[0].sets) == 4


class TestEditing:
    """add_exercise / remove_exercise / duplicate_workout."""

    def test_add_then_remove_restores_set_count(self):
        w = _custom(BENCH)
        before = w.total_sets
        add_exercise(w, SQUAT, SetsConfig(priority="low"))
        assert w.total_sets == before + 2

        added = w.exercises[-1]
        remove_exercise(w, added.id)
        assert w.total_sets == before
        # Muscles only ever grow.
        assert "quadriceps" in w.target_muscles

    def test_remove_unknown_exercise_raises(self):
        w = _custom(BENCH)
        with pytest.raises(NotFoundError):
            remove_exercise(w, "exercise_missing")

    def test_edit_completed_workout_raises(self):
        w = _custom(PUSHDOWN)
        we = w.exercises[0]
        for s in we.sets:
            complete_set(w, we.id, s.id, reps=s.target_reps)
        assert w.status == "completed"
        with pytest.raises(IllegalStateError):
            add_exercise(w, BENCH)
        with pytest.raises(IllegalStateError):
            remove_exercise(w, we.id)

    def test_remove_last_pending_exercise_completes_started_workout(self):
        w = _custom(BENCH, SQUAT)
        start(w)
        first = w.exercises[0]
        for s in first.sets:
            complete_set(w, first.id, s.id, reps=8)
        assert w.status == "in_progress"

        remove_exercise(w, w.exercises[1].id, clock=FakeClock())
        assert w.status == "completed"
        assert w.completed_at == T0

    def test_remove_from_draft_does_not_complete(self):
        w = _custom(BENCH, SQUAT)
        remove_exercise(w, w.exercises[1].id)
        assert w.status == "draft"

    def test_remove_last_pending_exercise_completes_draft(self):
        w = _custom(BENCH, SQUAT)
        first = w.exercises[0]
        for s in first.sets:
            complete_set(w, first.id, s.id, reps=8)
        assert w.status == "draft"

        remove_exercise(w, w.exercises[1].id, clock=FakeClock())
        assert w.status == "completed"
        assert w.completed_at == T0
        assert w.started_at is None
        assert workout_progress(w).is_completed

    def test_duplicate_resets_state_and_ids(self):
        w = _custom(BENCH, SQUAT, name="Monday")
        start(w)
        we = w.exercises[0]
        complete_set(w, we.id, we.sets[0].id, reps=9, weight=50, notes="easy")

        copy = duplicate_workout(w)
        assert copy.name == "Monday (Copy)"
        assert copy.status == "draft"
        assert copy.started_at is None and copy.completed_at is None
        assert copy.id != w.id
        old_ids = {we.id for we in w.exercises} | {s.id for _, s in w.iter_sets()}
        new_ids = {we.id for we in copy.exercises} | {s.id for _, s in copy.iter_sets()}
        assert not old_ids & new_ids
        assert all(s.status == "pending" and s.actual_reps is None and s.notes == "" for _, s in copy.iter_sets())
        assert copy.exercises[0].sets[0].weight == 50.0

    def test_duplicate_leaves_source_untouched(self):
        w = _custom(BENCH)
        start(w)
        duplicate_workout(w)
        assert w.status == "in_progress"
        assert w.name == "Custom"


# ===========================================================================
# Session state machine
# ===========================================================================


class TestLifecycle:
    """start / pause / resume guards."""

    def test_start_stamps_started_at(self):
        w = _custom(BENCH)
        start(w, clock=FakeClock())
        assert w.status == "in_progress"
        assert w.started_at == T0

    def test_pause_on_draft_raises(self):
        w = _custom(BENCH)
        with pytest.raises(IllegalStateError) as exc:
            pause(w)
        assert exc.value.status == "draft"
        assert w.status == "draft"

    def test_second_start_raises(self):
        w = _custom(BENCH)
        start(w, clock=FakeClock())
        started = w.started_at
        with pytest.raises(IllegalStateError):
            start(w)
        assert w.started_at == started

    def test_pause_resume_round_trip(self):
        w = _custom(BENCH)
        start(w)
        pause(w)
        assert w.status == "paused"
        resume(w)
        assert w.status == "in_progress"

    def test_resume_when_not_paused_raises(self):
        w = _custom(BENCH)
        start(w)
        with pytest.raises(IllegalStateError):
            resume(w)


class TestSetEvents:
    """complete_set / fail_set."""

    def test_complete_records_reps_weight_and_time(self):
        w = _custom(BENCH)
        start(w)
        we = w.exercises[0]
        s = we.sets[0]
        complete_set(w, we.id, s.id, reps=7, weight=60, notes="tough", clock=FakeClock())
        assert (s.status, s.actual_reps, s.weight, s.notes) == ("completed", 7, 60.0, "tough")
        assert s.previous_weight == 0.0
        assert s.completed_at == T0

    def test_complete_without_weight_keeps_planned_weight(self):
        spec = CustomWorkoutSpec(name="x", exercises=[(BENCH, SetsConfig(weight=40))])
        w = create_custom_workout(spec)
        we = w.exercises[0]
        complete_set(w, we.id, we.sets[0].id, reps=8)
        assert we.sets[0].weight == 40.0

    def test_fail_records_zero_reps_and_reason(self):
        w = _custom(BENCH)
        we = w.exercises[0]
        s = we.sets[1]
        fail_set(w, we.id, s.id, "shoulder pain")
        assert (s.status, s.actual_reps, s.notes) == ("failed", 0, "shoulder pain")
        assert s.completed_at is not None

    def test_unknown_ids_raise_not_found(self):
        w = _custom(BENCH)
        we = w.exercises[0]
        with pytest.raises(NotFoundError):
            complete_set(w, "exercise_x", we.sets[0].id, reps=5)
        with pytest.raises(NotFoundError):
            fail_set(w, we.id, "set_x")

    def test_negative_reps_rejected_without_mutation(self):
        w = _custom(BENCH)
        we = w.exercises[0]
        with pytest.raises(ValidationError):
            complete_set(w, we.id, we.sets[0].id, reps=-1)
        assert we.sets[0].status == "pending"

    def test_set_events_allowed_while_paused(self):
        w = _custom(BENCH)
        start(w)
        pause(w)
        we = w.exercises[0]
        complete_set(w, we.id, we.sets[0].id, reps=8)
        assert we.sets[0].status == "completed"
        assert w.status == "paused"

    def test_set_event_on_completed_workout_raises(self):
        w = _custom(PUSHDOWN)
        we = w.exercises[0]
        for s in we.sets:
            fail_set(w, we.id, s.id)
        with pytest.raises(IllegalStateError):
            complete_set(w, we.id, we.sets[0].id, reps=10)

    def test_last_set_completes_workout(self):
        w = _custom(BENCH)
        start(w)
        clock = FakeClock()
        we = w.exercises[0]
        complete_set(w, we.id, we.sets[0].id, reps=8, clock=clock)
        complete_set(w, we.id, we.sets[1].id, reps=10, clock=clock)
        assert w.status == "in_progress"
        assert w.completed_at is None
        fail_set(w, we.id, we.sets[2].id, "no gas", clock=clock)
        assert w.status == "completed"
        assert w.completed_at == T0 + timedelta(minutes=2)

    def test_next_pending_set_walks_in_order(self):
        w = _custom(BENCH, SQUAT)
        we, s = next_pending_set(w)
        assert (we.exercise.name, s.set_number) == ("Bench Press", 1)
        for s in w.exercises[0].sets:
            complete_set(w, we.id, s.id, reps=8)
        we, s = next_pending_set(w)
        assert (we.exercise.name, s.set_number) == ("Barbell Squat", 1)

    def test_elapsed_seconds(self):
        w = _custom(PUSHDOWN)
        assert elapsed_seconds(w) is None
        clock = FakeClock()
        start(w, clock=clock)
        we = w.exercises[0]
        for s in we.sets:
            complete_set(w, we.id, s.id, reps=12, clock=clock)
        assert elapsed_seconds(w) == 180


# ===========================================================================
# Progress
# ===========================================================================


class TestProgress:
    """workout_progress and percent rounding."""

    def test_empty_workout(self):
        w = Workout(id="w", name="Empty", created_at=T0)
        p = workout_progress(w)
        assert (p.completed_sets, p.total_sets, p.percentage, p.is_completed) == (0, 0, 0, False)

    def test_two_completed_one_failed(self):
        w = _custom(BENCH)
        start(w)
        we = w.exercises[0]
        assert [s.target_reps for s in we.sets] == [8, 10, 12]
        complete_set(w, we.id, we.sets[0].id, reps=8)
        complete_set(w, we.id, we.sets[1].id, reps=10)
        fail_set(w, we.id, we.sets[2].id)

        p = workout_progress(w)
        assert (p.completed_sets, p.total_sets, p.percentage, p.is_completed) == (2, 3, 67, True)
        assert w.status == "completed"

    @pytest.mark.parametrize(
        "part, whole, expected",
        [(1, 3, 33), (2, 3, 67), (1, 8, 13), (1, 2, 50), (0, 5, 0), (3, 0, 0)],
    )
    def test_percent_rounds_half_up(self, part, whole, expected):
        assert percent(part, whole) == expected

    def test_complete_and_fail_commute(self):
        a = _custom(BENCH)
        b = _custom(BENCH)
        we_a, we_b = a.exercises[0], b.exercises[0]

        complete_set(a, we_a.id, we_a.sets[0].id, reps=8)
        fail_set(a, we_a.id, we_a.sets[1].id)
        fail_set(b, we_b.id, we_b.sets[1].id)
        complete_set(b, we_b.id, we_b.sets[0].id, reps=8)

        assert workout_progress(a) == workout_progress(b)

    def test_exercise_stats(self):
        w = _custom(BENCH, FLYES, SQUAT)
        stats = exercise_stats(w.exercises)
        assert stats.total_exercises == 3
        assert stats.by_muscle_group == {"chest": 2, "quadriceps": 1}
        assert stats.by_equipment == {"barbell": 2, "dumbbell": 1}


# ===========================================================================
# Filters
# ===========================================================================


def _workouts():
    clock = FakeClock()
    a = _custom(BENCH, name="Upper Body", clock=clock)
    a.difficulty = "expert"
    a.estimated_duration = 90
    b = _custom(SQUAT, name="leg day", clock=clock)
    b.difficulty = "beginner"
    b.estimated_duration = 30
    b.description = "squats and more"
    c = _custom(FLYES, name="Arms", clock=clock)
    c.category = "Body Parts"
    start(c)
    return [a, b, c]


class TestFilters:
    """filter_workouts / sort_workouts / search_exercises."""

    def test_search_matches_name_and_description(self):
        ws = _workouts()
        assert [w.name for w in filter_workouts(ws, search="UPPER")] == ["Upper Body"]
        assert [w.name for w in filter_workouts(ws, search="squats")] == ["leg day"]

    def test_filters_combine_with_and(self):
        ws = _workouts()
        assert [w.name for w in filter_workouts(ws, category="custom", difficulty="beginner")] == ["leg day"]
        assert [w.name for w in filter_workouts(ws, status="in_progress")] == ["Arms"]
        assert filter_workouts(ws, category="Body Parts", status="draft") == []

    def test_empty_filters_return_all(self):
        ws = _workouts()
        assert filter_workouts(ws) == ws

    def test_sort_by_name_case_insensitive(self):
        names = [w.name for w in sort_workouts(_workouts(), "name")]
        assert names == ["Arms", "leg day", "Upper Body"]

    def test_sort_by_created_desc(self):
        names = [w.name for w in sort_workouts(_workouts(), "createdAt", "desc")]
        assert names == ["Arms", "leg day", "Upper Body"]

    def test_sort_by_difficulty_rank(self):
        names = [w.name for w in sort_workouts(_workouts(), "difficulty")]
        assert names == ["leg day", "Arms", "Upper Body"]

    def test_sort_by_duration(self):
        names = [w.name for w in sort_workouts(_workouts(), "duration", "desc")]
        assert names == ["Upper Body", "Arms", "leg day"]

    def test_unknown_sort_key_keeps_order(self):
        ws = _workouts()
        assert sort_workouts(ws, "colour") == ws

    def test_missing_fields_do_not_raise(self):
        items = [{"name": "b"}, {"name": None, "difficulty": "expert"}, {}]
        assert len(filter_workouts(items, search="b")) == 1
        assert sort_workouts(items, "difficulty") == [items[0], items[2], items[1]]

    def test_search_exercises(self):
        assert [e.name for e in search_exercises(CATALOG, query="dumbbell")] == ["Dumbbell Flyes", "Lateral Raise"]
        assert {e.name for e in search_exercises(CATALOG, muscle_group="triceps")} == {
            "Bench Press",
            "Overhead Press",
            "Triceps Pushdown",
        }
        assert [e.name for e in search_exercises(CATALOG, difficulty="intermediate")] == ["Barbell Squat"]
        assert [e.name for e in search_exercises(CATALOG, category="cardio")] == ["Treadmill"]

    def test_templates_by_category(self):
        t1 = _template(ExerciseRequirement("compound", ("chest",), 2), template_id="a")
        t2 = WorkoutTemplate(id="b", name="B", category="Full Body")
        assert filter_templates_by_category([t1, t2], "Body Parts") == [t1]
        assert filter_templates_by_category([t1, t2]) == [t1, t2]
        assert filter_templates_by_category(None, "x") == []
        assert total_template_exercises(t1) == 2
        assert total_template_exercises({"exercises": [{"count": 3}, {"count": 1}]}) == 4


# ===========================================================================
# Store
# ===========================================================================


class TestWorkoutStore:
    """Caller-owned collection of workouts."""

    def test_add_selects_and_orders_newest_first(self):
        store = WorkoutStore()
        a = store.add(_custom(BENCH, name="A"))
        b = store.add(_custom(BENCH, name="B"))
        assert store.all() == [b, a]
        assert store.current is b
        assert len(store) == 2
        assert a.id in store

    def test_delete_clears_current(self):
        store = WorkoutStore()
        a = store.add(_custom(BENCH))
        store.delete(a.id)
        assert store.current is None
        with pytest.raises(NotFoundError):
            store.get(a.id)

    def test_replace_and_select(self):
        store = WorkoutStore()
        a = store.add(_custom(BENCH, name="A"))
        store.add(_custom(BENCH, name="B"))
        copy = duplicate_workout(a)
        copy.id = a.id
        store.replace(copy)
        assert store.select(a.id).name == "A (Copy)"

    def test_list_and_stats(self):
        store = WorkoutStore()
        for w in _workouts():
            store.add(w)
        assert [w.name for w in store.list(sort_by="name", order="asc")] == ["Arms", "leg day", "Upper Body"]
        assert [w.name for w in store.list(status="draft")] == ["leg day", "Upper Body"]
        stats = store.stats()
        assert (stats.total, stats.draft, stats.in_progress) == (3, 2, 1)
        assert stats.completion_rate == 0

    def test_workout_stats_completion_rate(self):
        done = _custom(PUSHDOWN)
        we = done.exercises[0]
        for s in we.sets:
            complete_set(done, we.id, s.id, reps=12)
        stats = workout_stats([done, _custom(BENCH), _custom(BENCH)])
        assert stats.completed == 1
        assert stats.completion_rate == 33


# ===========================================================================
# Serializers
# ===========================================================================


class TestParseSetsConfig:
    """Compact set notation."""

    def test_reps_times_sets_with_weight_and_rest(self):
        cfg = parse_sets_config("10x3 +20kg / 90s")
        assert (cfg.sets, cfg.reps, cfg.weight, cfg.rest_seconds) == (3, [10], 20.0, 90)

    def test_rep_list(self):
        cfg = parse_sets_config("8, 10, 12 / 60s", priority="high")
        assert (cfg.sets, cfg.reps, cfg.rest_seconds, cfg.priority) == (3, [8, 10, 12], 60, "high")

    def test_bare_set_count(self):
        cfg = parse_sets_config("4")
        assert (cfg.sets, cfg.reps, cfg.weight) == (4, None, None)

    def test_weight_only(self):
        cfg = parse_sets_config("+12.5kg")
        assert (cfg.sets, cfg.weight) == (None, 12.5)

    def test_empty_is_tier_default(self):
        cfg = parse_sets_config("", priority="low")
        assert cfg == SetsConfig(priority="low")

    @pytest.mark.parametrize("text", ["abc", "10x", "0", "10x0"])
    def test_invalid_rejected(self, text):
        with pytest.raises(ValidationError):
            parse_sets_config(text)


class TestSerializers:
    """Validators and dict conversion."""

    def test_validators(self):
        assert validate_non_blank("  Push  ", "name") == "Push"
        with pytest.raises(ValidationError):
            validate_non_blank(" ", "name")
        with pytest.raises(ValidationError):
            validate_positive(0, "duration")

    def test_workout_to_dict(self):
        w = _custom(BENCH, clock=FakeClock())
        d = workout_to_dict(w)
        assert d["status"] == "draft"
        assert d["created_at"] == T0.isoformat()
        assert d["started_at"] is None
        assert d["target_muscles"] == ["chest"]
        assert d["exercises"][0]["exercise"]["name"] == "Bench Press"
        assert [s["target_reps"] for s in d["exercises"][0]["sets"]] == [8, 10, 12]


# ===========================================================================
# Config loader
# ===========================================================================


class TestConfigLoader:
    """engine.yaml loading and user override merge."""

    def test_deep_merge_is_non_destructive(self):
        base = {"a": {"x": 1, "y": 2}, "b": 1}
        merged = deep_merge(base, {"a": {"y": 3}})
        assert merged == {"a": {"x": 1, "y": 3}, "b": 1}
        assert base["a"]["y"] == 2

    def test_bundled_defaults(self, tmp_path):
        cfg = load_engine_config(user_path=tmp_path / "missing.yaml")
        assert cfg["set_defaults"]["rest_seconds"] == 60
        assert cfg["custom_workout"]["category"] == "custom"

    def test_user_override_merges(self, tmp_path):
        user = tmp_path / "engine.yaml"
        user.write_text("set_defaults:\n  rest_seconds: 120\n", encoding="utf-8")
        cfg = load_engine_config(user_path=user)
        assert cfg["set_defaults"]["rest_seconds"] == 120
        assert cfg["set_defaults"]["weight"] == 0

    def test_broken_override_warns_and_is_ignored(self, tmp_path):
        user = tmp_path / "engine.yaml"
        user.write_text("set_defaults: [unclosed\n", encoding="utf-8")
        with pytest.warns(UserWarning, match="workout-engine"):
            cfg = load_engine_config(user_path=user)
        assert cfg["set_defaults"]["rest_seconds"] == 60


# ===========================================================================
# Catalog
# ===========================================================================


class TestExerciseCatalog:
    """Read-only lookups over the exercise list."""

    def test_get_and_contains(self):
        assert CATALOG.get("Bench Press") is BENCH
        assert "Lateral Raise" in CATALOG
        with pytest.raises(NotFoundError):
            CATALOG.get("Handstand")

    def test_by_muscle_group_includes_secondary(self):
        assert [e.name for e in CATALOG.by_muscle_group("triceps")] == [
            "Bench Press",
            "Overhead Press",
            "Triceps Pushdown",
        ]
        assert len(CATALOG.by_muscle_group("chest", limit=2)) == 2

    def test_by_equipment_and_distinct_values(self):
        assert [e.name for e in CATALOG.by_equipment("dumbbell")] == ["Dumbbell Flyes", "Lateral Raise"]
        assert CATALOG.equipment_types() == ["barbell", "body only", "cable", "dumbbell", "machine"]
        assert "glutes" in CATALOG.muscle_groups()

    def test_loader_skips_bad_records(self, tmp_path):
        from workout_engine.core.catalog.loader import load_exercises_from_yaml

        path = tmp_path / "exercises.yaml"
        path.write_text(
            "exercises:\n"
            "  - {name: Good Curl, primary_muscles: [biceps], equipment: dumbbell,"
            " mechanic: isolation, category: strength, level: beginner}\n"
            "  - {name: Broken, primary_muscles: [biceps]}\n"
            "  - {name: Good Curl, primary_muscles: [biceps, forearms], equipment: cable,"
            " mechanic: isolation, category: strength, level: expert}\n",
            encoding="utf-8",
        )
        with pytest.warns(UserWarning, match="skipping exercise 'Broken'"):
            exercises = load_exercises_from_yaml(path)
        assert len(exercises) == 1
        assert exercises[0].equipment == "cable"
        assert exercises[0].level == "expert"

    def test_loader_reads_single_muscle_string(self, tmp_path):
        from workout_engine.core.catalog.loader import load_exercises_from_yaml

        path = tmp_path / "exercises.yaml"
        path.write_text(
            "exercises:\n"
            "  - name: Cable Crossover\n"
            "    primary_muscles: chest\n"
            "    secondary_muscles: shoulders\n"
            "    equipment: cable\n"
            "    mechanic: isolation\n"
            "    category: strength\n"
            "    level: beginner\n"
            "  - {name: Odd, primary_muscles: {chest: 1}, equipment: cable,"
            " category: strength, level: beginner}\n",
            encoding="utf-8",
        )
        with pytest.warns(UserWarning, match="skipping exercise 'Odd'"):
            (ex,) = load_exercises_from_yaml(path)
        assert ex.primary_muscles == frozenset({"chest"})
        assert ex.secondary_muscles == frozenset({"shoulders"})

    def test_broken_user_catalog_warns_and_is_ignored(self, tmp_path, monkeypatch):
        from workout_engine.core.catalog import loader

        (tmp_path / "exercises.yaml").write_text("exercises: [{name: Half\n", encoding="utf-8")
        monkeypatch.setattr(loader, "get_user_config_dir", lambda: tmp_path)

        with pytest.warns(UserWarning, match="ignoring"):
            exercises = loader.load_exercises_from_yaml()
        assert len(exercises) > 40
        assert "Half" not in {ex.name for ex in exercises}

    def test_template_loader_reads_requirements(self, tmp_path):
        from workout_engine.core.catalog.loader import load_templates_from_yaml

        path = tmp_path / "templates.yaml"
        path.write_text(
            "templates:\n"
            "  - id: t\n"
            "    name: T\n"
            "    category: Body Parts\n"
            "    target_muscles: [biceps]\n"
            "    estimated_duration: 30\n"
            "    difficulty: beginner\n"
            "    exercises:\n"
            "      - {category: isolation, muscle_groups: [biceps], count: 2, priority: low}\n",
            encoding="utf-8",
        )
        (template,) = load_templates_from_yaml(path)
        assert template.total_exercises == 2
        assert template.exercise_requirements[0] == ExerciseRequirement("isolation", ("biceps",), 2, "low")
