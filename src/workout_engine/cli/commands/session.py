"""Session command: build a workout and track it interactively."""

from typing import Annotated, Optional

import typer

from ...core.config import WORKOUT_COMPLETED
from ...core.engine.service import WorkoutEngine
from ...core.errors import TemplateNotFoundError, ValidationError, WorkoutEngineError
from ...core.filters import search_exercises
from ...core.models import CustomWorkoutSpec, Exercise, SetsConfig, TemplateOverrides, Workout
from ...core.session import next_pending_set
from ...core.store import WorkoutStore
from ...io.serializers import parse_sets_config, validate_non_blank, validate_non_negative
from .. import views
from ..app import SeedOption, app, get_engine

_MENU = {
    "s": "Start workout",
    "p": "Pause",
    "r": "Resume",
    "c": "Complete next set",
    "f": "Fail next set",
    "x": "Complete / fail a specific set",
    "a": "Add exercise",
    "d": "Remove exercise",
    "u": "Duplicate workout",
    "l": "List workouts",
    "v": "Switch workout",
    "k": "Delete workout",
    "w": "Show workout",
    "0": "Quit",
}


def _ask(prompt: str, default: str = "") -> str:
    """Prompt for one line; EOF counts as an empty answer."""
    try:
        raw = views.console.input(prompt).strip()
    except EOFError:
        return default
    return raw or default


def _ask_int(prompt: str, default: int) -> int | None:
    raw = _ask(f"{prompt} [{default}]: ", str(default))
    try:
        return int(validate_non_negative(int(raw), "value"))
    except ValueError:
        views.print_error(f"Not a number: {raw}")
    except ValidationError as e:
        views.print_error(str(e))
    return None


def _ask_float(prompt: str, default: float) -> float | None:
    raw = _ask(f"{prompt} [{default:g}]: ", f"{default:g}")
    try:
        return float(validate_non_negative(float(raw), "weight"))
    except ValueError:
        views.print_error(f"Not a number: {raw}")
    except ValidationError as e:
        views.print_error(str(e))
    return None


def _pick_exercise(engine: WorkoutEngine) -> Exercise | None:
    """Search the catalog and let the user pick one result."""
    query = _ask("  Search exercise (empty to stop): ")
    if not query:
        return None
    found = search_exercises(engine.catalog, query=query)[:15]
    if not found:
        views.print_warning(f"No exercises match '{query}'.")
        return _pick_exercise(engine)
    views.console.print(views.format_exercise_table(found))
    choice = _ask_int("  Pick #", 1)
    if choice is None or not 1 <= choice <= len(found):
        views.print_error(f"Enter a number between 1 and {len(found)}")
        return _pick_exercise(engine)
    return found[choice - 1]


def _ask_sets_config() -> SetsConfig:
    priority = _ask("  Priority (low/medium/high) [medium]: ", "medium").lower()
    if priority not in ("low", "medium", "high"):
        views.print_warning(f"Unknown priority '{priority}', using medium.")
        priority = "medium"
    while True:
        raw = _ask("  Sets, e.g. 10x3 +20kg / 90s (Enter for tier defaults): ")
        try:
            return parse_sets_config(raw, priority=priority)  # type: ignore[arg-type]
        except ValidationError as e:
            views.print_error(str(e))


def _build_custom_workout(engine: WorkoutEngine, name: str | None) -> Workout:
    """Prompt for a name and exercise list and assemble a custom workout."""
    views.console.print()
    views.console.print("[bold]New custom workout[/bold]")
    if not name:
        name = validate_non_blank(_ask("  Name: "), "Workout name")
    exercises: list[tuple[Exercise, SetsConfig]] = []
    while True:
        exercise = _pick_exercise(engine)
        if exercise is None:
            break
        exercises.append((exercise, _ask_sets_config()))
        views.print_success(f"{exercise.name} added")

    return engine.create_custom_workout(CustomWorkoutSpec(name=name or "", exercises=exercises))


def _record_set(engine: WorkoutEngine, workout: Workout, exercise_id: str, set_id: str, fail: bool) -> None:
    we = workout.find_exercise(exercise_id)
    s = we.find_set(set_id) if we is not None else None
    if we is None or s is None:
        views.print_error("Set not found")
        return

    label = f"{we.exercise.name} set {s.set_number}"
    if fail:
        reps = _ask_int(f"  {label} reps done", 0)
        if reps is None:
            return
        reason = _ask(f"  {label} failed, reason: ")
        engine.fail_set(workout, exercise_id, set_id, reason, reps=reps)
        views.print_warning(f"{label} marked as failed")
    else:
        reps = _ask_int(f"  {label} reps", s.target_reps)
        if reps is None:
            return
        weight = _ask_float("  Weight kg", s.weight)
        if weight is None:
            return
        notes = _ask("  Notes: ")
        engine.complete_set(workout, exercise_id, set_id, reps=reps, weight=weight, notes=notes)
        views.print_success(f"{label} completed")

    if workout.status == WORKOUT_COMPLETED:
        views.print_success("Workout completed! Great job!")


def _record_next_set(engine: WorkoutEngine, workout: Workout, fail: bool) -> None:
    nxt = next_pending_set(workout)
    if nxt is None:
        views.print_info("No pending sets left.")
        return
    we, s = nxt
    _record_set(engine, workout, we.id, s.id, fail)


def _record_chosen_set(engine: WorkoutEngine, workout: Workout) -> None:
    if not workout.exercises:
        views.print_info("This workout has no exercises.")
        return
    ex_num = _ask_int("  Exercise #", 1)
    if ex_num is None or not 1 <= ex_num <= len(workout.exercises):
        views.print_error(f"Enter a number between 1 and {len(workout.exercises)}")
        return
    we = workout.exercises[ex_num - 1]
    set_num = _ask_int("  Set #", 1)
    if set_num is None or not 1 <= set_num <= len(we.sets):
        views.print_error(f"Enter a number between 1 and {len(we.sets)}")
        return
    fail = _ask("  [c]omplete or [f]ail? [c]: ", "c").lower().startswith("f")
    _record_set(engine, workout, we.id, we.sets[set_num - 1].id, fail)


def _remove_exercise(engine: WorkoutEngine, workout: Workout) -> None:
    if not workout.exercises:
        views.print_info("This workout has no exercises.")
        return
    ex_num = _ask_int("  Remove exercise #", len(workout.exercises))
    if ex_num is None or not 1 <= ex_num <= len(workout.exercises):
        views.print_error(f"Enter a number between 1 and {len(workout.exercises)}")
        return
    we = workout.exercises[ex_num - 1]
    if views.confirm_action(f"  Remove {we.exercise.name}?"):
        engine.remove_exercise(workout, we.id)
        views.print_success(f"{we.exercise.name} removed")
    else:
        views.print_info("Cancelled.")


def _switch_workout(store: WorkoutStore) -> None:
    workouts = store.list()
    views.console.print(views.format_workout_list(workouts, store.stats()))
    num = _ask_int("  Switch to #", 1)
    if num is None or not 1 <= num <= len(workouts):
        views.print_error(f"Enter a number between 1 and {len(workouts)}")
        return
    selected = store.select(workouts[num - 1].id)
    views.print_info(f"Switched to '{selected.name}'")


def _delete_workout(store: WorkoutStore, workout: Workout) -> None:
    """Delete the current workout; the newest remaining one becomes current."""
    if not views.confirm_action(f"  Delete '{workout.name}'?"):
        views.print_info("Cancelled.")
        return
    store.delete(workout.id)
    views.print_success(f"'{workout.name}' deleted")
    remaining = store.list()
    if remaining:
        store.select(remaining[0].id)


def run_session_loop(engine: WorkoutEngine, store: WorkoutStore) -> None:
    """
    Drive the current workout of ``store`` from console input until quit.

    Engine errors are reported and the loop continues.
    """
    while True:
        workout = store.current
        if workout is None:
            views.print_info("No workout selected.")
            return

        views.console.print()
        views.print_workout(workout, engine.progress(workout))
        views.console.print()
        for key, desc in _MENU.items():
            views.console.print(f"  \\[{key}] {desc}")
        # Enter / EOF records the next set while one is pending, otherwise quits.
        default = "c" if workout.status != WORKOUT_COMPLETED and next_pending_set(workout) is not None else "0"
        choice = _ask(f"Choose \\[{default}]: ", default).lower()

        if choice in ("0", "q"):
            return

        try:
            if choice == "s":
                store.replace(engine.start(workout))
                views.print_success("Workout started!")
            elif choice == "p":
                store.replace(engine.pause(workout))
                views.print_info("Workout paused")
            elif choice == "r":
                store.replace(engine.resume(workout))
                views.print_info("Workout resumed")
            elif choice == "c":
                _record_next_set(engine, workout, fail=False)
            elif choice == "f":
                _record_next_set(engine, workout, fail=True)
            elif choice == "x":
                _record_chosen_set(engine, workout)
            elif choice == "a":
                exercise = _pick_exercise(engine)
                if exercise is not None:
                    store.replace(engine.add_exercise(workout, exercise, _ask_sets_config()))
                    views.print_success(f"{exercise.name} added to workout")
            elif choice == "d":
                _remove_exercise(engine, workout)
            elif choice == "u":
                copy = store.add(engine.duplicate(workout))
                views.print_success(f"Duplicated as '{copy.name}' (now selected)")
            elif choice == "l":
                views.console.print(views.format_workout_list(store.list(), store.stats()))
            elif choice == "v":
                _switch_workout(store)
            elif choice == "k":
                _delete_workout(store, workout)
            elif choice == "w":
                continue
            else:
                views.print_error(f"Unknown choice: {choice}")
        except WorkoutEngineError as e:
            views.print_error(str(e))


@app.command("session")
def session(
    template: Annotated[
        Optional[str],
        typer.Option("--template", "-t", help="Template ID to generate from (omit for a custom workout)"),
    ] = None,
    name: Annotated[
        Optional[str],
        typer.Option("--name", "-n", help="Workout name"),
    ] = None,
    seed: SeedOption = None,
) -> None:
    """
    Build a workout and track it set by set.

    With --template the workout is generated from that template; otherwise
    you pick exercises from the catalog.
    """
    engine = get_engine(seed)
    store = WorkoutStore()

    try:
        if template:
            workout = engine.generate_from_template(template, TemplateOverrides(name=name))
        else:
            workout = _build_custom_workout(engine, name)
    except (TemplateNotFoundError, ValidationError) as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    store.add(workout)
    views.print_success(f"Workout created: {workout.name}")
    run_session_loop(engine, store)
