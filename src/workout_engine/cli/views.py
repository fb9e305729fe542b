"""
CLI view formatters using Rich for pretty console output.

Handles table formatting and display of templates, exercises, workouts and
session progress.  The engine never prints; all user-facing messages go
through the helpers at the bottom of this module.
"""

from rich.console import Console
from rich.table import Table

from ..core.filters import total_template_exercises
from ..core.metrics import WorkoutStats, exercise_stats
from ..core.models import Exercise, ProgressSnapshot, Workout, WorkoutTemplate
from ..core.session import elapsed_seconds

console = Console()

_STATUS_STYLE = {
    "draft": "dim",
    "in_progress": "cyan",
    "paused": "yellow",
    "completed": "green",
    "pending": "dim",
    "failed": "red",
}


def _styled_status(status: str) -> str:
    style = _STATUS_STYLE.get(status, "")
    return f"[{style}]{status}[/{style}]" if style else status


def _fmt_weight(weight: float) -> str:
    return f"{weight:g} kg" if weight > 0 else "-"


def _fmt_duration(seconds: int | None) -> str:
    if seconds is None:
        return "-"
    minutes, secs = divmod(seconds, 60)
    return f"{minutes}:{secs:02d}"


def format_template_table(templates: list[WorkoutTemplate]) -> Table:
    """
    Create a Rich table listing workout templates.

    Args:
        templates: Templates to display

    Returns:
        Rich Table object
    """
    table = Table(title="Workout Templates")

    table.add_column("ID", style="cyan")
    table.add_column("Name", style="bold")
    table.add_column("Category", style="magenta")
    table.add_column("Muscles")
    table.add_column("Min", justify="right")
    table.add_column("Level")
    table.add_column("Exercises", justify="right")

    for t in templates:
        table.add_row(
            t.id,
            t.name,
            t.category,
            ", ".join(t.target_muscles),
            str(t.estimated_duration),
            t.difficulty,
            str(total_template_exercises(t)),
        )

    return table


def format_requirements_table(template: WorkoutTemplate) -> Table:
    """Create a Rich table of a template's exercise requirements."""
    table = Table(title=template.name, caption=template.description or None)

    table.add_column("#", justify="right", style="dim", width=3)
    table.add_column("Category", style="magenta")
    table.add_column("Muscle groups")
    table.add_column("Count", justify="right")
    table.add_column("Priority")

    for i, req in enumerate(template.exercise_requirements, 1):
        table.add_row(
            str(i),
            req.category or "any",
            ", ".join(req.muscle_groups),
            str(req.count),
            req.priority,
        )

    return table


def format_exercise_table(exercises: list[Exercise], title: str = "Exercises") -> Table:
    """Create a Rich table of catalog exercises."""
    table = Table(title=title)

    table.add_column("#", justify="right", style="dim", width=3)
    table.add_column("Name", style="bold")
    table.add_column("Primary", style="green")
    table.add_column("Secondary", style="dim")
    table.add_column("Equipment")
    table.add_column("Mechanic", style="magenta")
    table.add_column("Level")

    for i, ex in enumerate(exercises, 1):
        table.add_row(
            str(i),
            ex.name,
            ", ".join(sorted(ex.primary_muscles)),
            ", ".join(sorted(ex.secondary_muscles)),
            ex.equipment,
            ex.mechanic or "-",
            ex.level,
        )

    return table


def format_workout_table(workout: Workout) -> Table:
    """
    Create a Rich table with one row per set of a workout.

    Args:
        workout: Workout to display

    Returns:
        Rich Table object
    """
    table = Table(title=f"{workout.name}  [{_styled_status(workout.status)}]")

    table.add_column("Ex", justify="right", style="dim", width=3)
    table.add_column("Exercise", style="bold")
    table.add_column("Prio")
    table.add_column("Set", justify="right")
    table.add_column("Target", justify="right")
    table.add_column("Done", justify="right")
    table.add_column("Weight", justify="right")
    table.add_column("Rest", justify="right")
    table.add_column("Status")
    table.add_column("Notes", style="dim")

    for ex_num, we in enumerate(workout.exercises, 1):
        for s in we.sets:
            first = s.set_number == 1
            table.add_row(
                str(ex_num) if first else "",
                we.exercise.name if first else "",
                we.priority if first else "",
                str(s.set_number),
                str(s.target_reps),
                str(s.actual_reps) if s.actual_reps is not None else "-",
                _fmt_weight(s.weight),
                f"{s.rest_seconds}s",
                _styled_status(s.status),
                s.notes,
            )

    return table


def format_progress(progress: ProgressSnapshot) -> str:
    """Format progress as a one-line summary with a bar."""
    width = 20
    filled = round(width * progress.percentage / 100)
    bar = "█" * filled + "░" * (width - filled)
    done = "  [green]done[/green]" if progress.is_completed else ""
    return (
        f"{bar} {progress.percentage}%  "
        f"({progress.completed_sets} / {progress.total_sets} sets completed){done}"
    )


def print_workout(workout: Workout, progress: ProgressSnapshot | None = None) -> None:
    """
    Print a workout with its sets and, optionally, its progress.

    Args:
        workout: Workout to display
        progress: Progress snapshot to print under the table
    """
    console.print(format_workout_table(workout))
    muscles = ", ".join(sorted(workout.target_muscles)) or "-"
    console.print(
        f"[dim]{workout.category} · {workout.difficulty} · "
        f"~{workout.estimated_duration} min · muscles: {muscles} · "
        f"elapsed {_fmt_duration(elapsed_seconds(workout))}[/dim]"
    )
    if workout.exercises:
        stats = exercise_stats(workout.exercises)
        by_muscle = ", ".join(f"{m} {n}" for m, n in sorted(stats.by_muscle_group.items()))
        by_equipment = ", ".join(f"{e or 'none'} {n}" for e, n in sorted(stats.by_equipment.items()))
        console.print(f"[dim]by muscle: {by_muscle} · by equipment: {by_equipment}[/dim]")
    if progress is not None:
        console.print(format_progress(progress))


def format_workout_list(workouts: list[Workout], stats: WorkoutStats) -> Table:
    """Create a Rich table summarising several workouts."""
    table = Table(
        title="Workouts",
        caption=(
            f"{stats.total} total · {stats.draft} draft · {stats.in_progress} in progress · "
            f"{stats.paused} paused · {stats.completed} completed ({stats.completion_rate}%)"
        ),
    )

    table.add_column("#", justify="right", style="dim", width=3)
    table.add_column("Name", style="bold")
    table.add_column("Category", style="magenta")
    table.add_column("Exercises", justify="right")
    table.add_column("Sets", justify="right")
    table.add_column("Status")
    table.add_column("Created", style="cyan")

    for i, w in enumerate(workouts, 1):
        table.add_row(
            str(i),
            w.name,
            w.category,
            str(len(w.exercises)),
            str(w.total_sets),
            _styled_status(w.status),
            w.created_at.strftime("%Y-%m-%d %H:%M"),
        )

    return table


def print_success(message: str) -> None:
    """Print a success message."""
    console.print(f"[green]{message}[/green]")


def print_error(message: str) -> None:
    """Print an error message."""
    console.print(f"[red]Error: {message}[/red]")


def print_warning(message: str) -> None:
    """Print a warning message."""
    console.print(f"[yellow]Warning: {message}[/yellow]")


def print_info(message: str) -> None:
    """Print an info message."""
    console.print(f"[blue]{message}[/blue]")


def confirm_action(message: str) -> bool:
    """
    Prompt user for confirmation.

    Args:
        message: Confirmation message

    Returns:
        True if confirmed, False otherwise
    """
    try:
        response = console.input(f"{message} [y/N]: ")
    except EOFError:
        return False
    return response.strip().lower() in ("y", "yes")
