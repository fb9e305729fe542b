"""
CLI entry point using Typer.

Provides commands for building and running workouts:
- templates: List workout templates
- template: Show one template's exercise requirements
- exercises: Search the exercise catalog
- generate: Generate a draft workout from a template
- session: Build a workout and track it set by set
"""

import typer

from . import views
from .app import app
from .commands.catalog import list_exercises
from .commands.session import session as session_command
from .commands.templates import list_templates


@app.callback(invoke_without_command=True)
def main_callback(ctx: typer.Context) -> None:
    """
    Gym workout engine. Run without a command for interactive mode.
    """
    if ctx.invoked_subcommand is not None:
        return

    # -- Interactive main menu --
    views.console.print()
    views.console.print("[bold cyan]workout-engine[/bold cyan]  gym workout builder and tracker")
    views.console.print()

    menu = {
        "1": ("session-template", "Start a workout from a template"),
        "2": ("session-custom",   "Build a custom workout"),
        "3": ("templates",        "List templates"),
        "4": ("exercises",        "Browse the exercise catalog"),
        "0": ("quit",             "Quit"),
    }

    for key, (_, desc) in menu.items():
        views.console.print(f"  \\[{key}] {desc}")

    views.console.print()
    try:
        choice = views.console.input("Choose [1]: ").strip() or "1"
    except EOFError:
        choice = "0"

    if choice == "0":
        raise typer.Exit(0)

    cmd_map = {k: v[0] for k, v in menu.items()}
    chosen = cmd_map.get(choice)

    if chosen is None:
        views.print_error(f"Unknown choice: {choice}")
        raise typer.Exit(1)

    if chosen == "session-template":
        ctx.invoke(list_templates, category=None)
        try:
            template_id = views.console.input("Template ID [push-1]: ").strip() or "push-1"
        except EOFError:
            raise typer.Exit(0)
        ctx.invoke(session_command, template=template_id, name=None, seed=None)
    elif chosen == "session-custom":
        ctx.invoke(session_command, template=None, name=None, seed=None)
    elif chosen == "templates":
        ctx.invoke(list_templates, category=None)
    elif chosen == "exercises":
        ctx.invoke(
            list_exercises,
            search=None,
            muscle=None,
            equipment=None,
            level=None,
            category=None,
            limit=None,
            json_out=False,
        )


if __name__ == "__main__":
    app()
