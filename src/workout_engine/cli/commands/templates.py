"""Template commands: templates, template, generate."""

import json
from typing import Annotated, Optional

import typer

from ...core.errors import TemplateNotFoundError
from ...core.filters import filter_templates_by_category
from ...core.metrics import workout_progress
from ...core.models import TemplateOverrides
from ...io.serializers import progress_to_dict, workout_to_dict
from .. import views
from ..app import JsonOption, SeedOption, app, get_engine


@app.command("templates")
def list_templates(
    category: Annotated[
        Optional[str],
        typer.Option("--category", "-c", help="Only templates in this category, e.g. 'Body Parts'"),
    ] = None,
) -> None:
    """
    List the bundled workout templates.
    """
    engine = get_engine()
    templates = filter_templates_by_category(engine.templates, category or "")
    if not templates:
        views.print_warning(f"No templates in category '{category}'.")
        return
    views.console.print(views.format_template_table(templates))


@app.command("template")
def show_template(
    template_id: Annotated[str, typer.Argument(help="Template ID, e.g. push-1")],
) -> None:
    """
    Show the exercise requirements of one template.
    """
    engine = get_engine()
    try:
        template = engine.get_template(template_id)
    except TemplateNotFoundError as e:
        views.print_error(str(e))
        raise typer.Exit(1)
    views.console.print(views.format_requirements_table(template))


@app.command("generate")
def generate(
    template_id: Annotated[str, typer.Argument(help="Template ID, e.g. push-1")],
    name: Annotated[
        Optional[str],
        typer.Option("--name", "-n", help="Name for the generated workout"),
    ] = None,
    seed: SeedOption = None,
    json_out: JsonOption = False,
) -> None:
    """
    Generate a draft workout from a template.
    """
    engine = get_engine(seed)
    try:
        workout = engine.generate_from_template(template_id, TemplateOverrides(name=name))
    except TemplateNotFoundError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    progress = workout_progress(workout)
    if json_out:
        data = workout_to_dict(workout)
        data["progress"] = progress_to_dict(progress)
        print(json.dumps(data, indent=2))
        return

    views.print_workout(workout, progress)
    template = engine.get_template(template_id)
    if len(workout.exercises) < template.total_exercises:
        views.print_warning(
            f"Only {len(workout.exercises)} of {template.total_exercises} exercises "
            "could be matched from the catalog."
        )
