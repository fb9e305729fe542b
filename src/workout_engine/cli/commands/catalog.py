"""Catalog command: exercises."""

import json
from typing import Annotated, Optional

import typer

from ...core.errors import ValidationError
from ...core.filters import search_exercises
from ...io.serializers import exercise_to_dict, validate_positive
from .. import views
from ..app import JsonOption, app, get_engine


@app.command("exercises")
def list_exercises(
    search: Annotated[
        Optional[str],
        typer.Option("--search", "-q", help="Text in name, primary muscle, or equipment"),
    ] = None,
    muscle: Annotated[
        Optional[str],
        typer.Option("--muscle", "-m", help="Primary or secondary muscle, e.g. chest"),
    ] = None,
    equipment: Annotated[
        Optional[str],
        typer.Option("--equipment", help="Exact equipment, e.g. dumbbell"),
    ] = None,
    level: Annotated[
        Optional[str],
        typer.Option("--level", "-l", help="beginner, intermediate or expert"),
    ] = None,
    category: Annotated[
        Optional[str],
        typer.Option("--category", "-c", help="Exercise category, e.g. strength"),
    ] = None,
    limit: Annotated[
        Optional[int],
        typer.Option("--limit", help="Show at most this many results"),
    ] = None,
    json_out: JsonOption = False,
) -> None:
    """
    Search the exercise catalog.
    """
    engine = get_engine()
    try:
        if limit is not None:
            validate_positive(limit, "limit")
    except ValidationError as e:
        views.print_error(str(e))
        raise typer.Exit(1)

    found = search_exercises(
        engine.catalog,
        query=search or "",
        muscle_group=muscle or "",
        equipment=equipment or "",
        difficulty=level or "",
        category=category or "",
    )
    if limit:
        found = found[:limit]

    if json_out:
        print(json.dumps([exercise_to_dict(ex) for ex in found], indent=2))
        return

    if not found:
        views.print_warning("No exercises match those filters.")
        if muscle and muscle not in engine.catalog.muscle_groups():
            views.print_info(f"Known muscles: {', '.join(engine.catalog.muscle_groups())}")
        if equipment and equipment not in engine.catalog.equipment_types():
            views.print_info(f"Known equipment: {', '.join(engine.catalog.equipment_types())}")
        return
    views.console.print(views.format_exercise_table(found, title=f"Exercises ({len(found)})"))
