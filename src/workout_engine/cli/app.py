"""Shared Typer app object, shared option types, and engine factory."""

import random
from typing import Annotated, Optional

import typer

from ..core.engine.service import WorkoutEngine

# Shared --seed option: a fixed seed makes template matching repeatable
SeedOption = Annotated[
    Optional[int],
    typer.Option("--seed", "-s", help="Random seed for exercise selection (repeatable workouts)"),
]

JsonOption = Annotated[
    bool,
    typer.Option("--json", "-j", help="Output as JSON for machine processing"),
]

app = typer.Typer(
    name="workout-engine",
    help="Generate gym workouts from templates and track a session set by set.",
    no_args_is_help=False,
    invoke_without_command=True,
)


def get_engine(seed: int | None = None) -> WorkoutEngine:
    """Build an engine over the bundled catalog and templates."""
    rng = random.Random(seed) if seed is not None else None
    return WorkoutEngine(rng=rng)
