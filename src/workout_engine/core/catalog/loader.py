"""
YAML → Exercise / WorkoutTemplate loader.

Loads the exercise catalog from ``data/exercises.yaml`` and the template
seed data from ``data/templates.yaml``, both bundled with the package.

User overrides: a ``~/.workout-engine/exercises.yaml`` file adds records to
the catalog; a user record with the same name as a bundled one replaces it.
Templates are versioned with the code and have no user override.

Usage (internal, called by registry.py):
    from .loader import load_exercises_from_yaml, load_templates_from_yaml
    exercises = load_exercises_from_yaml()
"""

from __future__ import annotations

import warnings
from pathlib import Path

import yaml

from ..engine.config_loader import get_user_config_dir
from ..models import Exercise, ExerciseRequirement, WorkoutTemplate

_REQUIRED_EXERCISE_FIELDS: frozenset[str] = frozenset(
    {
        "name",
        "primary_muscles",
        "equipment",
        "category",
        "level",
    }
)

_REQUIRED_REQUIREMENT_FIELDS: frozenset[str] = frozenset(
    {"category", "muscle_groups", "count", "priority"}
)

_REQUIRED_TEMPLATE_FIELDS: frozenset[str] = frozenset(
    {
        "id",
        "name",
        "category",
        "target_muscles",
        "estimated_duration",
        "difficulty",
        "exercises",
    }
)


def _string_list(value, field: str) -> list[str]:
    """Read a YAML list of strings; a single bare string counts as one item."""
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if not isinstance(value, (list, tuple)):
        raise ValueError(f"'{field}' must be a list of strings, got {type(value).__name__}")
    return [str(v) for v in value]


def exercise_from_dict(d: dict) -> Exercise:
    """Convert a raw dict (from YAML) to an Exercise.

    Raises ValueError if any required field is absent or invalid.
    """
    missing = _REQUIRED_EXERCISE_FIELDS - set(d)
    if missing:
        raise ValueError(f"Exercise missing fields: {sorted(missing)}")

    mechanic = d.get("mechanic")
    return Exercise(
        name=str(d["name"]),
        primary_muscles=frozenset(_string_list(d["primary_muscles"], "primary_muscles")),
        secondary_muscles=frozenset(_string_list(d.get("secondary_muscles"), "secondary_muscles")),
        equipment=str(d["equipment"] or ""),
        mechanic=str(mechanic) if mechanic else None,  # type: ignore[arg-type]
        category=str(d["category"]),
        level=str(d["level"]),  # type: ignore[arg-type]
        force=str(d["force"]) if d.get("force") else None,
        instructions=tuple(_string_list(d.get("instructions"), "instructions")),
    )


def requirement_from_dict(d: dict) -> ExerciseRequirement:
    """Convert a raw requirement dict to an ExerciseRequirement."""
    missing = _REQUIRED_REQUIREMENT_FIELDS - set(d)
    if missing:
        raise ValueError(f"ExerciseRequirement missing fields: {sorted(missing)}")
    return ExerciseRequirement(
        category=str(d["category"] or ""),
        muscle_groups=tuple(_string_list(d["muscle_groups"], "muscle_groups")),
        count=int(d["count"]),
        priority=str(d["priority"]),  # type: ignore[arg-type]
    )


def template_from_dict(d: dict) -> WorkoutTemplate:
    """Convert a raw template dict to a WorkoutTemplate.

    Raises ValueError if any required field is absent.
    """
    missing = _REQUIRED_TEMPLATE_FIELDS - set(d)
    if missing:
        raise ValueError(f"WorkoutTemplate missing fields: {sorted(missing)}")
    return WorkoutTemplate(
        id=str(d["id"]),
        name=str(d["name"]),
        category=str(d["category"]),
        description=str(d.get("description") or ""),
        target_muscles=tuple(_string_list(d["target_muscles"], "target_muscles")),
        estimated_duration=int(d["estimated_duration"]),
        difficulty=str(d["difficulty"]),  # type: ignore[arg-type]
        exercise_requirements=tuple(requirement_from_dict(r) for r in d["exercises"]),
    )


def _load_yaml_list(path: Path, key: str) -> list[dict]:
    """Read ``key`` from a YAML mapping file as a list of dicts."""
    with open(path, "r", encoding="utf-8") as fh:
        data = yaml.safe_load(fh)
    if not isinstance(data, dict):
        raise ValueError(f"{path.name}: expected a mapping with a '{key}' list")
    records = data.get(key) or []
    if not isinstance(records, list):
        raise ValueError(f"{path.name}: '{key}' must be a list")
    return [r for r in records if isinstance(r, dict)]


def get_bundled_data_dir() -> Path:
    """Return the bundled data/ directory."""
    # loader.py lives at src/workout_engine/core/catalog/loader.py
    # three levels up → src/workout_engine/
    return Path(__file__).parent.parent.parent / "data"


def _convert_all(records: list[dict], convert, what: str, source: str) -> list:
    """Convert each record, skipping (with a warning) the ones that fail."""
    result = []
    for i, raw in enumerate(records, 1):
        try:
            result.append(convert(raw))
        except (ValueError, TypeError) as exc:
            label = raw.get("name") or raw.get("id") or f"#{i}"
            warnings.warn(
                f"workout-engine: skipping {what} '{label}' in {source}: {exc}",
                stacklevel=3,
            )
    return result


def load_exercises_from_yaml(path: Path | None = None) -> list[Exercise]:
    """Return the exercise catalog in file order.

    Args:
        path: Catalog file; defaults to the bundled data/exercises.yaml plus
            the optional user file ~/.workout-engine/exercises.yaml

    Returns:
        List of Exercise records, unique by name (later records win)
    """
    src = path if path is not None else get_bundled_data_dir() / "exercises.yaml"
    records = _load_yaml_list(src, "exercises")
    by_name: dict[str, Exercise] = {
        ex.name: ex for ex in _convert_all(records, exercise_from_dict, "exercise", src.name)
    }
    if path is not None:
        return list(by_name.values())

    # An unreadable user file is ignored; the bundled catalog still loads.
    user = get_user_config_dir() / "exercises.yaml"
    if user.exists():
        try:
            records = _load_yaml_list(user, "exercises")
        except (OSError, yaml.YAMLError, ValueError) as exc:
            warnings.warn(f"workout-engine: ignoring {user} ({exc})", stacklevel=2)
            records = []
        for ex in _convert_all(records, exercise_from_dict, "exercise", user.name):
            by_name[ex.name] = ex
    return list(by_name.values())


def load_templates_from_yaml(path: Path | None = None) -> list[WorkoutTemplate]:
    """Return workout templates in file order from data/templates.yaml (or ``path``)."""
    src = path if path is not None else get_bundled_data_dir() / "templates.yaml"
    records = _load_yaml_list(src, "templates")
    return _convert_all(records, template_from_dict, "template", src.name)
