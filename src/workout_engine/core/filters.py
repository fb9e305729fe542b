"""
Filtering and sorting for workout, exercise and template listings.

All functions are pure and total: they return new lists, never mutate their
input, and treat missing or None fields as an empty string (or, for
difficulty, as the middle rank) instead of raising.  Items may be model
dataclasses or plain mappings.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import datetime
from typing import Any, TypeVar

from .config import DEFAULT_DIFFICULTY_RANK, DIFFICULTY_RANK

T = TypeVar("T")

# Sort keys accepted by sort_workouts(); both spellings of the creation key work.
SORT_FIELDS: tuple[str, ...] = ("name", "createdAt", "created_at", "duration", "difficulty")


def _field(item: Any, name: str, default: Any = None) -> Any:
    """Read ``name`` from a mapping or an object, falling back to ``default``."""
    if isinstance(item, Mapping):
        value = item.get(name, default)
    else:
        value = getattr(item, name, default)
    return default if value is None else value


def _text(item: Any, name: str) -> str:
    value = _field(item, name, "")
    return value if isinstance(value, str) else str(value)


def _strings(item: Any, name: str) -> list[str]:
    value = _field(item, name, ())
    if isinstance(value, str):
        return [value]
    try:
        return [str(v) for v in value]
    except TypeError:
        return []


def _contains(haystack: str, needle: str) -> bool:
    return needle in haystack.lower()


def _equals(item: Any, name: str, wanted: str | None) -> bool:
    """Equality filter; an empty ``wanted`` matches everything."""
    return not wanted or _text(item, name) == wanted


# =============================================================================
# WORKOUTS
# =============================================================================


def filter_workouts(
    workouts: Iterable[T],
    search: str = "",
    category: str = "",
    difficulty: str = "",
    status: str = "",
) -> list[T]:
    """
    Filter workouts by text search and equality filters, combined with AND.

    Args:
        workouts: Workouts to filter
        search: Case-insensitive substring of name or description
        category: Exact category, empty for any
        difficulty: Exact difficulty, empty for any
        status: Exact lifecycle status, empty for any

    Returns:
        Matching workouts in input order
    """
    needle = (search or "").strip().lower()
    result = []
    for w in workouts:
        if needle and not (
            _contains(_text(w, "name"), needle) or _contains(_text(w, "description"), needle)
        ):
            continue
        if not (
            _equals(w, "category", category)
            and _equals(w, "difficulty", difficulty)
            and _equals(w, "status", status)
        ):
            continue
        result.append(w)
    return result


def difficulty_rank(item: Any, field_name: str = "difficulty") -> int:
    """Rank beginner < intermediate < expert; anything else ranks as intermediate."""
    return DIFFICULTY_RANK.get(_text(item, field_name), DEFAULT_DIFFICULTY_RANK)


def _created_key(item: Any) -> float:
    value = _field(item, "created_at")
    if value is None:
        value = _field(item, "createdAt")
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value)
        except ValueError:
            return float("-inf")
    if isinstance(value, datetime):
        return value.timestamp()
    return float("-inf")


def _duration_key(item: Any) -> float:
    value = _field(item, "estimated_duration")
    if value is None:
        value = _field(item, "estimatedDuration", 0)
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


_SORT_KEYS = {
    "name": lambda w: _text(w, "name").lower(),
    "createdAt": _created_key,
    "created_at": _created_key,
    "duration": _duration_key,
    "difficulty": difficulty_rank,
}


def sort_workouts(workouts: Iterable[T], sort_by: str, order: str = "asc") -> list[T]:
    """
    Return workouts sorted by ``sort_by``.

    Keys: name (case-insensitive), createdAt (chronological), duration
    (estimated minutes), difficulty (fixed rank).  An unknown key leaves the
    order unchanged.  The sort is stable.

    Args:
        workouts: Workouts to sort
        sort_by: One of SORT_FIELDS
        order: "asc" or "desc"

    Returns:
        New sorted list
    """
    items = list(workouts)
    key = _SORT_KEYS.get(sort_by)
    if key is None:
        return items
    return sorted(items, key=key, reverse=(order == "desc"))


# =============================================================================
# EXERCISES
# =============================================================================


def search_exercises(
    exercises: Iterable[T],
    query: str = "",
    muscle_group: str = "",
    equipment: str = "",
    difficulty: str = "",
    category: str = "",
) -> list[T]:
    """
    Search catalog exercises.

    ``query`` is a case-insensitive substring of the name, any primary
    muscle, or the equipment.  ``muscle_group`` matches primary or secondary
    muscles; ``difficulty`` matches the exercise level.
    """
    needle = (query or "").strip().lower()
    result = []
    for ex in exercises:
        if needle and not (
            _contains(_text(ex, "name"), needle)
            or any(_contains(m, needle) for m in _strings(ex, "primary_muscles"))
            or _contains(_text(ex, "equipment"), needle)
        ):
            continue
        if muscle_group and muscle_group not in (
            _strings(ex, "primary_muscles") + _strings(ex, "secondary_muscles")
        ):
            continue
        if not (
            _equals(ex, "equipment", equipment)
            and _equals(ex, "level", difficulty)
            and _equals(ex, "category", category)
        ):
            continue
        result.append(ex)
    return result


# =============================================================================
# TEMPLATES
# =============================================================================


def filter_templates_by_category(templates: Iterable[T] | None, category: str = "") -> list[T]:
    """Templates in ``category``; all templates when the category is empty."""
    return [t for t in (templates or []) if _equals(t, "category", category)]


def total_template_exercises(template: Any) -> int:
    """Number of exercises a template asks for across its requirements."""
    requirements = _field(template, "exercise_requirements", None)
    if requirements is None:
        requirements = _field(template, "exercises", ())
    total = 0
    for req in requirements:
        try:
            total += int(_field(req, "count", 0))
        except (TypeError, ValueError):
            continue
    return total
