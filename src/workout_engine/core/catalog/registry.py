"""
Exercise catalog and template registry.

ExerciseCatalog is a read-only, ordered view over exercise records supplied
wholesale by an external source.  default_catalog() and default_templates()
load the bundled YAML seed data on first use; get_template() looks up a
template by id.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence

from ..errors import NotFoundError, TemplateNotFoundError
from ..models import Exercise, WorkoutTemplate


class ExerciseCatalog:
    """
    Read-only lookup and search over a fixed list of exercises.

    Order is preserved from the source list; names are unique keys.
    """

    def __init__(self, exercises: Iterable[Exercise]):
        self._exercises: tuple[Exercise, ...] = tuple(exercises)
        self._by_name: dict[str, Exercise] = {ex.name: ex for ex in self._exercises}

    def __len__(self) -> int:
        return len(self._exercises)

    def __iter__(self) -> Iterator[Exercise]:
        return iter(self._exercises)

    def __contains__(self, name: object) -> bool:
        return name in self._by_name

    def all(self) -> list[Exercise]:
        """All exercises in catalog order."""
        return list(self._exercises)

    def get(self, name: str) -> Exercise:
        """
        Return the exercise with the given name.

        Raises:
            NotFoundError: If no exercise has that name
        """
        try:
            return self._by_name[name]
        except KeyError:
            raise NotFoundError(f"Unknown exercise '{name}'") from None

    def by_muscle_group(self, muscle: str, limit: int | None = None) -> list[Exercise]:
        """Exercises working ``muscle`` as a primary or secondary muscle."""
        found = [ex for ex in self._exercises if muscle in ex.muscles]
        return found[:limit] if limit else found

    def by_equipment(self, equipment: str) -> list[Exercise]:
        """Exercises using exactly the given equipment."""
        return [ex for ex in self._exercises if ex.equipment == equipment]

    def equipment_types(self) -> list[str]:
        """Distinct equipment values, sorted."""
        return sorted({ex.equipment for ex in self._exercises if ex.equipment})

    def muscle_groups(self) -> list[str]:
        """Distinct muscles (primary or secondary), sorted."""
        muscles: set[str] = set()
        for ex in self._exercises:
            muscles |= ex.muscles
        return sorted(muscles)


_DEFAULT_CATALOG: ExerciseCatalog | None = None
_DEFAULT_TEMPLATES: tuple[WorkoutTemplate, ...] | None = None


def default_catalog() -> ExerciseCatalog:
    """Return the bundled exercise catalog, loading it on first call."""
    global _DEFAULT_CATALOG
    if _DEFAULT_CATALOG is None:
        from .loader import load_exercises_from_yaml

        loaded = load_exercises_from_yaml()
        if not loaded:
            raise RuntimeError(
                "workout-engine: no exercises could be loaded. "
                "Check that src/workout_engine/data/exercises.yaml is present and valid."
            )
        _DEFAULT_CATALOG = ExerciseCatalog(loaded)
    return _DEFAULT_CATALOG


def default_templates() -> list[WorkoutTemplate]:
    """Return the bundled workout templates, loading them on first call."""
    global _DEFAULT_TEMPLATES
    if _DEFAULT_TEMPLATES is None:
        from .loader import load_templates_from_yaml

        _DEFAULT_TEMPLATES = tuple(load_templates_from_yaml())
    return list(_DEFAULT_TEMPLATES)


def get_template(
    template_id: str,
    templates: Sequence[WorkoutTemplate] | None = None,
) -> WorkoutTemplate:
    """
    Return the template with the given id.

    Args:
        template_id: Template id, e.g. "push-1"
        templates: Templates to search; defaults to the bundled seed data

    Returns:
        The matching WorkoutTemplate

    Raises:
        TemplateNotFoundError: If no template has that id
    """
    pool = default_templates() if templates is None else templates
    for t in pool:
        if t.id == template_id:
            return t
    raise TemplateNotFoundError(template_id, [t.id for t in pool])
