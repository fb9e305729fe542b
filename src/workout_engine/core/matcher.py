"""
Template matcher: select concrete catalog exercises for a template requirement.

An exercise qualifies for a requirement when
  1. its mechanic equals the requirement category (for "compound" and
     "isolation"), or its category field equals the requirement category
     (any other value, e.g. "cardio"); an empty category matches anything;
  2. at least one requirement muscle group is among its primary or
     secondary muscles.

From the qualifying pool, ``count`` exercises are drawn uniformly at random
without replacement.  A pool smaller than ``count`` is returned whole.
"""

from __future__ import annotations

import random
from collections.abc import Iterable, Sequence
from typing import Protocol, TypeVar

from .config import MECHANIC_CATEGORIES
from .models import Exercise, ExerciseRequirement

T = TypeVar("T")


class RandomSource(Protocol):
    """Anything with ``sample``; ``random.Random`` and the ``random`` module qualify."""

    def sample(self, population: Sequence[T], k: int) -> list[T]: ...


def matches_category(exercise: Exercise, category: str | None) -> bool:
    """True if the exercise satisfies the requirement category."""
    if not category:
        return True
    if category in MECHANIC_CATEGORIES:
        return exercise.mechanic == category
    return exercise.category == category


def targets_muscles(exercise: Exercise, muscle_groups: Iterable[str]) -> bool:
    """True if any of ``muscle_groups`` is a primary or secondary muscle."""
    muscles = exercise.muscles
    return any(m in muscles for m in muscle_groups)


def exercise_matches_requirement(exercise: Exercise, requirement: ExerciseRequirement) -> bool:
    """Selection predicate for one exercise against one requirement."""
    return matches_category(exercise, requirement.category) and targets_muscles(
        exercise, requirement.muscle_groups
    )


def find_exercises_for_requirement(
    requirement: ExerciseRequirement,
    catalog: Iterable[Exercise],
) -> list[Exercise]:
    """Return the qualifying pool, in catalog order."""
    return [ex for ex in catalog if exercise_matches_requirement(ex, requirement)]


def select_from_pool(
    pool: Sequence[Exercise],
    count: int,
    rng: RandomSource | None = None,
) -> list[Exercise]:
    """
    Draw ``count`` exercises uniformly without replacement.

    Args:
        pool: Qualifying exercises
        count: Number requested
        rng: Random source; defaults to the ``random`` module

    Returns:
        ``min(count, len(pool))`` distinct exercises
    """
    if count <= 0 or not pool:
        return []
    source: RandomSource = rng if rng is not None else random  # type: ignore[assignment]
    return list(source.sample(list(pool), min(count, len(pool))))


def match(
    requirement: ExerciseRequirement,
    catalog: Iterable[Exercise],
    rng: RandomSource | None = None,
) -> list[Exercise]:
    """
    Select exercises from ``catalog`` that fulfil ``requirement``.

    Partial fulfilment is not an error: when fewer than ``requirement.count``
    exercises qualify, all of them are returned.

    Args:
        requirement: Category, muscle groups and count to satisfy
        catalog: Exercises to choose from
        rng: Injectable random source for repeatable selection

    Returns:
        Selected exercises
    """
    pool = find_exercises_for_requirement(requirement, catalog)
    return select_from_pool(pool, requirement.count, rng)
