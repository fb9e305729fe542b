"""
In-memory workout store owned by the caller.

Holds the workouts of one session (one user, one process) plus the id of
the workout currently being viewed.  Nothing is persisted.  The engine never
reaches into a store; callers pass workouts from it to engine functions and
put the results back.
"""

from __future__ import annotations

from .errors import NotFoundError
from .filters import filter_workouts, sort_workouts
from .metrics import WorkoutStats, workout_stats
from .models import Workout


class WorkoutStore:
    """
    Ordered collection of workouts, newest first.

    Not thread-safe: a single actor drives each workout.
    """

    def __init__(self) -> None:
        self._workouts: list[Workout] = []
        self._current_id: str | None = None

    def __len__(self) -> int:
        return len(self._workouts)

    def __contains__(self, workout_id: object) -> bool:
        return any(w.id == workout_id for w in self._workouts)

    def add(self, workout: Workout, select: bool = True) -> Workout:
        """Insert a workout at the front and (by default) make it current."""
        self._workouts.insert(0, workout)
        if select:
            self._current_id = workout.id
        return workout

    def get(self, workout_id: str) -> Workout:
        """
        Return the workout with the given id.

        Raises:
            NotFoundError: If no workout has that id
        """
        for w in self._workouts:
            if w.id == workout_id:
                return w
        raise NotFoundError(f"Unknown workout '{workout_id}'")

    def replace(self, workout: Workout) -> Workout:
        """Swap in a new value for an existing workout id."""
        for i, w in enumerate(self._workouts):
            if w.id == workout.id:
                self._workouts[i] = workout
                return workout
        raise NotFoundError(f"Unknown workout '{workout.id}'")

    def delete(self, workout_id: str) -> Workout:
        """Remove and return a workout; clears the selection if it was current."""
        w = self.get(workout_id)
        self._workouts.remove(w)
        if self._current_id == workout_id:
            self._current_id = None
        return w

    @property
    def current(self) -> Workout | None:
        """The selected workout, if any."""
        if self._current_id is None:
            return None
        return self.get(self._current_id)

    def select(self, workout_id: str | None) -> Workout | None:
        """Make ``workout_id`` current (None clears the selection)."""
        if workout_id is None:
            self._current_id = None
            return None
        w = self.get(workout_id)
        self._current_id = w.id
        return w

    def all(self) -> list[Workout]:
        """All workouts, newest first."""
        return list(self._workouts)

    def list(
        self,
        search: str = "",
        category: str = "",
        difficulty: str = "",
        status: str = "",
        sort_by: str = "createdAt",
        order: str = "desc",
    ) -> list[Workout]:
        """Filtered and sorted view of the stored workouts."""
        filtered = filter_workouts(
            self._workouts,
            search=search,
            category=category,
            difficulty=difficulty,
            status=status,
        )
        return sort_workouts(filtered, sort_by, order)

    def stats(self) -> WorkoutStats:
        """Counts of stored workouts per status."""
        return workout_stats(self._workouts)
