"""Engine wiring: configuration loading and the WorkoutEngine service."""
