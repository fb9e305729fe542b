"""
Exception types raised by the workout engine.

Every engine operation validates first and mutates second, so an exception
always means the workout passed in is unchanged.
"""


class WorkoutEngineError(Exception):
    """Base class for all engine errors."""

    pass


class ValidationError(WorkoutEngineError):
    """
    Raised when caller-supplied data is rejected.

    ``errors`` maps the offending field name to a human-readable message,
    e.g. ``{"name": "Workout name is required"}``.
    """

    def __init__(self, message: str, errors: dict[str, str] | None = None):
        super().__init__(message)
        self.errors: dict[str, str] = dict(errors or {})


class NotFoundError(WorkoutEngineError):
    """Raised when an exercise, set, or workout id does not resolve."""

    pass


class TemplateNotFoundError(NotFoundError):
    """Raised when a template id is not in the template registry."""

    def __init__(self, template_id: str, known: list[str] | None = None):
        msg = f"Unknown template '{template_id}'"
        if known:
            msg += f". Valid IDs: {', '.join(known)}"
        super().__init__(msg)
        self.template_id = template_id


class IllegalStateError(WorkoutEngineError):
    """Raised when a lifecycle transition is not allowed from the current status."""

    def __init__(self, action: str, status: str):
        super().__init__(f"Cannot {action} a workout that is {status}")
        self.action = action
        self.status = status
