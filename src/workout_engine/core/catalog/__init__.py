"""
Exercise catalog accessor and template seed data.

The catalog is read-only: the engine looks exercises up and searches them,
but never adds, edits, or removes records.
"""

from .registry import ExerciseCatalog, default_catalog, default_templates, get_template

__all__ = [
    "ExerciseCatalog",
    "default_catalog",
    "default_templates",
    "get_template",
]
