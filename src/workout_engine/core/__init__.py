"""Core workout engine: models, matching, assembly, session and metrics."""
