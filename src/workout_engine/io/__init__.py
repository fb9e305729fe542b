"""Serialization and text parsing."""
