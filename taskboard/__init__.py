"""Taskboard: users and tasks API with a MongoDB store and a fallback mode."""

__version__ = "1.0.0"
