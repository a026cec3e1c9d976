"""Friction PM - projects and tasks with friction, blockers and decay."""

__version__ = "0.1.0"
