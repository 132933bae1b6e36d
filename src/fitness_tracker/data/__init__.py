"""Data loading utilities."""

from .exercise_loader import load_default_exercises, load_default_plans

__all__ = ["load_default_exercises", "load_default_plans"]
