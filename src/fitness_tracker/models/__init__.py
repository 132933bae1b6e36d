"""Data models for fitness-tracker."""

from .exercises import Difficulty, Equipment, Exercise, MuscleGroup
from .plan import PlannedExercise, WorkoutPlan
from .workout import Coordinate, ExerciseSet, Location, Workout, WorkoutExercise

__all__ = [
    "Coordinate",
    "Difficulty",
    "Equipment",
    "Exercise",
    "ExerciseSet",
    "Location",
    "MuscleGroup",
    "PlannedExercise",
    "Workout",
    "WorkoutExercise",
    "WorkoutPlan",
]
