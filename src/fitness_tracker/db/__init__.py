"""Database layer for fitness-tracker."""

from .engine import get_data_dir, get_db_path, init_db
from .persistence import (
    CURRENT_SCHEMA_VERSION,
    DecodeError,
    DecodedWorkouts,
    decode_workouts,
    encode_workouts,
)
from .repositories import LocationRepository, PlanRepository, WorkoutRepository

__all__ = [
    "CURRENT_SCHEMA_VERSION",
    "DecodeError",
    "DecodedWorkouts",
    "decode_workouts",
    "encode_workouts",
    "get_data_dir",
    "get_db_path",
    "init_db",
    "LocationRepository",
    "PlanRepository",
    "WorkoutRepository",
]
