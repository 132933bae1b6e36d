"""Built-in exercise library and plan catalog loader."""

import json
import logging
from pathlib import Path
from uuid import NAMESPACE_URL, uuid5

from ..models.exercises import Difficulty, Equipment, Exercise, MuscleGroup
from ..models.plan import PlannedExercise, WorkoutPlan

logger = logging.getLogger(__name__)

DATA_PATH = Path(__file__).parent


def _stable_id(kind: str, *parts: str) -> str:
    """Derive an id that stays the same across launches."""
    return str(uuid5(NAMESPACE_URL, "fitness-tracker:" + ":".join([kind, *parts]))).upper()


def get_exercises_json_path() -> Path:
    """Get the path to the built-in exercises JSON file."""
    return DATA_PATH / "default_exercises.json"


def get_plans_json_path() -> Path:
    """Get the path to the built-in plans JSON file."""
    return DATA_PATH / "default_plans.json"


def load_default_exercises() -> list[Exercise]:
    """Load the built-in exercise library.

    Exercise ids are derived from the exercise name, so workouts logged
    against a built-in exercise keep resolving after a restart.

    Returns:
        List of Exercise objects loaded from JSON
    """
    json_path = get_exercises_json_path()
    if not json_path.exists():
        return []

    with open(json_path) as f:
        data = json.load(f)

    exercises = []
    for ex_data in data.get("exercises", []):
        try:
            exercise = Exercise(
                id=_stable_id("exercise", ex_data["name"]),
                name=ex_data["name"],
                muscle_group=MuscleGroup(ex_data["muscleGroup"]),
                equipment=Equipment(ex_data["equipment"]),
                difficulty=Difficulty(ex_data["difficulty"]),
                description=ex_data.get("description", ""),
                image_url=ex_data.get("imageURL"),
                variations=ex_data.get("variations"),
            )
            exercises.append(exercise)
        except (ValueError, KeyError) as e:
            logger.warning(
                "Skipping invalid exercise %s: %s", ex_data.get("name", "unknown"), e
            )
            continue

    return exercises


def load_default_plans(exercises: list[Exercise]) -> list[WorkoutPlan]:
    """Load the built-in plan catalog against an exercise library.

    Args:
        exercises: Library used to resolve the exercise names in each plan

    Returns:
        List of WorkoutPlan objects. Planned exercises naming an exercise
        that is not in the library are dropped.
    """
    json_path = get_plans_json_path()
    if not json_path.exists():
        return []

    with open(json_path) as f:
        data = json.load(f)

    by_name = {exercise.name: exercise for exercise in exercises}
    plans = []
    for plan_data in data.get("plans", []):
        try:
            planned = []
            for name, target_sets, target_reps in plan_data["exercises"]:
                exercise = by_name.get(name)
                if exercise is None:
                    logger.warning(
                        "Plan %s references unknown exercise %s", plan_data["name"], name
                    )
                    continue
                planned.append(
                    PlannedExercise(
                        id=_stable_id("planned", plan_data["name"], name),
                        exercise=exercise,
                        target_sets=target_sets,
                        target_reps=target_reps,
                    )
                )

            plans.append(
                WorkoutPlan(
                    id=_stable_id("plan", plan_data["name"]),
                    name=plan_data["name"],
                    description=plan_data.get("description", ""),
                    duration=plan_data.get("duration", ""),
                    difficulty=Difficulty(plan_data["difficulty"]),
                    exercises=planned,
                )
            )
        except (ValueError, KeyError) as e:
            logger.warning(
                "Skipping invalid plan %s: %s", plan_data.get("name", "unknown"), e
            )
            continue

    return plans
