"""Utilities for exercise lookup, filtering and workout history."""

import re
from collections.abc import Iterable
from datetime import date, datetime
from difflib import SequenceMatcher

from ..models.exercises import Difficulty, Equipment, Exercise, MuscleGroup
from ..models.workout import Workout


def normalize_exercise_name(name: str) -> str:
    """Normalize an exercise name for comparison.

    Converts to lowercase, treats hyphens as spaces, removes extra whitespace,
    and expands common abbreviations.
    """
    normalized = name.lower().strip().replace("-", " ")
    normalized = re.sub(r"\s+", " ", normalized)

    abbreviations = {
        "bb": "barbell",
        "db": "dumbbell",
        "kb": "kettlebell",
        "ohp": "overhead press",
        "rdl": "romanian deadlift",
        "bss": "bulgarian split squat",
    }

    if normalized in abbreviations:
        return abbreviations[normalized]

    for abbrev, full in abbreviations.items():
        normalized = re.sub(rf"\b{abbrev}\b", full, normalized)

    return normalized


def find_exercise_by_name(
    exercises: list[Exercise],
    name: str,
    threshold: float = 0.8,
) -> Exercise | None:
    """Find the best matching exercise from the library.

    Args:
        exercises: List of exercises to search
        name: The exercise name to match
        threshold: Minimum similarity ratio (0-1) to accept a fuzzy match

    Returns:
        The best matching Exercise or None if no match above threshold
    """
    normalized_name = normalize_exercise_name(name)

    best_match: Exercise | None = None
    best_score = 0.0

    for exercise in exercises:
        candidate = normalize_exercise_name(exercise.name)
        if candidate == normalized_name:
            return exercise

        score = SequenceMatcher(None, normalized_name, candidate).ratio()
        if score > best_score:
            best_score = score
            best_match = exercise

    if best_score >= threshold:
        return best_match

    return None


def filter_exercises(
    exercises: Iterable[Exercise],
    search: str | None = None,
    muscle_group: MuscleGroup | None = None,
    equipment: Equipment | None = None,
    difficulty: Difficulty | None = None,
) -> list[Exercise]:
    """Filter the library the way the exercise browser does.

    ``search`` matches case-insensitively against name or description; each
    other criterion is ignored when None.
    """
    needle = search.casefold() if search else None
    result = []
    for exercise in exercises:
        if needle and needle not in exercise.name.casefold() and (
            needle not in exercise.description.casefold()
        ):
            continue
        if muscle_group is not None and exercise.muscle_group != muscle_group:
            continue
        if equipment is not None and exercise.equipment != equipment:
            continue
        if difficulty is not None and exercise.difficulty != difficulty:
            continue
        result.append(exercise)
    return result


def categorize_exercises_by_muscle_group(
    exercises: list[Exercise],
) -> dict[str, list[Exercise]]:
    """Group exercises by muscle group."""
    result: dict[str, list[Exercise]] = {group.value: [] for group in MuscleGroup}

    for exercise in exercises:
        result[exercise.muscle_group.value].append(exercise)

    return result


def exercise_history(workouts: list[Workout], exercise: Exercise) -> list[str] | None:
    """Summaries of the targets an exercise was logged with.

    Returns:
        One "N sets × M reps" line per logged occurrence with targets, or
        None if the exercise has no such history.
    """
    summaries = [
        f"{log.target_sets} sets × {log.target_reps} reps"
        for workout in workouts
        for log in workout.exercise_logs
        if log.exercise_id == exercise.id
        and log.target_sets is not None
        and log.target_reps is not None
    ]
    return summaries or None


def workouts_on(workouts: list[Workout], day: date) -> list[Workout]:
    """Workouts started on ``day``, most recent first."""
    matching = [w for w in workouts if w.started_at and w.started_at.date() == day]
    return sorted(matching, key=lambda w: w.started_at, reverse=True)


def count_workouts_this_week(workouts: list[Workout], now: datetime | None = None) -> int:
    """Workouts started in the same ISO week as ``now``."""
    now = now or datetime.now()
    week = now.isocalendar()[:2]
    return sum(1 for w in workouts if w.started_at and w.started_at.isocalendar()[:2] == week)


def count_workouts_this_month(workouts: list[Workout], now: datetime | None = None) -> int:
    """Workouts started in the same calendar month as ``now``."""
    now = now or datetime.now()
    return sum(
        1
        for w in workouts
        if w.started_at and (w.started_at.year, w.started_at.month) == (now.year, now.month)
    )
