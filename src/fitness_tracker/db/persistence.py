"""Versioned encoding of stored workouts, locations and plans.

The workout store is a JSON envelope::

    {"schemaVersion": 2, "workouts": [...]}

Older files may be a bare list of legacy workout records, which carried the
planned exercises instead of per-set logs. Those are converted on read and
reported as migrated so the caller re-saves them in the current shape.
"""

import json
import logging
from collections.abc import Callable
from dataclasses import dataclass

from ..models.plan import PlannedExercise, WorkoutPlan
from ..models.workout import Location, Workout, WorkoutExercise, parse_timestamp

logger = logging.getLogger(__name__)

CURRENT_SCHEMA_VERSION = 2


class DecodeError(ValueError):
    """Stored data is not in any recognised shape."""


@dataclass
class DecodedWorkouts:
    """Result of decoding the workout store."""

    workouts: list[Workout]
    migrated: bool


def _upgrade_v1(store: dict) -> dict:
    # Version 1 and 2 envelopes share the same record shape.
    return {**store, "schemaVersion": 2}


# Maps a schema version to the function that upgrades a store from that
# version to the next one. Every version bump needs an entry here.
UPGRADES: dict[int, Callable[[dict], dict]] = {
    1: _upgrade_v1,
}


def upgrade_store(store: dict) -> dict:
    """Run registered upgrades until the store reaches the current version."""
    version = store["schemaVersion"]
    while version < CURRENT_SCHEMA_VERSION:
        upgrade = UPGRADES.get(version)
        if upgrade is None:
            raise DecodeError(f"No upgrade registered for schema version {version}")
        store = upgrade(store)
        version = store["schemaVersion"]
    return store


def encode_workouts(workouts: list[Workout]) -> bytes:
    """Serialize workouts into the current envelope."""
    store = {
        "schemaVersion": CURRENT_SCHEMA_VERSION,
        "workouts": [w.to_dict() for w in workouts],
    }
    return json.dumps(store, sort_keys=True).encode("utf-8")


def decode_workouts(data: bytes) -> DecodedWorkouts:
    """Decode the workout store, converting legacy data if needed.

    Raises:
        DecodeError: If the data is neither a current envelope nor a legacy
            workout list.
    """
    payload = _load_json(data)

    try:
        return _decode_envelope(payload)
    except (KeyError, TypeError, ValueError) as e:
        envelope_error = e

    try:
        workouts = [_legacy_to_workout(record) for record in payload]
    except (KeyError, TypeError, ValueError) as e:
        raise DecodeError(
            f"Unrecognised workout data (envelope: {envelope_error}; legacy: {e})"
        ) from e

    logger.info("Converted %d legacy workouts", len(workouts))
    return DecodedWorkouts(workouts=workouts, migrated=True)


def _load_json(data: bytes):
    try:
        return json.loads(data)
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise DecodeError(f"Stored data is not valid JSON: {e}") from e


def _decode_envelope(payload) -> DecodedWorkouts:
    if not isinstance(payload, dict):
        raise TypeError("Envelope must be an object")

    version = payload["schemaVersion"]
    if not isinstance(version, int) or isinstance(version, bool):
        raise TypeError(f"Invalid schema version: {version!r}")

    migrated = version < CURRENT_SCHEMA_VERSION
    if version > CURRENT_SCHEMA_VERSION:
        logger.warning(
            "Workout store has schema version %d, newer than %d; reading as-is",
            version,
            CURRENT_SCHEMA_VERSION,
        )
    else:
        payload = upgrade_store(payload)

    workouts = [Workout.from_dict(w) for w in payload["workouts"]]
    return DecodedWorkouts(workouts=workouts, migrated=migrated)


def _legacy_to_workout(record: dict) -> Workout:
    """Convert a legacy (plan-shaped) workout record."""
    workout_id = record["id"]
    planned = [PlannedExercise.from_dict(ex) for ex in record["exercises"]]
    location = record.get("location")

    logs = [
        WorkoutExercise(
            workout_id=workout_id,
            exercise=p.exercise,
            order=index,
            target_sets=p.target_sets,
            target_reps=p.target_reps,
            target_rest=p.rest_duration,
            notes=p.notes,
            sets=[],
        )
        for index, p in enumerate(planned)
    ]

    return Workout(
        id=workout_id,
        name=record["name"],
        started_at=parse_timestamp(record.get("startTime")),
        ended_at=parse_timestamp(record.get("endTime")),
        location=Location.from_dict(location) if location else None,
        notes=record.get("notes"),
        exercise_logs=logs,
    )


def encode_locations(locations: list[Location]) -> bytes:
    """Serialize saved locations as a bare list."""
    return json.dumps([loc.to_dict() for loc in locations], sort_keys=True).encode("utf-8")


def decode_locations(data: bytes) -> list[Location]:
    """Decode saved locations."""
    payload = _load_json(data)
    if not isinstance(payload, list):
        raise DecodeError("Location store must be a list")
    try:
        return [Location.from_dict(item) for item in payload]
    except (KeyError, TypeError, ValueError) as e:
        raise DecodeError(f"Invalid location record: {e}") from e


def encode_plans(plans: list[WorkoutPlan]) -> bytes:
    """Serialize user-created plans as a bare list."""
    return json.dumps([plan.to_dict() for plan in plans], sort_keys=True).encode("utf-8")


def decode_plans(data: bytes) -> list[WorkoutPlan]:
    """Decode user-created plans."""
    payload = _load_json(data)
    if not isinstance(payload, list):
        raise DecodeError("Plan store must be a list")
    try:
        return [WorkoutPlan.from_dict(item) for item in payload]
    except (KeyError, TypeError, ValueError) as e:
        raise DecodeError(f"Invalid plan record: {e}") from e
