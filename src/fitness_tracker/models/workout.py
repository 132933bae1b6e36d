"""Workout log data models."""

from dataclasses import dataclass, field
from datetime import datetime, timedelta

from .exercises import Exercise, new_id

# Seconds between the Unix epoch and 2001-01-01 00:00:00 UTC, the reference
# date used for numeric timestamps in files written by the mobile app.
REFERENCE_DATE_OFFSET = 978307200.0


def parse_timestamp(value) -> datetime | None:
    """Parse a stored timestamp.

    Accepts ISO-8601 strings as well as numeric seconds since the 2001
    reference date. Aware values are converted to naive local time so they
    compare cleanly with ``datetime.now()``.
    """
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValueError(f"Invalid timestamp: {value!r}")
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(REFERENCE_DATE_OFFSET + value)
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def format_timestamp(value: datetime | None) -> str | None:
    """Format a timestamp for storage."""
    return value.isoformat() if value else None


@dataclass(frozen=True)
class Coordinate:
    """A geographic coordinate in decimal degrees."""

    latitude: float
    longitude: float

    def to_dict(self) -> dict:
        return {"latitude": self.latitude, "longitude": self.longitude}

    @classmethod
    def from_dict(cls, data: dict) -> "Coordinate":
        return cls(latitude=float(data["latitude"]), longitude=float(data["longitude"]))


@dataclass
class Location:
    """A saved training location."""

    name: str
    coordinate: Coordinate
    id: str = field(default_factory=new_id)

    def to_dict(self) -> dict:
        """Convert to dictionary for storage."""
        return {
            "id": self.id,
            "name": self.name,
            "coordinate": self.coordinate.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Location":
        """Create from dictionary."""
        return cls(
            id=data["id"],
            name=data["name"],
            coordinate=Coordinate.from_dict(data["coordinate"]),
        )


@dataclass
class ExerciseSet:
    """A single performed (or pending) set.

    Completion is tracked by ``completed_at`` alone; the ``completed`` flag
    is derived and only written out for readers of the older schema.
    """

    reps: int
    weight: float | None = None
    rpe: float | None = None  # Rate of perceived exertion
    set_index: int | None = None
    completed_at: datetime | None = None
    id: str = field(default_factory=new_id)

    @property
    def completed(self) -> bool:
        return self.completed_at is not None

    def mark_completed(self, at: datetime) -> None:
        self.completed_at = at

    def mark_incomplete(self) -> None:
        self.completed_at = None

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        data = {
            "id": self.id,
            "reps": self.reps,
            "completed": self.completed,
        }
        if self.set_index is not None:
            data["setIndex"] = self.set_index
        if self.weight is not None:
            data["weight"] = self.weight
        if self.rpe is not None:
            data["rpe"] = self.rpe
        if self.completed_at is not None:
            data["completedAt"] = format_timestamp(self.completed_at)
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "ExerciseSet":
        """Create from dictionary.

        A record whose ``completed`` flag disagrees with ``completedAt`` is
        read as not completed.
        """
        completed_at = parse_timestamp(data.get("completedAt"))
        if data.get("completed") is False:
            completed_at = None

        set_index = data.get("setIndex")
        weight = data.get("weight")
        rpe = data.get("rpe")
        return cls(
            id=data["id"],
            set_index=int(set_index) if set_index is not None else None,
            reps=int(data["reps"]),
            weight=float(weight) if weight is not None else None,
            rpe=float(rpe) if rpe is not None else None,
            completed_at=completed_at,
        )


@dataclass
class WorkoutExercise:
    """An exercise as performed within one workout."""

    exercise: Exercise
    workout_id: str = field(default_factory=new_id)
    order: int = 0
    target_sets: int | None = None
    target_reps: int | None = None
    target_weight: float | None = None
    target_rest: float | None = None  # seconds
    notes: str | None = None
    sets: list[ExerciseSet] = field(default_factory=list)
    id: str = field(default_factory=new_id)
    exercise_id: str = ""

    def __post_init__(self):
        if not self.exercise_id:
            self.exercise_id = self.exercise.id

    @property
    def completed_set_count(self) -> int:
        return sum(1 for s in self.sets if s.completed)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        data = {
            "id": self.id,
            "workoutId": self.workout_id,
            "exerciseId": self.exercise_id,
            "exercise": self.exercise.to_dict(),
            "order": self.order,
            "sets": [s.to_dict() for s in self.sets],
        }
        optional = {
            "targetSets": self.target_sets,
            "targetReps": self.target_reps,
            "targetWeight": self.target_weight,
            "targetRest": self.target_rest,
            "notes": self.notes,
        }
        data.update({k: v for k, v in optional.items() if v is not None})
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "WorkoutExercise":
        """Create from dictionary."""
        exercise = Exercise.from_dict(data["exercise"])
        target_weight = data.get("targetWeight")
        target_rest = data.get("targetRest")
        return cls(
            id=data["id"],
            workout_id=data["workoutId"],
            exercise_id=data.get("exerciseId") or exercise.id,
            exercise=exercise,
            order=int(data.get("order", 0)),
            target_sets=data.get("targetSets"),
            target_reps=data.get("targetReps"),
            target_weight=float(target_weight) if target_weight is not None else None,
            target_rest=float(target_rest) if target_rest is not None else None,
            notes=data.get("notes"),
            sets=[ExerciseSet.from_dict(s) for s in data.get("sets", [])],
        )


@dataclass
class Workout:
    """A workout, either in progress or logged in history."""

    name: str
    started_at: datetime | None = None
    ended_at: datetime | None = None
    location: Location | None = None
    notes: str | None = None
    exercise_logs: list[WorkoutExercise] = field(default_factory=list)
    id: str = field(default_factory=new_id)

    @property
    def duration(self) -> timedelta | None:
        """Elapsed time between start and end, when both are known."""
        if self.started_at is None or self.ended_at is None:
            return None
        return self.ended_at - self.started_at

    @property
    def completed_set_count(self) -> int:
        return sum(log.completed_set_count for log in self.exercise_logs)

    @property
    def total_volume(self) -> float:
        """Sum of reps x weight over completed, weighted sets."""
        return sum(
            s.reps * s.weight
            for log in self.exercise_logs
            for s in log.sets
            if s.completed and s.weight is not None
        )

    def to_dict(self) -> dict:
        """Convert to dictionary for storage."""
        data = {
            "id": self.id,
            "name": self.name,
            "exerciseLogs": [log.to_dict() for log in self.exercise_logs],
        }
        if self.started_at is not None:
            data["startedAt"] = format_timestamp(self.started_at)
        if self.ended_at is not None:
            data["endedAt"] = format_timestamp(self.ended_at)
        if self.location is not None:
            data["location"] = self.location.to_dict()
        if self.notes is not None:
            data["notes"] = self.notes
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "Workout":
        """Create from dictionary."""
        location = data.get("location")
        return cls(
            id=data["id"],
            name=data["name"],
            started_at=parse_timestamp(data.get("startedAt")),
            ended_at=parse_timestamp(data.get("endedAt")),
            location=Location.from_dict(location) if location else None,
            notes=data.get("notes"),
            exercise_logs=[WorkoutExercise.from_dict(log) for log in data["exerciseLogs"]],
        )

    def get_summary(self) -> str:
        """Generate a summary of the workout."""
        summary = f"Workout: {self.name}\n"
        if self.started_at:
            summary += f"Started: {self.started_at.strftime('%Y-%m-%d %H:%M')}\n"
        if self.duration is not None:
            minutes = int(self.duration.total_seconds() // 60)
            summary += f"Duration: {minutes} min\n"
        if self.location:
            summary += f"Location: {self.location.name}\n"
        if self.notes:
            summary += f"Notes: {self.notes}\n"
        summary += "\n"

        for log in sorted(self.exercise_logs, key=lambda log: log.order):
            summary += f"  {log.order + 1}. {log.exercise.name}"
            if log.target_sets and log.target_reps:
                summary += f" (target {log.target_sets}x{log.target_reps})"
            summary += "\n"
            for s in log.sets:
                weight = f" @ {s.weight:g}" if s.weight is not None else ""
                mark = "x" if s.completed else " "
                summary += f"      [{mark}] {s.reps} reps{weight}\n"

        return summary
