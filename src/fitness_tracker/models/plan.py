"""Workout plan data models."""

from dataclasses import dataclass, field

from .exercises import Difficulty, Exercise, new_id

DEFAULT_REST_SECONDS = 60.0


@dataclass
class PlannedExercise:
    """An exercise within a plan, with its targets."""

    exercise: Exercise
    target_sets: int
    target_reps: int
    rest_duration: float = DEFAULT_REST_SECONDS  # seconds
    notes: str | None = None
    id: str = field(default_factory=new_id)

    def to_dict(self) -> dict:
        """Convert to dictionary."""
        data = {
            "id": self.id,
            "exercise": self.exercise.to_dict(),
            "targetSets": self.target_sets,
            "targetReps": self.target_reps,
            "restDuration": self.rest_duration,
        }
        if self.notes is not None:
            data["notes"] = self.notes
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "PlannedExercise":
        """Create from dictionary."""
        return cls(
            id=data["id"],
            exercise=Exercise.from_dict(data["exercise"]),
            target_sets=int(data["targetSets"]),
            target_reps=int(data["targetReps"]),
            rest_duration=float(data.get("restDuration", DEFAULT_REST_SECONDS)),
            notes=data.get("notes"),
        )


@dataclass(eq=False)
class WorkoutPlan:
    """A named, ordered list of planned exercises.

    Plans are catalog content: two plans are the same plan when their ids
    match, regardless of the exercises they carry.
    """

    name: str
    description: str
    duration: str  # display label, e.g. "60 minutes"
    difficulty: Difficulty
    exercises: list[PlannedExercise] = field(default_factory=list)
    id: str = field(default_factory=new_id)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, WorkoutPlan):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def to_dict(self) -> dict:
        """Convert to dictionary for storage."""
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "duration": self.duration,
            "difficulty": self.difficulty.value,
            "exercises": [ex.to_dict() for ex in self.exercises],
        }

    @classmethod
    def from_dict(cls, data: dict) -> "WorkoutPlan":
        """Create from dictionary."""
        return cls(
            id=data["id"],
            name=data["name"],
            description=data.get("description", ""),
            duration=data.get("duration", ""),
            difficulty=Difficulty(data["difficulty"]),
            exercises=[PlannedExercise.from_dict(ex) for ex in data.get("exercises", [])],
        )

    def get_summary(self) -> str:
        """Generate a summary of the plan."""
        summary = f"Plan: {self.name}\n"
        summary += f"Description: {self.description}\n"
        summary += f"Duration: {self.duration} | Difficulty: {self.difficulty.value}\n\n"

        if not self.exercises:
            summary += "  (no exercises yet)\n"
        for planned in self.exercises:
            summary += (
                f"  - {planned.exercise.name}: "
                f"{planned.target_sets}x{planned.target_reps}, "
                f"rest {int(planned.rest_duration)}s\n"
            )
            if planned.notes:
                summary += f"      {planned.notes}\n"

        return summary
