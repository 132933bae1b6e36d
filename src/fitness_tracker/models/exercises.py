"""Exercise definitions and metadata."""

from dataclasses import dataclass, field
from enum import Enum
from uuid import uuid4


class MuscleGroup(str, Enum):
    """Primary muscle group an exercise trains."""

    CHEST = "chest"
    BACK = "back"
    LEGS = "legs"
    SHOULDERS = "shoulders"
    ARMS = "arms"
    CORE = "core"
    FULL_BODY = "fullBody"


class Equipment(str, Enum):
    """Equipment needed for an exercise."""

    NONE = "none"
    DUMBBELLS = "dumbbells"
    BARBELL = "barbell"
    KETTLEBELL = "kettlebell"
    RESISTANCE_BANDS = "resistanceBands"
    MACHINE = "machine"
    BODYWEIGHT = "bodyweight"
    CABLE = "cable"
    OTHER = "other"


class Difficulty(str, Enum):
    """Difficulty rating for exercises and plans."""

    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


def new_id() -> str:
    """Generate a fresh record identifier."""
    return str(uuid4()).upper()


@dataclass(frozen=True)
class Exercise:
    """An entry in the exercise library."""

    name: str
    muscle_group: MuscleGroup
    equipment: Equipment
    difficulty: Difficulty
    description: str
    image_url: str | None = None
    variations: list[str] | None = None
    id: str = field(default_factory=new_id)

    def __hash__(self) -> int:
        return hash(self.id)

    def to_dict(self) -> dict:
        """Convert to dictionary for storage."""
        data = {
            "id": self.id,
            "name": self.name,
            "muscleGroup": self.muscle_group.value,
            "equipment": self.equipment.value,
            "difficulty": self.difficulty.value,
            "description": self.description,
        }
        if self.image_url is not None:
            data["imageURL"] = self.image_url
        if self.variations is not None:
            data["variations"] = list(self.variations)
        return data

    @classmethod
    def from_dict(cls, data: dict) -> "Exercise":
        """Create from dictionary."""
        variations = data.get("variations")
        return cls(
            id=data["id"],
            name=data["name"],
            muscle_group=MuscleGroup(data["muscleGroup"]),
            equipment=Equipment(data["equipment"]),
            difficulty=Difficulty(data["difficulty"]),
            description=data.get("description", ""),
            image_url=data.get("imageURL"),
            variations=list(variations) if variations is not None else None,
        )
