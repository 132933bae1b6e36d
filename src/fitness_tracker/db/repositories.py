"""Data access layer for fitness-tracker.

Each collection is stored as one encoded blob in the ``stores`` table and is
rewritten in full on every save.
"""

from pathlib import Path

import aiosqlite

from ..models.plan import WorkoutPlan
from ..models.workout import Location, Workout
from .engine import get_db_path
from .persistence import (
    DecodedWorkouts,
    decode_locations,
    decode_plans,
    decode_workouts,
    encode_locations,
    encode_plans,
    encode_workouts,
)


class BlobRepository:
    """Reads and writes one named blob."""

    store_name: str = ""

    def __init__(self, db_path: Path | None = None):
        self.db_path = db_path or get_db_path()

    async def read(self) -> bytes | None:
        """Get the stored blob, or None if nothing was saved yet."""
        async with aiosqlite.connect(self.db_path) as db:
            cursor = await db.execute(
                "SELECT data FROM stores WHERE name = ?", (self.store_name,)
            )
            row = await cursor.fetchone()
            if row is None:
                return None
            data = row[0]
            return data.encode("utf-8") if isinstance(data, str) else bytes(data)

    async def write(self, data: bytes) -> None:
        """Replace the stored blob."""
        async with aiosqlite.connect(self.db_path) as db:
            await db.execute(
                """
                INSERT INTO stores (name, data, updated_at)
                VALUES (?, ?, CURRENT_TIMESTAMP)
                ON CONFLICT(name) DO UPDATE SET
                    data = excluded.data,
                    updated_at = CURRENT_TIMESTAMP
                """,
                (self.store_name, data),
            )
            await db.commit()


class WorkoutRepository(BlobRepository):
    """Repository for the workout history."""

    store_name = "workouts"

    async def load(self) -> DecodedWorkouts | None:
        """Load and decode workouts.

        Raises:
            DecodeError: If the stored blob is malformed.
        """
        data = await self.read()
        if data is None:
            return None
        return decode_workouts(data)

    async def save(self, workouts: list[Workout]) -> None:
        """Encode and store workouts."""
        await self.write(encode_workouts(workouts))


class LocationRepository(BlobRepository):
    """Repository for saved locations."""

    store_name = "locations"

    async def load(self) -> list[Location] | None:
        data = await self.read()
        if data is None:
            return None
        return decode_locations(data)

    async def save(self, locations: list[Location]) -> None:
        await self.write(encode_locations(locations))


class PlanRepository(BlobRepository):
    """Repository for user-created workout plans."""

    store_name = "plans"

    async def load(self) -> list[WorkoutPlan] | None:
        data = await self.read()
        if data is None:
            return None
        return decode_plans(data)

    async def save(self, plans: list[WorkoutPlan]) -> None:
        await self.write(encode_plans(plans))
