"""Calendar sync for logged workouts."""

import logging
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Protocol, runtime_checkable

import aiosqlite

from ..db.engine import get_db_path
from ..models.workout import Workout

logger = logging.getLogger(__name__)

EVENT_TITLE_PREFIX = "Workout: "


class CalendarAccessError(Exception):
    """Calendar access was denied or an event could not be saved."""


def event_title(workout: Workout) -> str:
    """Title of the calendar event for a workout."""
    return f"{EVENT_TITLE_PREFIX}{workout.name}"


@dataclass
class CalendarEvent:
    """An event in the calendar."""

    title: str
    start_date: datetime
    end_date: datetime
    location: str | None = None
    notes: str | None = None
    id: int | None = None

    def matches(self, workout: Workout) -> bool:
        """Whether this is the event for ``workout``.

        Events carry no workout id, so they are matched on title and start.
        """
        return self.title == event_title(workout) and self.start_date == workout.started_at


@runtime_checkable
class CalendarService(Protocol):
    """Calendar the catalog mirrors workouts into."""

    async def request_access(self) -> None:
        """Raises CalendarAccessError when access is denied."""
        ...

    async def list_events(self, start: datetime, end: datetime) -> list[CalendarEvent]:
        ...

    async def add_event(self, workout: Workout) -> CalendarEvent:
        """Raises CalendarAccessError when the event cannot be saved."""
        ...

    async def remove_event(self, workout: Workout) -> bool:
        ...

    async def update_event(self, workout: Workout) -> CalendarEvent:
        ...


class LocalCalendarService:
    """Calendar kept in the local database."""

    def __init__(self, db_path: Path | None = None, access_granted: bool = True):
        self.db_path = db_path or get_db_path()
        self.access_granted = access_granted

    async def request_access(self) -> None:
        if not self.access_granted:
            raise CalendarAccessError("Calendar access denied")

    async def list_events(self, start: datetime, end: datetime) -> list[CalendarEvent]:
        """List events starting in ``[start, end)``."""
        await self.request_access()
        async with aiosqlite.connect(self.db_path) as db:
            db.row_factory = aiosqlite.Row
            cursor = await db.execute(
                "SELECT * FROM calendar_events ORDER BY start_date"
            )
            rows = await cursor.fetchall()
        events = [self._row_to_event(row) for row in rows]
        return [e for e in events if start <= e.start_date < end]

    async def add_event(self, workout: Workout) -> CalendarEvent:
        """Save an event spanning the workout."""
        await self.request_access()
        if workout.started_at is None or workout.ended_at is None:
            raise CalendarAccessError(f"Workout {workout.name!r} has no start or end time")

        event = CalendarEvent(
            title=event_title(workout),
            start_date=workout.started_at,
            end_date=workout.ended_at,
            location=workout.location.name if workout.location else None,
            notes=workout.notes,
        )
        try:
            async with aiosqlite.connect(self.db_path) as db:
                cursor = await db.execute(
                    """
                    INSERT INTO calendar_events
                    (title, start_date, end_date, location, notes)
                    VALUES (?, ?, ?, ?, ?)
                    """,
                    (
                        event.title,
                        event.start_date.isoformat(),
                        event.end_date.isoformat(),
                        event.location,
                        event.notes,
                    ),
                )
                await db.commit()
                event.id = cursor.lastrowid
        except aiosqlite.Error as e:
            raise CalendarAccessError(f"Failed to save event: {e}") from e

        logger.info("Added calendar event %r", event.title)
        return event

    async def remove_event(self, workout: Workout) -> bool:
        """Remove the workout's event, if there is one.

        Returns:
            True if an event was removed
        """
        if workout.started_at is None:
            return False

        try:
            async with aiosqlite.connect(self.db_path) as db:
                db.row_factory = aiosqlite.Row
                cursor = await db.execute(
                    "SELECT * FROM calendar_events WHERE title = ?",
                    (event_title(workout),),
                )
                rows = await cursor.fetchall()
                match = next(
                    (e for e in map(self._row_to_event, rows) if e.matches(workout)), None
                )
                if match is None:
                    return False
                await db.execute("DELETE FROM calendar_events WHERE id = ?", (match.id,))
                await db.commit()
        except aiosqlite.Error as e:
            logger.warning("Error removing event from calendar: %s", e)
            return False

        logger.info("Removed calendar event %r", match.title)
        return True

    async def update_event(self, workout: Workout) -> CalendarEvent:
        """Replace the workout's event."""
        await self.remove_event(workout)
        return await self.add_event(workout)

    def _row_to_event(self, row: aiosqlite.Row) -> CalendarEvent:
        return CalendarEvent(
            id=row["id"],
            title=row["title"],
            start_date=datetime.fromisoformat(row["start_date"]),
            end_date=datetime.fromisoformat(row["end_date"]),
            location=row["location"],
            notes=row["notes"],
        )
