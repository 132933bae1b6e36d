"""Database engine setup and initialization."""

import os
from pathlib import Path

import aiosqlite

DATA_DIR_ENV = "FITNESS_TRACKER_DATA_DIR"

# Default data directory
DATA_DIR = Path.home() / ".fitness-tracker"


def get_data_dir() -> Path:
    """Get the data directory, honouring the environment override."""
    override = os.environ.get(DATA_DIR_ENV)
    return Path(override).expanduser() if override else DATA_DIR


def get_db_path(data_dir: Path | None = None) -> Path:
    """Get the database file path."""
    if data_dir is None:
        data_dir = get_data_dir()
    data_dir.mkdir(parents=True, exist_ok=True)
    return data_dir / "fitness_tracker.db"


async def init_db(db_path: Path | None = None) -> None:
    """Initialize the database schema."""
    if db_path is None:
        db_path = get_db_path()

    async with aiosqlite.connect(db_path) as db:
        # Whole-collection blobs: workouts, locations, custom plans
        await db.execute("""
            CREATE TABLE IF NOT EXISTS stores (
                name TEXT PRIMARY KEY,
                data BLOB NOT NULL,
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """)

        # Local calendar
        await db.execute("""
            CREATE TABLE IF NOT EXISTS calendar_events (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                title TEXT NOT NULL,
                start_date TIMESTAMP NOT NULL,
                end_date TIMESTAMP NOT NULL,
                location TEXT,
                notes TEXT
            )
        """)

        await db.execute("""
            CREATE INDEX IF NOT EXISTS idx_calendar_events_start
            ON calendar_events(start_date)
        """)

        await db.commit()
