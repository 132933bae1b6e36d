"""Shared CLI utilities."""

import asyncio
from contextlib import asynccontextmanager
from datetime import datetime
from functools import wraps
from pathlib import Path

import click

from ..db import get_data_dir, get_db_path, init_db
from ..services.catalog import WorkoutCatalog
from ..services.location import FixedLocationService


def async_command(f):
    """Decorator to run async Click commands."""

    @wraps(f)
    def wrapper(*args, **kwargs):
        return asyncio.run(f(*args, **kwargs))

    return wrapper


def data_dir_from(ctx: click.Context) -> Path:
    """Get the data directory chosen on the command line."""
    obj = ctx.find_object(dict) or {}
    return obj.get("data_dir") or get_data_dir()


def db_path_from(ctx: click.Context) -> Path:
    """Get the database path for the chosen data directory."""
    return get_db_path(data_dir_from(ctx))


def ensure_initialized(ctx: click.Context) -> None:
    """Ensure the database is initialized."""
    db_path = db_path_from(ctx)
    if not db_path.exists():
        click.echo(
            click.style("Error: ", fg="red")
            + "Data store not initialized. Run 'fitness-tracker init' first."
        )
        ctx.exit(1)


@asynccontextmanager
async def open_catalog(ctx: click.Context):
    """Load the catalog for one command and wait for its background work."""
    db_path = db_path_from(ctx)
    await init_db(db_path)
    catalog = WorkoutCatalog(db_path, location_service=FixedLocationService.from_env())
    await catalog.load()
    try:
        yield catalog
    finally:
        await catalog.shutdown()


def echo_success(message: str) -> None:
    """Print a success message."""
    click.echo(click.style("[OK] ", fg="green") + message)


def echo_error(message: str) -> None:
    """Print an error message."""
    click.echo(click.style("[ERROR] ", fg="red") + message)


def echo_info(message: str) -> None:
    """Print an info message."""
    click.echo(click.style("[INFO] ", fg="blue") + message)


def echo_warning(message: str) -> None:
    """Print a warning message."""
    click.echo(click.style("[WARN] ", fg="yellow") + message)


def format_date(value: datetime | None) -> str:
    return value.strftime("%Y-%m-%d %H:%M") if value else "N/A"


def truncate(text: str, width: int = 30) -> str:
    return text[:width] + "..." if len(text) > width else text


def format_table(headers: list[str], rows: list[list[str]], padding: int = 2) -> str:
    """Format data as a simple table."""
    if not rows:
        return ""

    widths = [len(h) for h in headers]
    for row in rows:
        for i, cell in enumerate(row):
            widths[i] = max(widths[i], len(str(cell)))

    lines = ["".join(h.ljust(widths[i] + padding) for i, h in enumerate(headers))]
    lines.append("".join("-" * w + " " * padding for w in widths))
    for row in rows:
        lines.append(
            "".join(str(cell).ljust(widths[i] + padding) for i, cell in enumerate(row))
        )

    return "\n".join(line.rstrip() for line in lines)
