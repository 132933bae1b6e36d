"""Saved training location commands."""

import click

from ..models.workout import Coordinate, Location
from ..services.catalog import WorkoutCatalog
from .base import (
    async_command,
    echo_error,
    echo_info,
    echo_success,
    ensure_initialized,
    format_table,
    open_catalog,
)


def resolve_location(catalog: WorkoutCatalog, key: str) -> Location | None:
    """Find a location by id or (case-insensitive) name."""
    location = catalog.get_location(key)
    if location is not None:
        return location
    return next(
        (loc for loc in catalog.locations if loc.name.casefold() == key.casefold()), None
    )


@click.group()
@click.pass_context
def locations(ctx):
    """Manage saved training locations."""
    ensure_initialized(ctx)


@locations.command(name="list")
@click.pass_context
@async_command
async def list_locations(ctx):
    """List saved locations."""
    async with open_catalog(ctx) as catalog:
        saved = list(catalog.locations)

    if not saved:
        echo_info("No saved locations. Add one with 'fitness-tracker locations add'")
        return

    headers = ["ID", "Name", "Latitude", "Longitude"]
    rows = [
        [
            loc.id[:8],
            loc.name,
            f"{loc.coordinate.latitude:.5f}",
            f"{loc.coordinate.longitude:.5f}",
        ]
        for loc in saved
    ]

    click.echo()
    click.echo(format_table(headers, rows))


@locations.command()
@click.argument("name")
@click.option("--latitude", type=float, help="Latitude in decimal degrees")
@click.option("--longitude", type=float, help="Longitude in decimal degrees")
@click.option(
    "--here",
    is_flag=True,
    help="Use the current position (FITNESS_TRACKER_LATITUDE / FITNESS_TRACKER_LONGITUDE)",
)
@click.pass_context
@async_command
async def add(ctx, name: str, latitude: float | None, longitude: float | None, here: bool):
    """Save a training location."""
    async with open_catalog(ctx) as catalog:
        if here:
            coordinate = catalog.current_coordinate()
            if coordinate is None:
                echo_error("Current position is not available")
                ctx.exit(1)
        elif latitude is not None and longitude is not None:
            coordinate = Coordinate(latitude=latitude, longitude=longitude)
        else:
            echo_error("Give --latitude and --longitude, or --here")
            ctx.exit(1)

        location = Location(name=name, coordinate=coordinate)
        await catalog.add_location(location)

    echo_success(f"Location {name!r} saved ({location.id[:8]})")


@locations.command()
@click.argument("location")
@click.pass_context
@async_command
async def delete(ctx, location: str):
    """Delete a saved location by name or id."""
    async with open_catalog(ctx) as catalog:
        found = resolve_location(catalog, location)
        if found is None:
            echo_error(f"Location {location!r} not found")
            ctx.exit(1)
        await catalog.delete_location(found.id)

    echo_success(f"Location {found.name!r} deleted")
