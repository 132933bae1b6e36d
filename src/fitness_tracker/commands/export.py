"""Export and import of the workout history."""

from pathlib import Path

import click

from ..db.persistence import DecodeError, decode_workouts, encode_workouts
from .base import (
    async_command,
    echo_error,
    echo_info,
    echo_success,
    ensure_initialized,
    open_catalog,
)


@click.command()
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Write to file instead of stdout",
)
@click.pass_context
@async_command
async def export(ctx, output: Path | None):
    """Export the workout history as JSON.

    The file uses the current storage format and can be read back with
    'fitness-tracker import'.
    """
    ensure_initialized(ctx)

    async with open_catalog(ctx) as catalog:
        data = encode_workouts(catalog.workouts)
        count = len(catalog.workouts)

    if output is None:
        click.echo(data.decode("utf-8"))
        return

    output.write_bytes(data)
    echo_success(f"Exported {count} workout(s) to {output}")


@click.command(name="import")
@click.argument("source", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option(
    "--replace",
    is_flag=True,
    help="Replace the history instead of merging into it",
)
@click.pass_context
@async_command
async def import_data(ctx, source: Path, replace: bool):
    """Import workouts from a JSON file.

    Files in the older list format are converted on the way in. Workouts
    whose id is already in the history are skipped unless --replace is given.
    """
    ensure_initialized(ctx)

    try:
        decoded = decode_workouts(source.read_bytes())
    except DecodeError as e:
        echo_error(f"Could not read {source}: {e}")
        ctx.exit(1)

    if decoded.migrated:
        echo_info("Converted workouts from an older format")

    async with open_catalog(ctx) as catalog:
        if replace:
            catalog.workouts = list(decoded.workouts)
            added = len(decoded.workouts)
        else:
            known = {w.id for w in catalog.workouts}
            new = [w for w in decoded.workouts if w.id not in known]
            catalog.workouts.extend(new)
            added = len(new)

        if not await catalog.save():
            echo_error("Imported workouts could not be saved")
            ctx.exit(1)

    echo_success(f"Imported {added} workout(s)")
