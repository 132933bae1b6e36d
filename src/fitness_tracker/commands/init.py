"""Initialize data store command."""

import click

from ..data.exercise_loader import load_default_exercises, load_default_plans
from ..db import get_db_path, init_db
from .base import async_command, data_dir_from, echo_info, echo_success


@click.command()
@click.pass_context
@async_command
async def init(ctx):
    """Initialize the fitness-tracker data store.

    This creates the data directory and the SQLite database that holds
    workouts, saved locations, custom plans and calendar events.
    """
    data_dir = data_dir_from(ctx)

    echo_info(f"Initializing fitness-tracker in {data_dir}")

    data_dir.mkdir(parents=True, exist_ok=True)
    await init_db(get_db_path(data_dir))
    echo_success("Database initialized")

    exercises = load_default_exercises()
    plans = load_default_plans(exercises)
    echo_success(f"Built-in library: {len(exercises)} exercises, {len(plans)} plans")

    click.echo()
    click.echo("fitness-tracker is ready to use!")
    click.echo()
    click.echo("Next steps:")
    click.echo("  1. Browse the library:")
    click.echo("     fitness-tracker exercises list --muscle-group chest")
    click.echo("     fitness-tracker plans list")
    click.echo()
    click.echo("  2. Start a workout:")
    click.echo('     fitness-tracker workout start --plan "Full Body Workout"')
