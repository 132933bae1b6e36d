"""CLI entry point for fitness-tracker."""

import logging
from pathlib import Path

import click

from .commands import exercises, export, import_data, init, locations, plans, stats, workout
from .db.engine import DATA_DIR_ENV


@click.group()
@click.version_option(version="0.1.0", prog_name="fitness-tracker")
@click.option(
    "--data-dir",
    type=click.Path(file_okay=False, path_type=Path),
    envvar=DATA_DIR_ENV,
    help="Directory holding the database (default: ~/.fitness-tracker)",
)
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging")
@click.pass_context
def main(ctx, data_dir: Path | None, verbose: bool):
    """fitness-tracker: log workouts, run live sessions with rest timers.

    Example usage:

        # Initialize the data store
        fitness-tracker init

        # Browse exercises and plans
        fitness-tracker exercises list --muscle-group legs
        fitness-tracker plans show "Pure Strength"

        # Train
        fitness-tracker workout start --plan "Pure Strength"
        fitness-tracker workout list
    """
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    ctx.ensure_object(dict)
    ctx.obj["data_dir"] = data_dir.expanduser() if data_dir else None


# Register commands
main.add_command(init)
main.add_command(exercises)
main.add_command(plans)
main.add_command(workout)
main.add_command(locations)
main.add_command(export)
main.add_command(import_data)
main.add_command(stats)


def run():
    """Run the CLI (handles async event loop)."""
    main()


if __name__ == "__main__":
    run()
