"""Training statistics command."""

from collections import Counter

import click

from ..utils.exercise_utils import count_workouts_this_month, count_workouts_this_week
from .base import async_command, echo_info, ensure_initialized, format_table, open_catalog


@click.command()
@click.option("--top", default=5, show_default=True, help="Number of exercises to list")
@click.pass_context
@async_command
async def stats(ctx, top: int):
    """Show workout counts and the most logged exercises."""
    ensure_initialized(ctx)

    async with open_catalog(ctx) as catalog:
        workouts = list(catalog.workouts)

    if not workouts:
        echo_info("No workouts logged yet")
        return

    completed_sets = sum(w.completed_set_count for w in workouts)
    volume = sum(w.total_volume for w in workouts)
    frequency = Counter(
        log.exercise.name for w in workouts for log in w.exercise_logs
    )

    click.echo()
    click.echo(click.style("Workouts", bold=True))
    click.echo(f"  This week:  {count_workouts_this_week(workouts)}")
    click.echo(f"  This month: {count_workouts_this_month(workouts)}")
    click.echo(f"  All time:   {len(workouts)}")
    click.echo()
    click.echo(f"Completed sets: {completed_sets}")
    click.echo(f"Total volume:   {volume:g}")

    if frequency:
        click.echo()
        click.echo(click.style("Most logged exercises", bold=True))
        rows = [[name, str(count)] for name, count in frequency.most_common(top)]
        click.echo(format_table(["Exercise", "Workouts"], rows))
