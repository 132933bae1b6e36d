"""Exercise library commands."""

import click

from ..models.exercises import Difficulty, Equipment, MuscleGroup
from ..utils.exercise_utils import categorize_exercises_by_muscle_group, filter_exercises
from .base import (
    async_command,
    echo_error,
    echo_info,
    ensure_initialized,
    format_table,
    open_catalog,
    truncate,
)


@click.group()
@click.pass_context
def exercises(ctx):
    """Browse the exercise library."""
    ensure_initialized(ctx)


@exercises.command(name="list")
@click.option("--search", "-s", help="Match against name or description")
@click.option(
    "--muscle-group",
    "-m",
    type=click.Choice([g.value for g in MuscleGroup]),
    help="Only this muscle group",
)
@click.option(
    "--equipment",
    "-e",
    type=click.Choice([e.value for e in Equipment]),
    help="Only exercises using this equipment",
)
@click.option(
    "--difficulty",
    "-d",
    type=click.Choice([d.value for d in Difficulty]),
    help="Only this difficulty",
)
@click.option("--by-group", "-g", is_flag=True, help="Group the list by muscle group")
@click.pass_context
@async_command
async def list_exercises(
    ctx,
    search: str | None,
    muscle_group: str | None,
    equipment: str | None,
    difficulty: str | None,
    by_group: bool,
):
    """List exercises, optionally filtered."""
    async with open_catalog(ctx) as catalog:
        matches = filter_exercises(
            catalog.exercises,
            search=search,
            muscle_group=MuscleGroup(muscle_group) if muscle_group else None,
            equipment=Equipment(equipment) if equipment else None,
            difficulty=Difficulty(difficulty) if difficulty else None,
        )

    if not matches:
        echo_info("No exercises match those filters")
        return

    headers = ["Name", "Muscle Group", "Equipment", "Difficulty"]

    def rows_for(group):
        return [
            [truncate(ex.name), ex.muscle_group.value, ex.equipment.value, ex.difficulty.value]
            for ex in sorted(group, key=lambda ex: ex.name)
        ]

    if by_group:
        for group_name, group in categorize_exercises_by_muscle_group(matches).items():
            if not group:
                continue
            click.echo()
            click.echo(click.style(f"{group_name} ({len(group)})", bold=True))
            click.echo(format_table(headers, rows_for(group)))
    else:
        click.echo()
        click.echo(format_table(headers, rows_for(matches)))

    click.echo()
    click.echo(f"Total: {len(matches)} exercise(s)")


@exercises.command()
@click.argument("name")
@click.pass_context
@async_command
async def show(ctx, name: str):
    """Show an exercise and how it has been logged before."""
    async with open_catalog(ctx) as catalog:
        exercise = catalog.find_exercise(name)
        if exercise is None:
            echo_error(f"Exercise {name!r} not found")
            ctx.exit(1)
        history = catalog.get_exercise_history(exercise)

    click.echo()
    click.echo("=" * 60)
    click.echo(f"Exercise: {exercise.name}")
    click.echo("=" * 60)
    click.echo()
    click.echo(f"Muscle group: {exercise.muscle_group.value}")
    click.echo(f"Equipment: {exercise.equipment.value}")
    click.echo(f"Difficulty: {exercise.difficulty.value}")
    click.echo()
    click.echo(exercise.description)

    if exercise.variations:
        click.echo()
        click.echo("Variations:")
        for variation in exercise.variations:
            click.echo(f"  - {variation}")

    click.echo()
    click.echo("History:")
    click.echo("-" * 40)
    if history is None:
        click.echo("  No workouts logged with this exercise yet")
    else:
        for line in history:
            click.echo(f"  {line}")
