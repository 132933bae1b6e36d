"""Workout plan commands."""

import re

import click

from ..models.exercises import Difficulty
from ..models.plan import PlannedExercise, WorkoutPlan
from ..services.catalog import WorkoutCatalog
from .base import (
    async_command,
    echo_error,
    echo_info,
    echo_success,
    ensure_initialized,
    format_table,
    open_catalog,
    truncate,
)

PLANNED_EXERCISE_PATTERN = re.compile(r"^(?P<name>.+):(?P<sets>\d+)x(?P<reps>\d+)$")


def resolve_plan(catalog: WorkoutCatalog, key: str) -> WorkoutPlan | None:
    """Find a plan by id or by (case-insensitive) name."""
    plan = catalog.get_plan(key)
    if plan is not None:
        return plan
    return next(
        (p for p in catalog.workout_plans if p.name.casefold() == key.casefold()), None
    )


def parse_planned_exercise(catalog: WorkoutCatalog, spec: str) -> PlannedExercise:
    """Parse ``NAME:SETSxREPS`` into a planned exercise.

    Raises:
        click.BadParameter: If the format is wrong or the exercise is unknown.
    """
    match = PLANNED_EXERCISE_PATTERN.match(spec.strip())
    if match is None:
        raise click.BadParameter(f"Expected NAME:SETSxREPS, got {spec!r}")

    exercise = catalog.find_exercise(match["name"])
    if exercise is None:
        raise click.BadParameter(f"Unknown exercise {match['name']!r}")

    return PlannedExercise(
        exercise=exercise,
        target_sets=int(match["sets"]),
        target_reps=int(match["reps"]),
    )


@click.group()
@click.pass_context
def plans(ctx):
    """Browse and create workout plans."""
    ensure_initialized(ctx)


@plans.command(name="list")
@click.pass_context
@async_command
async def list_plans(ctx):
    """List built-in and custom plans."""
    async with open_catalog(ctx) as catalog:
        all_plans = catalog.workout_plans
        custom_ids = {p.id for p in catalog.custom_plans}

    if not all_plans:
        echo_info("No plans found. Create one with 'fitness-tracker plans create'")
        return

    headers = ["Name", "Difficulty", "Duration", "Exercises", "Source"]
    rows = [
        [
            truncate(plan.name),
            plan.difficulty.value,
            plan.duration,
            str(len(plan.exercises)),
            "custom" if plan.id in custom_ids else "built-in",
        ]
        for plan in all_plans
    ]

    click.echo()
    click.echo(format_table(headers, rows))
    click.echo()
    click.echo(f"Total: {len(all_plans)} plan(s)")


@plans.command()
@click.argument("plan")
@click.pass_context
@async_command
async def show(ctx, plan: str):
    """Show a plan by name or id."""
    async with open_catalog(ctx) as catalog:
        found = resolve_plan(catalog, plan)

    if found is None:
        echo_error(f"Plan {plan!r} not found")
        ctx.exit(1)

    click.echo()
    click.echo(found.get_summary())


@plans.command()
@click.argument("name")
@click.option("--description", "-d", default="", help="Short description")
@click.option(
    "--difficulty",
    type=click.Choice([d.value for d in Difficulty]),
    default=Difficulty.BEGINNER.value,
    help="Plan difficulty",
)
@click.option(
    "--exercise",
    "-e",
    "exercise_specs",
    multiple=True,
    help="Exercise as NAME:SETSxREPS (repeatable)",
)
@click.pass_context
@async_command
async def create(ctx, name: str, description: str, difficulty: str, exercise_specs: tuple[str, ...]):
    """Create a custom plan.

    Examples:

        fitness-tracker plans create "Quick Push" -e "Bench Press:3x8" -e "Push-up:3x15"
    """
    async with open_catalog(ctx) as catalog:
        planned = [parse_planned_exercise(catalog, spec) for spec in exercise_specs]

        plan = await catalog.create_workout_plan(name, description, Difficulty(difficulty))
        if planned:
            plan.exercises.extend(planned)
            if not await catalog.save():
                echo_error("Plan created but its exercises could not be saved")
                ctx.exit(1)

    echo_success(f"Plan {plan.name!r} created with {len(plan.exercises)} exercise(s)")
