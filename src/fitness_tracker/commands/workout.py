"""Workout commands: live sessions and workout history."""

import re
from datetime import datetime

import click
import questionary
from questionary import Style

from ..models.plan import PlannedExercise
from ..models.workout import ExerciseSet, Location, Workout, WorkoutExercise
from ..services.catalog import WorkoutCatalog
from ..services.notifications import ConsoleNotificationScheduler
from ..services.session import ActiveWorkoutSession, RestState
from .base import (
    async_command,
    echo_error,
    echo_info,
    echo_success,
    echo_warning,
    ensure_initialized,
    format_date,
    format_table,
    open_catalog,
    truncate,
)
from .plans import parse_planned_exercise, resolve_plan

LOGGED_EXERCISE_PATTERN = re.compile(
    r"^(?P<name>.+):(?P<sets>\d+)x(?P<reps>\d+)(?:@(?P<weight>\d+(?:\.\d+)?))?$"
)

custom_style = Style(
    [
        ("qmark", "fg:#673ab7 bold"),
        ("question", "bold"),
        ("answer", "fg:#f44336 bold"),
        ("pointer", "fg:#673ab7 bold"),
        ("highlighted", "fg:#673ab7 bold"),
        ("selected", "fg:#cc5454"),
        ("separator", "fg:#cc5454"),
        ("instruction", ""),
        ("text", ""),
    ]
)

ADD_EXERCISE = "Add exercise"
ADD_SET = "Add set"
EDIT_SET = "Edit set"
COMPLETE_SET = "Complete set"
NEXT_EXERCISE = "Next exercise"
PREVIOUS_EXERCISE = "Previous exercise"
START_REST = "Start rest timer"
CANCEL_REST = "Cancel rest timer"
FINISH = "Finish workout"
DISCARD = "Discard workout"


def resolve_workout(catalog: WorkoutCatalog, key: str) -> Workout | None:
    """Find a workout by id or unique id prefix."""
    workout = catalog.get_workout(key)
    if workout is not None:
        return workout
    matches = [w for w in catalog.workouts if w.id.startswith(key.upper())]
    return matches[0] if len(matches) == 1 else None


def parse_logged_exercise(catalog: WorkoutCatalog, spec: str) -> WorkoutExercise:
    """Parse ``NAME:SETSxREPS[@WEIGHT]`` into an exercise with completed sets."""
    match = LOGGED_EXERCISE_PATTERN.match(spec.strip())
    if match is None:
        raise click.BadParameter(f"Expected NAME:SETSxREPS[@WEIGHT], got {spec!r}")

    exercise = catalog.find_exercise(match["name"])
    if exercise is None:
        raise click.BadParameter(f"Unknown exercise {match['name']!r}")

    set_count = int(match["sets"])
    reps = int(match["reps"])
    weight = float(match["weight"]) if match["weight"] else None
    return WorkoutExercise(
        exercise=exercise,
        target_sets=set_count,
        target_reps=reps,
        target_weight=weight,
        sets=[ExerciseSet(reps=reps, weight=weight) for _ in range(set_count)],
    )


def _optional_float(text: str) -> float | None:
    text = text.strip()
    return float(text) if text else None


def _is_int(text: str) -> bool:
    return text.strip().isdigit()


def _is_optional_number(text: str) -> bool:
    try:
        _optional_float(text)
    except ValueError:
        return False
    return True


def _print_status(session: ActiveWorkoutSession) -> None:
    exercise = session.current_exercise
    total = len(session.workout.exercise_logs)

    click.echo()
    click.echo(click.style(session.workout.name, bold=True))
    if exercise is None:
        click.echo("  (no exercises)")
        return

    header = f"  [{session.current_exercise_index + 1}/{total}] {exercise.exercise.name}"
    if exercise.target_sets and exercise.target_reps:
        header += f" (target {exercise.target_sets}x{exercise.target_reps})"
    click.echo(header)
    for index, s in enumerate(exercise.sets):
        weight = f" @ {s.weight:g}" if s.weight is not None else ""
        mark = "x" if s.completed else " "
        click.echo(f"    {index + 1}. [{mark}] {s.reps} reps{weight}")

    remaining = session.tick()
    if session.rest_state() == RestState.RESTING:
        click.echo(click.style(f"  Resting: {int(remaining)}s left", fg="cyan"))
    click.echo(f"  Completed sets: {session.completed_set_count}")


async def _prompt_set_numbers(
    reps: int | None = None, weight: float | None = None
) -> tuple[int, float | None, float | None] | None:
    reps_text = await questionary.text(
        "Reps:",
        default=str(reps) if reps is not None else "",
        validate=lambda t: _is_int(t) or "Enter a whole number",
        style=custom_style,
    ).ask_async()
    if reps_text is None:
        return None

    weight_text = await questionary.text(
        "Weight (blank for none):",
        default=f"{weight:g}" if weight is not None else "",
        validate=lambda t: _is_optional_number(t) or "Enter a number",
        style=custom_style,
    ).ask_async()
    if weight_text is None:
        return None

    rpe_text = await questionary.text(
        "RPE (blank for none):",
        validate=lambda t: _is_optional_number(t) or "Enter a number",
        style=custom_style,
    ).ask_async()
    if rpe_text is None:
        return None

    return int(reps_text), _optional_float(weight_text), _optional_float(rpe_text)


async def _choose_set(session: ActiveWorkoutSession, message: str, pending_only: bool = False):
    exercise = session.current_exercise
    if exercise is None:
        return None
    choices = [
        questionary.Choice(f"Set {i + 1}: {s.reps} reps", i)
        for i, s in enumerate(exercise.sets)
        if not (pending_only and s.completed)
    ]
    if not choices:
        echo_info("No sets to choose from")
        return None
    return await questionary.select(message, choices=choices, style=custom_style).ask_async()


async def _prompt_exercise(catalog: WorkoutCatalog) -> PlannedExercise | None:
    name = await questionary.text("Exercise name:", style=custom_style).ask_async()
    if not name:
        return None
    exercise = catalog.find_exercise(name)
    if exercise is None:
        echo_warning(f"Exercise {name!r} not found")
        return None

    sets_text = await questionary.text(
        "Target sets:",
        default="3",
        validate=lambda t: _is_int(t) or "Enter a whole number",
        style=custom_style,
    ).ask_async()
    if sets_text is None:
        return None
    reps_text = await questionary.text(
        "Target reps:",
        default="10",
        validate=lambda t: _is_int(t) or "Enter a whole number",
        style=custom_style,
    ).ask_async()
    if reps_text is None:
        return None

    return PlannedExercise(
        exercise=exercise, target_sets=int(sets_text), target_reps=int(reps_text)
    )


async def _choose_location(catalog: WorkoutCatalog) -> Location | None:
    location_id = await questionary.select(
        "Where did you train?",
        choices=[questionary.Choice("(no location)", value="")]
        + [questionary.Choice(loc.name, value=loc.id) for loc in catalog.locations],
        style=custom_style,
    ).ask_async()
    return catalog.get_location(location_id) if location_id else None


async def run_session(
    catalog: WorkoutCatalog, session: ActiveWorkoutSession
) -> Workout | None:
    """Drive a session interactively.

    Returns:
        The finalized workout, or None if it was discarded
    """
    while True:
        _print_status(session)
        action = await questionary.select(
            "What next?",
            choices=[
                ADD_EXERCISE,
                ADD_SET,
                EDIT_SET,
                COMPLETE_SET,
                NEXT_EXERCISE,
                PREVIOUS_EXERCISE,
                START_REST,
                CANCEL_REST,
                FINISH,
                DISCARD,
            ],
            style=custom_style,
        ).ask_async()

        if action is None:
            return None
        elif action == DISCARD:
            confirmed = await questionary.confirm(
                "Discard this workout?", default=False, style=custom_style
            ).ask_async()
            if confirmed:
                return None
        elif action == FINISH:
            return session.finalize()
        elif action == ADD_EXERCISE:
            planned = await _prompt_exercise(catalog)
            if planned is not None:
                added = catalog.add_exercise_to_workout(planned)
                if added is not None:
                    session.add_exercise(added)
                    echo_info(f"Added {planned.exercise.name}")
        elif action == ADD_SET:
            current = session.current_exercise
            numbers = await _prompt_set_numbers(
                current.target_reps if current else None,
                current.target_weight if current else None,
            )
            if numbers is not None and not session.add_set(*numbers):
                echo_warning("This workout has no exercises; add one first")
        elif action == EDIT_SET:
            index = await _choose_set(session, "Which set?")
            if index is not None:
                existing = session.current_exercise.sets[index]
                numbers = await _prompt_set_numbers(existing.reps, existing.weight)
                if numbers is not None:
                    session.update_set(index, *numbers)
        elif action == COMPLETE_SET:
            index = await _choose_set(session, "Which set is done?", pending_only=True)
            if index is not None and session.complete_set(index):
                if session.rest_timer is not None:
                    echo_info(f"Rest started: {int(session.rest_timer.duration)}s")
        elif action == NEXT_EXERCISE:
            if not session.next_exercise():
                echo_info("Already on the last exercise")
        elif action == PREVIOUS_EXERCISE:
            if not session.previous_exercise():
                echo_info("Already on the first exercise")
        elif action == START_REST:
            current = session.current_exercise
            default_rest = current.target_rest if current and current.target_rest else 60
            seconds = await questionary.text(
                "Rest seconds:",
                default=f"{default_rest:g}",
                validate=lambda t: _is_int(t) or "Enter a whole number",
                style=custom_style,
            ).ask_async()
            if seconds is not None:
                session.start_rest_timer(float(seconds))
        elif action == CANCEL_REST:
            session.cancel_rest_timer()


@click.group()
@click.pass_context
def workout(ctx):
    """Run live workouts and manage workout history."""
    ensure_initialized(ctx)


@workout.command()
@click.option("--plan", "-p", "plan_key", help="Plan name or id to start from")
@click.option("--name", "-n", help="Workout name (defaults to the plan name)")
@click.option(
    "--exercise",
    "-e",
    "exercise_specs",
    multiple=True,
    help="Exercise as NAME:SETSxREPS (repeatable, not with --plan)",
)
@click.pass_context
@async_command
async def start(ctx, plan_key: str | None, name: str | None, exercise_specs: tuple[str, ...]):
    """Start a live workout session.

    Start from a plan, from exercises given with -e, or empty and add
    exercises during the session. A plan and -e cannot be combined.

    Examples:

        fitness-tracker workout start --plan "Full Body Workout"

        fitness-tracker workout start -n "Quick pump" -e "Push-up:3x15" -e "Plank:3x60"
    """
    if plan_key and exercise_specs:
        raise click.UsageError("Use either --plan or --exercise, not both")

    async with open_catalog(ctx) as catalog:
        catalog.setup_initial_access()

        plan = None
        if plan_key:
            plan = resolve_plan(catalog, plan_key)
            if plan is None:
                echo_error(f"Plan {plan_key!r} not found")
                ctx.exit(1)

        planned = [parse_planned_exercise(catalog, spec) for spec in exercise_specs] or None
        workout_name = name or (plan.name if plan else "Workout")

        catalog.start_new_workout(workout_name, exercises=planned, plan=plan)
        session = catalog.begin_session(ConsoleNotificationScheduler())

        finished = await run_session(catalog, session)
        if finished is None:
            echo_info("Workout discarded")
            return

        if catalog.locations:
            finished.location = await _choose_location(catalog)

        finished = await catalog.end_workout(finished)

    echo_success(
        f"Workout {finished.name!r} saved: {finished.completed_set_count} set(s) completed"
    )


@workout.command()
@click.argument("name")
@click.option(
    "--date",
    "-d",
    "when",
    type=click.DateTime(formats=["%Y-%m-%d", "%Y-%m-%d %H:%M"]),
    default=None,
    help="When the workout took place (default: now)",
)
@click.option(
    "--exercise",
    "-e",
    "exercise_specs",
    multiple=True,
    help="Exercise as NAME:SETSxREPS[@WEIGHT] (repeatable)",
)
@click.option("--location", "-l", "location_name", help="Saved location name")
@click.option("--notes", help="Free-form notes")
@click.pass_context
@async_command
async def log(
    ctx,
    name: str,
    when: datetime | None,
    exercise_specs: tuple[str, ...],
    location_name: str | None,
    notes: str | None,
):
    """Log a workout that was done without a live session.

    Examples:

        fitness-tracker workout log "Morning lift" -d 2024-03-01 -e "Squat:3x5@100"
    """
    async with open_catalog(ctx) as catalog:
        location = None
        if location_name:
            location = next(
                (loc for loc in catalog.locations if loc.name.casefold() == location_name.casefold()),
                None,
            )
            if location is None:
                echo_error(f"Location {location_name!r} not found")
                ctx.exit(1)

        performed_at = when or datetime.now()
        logged = [parse_logged_exercise(catalog, spec) for spec in exercise_specs]
        for exercise_log in logged:
            for s in exercise_log.sets:
                s.mark_completed(performed_at)

        saved = await catalog.log_past_workout(
            name=name,
            date=performed_at,
            location=location,
            exercises=logged,
            notes=notes,
        )

    echo_success(f"Logged {saved.name!r} ({saved.id[:8]})")


@workout.command(name="list")
@click.option(
    "--date",
    "-d",
    "day",
    type=click.DateTime(formats=["%Y-%m-%d"]),
    default=None,
    help="Only workouts on this day",
)
@click.pass_context
@async_command
async def list_workouts(ctx, day: datetime | None):
    """List logged workouts, most recent first."""
    async with open_catalog(ctx) as catalog:
        if day is not None:
            found = catalog.workouts_on(day.date())
        else:
            found = sorted(
                catalog.workouts,
                key=lambda w: w.started_at or datetime.min,
                reverse=True,
            )

    if not found:
        echo_info("No workouts found. Start one with 'fitness-tracker workout start'")
        return

    headers = ["ID", "Name", "Started", "Exercises", "Sets Done", "Location"]
    rows = [
        [
            w.id[:8],
            truncate(w.name),
            format_date(w.started_at),
            str(len(w.exercise_logs)),
            str(w.completed_set_count),
            w.location.name if w.location else "",
        ]
        for w in found
    ]

    click.echo()
    click.echo(format_table(headers, rows))
    click.echo()
    click.echo(f"Total: {len(found)} workout(s)")


@workout.command()
@click.argument("workout_id")
@click.pass_context
@async_command
async def show(ctx, workout_id: str):
    """Show a logged workout."""
    async with open_catalog(ctx) as catalog:
        found = resolve_workout(catalog, workout_id)

    if found is None:
        echo_error(f"Workout {workout_id} not found")
        ctx.exit(1)

    click.echo()
    click.echo(found.get_summary())
    if found.total_volume:
        click.echo(f"Total volume: {found.total_volume:g}")


@workout.command()
@click.argument("workout_id")
@click.option("--force", "-f", is_flag=True, help="Skip confirmation")
@click.pass_context
@async_command
async def delete(ctx, workout_id: str, force: bool):
    """Delete a logged workout."""
    async with open_catalog(ctx) as catalog:
        found = resolve_workout(catalog, workout_id)
        if found is None:
            echo_error(f"Workout {workout_id} not found")
            ctx.exit(1)

        if not force:
            click.echo(f"Workout: {found.name} ({format_date(found.started_at)})")
            if not click.confirm("Are you sure you want to delete this workout?"):
                echo_info("Cancelled")
                return

        await catalog.delete_workout(found.id)

    echo_success(f"Workout {found.id[:8]} deleted")
