"""Workout catalog: the application's single source of truth."""

import copy
import logging
from collections.abc import Callable, Iterable
from datetime import date, datetime
from pathlib import Path

import aiosqlite

from ..data.exercise_loader import load_default_exercises, load_default_plans
from ..db.engine import get_db_path
from ..db.persistence import DecodeError, encode_workouts
from ..db.repositories import LocationRepository, PlanRepository, WorkoutRepository
from ..models.exercises import Difficulty, Exercise, new_id
from ..models.plan import PlannedExercise, WorkoutPlan
from ..models.workout import Coordinate, ExerciseSet, Location, Workout, WorkoutExercise
from ..utils.exercise_utils import exercise_history, find_exercise_by_name, workouts_on
from .background import BackgroundTasks
from .calendar import CalendarAccessError, CalendarService, LocalCalendarService
from .location import FixedLocationService, LocationService
from .notifications import RestNotificationScheduler
from .session import ActiveWorkoutSession

logger = logging.getLogger(__name__)

DEFAULT_PLAN_DURATION = "60 minutes"


class WorkoutCatalog:
    """Holds workouts, plans, exercises and locations.

    Create one per process, call :meth:`load` before use and hand the same
    instance to every consumer. Every mutating command persists before it
    returns; calendar sync runs in the background and never affects the
    local result.
    """

    def __init__(
        self,
        db_path: Path | None = None,
        calendar: CalendarService | None = None,
        location_service: LocationService | None = None,
        background: BackgroundTasks | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.db_path = db_path or get_db_path()
        self.workout_repo = WorkoutRepository(self.db_path)
        self.location_repo = LocationRepository(self.db_path)
        self.plan_repo = PlanRepository(self.db_path)
        self.calendar = calendar or LocalCalendarService(self.db_path)
        self.location_service = location_service or FixedLocationService()
        self.background = background or BackgroundTasks()
        self._clock = clock

        self.workouts: list[Workout] = []
        self.exercises: list[Exercise] = []
        self.builtin_plans: list[WorkoutPlan] = []
        self.custom_plans: list[WorkoutPlan] = []
        self.locations: list[Location] = []
        self.active_workout: Workout | None = None

    @property
    def workout_plans(self) -> list[WorkoutPlan]:
        return self.builtin_plans + self.custom_plans

    # Lifecycle

    async def load(self) -> None:
        """Load persisted data and seed the built-in content.

        Unreadable data is logged and treated as empty. Workouts read from an
        older format are written back immediately in the current one.
        """
        requires_migration_save = False

        try:
            decoded = await self.workout_repo.load()
            if decoded is not None:
                self.workouts = decoded.workouts
                requires_migration_save = decoded.migrated
        except (DecodeError, aiosqlite.Error, OSError) as e:
            logger.error("Error loading workouts: %s", e)

        try:
            self.locations = await self.location_repo.load() or []
        except (DecodeError, aiosqlite.Error, OSError) as e:
            logger.error("Error loading locations: %s", e)

        try:
            self.custom_plans = await self.plan_repo.load() or []
        except (DecodeError, aiosqlite.Error, OSError) as e:
            logger.error("Error loading plans: %s", e)

        if not self.exercises:
            self.exercises = load_default_exercises()
        if not self.builtin_plans:
            self.builtin_plans = load_default_plans(self.exercises)

        if requires_migration_save:
            logger.info("Saving workouts in schema format after migration")
            await self.save()

    async def save(self) -> bool:
        """Persist workouts, locations and custom plans.

        Returns:
            False if the write failed; in-memory state is kept either way.
        """
        try:
            await self.workout_repo.save(self.workouts)
            await self.location_repo.save(self.locations)
            await self.plan_repo.save(self.custom_plans)
        except (aiosqlite.Error, OSError) as e:
            logger.error("Error saving data: %s", e)
            return False
        return True

    def setup_initial_access(self) -> None:
        """Ask the calendar and location services for access."""
        self.background.dispatch("calendar-access", self._request_calendar_access())
        if not self.location_service.request_access():
            logger.info("Location access not available")

    async def shutdown(self) -> None:
        """Let outstanding background work finish."""
        await self.background.drain()

    # Workouts

    def start_new_workout(
        self,
        name: str,
        exercises: Iterable[PlannedExercise] | None = None,
        plan: WorkoutPlan | None = None,
    ) -> Workout:
        """Start a workout from planned exercises or a plan.

        Any unfinished active workout is discarded.
        """
        if exercises is None:
            exercises = plan.exercises if plan is not None else []

        workout_id = new_id()
        logs = [
            self._log_from_planned(workout_id, planned, order)
            for order, planned in enumerate(exercises)
        ]
        self.active_workout = Workout(
            id=workout_id,
            name=name,
            started_at=self._clock(),
            exercise_logs=logs,
        )
        logger.info("Started workout %r with %d exercises", name, len(logs))
        return self.active_workout

    def begin_session(
        self, notification_scheduler: RestNotificationScheduler
    ) -> ActiveWorkoutSession | None:
        """Open a live session over the active workout."""
        if self.active_workout is None:
            return None
        return ActiveWorkoutSession(
            self.active_workout, notification_scheduler, clock=self._clock
        )

    def add_exercise_to_workout(self, planned: PlannedExercise) -> WorkoutExercise | None:
        """Append an exercise to the active workout."""
        workout = self.active_workout
        if workout is None:
            return None
        log = self._log_from_planned(workout.id, planned, len(workout.exercise_logs))
        workout.exercise_logs.append(log)
        return log

    async def end_workout(self, workout: Workout) -> Workout:
        """Store a finished workout in history.

        A workout already in history is replaced in place; otherwise it is
        appended. Missing start/end times are filled in on a copy; the
        caller's workout is left as it was. The new history is encoded before
        anything changes, so a workout that cannot be encoded raises and
        leaves history and the active workout untouched.
        """
        finished = copy.deepcopy(workout)
        index = next((i for i, w in enumerate(self.workouts) if w.id == finished.id), None)

        updated = list(self.workouts)
        if index is not None:
            if finished.ended_at is None:
                finished.ended_at = self._clock()
            if finished.started_at is None:
                finished.started_at = finished.ended_at
            updated[index] = finished
        else:
            if finished.started_at is None:
                finished.started_at = self._clock()
            if finished.ended_at is None:
                finished.ended_at = finished.started_at
            updated.append(finished)

        encode_workouts(updated)
        self.workouts = updated
        self.active_workout = None

        replaced = index is not None
        self.background.dispatch(
            f"calendar-{'update' if replaced else 'add'}:{finished.id}",
            self._sync_calendar(finished, update=replaced),
        )

        await self.save()
        return finished

    async def log_past_workout(
        self,
        name: str,
        date: datetime,
        location: Location | None = None,
        exercises: Iterable[WorkoutExercise] = (),
        notes: str | None = None,
    ) -> Workout:
        """Record a workout that was done without a live session.

        Exercises are renumbered in the order given and their sets get
        indices 0..n-1 in list order.
        """
        workout_id = new_id()
        logs = []
        for order, exercise in enumerate(exercises):
            sets = [
                ExerciseSet(
                    id=s.id,
                    set_index=set_index,
                    reps=s.reps,
                    weight=s.weight,
                    rpe=s.rpe,
                    completed_at=s.completed_at,
                )
                for set_index, s in enumerate(exercise.sets)
            ]
            logs.append(
                WorkoutExercise(
                    id=exercise.id,
                    workout_id=workout_id,
                    exercise=exercise.exercise,
                    order=order,
                    target_sets=exercise.target_sets,
                    target_reps=exercise.target_reps,
                    target_weight=exercise.target_weight,
                    target_rest=exercise.target_rest,
                    notes=exercise.notes,
                    sets=sets,
                )
            )

        workout = Workout(
            id=workout_id,
            name=name,
            started_at=date,
            ended_at=date,
            location=location,
            notes=notes,
            exercise_logs=logs,
        )
        self.workouts.append(workout)
        await self.save()

        self.background.dispatch(f"calendar-add:{workout.id}", self._sync_calendar(workout))
        return workout

    async def delete_workout(self, workout_id: str) -> bool:
        """Remove a workout from history and from the calendar."""
        workout = self.get_workout(workout_id)
        if workout is None:
            return False
        self.workouts = [w for w in self.workouts if w.id != workout_id]
        await self.save()
        self.background.dispatch(
            f"calendar-remove:{workout_id}", self.calendar.remove_event(workout)
        )
        return True

    def get_workout(self, workout_id: str) -> Workout | None:
        return next((w for w in self.workouts if w.id == workout_id), None)

    def workouts_on(self, day: date) -> list[Workout]:
        return workouts_on(self.workouts, day)

    # Exercises and plans

    def find_exercise(self, name: str) -> Exercise | None:
        return find_exercise_by_name(self.exercises, name)

    def get_exercise_history(self, exercise: Exercise) -> list[str] | None:
        return exercise_history(self.workouts, exercise)

    def get_plan(self, plan_id: str) -> WorkoutPlan | None:
        return next((p for p in self.workout_plans if p.id == plan_id), None)

    async def create_workout_plan(
        self, name: str, description: str, difficulty: Difficulty
    ) -> WorkoutPlan:
        """Create an empty plan with the default duration."""
        plan = WorkoutPlan(
            name=name,
            description=description,
            duration=DEFAULT_PLAN_DURATION,
            difficulty=difficulty,
            exercises=[],
        )
        self.custom_plans.append(plan)
        await self.save()
        return plan

    # Locations

    async def add_location(self, location: Location) -> None:
        self.locations.append(location)
        await self.save()

    async def delete_location(self, location_id: str) -> None:
        self.locations = [loc for loc in self.locations if loc.id != location_id]
        await self.save()

    def get_location(self, location_id: str) -> Location | None:
        return next((loc for loc in self.locations if loc.id == location_id), None)

    def current_coordinate(self) -> Coordinate | None:
        return self.location_service.current_coordinate()

    # Helpers

    def _log_from_planned(
        self, workout_id: str, planned: PlannedExercise, order: int
    ) -> WorkoutExercise:
        return WorkoutExercise(
            workout_id=workout_id,
            exercise=planned.exercise,
            order=order,
            target_sets=planned.target_sets,
            target_reps=planned.target_reps,
            target_weight=None,
            target_rest=planned.rest_duration,
            notes=planned.notes,
            sets=[],
        )

    async def _request_calendar_access(self) -> None:
        try:
            await self.calendar.request_access()
        except CalendarAccessError as e:
            logger.warning("Failed to get calendar access: %s", e)

    async def _sync_calendar(self, workout: Workout, update: bool = False) -> None:
        try:
            if update:
                await self.calendar.update_event(workout)
            else:
                await self.calendar.add_event(workout)
        except CalendarAccessError as e:
            logger.warning("Error adding workout to calendar: %s", e)
