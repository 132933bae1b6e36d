"""Pytest configuration and fixtures."""

import tempfile
from datetime import datetime, timedelta
from pathlib import Path

import pytest

from fitness_tracker.db import init_db
from fitness_tracker.models.exercises import Difficulty, Equipment, Exercise, MuscleGroup
from fitness_tracker.models.plan import PlannedExercise, WorkoutPlan
from fitness_tracker.models.workout import Workout, WorkoutExercise
from fitness_tracker.services.background import BackgroundTasks
from fitness_tracker.services.calendar import CalendarAccessError, LocalCalendarService
from fitness_tracker.services.catalog import WorkoutCatalog


class FakeClock:
    """Clock that only moves when told to."""

    def __init__(self, start: datetime | None = None):
        self.now = start or datetime(2024, 3, 4, 18, 0, 0)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> datetime:
        self.now += timedelta(seconds=seconds)
        return self.now


class RecordingScheduler:
    """Notification scheduler that remembers what it was asked to do."""

    def __init__(self):
        self.authorization_requests = 0
        self.scheduled: list[tuple[datetime, str, str]] = []

    def request_authorization_if_needed(self) -> None:
        self.authorization_requests += 1

    def schedule_rest_notification(self, ends_at: datetime, title: str, body: str) -> None:
        self.scheduled.append((ends_at, title, body))


class FailingScheduler:
    """Notification scheduler whose every call fails."""

    def request_authorization_if_needed(self) -> None:
        raise RuntimeError("notifications unavailable")

    def schedule_rest_notification(self, ends_at: datetime, title: str, body: str) -> None:
        raise RuntimeError("notifications unavailable")


class RecordingCalendar:
    """Calendar that records calls and can be told to fail."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.calls: list[tuple[str, str]] = []

    async def request_access(self) -> None:
        self.calls.append(("request_access", ""))
        if self.fail:
            raise CalendarAccessError("denied")

    async def list_events(self, start, end):
        return []

    async def add_event(self, workout: Workout):
        self.calls.append(("add", workout.id))
        if self.fail:
            raise CalendarAccessError("denied")

    async def remove_event(self, workout: Workout) -> bool:
        self.calls.append(("remove", workout.id))
        return not self.fail

    async def update_event(self, workout: Workout):
        self.calls.append(("update", workout.id))
        if self.fail:
            raise CalendarAccessError("denied")


@pytest.fixture
def temp_db_path():
    """Create a temporary database path."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir) / "test.db"


@pytest.fixture
async def db_path(temp_db_path):
    """A temporary database with the schema in place."""
    await init_db(temp_db_path)
    return temp_db_path


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def scheduler():
    return RecordingScheduler()


@pytest.fixture
def calendar():
    return RecordingCalendar()


@pytest.fixture
async def catalog(db_path, calendar, clock):
    """A loaded catalog over an empty database."""
    catalog = WorkoutCatalog(db_path, calendar=calendar, background=BackgroundTasks(), clock=clock)
    await catalog.load()
    yield catalog
    await catalog.shutdown()


@pytest.fixture
def squat():
    return Exercise(
        name="Squat",
        muscle_group=MuscleGroup.LEGS,
        equipment=Equipment.BARBELL,
        difficulty=Difficulty.INTERMEDIATE,
        description="A compound lower body exercise",
    )


@pytest.fixture
def bench_press():
    return Exercise(
        name="Bench Press",
        muscle_group=MuscleGroup.CHEST,
        equipment=Equipment.BARBELL,
        difficulty=Difficulty.INTERMEDIATE,
        description="A compound pushing exercise",
    )


@pytest.fixture
def sample_exercises(squat, bench_press):
    """Five distinct exercises."""
    return [
        squat,
        bench_press,
        Exercise(
            name="Pull-up",
            muscle_group=MuscleGroup.BACK,
            equipment=Equipment.BODYWEIGHT,
            difficulty=Difficulty.INTERMEDIATE,
            description="Vertical pulling exercise",
        ),
        Exercise(
            name="Plank",
            muscle_group=MuscleGroup.CORE,
            equipment=Equipment.NONE,
            difficulty=Difficulty.BEGINNER,
            description="Isometric core hold",
        ),
        Exercise(
            name="Kettlebell Swing",
            muscle_group=MuscleGroup.FULL_BODY,
            equipment=Equipment.KETTLEBELL,
            difficulty=Difficulty.INTERMEDIATE,
            description="Explosive hip hinge",
        ),
    ]


@pytest.fixture
def sample_plan(sample_exercises):
    """A plan with five planned exercises of varying targets."""
    return WorkoutPlan(
        name="Test Plan",
        description="Five exercises",
        duration="60 minutes",
        difficulty=Difficulty.INTERMEDIATE,
        exercises=[
            PlannedExercise(exercise=ex, target_sets=3 + i, target_reps=8 + i, rest_duration=60 + i)
            for i, ex in enumerate(sample_exercises)
        ],
    )


@pytest.fixture
def two_exercise_workout(squat, bench_press):
    """A workout with two exercises and no sets, rest 90s on each."""
    workout = Workout(name="Session", started_at=datetime(2024, 3, 4, 17, 30))
    workout.exercise_logs = [
        WorkoutExercise(
            exercise=ex,
            workout_id=workout.id,
            order=i,
            target_sets=3,
            target_reps=5,
            target_rest=90,
        )
        for i, ex in enumerate([squat, bench_press])
    ]
    return workout


@pytest.fixture
def denied_calendar(db_path):
    return LocalCalendarService(db_path, access_granted=False)


@pytest.fixture
def failing_scheduler():
    return FailingScheduler()


@pytest.fixture
def failing_calendar():
    return RecordingCalendar(fail=True)
