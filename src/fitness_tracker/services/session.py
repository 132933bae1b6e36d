"""Active workout session state."""

import copy
import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum

from ..models.workout import ExerciseSet, Workout, WorkoutExercise
from .notifications import RestNotificationScheduler

logger = logging.getLogger(__name__)

REST_FINISHED_TITLE = "Rest finished"
REST_FINISHED_BODY = "Time to start your next set"


class SessionState(str, Enum):
    """Lifecycle of a session."""

    ACTIVE = "active"
    FINALIZED = "finalized"


class RestState(str, Enum):
    """Rest timer sub-state of an active session."""

    NO_REST = "no_rest"
    RESTING = "resting"


@dataclass(frozen=True)
class RestTimer:
    """A countdown between sets.

    The timer holds no running clock; remaining time is computed from the
    start stamp whenever it is asked for.
    """

    duration: float  # seconds
    started_at: datetime

    @property
    def ends_at(self) -> datetime:
        return self.started_at + timedelta(seconds=self.duration)

    def remaining(self, now: datetime | None = None) -> float:
        """Seconds left, never negative."""
        if now is None:
            now = datetime.now()
        return max(0.0, (self.ends_at - now).total_seconds())

    def is_finished(self, now: datetime | None = None) -> bool:
        return self.remaining(now) <= 0


class ActiveWorkoutSession:
    """Tracks one in-progress workout.

    The session works on a private copy of the workout it was started with.
    Commands that point at a missing exercise or set do nothing and return
    False; the caller is expected to only offer valid choices.
    """

    def __init__(
        self,
        workout: Workout,
        notification_scheduler: RestNotificationScheduler,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.workout = copy.deepcopy(workout)
        self.current_exercise_index = 0
        self.rest_timer: RestTimer | None = None
        self.state = SessionState.ACTIVE
        self._notification_scheduler = notification_scheduler
        self._clock = clock

    @property
    def current_exercise(self) -> WorkoutExercise | None:
        """The exercise under the cursor, or None for an empty workout."""
        logs = self.workout.exercise_logs
        if 0 <= self.current_exercise_index < len(logs):
            return logs[self.current_exercise_index]
        return None

    @property
    def completed_set_count(self) -> int:
        return self.workout.completed_set_count

    def next_exercise(self) -> bool:
        """Move the cursor forward; stays put on the last exercise."""
        if self.current_exercise_index + 1 >= len(self.workout.exercise_logs):
            return False
        self.current_exercise_index += 1
        return True

    def previous_exercise(self) -> bool:
        """Move the cursor back; stays put on the first exercise."""
        if self.current_exercise_index - 1 < 0:
            return False
        self.current_exercise_index -= 1
        return True

    def add_exercise(self, exercise_log: WorkoutExercise) -> WorkoutExercise:
        """Append a copy of ``exercise_log`` after the last exercise.

        The cursor does not move, except that an empty workout now has a
        current exercise.
        """
        added = copy.deepcopy(exercise_log)
        added.workout_id = self.workout.id
        added.order = len(self.workout.exercise_logs)
        self.workout.exercise_logs.append(added)
        return added

    def add_set(self, reps: int, weight: float | None = None, rpe: float | None = None) -> bool:
        """Append a pending set to the current exercise."""
        exercise = self.current_exercise
        if exercise is None:
            return False
        exercise.sets.append(
            ExerciseSet(set_index=len(exercise.sets), reps=reps, weight=weight, rpe=rpe)
        )
        return True

    def update_set(
        self, index: int, reps: int, weight: float | None = None, rpe: float | None = None
    ) -> bool:
        """Overwrite the numbers of one set of the current exercise."""
        target = self._set_at(index)
        if target is None:
            return False
        target.reps = reps
        target.weight = weight
        target.rpe = rpe
        return True

    def complete_set(self, index: int) -> bool:
        """Mark a set done and start the exercise's rest period, if it has one."""
        target = self._set_at(index)
        if target is None:
            return False
        target.mark_completed(self._clock())

        rest = self.current_exercise.target_rest
        if rest is not None and rest > 0:
            self.start_rest_timer(rest)
        return True

    def start_rest_timer(self, duration: float) -> RestTimer:
        """Start (or restart) the rest countdown and schedule its reminder."""
        timer = RestTimer(duration=duration, started_at=self._clock())
        self.rest_timer = timer
        self._notify_rest_finished(timer.ends_at)
        return timer

    def cancel_rest_timer(self) -> None:
        """Drop the rest countdown. An already scheduled reminder still fires."""
        self.rest_timer = None

    def rest_state(self, now: datetime | None = None) -> RestState:
        if self.rest_timer is None or self.rest_timer.is_finished(now or self._clock()):
            return RestState.NO_REST
        return RestState.RESTING

    def tick(self, now: datetime | None = None) -> float:
        """Sample the rest countdown, clearing it once it has run out.

        Returns:
            Seconds of rest remaining (0 when not resting)
        """
        if self.rest_timer is None:
            return 0.0
        remaining = self.rest_timer.remaining(now or self._clock())
        if remaining <= 0:
            self.rest_timer = None
        return remaining

    def finalize(self) -> Workout:
        """Produce the completed workout.

        The end time is stamped on every call; the start time is filled in
        only if the workout never had one.
        """
        now = self._clock()
        finished = copy.deepcopy(self.workout)
        if finished.started_at is None:
            finished.started_at = now
        finished.ended_at = now
        self.state = SessionState.FINALIZED
        return finished

    def _set_at(self, index: int) -> ExerciseSet | None:
        exercise = self.current_exercise
        if exercise is None or not 0 <= index < len(exercise.sets):
            return None
        return exercise.sets[index]

    def _notify_rest_finished(self, ends_at: datetime) -> None:
        scheduler = self._notification_scheduler
        try:
            scheduler.request_authorization_if_needed()
            scheduler.schedule_rest_notification(
                ends_at=ends_at,
                title=REST_FINISHED_TITLE,
                body=REST_FINISHED_BODY,
            )
        except Exception:
            logger.warning("Failed to schedule rest notification", exc_info=True)
