"""Tests for data models."""

from datetime import datetime, timedelta, timezone

import pytest

from fitness_tracker.models.exercises import Difficulty, Equipment, Exercise, MuscleGroup
from fitness_tracker.models.plan import DEFAULT_REST_SECONDS, PlannedExercise, WorkoutPlan
from fitness_tracker.models.workout import (
    REFERENCE_DATE_OFFSET,
    Coordinate,
    ExerciseSet,
    Location,
    Workout,
    WorkoutExercise,
    parse_timestamp,
)


class TestExercise:
    """Tests for Exercise model."""

    def test_exercise_to_dict(self):
        """Test exercise serialization uses camelCase keys."""
        exercise = Exercise(
            name="Kettlebell Swing",
            muscle_group=MuscleGroup.FULL_BODY,
            equipment=Equipment.KETTLEBELL,
            difficulty=Difficulty.INTERMEDIATE,
            description="Hip hinge",
            image_url="https://example.com/swing.png",
            variations=["Single-arm swing"],
        )
        data = exercise.to_dict()

        assert data["name"] == "Kettlebell Swing"
        assert data["muscleGroup"] == "fullBody"
        assert data["equipment"] == "kettlebell"
        assert data["imageURL"] == "https://example.com/swing.png"
        assert data["variations"] == ["Single-arm swing"]

    def test_exercise_from_dict(self):
        """Test exercise deserialization."""
        data = {
            "id": "ABC",
            "name": "Band Pull-apart",
            "muscleGroup": "shoulders",
            "equipment": "resistanceBands",
            "difficulty": "beginner",
            "description": "Rear delt work",
        }
        exercise = Exercise.from_dict(data)

        assert exercise.id == "ABC"
        assert exercise.equipment == Equipment.RESISTANCE_BANDS
        assert exercise.image_url is None
        assert exercise.variations is None

    def test_optional_fields_omitted(self, squat):
        """Test unset optional fields are left out of the record."""
        data = squat.to_dict()
        assert "imageURL" not in data
        assert "variations" not in data

    def test_identity_is_id(self, squat):
        """Test exercises hash by id."""
        assert len({squat, squat}) == 1

    def test_fresh_ids_are_unique(self):
        """Test each new exercise gets its own id."""
        a = Exercise("A", MuscleGroup.ARMS, Equipment.NONE, Difficulty.BEGINNER, "")
        b = Exercise("A", MuscleGroup.ARMS, Equipment.NONE, Difficulty.BEGINNER, "")
        assert a.id != b.id


class TestWorkoutPlan:
    """Tests for WorkoutPlan model."""

    def test_equality_by_id(self, sample_plan):
        """Test plans compare by id only."""
        other = WorkoutPlan(
            id=sample_plan.id,
            name="Renamed",
            description="",
            duration="30 minutes",
            difficulty=Difficulty.BEGINNER,
        )
        assert other == sample_plan
        assert hash(other) == hash(sample_plan)

    def test_plan_round_trip(self, sample_plan):
        """Test a plan survives serialization."""
        restored = WorkoutPlan.from_dict(sample_plan.to_dict())

        assert restored == sample_plan
        assert restored.name == sample_plan.name
        assert [p.target_sets for p in restored.exercises] == [3, 4, 5, 6, 7]
        assert restored.exercises[2].rest_duration == 62

    def test_planned_exercise_default_rest(self, squat):
        """Test rest defaults to sixty seconds."""
        planned = PlannedExercise(exercise=squat, target_sets=3, target_reps=5)
        assert planned.rest_duration == DEFAULT_REST_SECONDS == 60.0

    def test_summary_lists_exercises(self, sample_plan):
        """Test plan summary generation."""
        summary = sample_plan.get_summary()

        assert "Test Plan" in summary
        assert "Squat: 3x8" in summary
        assert "Kettlebell Swing: 7x12" in summary


class TestExerciseSet:
    """Tests for ExerciseSet model."""

    def test_completion_follows_timestamp(self):
        """Test completed is derived from completed_at."""
        s = ExerciseSet(reps=5)
        assert not s.completed

        s.mark_completed(datetime(2024, 1, 1, 10, 0))
        assert s.completed
        assert s.to_dict()["completed"] is True

        s.mark_incomplete()
        assert not s.completed
        assert s.completed_at is None

    def test_flag_without_timestamp_is_incomplete(self):
        """Test a completed flag with no timestamp decodes as not completed."""
        s = ExerciseSet.from_dict({"id": "S1", "reps": 5, "completed": True})
        assert not s.completed

    def test_timestamp_with_false_flag_is_incomplete(self):
        """Test a timestamp contradicted by the flag is dropped."""
        s = ExerciseSet.from_dict(
            {"id": "S1", "reps": 5, "completed": False, "completedAt": "2024-01-01T10:00:00"}
        )
        assert not s.completed
        data = s.to_dict()
        assert data["completed"] is False
        assert "completedAt" not in data

    def test_consistent_record(self):
        """Test an agreeing flag and timestamp decode as completed."""
        s = ExerciseSet.from_dict(
            {
                "id": "S1",
                "reps": 8,
                "weight": 60,
                "setIndex": 2,
                "completed": True,
                "completedAt": "2024-01-01T10:00:00",
            }
        )
        assert s.completed
        assert s.completed_at == datetime(2024, 1, 1, 10, 0)
        assert s.weight == 60.0
        assert s.set_index == 2


class TestTimestamps:
    """Tests for stored timestamp parsing."""

    def test_iso_string(self):
        """Test naive ISO strings are read as-is."""
        assert parse_timestamp("2024-03-04T18:00:00") == datetime(2024, 3, 4, 18, 0)

    def test_reference_date_seconds(self):
        """Test numeric values count from 2001-01-01."""
        assert parse_timestamp(0) == datetime.fromtimestamp(REFERENCE_DATE_OFFSET)
        assert parse_timestamp(60.0) - parse_timestamp(0) == timedelta(seconds=60)

    def test_aware_string_becomes_naive_local(self):
        """Test aware values are converted to local naive time."""
        aware = datetime(2024, 3, 4, 18, 0, tzinfo=timezone.utc)
        parsed = parse_timestamp(aware.isoformat())

        assert parsed.tzinfo is None
        assert parsed == aware.astimezone().replace(tzinfo=None)

    def test_none(self):
        assert parse_timestamp(None) is None

    def test_invalid(self):
        """Test garbage is rejected."""
        with pytest.raises(ValueError):
            parse_timestamp("yesterday")
        with pytest.raises(ValueError):
            parse_timestamp(True)


class TestWorkout:
    """Tests for Workout model."""

    def test_exercise_id_derived(self, squat):
        """Test exercise_id comes from the embedded exercise."""
        log = WorkoutExercise(exercise=squat, workout_id="W1")
        assert log.exercise_id == squat.id

    def test_duration(self):
        """Test duration needs both stamps."""
        workout = Workout(name="W", started_at=datetime(2024, 1, 1, 10, 0))
        assert workout.duration is None

        workout.ended_at = datetime(2024, 1, 1, 11, 15)
        assert workout.duration == timedelta(minutes=75)

    def test_counts_and_volume(self, two_exercise_workout):
        """Test completed set count and volume only include completed sets."""
        done = datetime(2024, 3, 4, 17, 45)
        squat_log, bench_log = two_exercise_workout.exercise_logs
        squat_log.sets = [
            ExerciseSet(reps=5, weight=100, completed_at=done),
            ExerciseSet(reps=5, weight=100),
        ]
        bench_log.sets = [
            ExerciseSet(reps=8, weight=60, completed_at=done),
            ExerciseSet(reps=10, completed_at=done),
        ]

        assert two_exercise_workout.completed_set_count == 3
        assert two_exercise_workout.total_volume == 5 * 100 + 8 * 60

    def test_workout_round_trip(self, two_exercise_workout):
        """Test a workout with location and sets survives serialization."""
        two_exercise_workout.location = Location(
            name="Home gym", coordinate=Coordinate(latitude=51.5, longitude=-0.12)
        )
        two_exercise_workout.ended_at = datetime(2024, 3, 4, 18, 30)
        two_exercise_workout.exercise_logs[0].sets = [
            ExerciseSet(reps=5, weight=100, set_index=0, completed_at=datetime(2024, 3, 4, 17, 40))
        ]

        restored = Workout.from_dict(two_exercise_workout.to_dict())

        assert restored == two_exercise_workout

    def test_summary(self, two_exercise_workout):
        """Test workout summary generation."""
        two_exercise_workout.ended_at = datetime(2024, 3, 4, 18, 0)
        summary = two_exercise_workout.get_summary()

        assert "Session" in summary
        assert "Duration: 30 min" in summary
        assert "1. Squat (target 3x5)" in summary
