"""Tests for utility functions and built-in content."""

import json
from datetime import datetime

import pytest

from fitness_tracker.data import exercise_loader
from fitness_tracker.data.exercise_loader import load_default_exercises, load_default_plans
from fitness_tracker.models.exercises import Difficulty, Equipment, MuscleGroup
from fitness_tracker.models.workout import Workout
from fitness_tracker.utils.exercise_utils import (
    categorize_exercises_by_muscle_group,
    count_workouts_this_month,
    count_workouts_this_week,
    filter_exercises,
    find_exercise_by_name,
    normalize_exercise_name,
    workouts_on,
)


@pytest.fixture(scope="module")
def library():
    return load_default_exercises()


class TestNormalizeExerciseName:
    """Tests for normalize_exercise_name function."""

    def test_lowercase_and_strip(self):
        """Test basic normalization."""
        assert normalize_exercise_name("  Bench Press  ") == "bench press"

    def test_abbreviation_expansion(self):
        """Test abbreviation expansion."""
        assert normalize_exercise_name("KB") == "kettlebell"
        assert normalize_exercise_name("OHP") == "overhead press"
        assert normalize_exercise_name("RDL") == "romanian deadlift"

    def test_inline_abbreviation(self):
        """Test abbreviation expansion within name."""
        assert normalize_exercise_name("DB Row") == "dumbbell row"
        assert normalize_exercise_name("KB Swing") == "kettlebell swing"

    def test_hyphens_and_whitespace(self):
        """Test hyphens and runs of whitespace collapse to single spaces."""
        assert normalize_exercise_name("Pull-up") == "pull up"
        assert normalize_exercise_name("Bench   Press") == "bench press"


class TestFindExerciseByName:
    """Tests for find_exercise_by_name function."""

    def test_exact_match(self, library):
        """Test exact name matching."""
        assert find_exercise_by_name(library, "Bench Press").name == "Bench Press"

    def test_case_and_hyphen_insensitive(self, library):
        """Test case and punctuation do not matter."""
        assert find_exercise_by_name(library, "pull up").name == "Pull-up"

    def test_abbreviation_match(self, library):
        """Test abbreviation matching."""
        assert find_exercise_by_name(library, "OHP").name == "Overhead Press"
        assert find_exercise_by_name(library, "KB swing").name == "Kettlebell Swing"

    def test_fuzzy_match(self, library):
        """Test fuzzy matching."""
        result = find_exercise_by_name(library, "Bench Pres")  # Missing 's'
        assert result is not None
        assert result.name == "Bench Press"

    def test_no_match_below_threshold(self, library):
        """Test no match returned for low similarity."""
        assert find_exercise_by_name(library, "xyzabc123") is None

    def test_custom_threshold(self, library):
        """Test a strict threshold rejects a near miss."""
        assert find_exercise_by_name(library, "Bench Pres", threshold=0.99) is None

    def test_empty_library(self):
        assert find_exercise_by_name([], "Squat") is None


class TestFilterExercises:
    """Tests for filter_exercises function."""

    def test_no_filters(self, library):
        assert filter_exercises(library) == library

    def test_search_name_and_description(self, library):
        """Test search matches name or description, ignoring case."""
        by_name = filter_exercises(library, search="SQUAT")
        assert "Bulgarian Split Squat" in [e.name for e in by_name]
        assert all(
            "squat" in e.name.lower() or "squat" in e.description.lower() for e in by_name
        )

    def test_combined_filters(self, library):
        """Test every criterion must hold."""
        result = filter_exercises(
            library,
            muscle_group=MuscleGroup.CHEST,
            equipment=Equipment.BARBELL,
        )
        assert result
        assert all(e.muscle_group == MuscleGroup.CHEST for e in result)
        assert all(e.equipment == Equipment.BARBELL for e in result)
        assert "Bench Press" in [e.name for e in result]

    def test_difficulty(self, library):
        result = filter_exercises(library, difficulty=Difficulty.ADVANCED)
        assert result
        assert all(e.difficulty == Difficulty.ADVANCED for e in result)


class TestCategorizeExercisesByMuscleGroup:
    """Tests for categorize_exercises_by_muscle_group function."""

    def test_categorization(self, library):
        """Test exercise categorization."""
        result = categorize_exercises_by_muscle_group(library)

        assert set(result) == {g.value for g in MuscleGroup}
        assert "Bench Press" in [e.name for e in result["chest"]]
        assert sum(len(v) for v in result.values()) == len(library)

    def test_empty_input(self):
        """Test with empty input."""
        result = categorize_exercises_by_muscle_group([])
        for category in result.values():
            assert len(category) == 0


class TestWorkoutCounts:
    """Tests for workout date helpers."""

    def test_week_and_month(self):
        """Test counts use the ISO week and calendar month of now."""
        now = datetime(2024, 3, 6, 12, 0)  # Wednesday
        workouts = [
            Workout(name="Mon", started_at=datetime(2024, 3, 4, 7, 0)),
            Workout(name="Sun before", started_at=datetime(2024, 3, 3, 7, 0)),
            Workout(name="Feb", started_at=datetime(2024, 2, 28, 7, 0)),
            Workout(name="Unstarted"),
        ]

        assert count_workouts_this_week(workouts, now) == 1
        assert count_workouts_this_month(workouts, now) == 2

    def test_workouts_on_skips_unstarted(self):
        workouts = [Workout(name="Unstarted"), Workout(name="A", started_at=datetime(2024, 3, 4))]
        assert [w.name for w in workouts_on(workouts, datetime(2024, 3, 4).date())] == ["A"]


class TestBuiltinContent:
    """Tests for the built-in exercise and plan catalog."""

    def test_exercises_loaded(self, library):
        """Test the library is populated with unique names and ids."""
        names = [e.name for e in library]
        assert len(library) > 50
        assert len(set(names)) == len(names)
        assert len({e.id for e in library}) == len(library)
        assert "Deadlift" in names

    def test_ids_stable(self, library):
        """Test ids are derived from names."""
        again = load_default_exercises()
        assert [e.id for e in again] == [e.id for e in library]

    def test_plans_resolve_exercises(self, library):
        """Test every built-in plan references library exercises."""
        plans = load_default_plans(library)
        ids = {e.id for e in library}

        assert len(plans) > 10
        for plan in plans:
            assert plan.exercises
            assert all(p.exercise.id in ids for p in plan.exercises)

    def test_unknown_exercise_skipped(self, library, tmp_path, monkeypatch):
        """Test plan entries naming unknown exercises are dropped."""
        plans_file = tmp_path / "plans.json"
        plans_file.write_text(
            json.dumps(
                {
                    "plans": [
                        {
                            "name": "Mixed",
                            "difficulty": "beginner",
                            "exercises": [["Squat", 3, 5], ["Moon Walk", 3, 5]],
                        },
                        {"name": "Broken", "difficulty": "impossible", "exercises": []},
                    ]
                }
            )
        )
        monkeypatch.setattr(exercise_loader, "get_plans_json_path", lambda: plans_file)

        plans = load_default_plans(library)

        assert [p.name for p in plans] == ["Mixed"]
        assert [p.exercise.name for p in plans[0].exercises] == ["Squat"]
