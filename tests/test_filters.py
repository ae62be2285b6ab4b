import pytest

from backend.filters import (
    CANONICAL_MUSCLE_GROUPS,
    difficulty_matches,
    filter_candidates,
    focus_categories,
    underused_muscle_groups,
)
from backend.models import Category, Difficulty, FocusArea, WorkoutPlan
from conftest import make_exercise


def plan_with(*exercises):
    return WorkoutPlan(
        id="p", user_id="u", name="Past", description="", exercises=list(exercises),
        duration=30, difficulty="beginner", category="full-body", equipment="none",
    )


@pytest.mark.parametrize(
    "requested, level, category, expected",
    [
        ("beginner", "beginner", "chest", True),
        ("beginner", "intermediate", "chest", False),
        ("intermediate", "beginner", "chest", True),
        ("intermediate", "advanced", "chest", False),
        ("advanced", "advanced", "chest", True),
        ("advanced", "intermediate", "chest", True),
        ("advanced", "intermediate", "flexibility", False),
        ("advanced", "advanced", "flexibility", True),
        ("advanced", "beginner", "chest", False),
    ],
)
def test_difficulty_matching(requested, level, category, expected):
    e = make_exercise("x", difficulty=level, category=category)
    assert difficulty_matches(e, Difficulty(requested)) is expected


def test_empty_focus_and_full_body_allow_everything():
    assert focus_categories([]) == frozenset(Category)
    assert focus_categories([FocusArea.CORE, FocusArea.FULL_BODY]) == frozenset(Category)


def test_coarse_focus_tags_expand():
    assert focus_categories([FocusArea.UPPER_BODY]) == {
        Category.CHEST, Category.BACK, Category.SHOULDERS, Category.ARMS,
    }
    assert focus_categories([FocusArea.LOWER_BODY, FocusArea.CARDIO]) == {Category.LEGS, Category.CARDIO}


def test_filter_candidates_applies_both_constraints():
    pool = [
        make_exercise("row", category="back"),
        make_exercise("squat", category="legs"),
        make_exercise("hard-row", category="back", difficulty="advanced"),
    ]
    kept = filter_candidates(pool, Difficulty.BEGINNER, [FocusArea.UPPER_BODY])
    assert [e.id for e in kept] == ["row"]


def test_no_history_means_no_underused_groups():
    assert underused_muscle_groups([]) == set()
    assert underused_muscle_groups([plan_with()], window=0) == set()


def test_one_plan_of_history_marks_unseen_groups():
    push = make_exercise("push", muscle_groups=["chest"])
    assert underused_muscle_groups([plan_with(push)]) == set(CANONICAL_MUSCLE_GROUPS)


def test_groups_seen_twice_are_not_underused():
    push = make_exercise("push", muscle_groups=["Chest", "triceps"])
    history = [plan_with(push), plan_with(push)]
    underused = underused_muscle_groups(history)
    assert "chest" not in underused
    assert "triceps" not in underused
    assert "quads" in underused


def test_only_the_last_five_plans_count():
    squat = make_exercise("squat", category="legs", muscle_groups=["quads"])
    plank = make_exercise("plank", category="core", muscle_groups=["core"])
    history = [plan_with(squat), plan_with(squat)] + [plan_with(plank) for _ in range(5)]
    underused = underused_muscle_groups(history)
    assert "quads" in underused
    assert "core" not in underused


def test_weekly_history_counts_child_sessions():
    squat = make_exercise("squat", category="legs", muscle_groups=["quads"])
    container = plan_with()
    container = container.model_copy(update={"weekly_workouts": [plan_with(squat), plan_with(squat)]})
    assert "quads" not in underused_muscle_groups([container])
