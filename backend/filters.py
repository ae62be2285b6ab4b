from __future__ import annotations

from collections import Counter
from typing import Dict, FrozenSet, Iterable, List, Sequence, Set

from .models import Category, Difficulty, Exercise, FocusArea, WorkoutPlan

FOCUS_EXPANSION: Dict[FocusArea, FrozenSet[Category]] = {
    FocusArea.FULL_BODY: frozenset(Category),
    FocusArea.UPPER_BODY: frozenset({Category.CHEST, Category.BACK, Category.SHOULDERS, Category.ARMS}),
    FocusArea.LOWER_BODY: frozenset({Category.LEGS}),
    FocusArea.CARDIO: frozenset({Category.CARDIO}),
    FocusArea.CHEST: frozenset({Category.CHEST}),
    FocusArea.BACK: frozenset({Category.BACK}),
    FocusArea.SHOULDERS: frozenset({Category.SHOULDERS}),
    FocusArea.ARMS: frozenset({Category.ARMS}),
    FocusArea.LEGS: frozenset({Category.LEGS}),
    FocusArea.CORE: frozenset({Category.CORE}),
    FocusArea.FLEXIBILITY: frozenset({Category.FLEXIBILITY}),
    FocusArea.FUNCTIONAL: frozenset({Category.FUNCTIONAL}),
}

CANONICAL_MUSCLE_GROUPS = (
    "chest", "back", "shoulders", "biceps", "triceps", "quads",
    "hamstrings", "glutes", "calves", "core", "cardiovascular",
)


def difficulty_matches(exercise: Exercise, requested: Difficulty) -> bool:
    """Beginner sees beginner only, intermediate sees both lower tiers.

    Advanced sees advanced and intermediate, minus intermediate stretches, so
    hard sessions are not padded out with easy flexibility work.
    """
    level = exercise.difficulty
    if requested == Difficulty.BEGINNER:
        return level == Difficulty.BEGINNER
    if requested == Difficulty.INTERMEDIATE:
        return level in (Difficulty.BEGINNER, Difficulty.INTERMEDIATE)
    if level == Difficulty.ADVANCED:
        return True
    return level == Difficulty.INTERMEDIATE and exercise.category != Category.FLEXIBILITY


def focus_categories(focus_areas: Sequence[FocusArea]) -> FrozenSet[Category]:
    if not focus_areas or FocusArea.FULL_BODY in focus_areas:
        return FOCUS_EXPANSION[FocusArea.FULL_BODY]
    cats: Set[Category] = set()
    for f in focus_areas:
        cats |= FOCUS_EXPANSION[f]
    return frozenset(cats)


def filter_candidates(
    pool: Iterable[Exercise],
    difficulty: Difficulty,
    focus_areas: Sequence[FocusArea],
) -> List[Exercise]:
    """Narrow an equipment-filtered pool by difficulty and focus."""
    allowed = focus_categories(focus_areas)
    return [e for e in pool if e.category in allowed and difficulty_matches(e, difficulty)]


def underused_muscle_groups(
    recent_plans: Sequence[WorkoutPlan],
    window: int = 5,
    threshold: int = 2,
) -> Set[str]:
    """Canonical muscle groups seen fewer than ``threshold`` times in the last ``window`` plans.

    No history means no bias: the result is empty.
    """
    tail = list(recent_plans)[-window:] if window > 0 else []
    if not tail:
        return set()
    tally: Counter = Counter()
    for plan in tail:
        exercises = list(plan.exercises)
        for child in plan.weekly_workouts:
            exercises.extend(child.exercises)
        for ex in exercises:
            tally.update(m.lower() for m in ex.muscle_groups)
    return {m for m in CANONICAL_MUSCLE_GROUPS if tally[m] < threshold}
