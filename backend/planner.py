from __future__ import annotations

import uuid
from dataclasses import dataclass
from datetime import date
from typing import Callable, List, Optional, Sequence, Set, Tuple

import numpy as np

from .catalog import ExerciseCatalog, load_catalog
from .config import Settings, get_settings
from .equipment import equipment_labels, filter_by_equipment
from .filters import filter_candidates, underused_muscle_groups
from .logging_config import get_logger
from .models import (
    Category,
    Difficulty,
    Exercise,
    FocusArea,
    PlanMode,
    PlanRequest,
    WorkoutPlan,
)
from .schedule import ScheduledDay, build_week, suggested_rest_days

logger = get_logger(__name__)

REST_BY_DIFFICULTY = {
    Difficulty.BEGINNER: 60,
    Difficulty.INTERMEDIATE: 90,
    Difficulty.ADVANCED: 120,
}
CARDIO_REST_SECONDS = 60
SECONDS_PER_REP = 3
STRETCHES_PER_BLOCK = 2


def rest_time(exercise: Exercise, difficulty: Difficulty) -> int:
    if exercise.category == Category.CARDIO:
        return CARDIO_REST_SECONDS
    return REST_BY_DIFFICULTY[difficulty]


def exercise_seconds(exercise: Exercise) -> int:
    """Nominal working time; rep-only entries are estimated from sets x reps."""
    if exercise.duration is not None:
        return exercise.duration
    return (exercise.sets or 1) * (exercise.reps or 0) * SECONDS_PER_REP


def pack_exercises(
    candidates: Sequence[Exercise],
    budget_seconds: int,
    cost: Callable[[Exercise], int],
    gap_fill_threshold: int = 300,
) -> Tuple[List[Exercise], int]:
    """Greedy accept-or-skip scan over ``candidates`` in order, then a gap-filling pass.

    Returns the selected exercises (in candidate order per pass) and the seconds used.
    The total never exceeds ``budget_seconds``.
    """
    selected: List[Exercise] = []
    chosen_ids: Set[str] = set()
    used = 0
    for ex in candidates:
        c = cost(ex)
        if used + c <= budget_seconds:
            selected.append(ex)
            chosen_ids.add(ex.id)
            used += c
        else:
            logger.debug("Skipped candidate", extra={"ctx_exercise": ex.id, "ctx_cost": c})

    if budget_seconds - used > gap_fill_threshold:
        for ex in candidates:
            if budget_seconds - used < gap_fill_threshold:
                break
            if ex.id in chosen_ids:
                continue
            c = cost(ex)
            if used + c <= budget_seconds:
                selected.append(ex)
                chosen_ids.add(ex.id)
                used += c
    return selected, used


def focus_label(focus_areas: Sequence[FocusArea]) -> str:
    if not focus_areas or FocusArea.FULL_BODY in focus_areas:
        return "Full Body"
    return " & ".join(f.value.replace("-", " ").title() for f in focus_areas)


@dataclass
class _Session:
    exercises: List[Exercise]
    main_count: int
    pool_size: int
    used_seconds: int
    budget_seconds: int
    warmup_count: int = 0
    cooldown_count: int = 0


class Planner:
    def __init__(self, catalog: Optional[ExerciseCatalog] = None, settings: Optional[Settings] = None) -> None:
        self.settings = settings or get_settings()
        self.catalog = catalog if catalog is not None else load_catalog(self.settings.catalog_path)

    def generate(
        self,
        req: PlanRequest,
        recent_plans: Sequence[WorkoutPlan] = (),
        rng: Optional[np.random.Generator] = None,
        today: Optional[date] = None,
    ) -> WorkoutPlan:
        rng = rng if rng is not None else np.random.default_rng(req.seed)
        if req.mode == PlanMode.WEEKLY:
            return self._generate_weekly(req, rng, today or date.today())

        underused = underused_muscle_groups(
            recent_plans,
            window=self.settings.recent_plan_window,
            threshold=self.settings.underused_threshold,
        )
        session = self._build_session(req, req.focus_areas, underused, rng)
        label = focus_label(req.focus_areas)
        return WorkoutPlan(
            id=str(uuid.uuid4()),
            user_id=req.user_id,
            name=f"{label} Workout",
            description=self._describe(req, label, session),
            exercises=session.exercises,
            duration=req.duration,
            realized_duration=self._realized_minutes(session),
            difficulty=req.difficulty,
            category=",".join(f.value for f in req.focus_areas) or FocusArea.FULL_BODY.value,
            equipment=req.equipment,
        )

    # --- internals ---
    def _generate_weekly(self, req: PlanRequest, rng: np.random.Generator, today: date) -> WorkoutPlan:
        days = build_week(req.frequency, req.weekdays, req.focus_areas, today=today)
        children = [self._build_day(req, day, rng) for day in days]
        rest_days = suggested_rest_days(req.frequency, req.weekdays)
        day_names = ", ".join(d.weekday.value for d in days)
        description = (
            f"{len(children)} workouts this week ({day_names}), "
            f"{req.duration} minutes each at {req.difficulty.value} level."
        )
        if rest_days:
            description += " Suggested rest: " + ", ".join(d.value for d in rest_days) + "."
        logger.info(
            "Generated weekly plan",
            extra={"ctx_user": req.user_id, "ctx_days": len(children), "ctx_frequency": req.frequency},
        )
        return WorkoutPlan(
            id=str(uuid.uuid4()),
            user_id=req.user_id,
            name=f"Weekly Plan: {len(children)} Workouts",
            description=description,
            exercises=[],
            duration=req.duration,
            realized_duration=sum(c.realized_duration for c in children),
            difficulty=req.difficulty,
            category="weekly",
            equipment=req.equipment,
            is_weekly_plan=True,
            weekly_workouts=children,
            rest_days=rest_days,
        )

    def _build_day(self, req: PlanRequest, day: ScheduledDay, rng: np.random.Generator) -> WorkoutPlan:
        session = self._build_session(req, [day.focus], set(), rng)
        label = focus_label([day.focus])
        return WorkoutPlan(
            id=str(uuid.uuid4()),
            user_id=req.user_id,
            name=f"{day.weekday.value} {label} Workout",
            description=self._describe(req, label, session),
            exercises=session.exercises,
            duration=req.duration,
            realized_duration=self._realized_minutes(session),
            difficulty=req.difficulty,
            category=day.focus.value,
            equipment=req.equipment,
            day_of_week=day.weekday,
            scheduled_date=day.scheduled_date,
            focus_area=day.focus,
        )

    def _build_session(
        self,
        req: PlanRequest,
        focus_areas: Sequence[FocusArea],
        underused: Set[str],
        rng: np.random.Generator,
    ) -> _Session:
        usable = filter_by_equipment(
            self.catalog,
            req.equipment,
            req.owned_equipment,
            lenient_unrecognized=self.settings.lenient_basic_equipment,
        )
        warmup, cooldown = self._pick_stretches(usable, rng)
        reserved = {e.id for e in warmup + cooldown}
        pool = filter_candidates(
            [e for e in usable if e.id not in reserved],
            req.difficulty,
            focus_areas,
        )
        ordered = self._prioritize(pool, req.difficulty, underused, rng)

        s = self.settings
        budget = max(req.duration - s.warmup_minutes - s.cooldown_minutes, 0) * 60
        main, used = pack_exercises(
            ordered,
            budget,
            cost=lambda e: exercise_seconds(e) + rest_time(e, req.difficulty),
            gap_fill_threshold=s.gap_fill_threshold_seconds,
        )

        exercises = (
            [self._annotate(e, req.difficulty, is_warmup=True) for e in warmup]
            + [self._annotate(e, req.difficulty) for e in main]
            + [self._annotate(e, req.difficulty, is_cooldown=True) for e in cooldown]
        )
        if budget - used > s.gap_fill_threshold_seconds:
            logger.warning(
                "Workout under-filled",
                extra={"ctx_pool": len(pool), "ctx_used_seconds": used, "ctx_budget_seconds": budget},
            )
        logger.info(
            "Generated workout",
            extra={
                "ctx_user": req.user_id,
                "ctx_pool": len(pool),
                "ctx_selected": len(main),
                "ctx_used_seconds": used,
                "ctx_budget_seconds": budget,
            },
        )
        return _Session(exercises, len(main), len(pool), used, budget, len(warmup), len(cooldown))

    def _pick_stretches(
        self, usable: Sequence[Exercise], rng: np.random.Generator
    ) -> Tuple[List[Exercise], List[Exercise]]:
        stretches = [e for e in usable if e.category == Category.FLEXIBILITY]
        shuffled = [stretches[i] for i in rng.permutation(len(stretches))]
        n = STRETCHES_PER_BLOCK
        return shuffled[:n], shuffled[n:2 * n]

    def _prioritize(
        self,
        pool: Sequence[Exercise],
        difficulty: Difficulty,
        underused: Set[str],
        rng: np.random.Generator,
    ) -> List[Exercise]:
        # shuffle first; the stable sort keeps the random order inside each tier
        shuffled = [pool[i] for i in rng.permutation(len(pool))]

        def key(e: Exercise) -> Tuple[int, int]:
            hard_first = 0 if difficulty == Difficulty.ADVANCED and e.difficulty == Difficulty.ADVANCED else 1
            fresh_first = 0 if underused.intersection(m.lower() for m in e.muscle_groups) else 1
            return hard_first, fresh_first

        return sorted(shuffled, key=key)

    def _annotate(self, e: Exercise, difficulty: Difficulty, **flags: bool) -> Exercise:
        required, optional = equipment_labels(e)
        return e.model_copy(update={
            "rest_time": rest_time(e, difficulty),
            "equipment_required": required,
            "equipment_optional": optional,
            **flags,
        })

    def _realized_minutes(self, session: _Session) -> int:
        s = self.settings
        # stretch blocks count only for the slots actually filled
        warmup = s.warmup_minutes * session.warmup_count // STRETCHES_PER_BLOCK
        cooldown = s.cooldown_minutes * session.cooldown_count // STRETCHES_PER_BLOCK
        return warmup + cooldown + round(session.used_seconds / 60)

    def _describe(self, req: PlanRequest, label: str, session: _Session) -> str:
        text = f"AI-generated {req.duration}-minute {label.lower()} workout tailored to your goals."
        if session.pool_size == 0:
            return text + " No exercises matched your filters; try broadening focus areas or equipment."
        used_min = round(session.used_seconds / 60)
        budget_min = session.budget_seconds // 60
        text += f" Main block: {session.main_count} exercises filling {used_min} of {budget_min} minutes."
        if session.budget_seconds - session.used_seconds > self.settings.gap_fill_threshold_seconds:
            text += " Not enough matching exercises to fill the session; it runs shorter than requested."
        return text
