import json
import re
from typing import Any, Dict, List, Optional, Sequence

from langchain_core.prompts import PromptTemplate
from langchain_openai import ChatOpenAI
from pydantic import ValidationError

from .config import Settings, get_settings
from .logging_config import get_logger
from .models import (
    AIExercise,
    AIWorkout,
    AIWorkoutResponse,
    EquipmentTier,
    PlanMode,
    PlanRequest,
    WorkoutPlan,
)
from .planner import Planner, focus_label

logger = get_logger(__name__)

DEFAULT_WARMUP = (
    "Start with 5 minutes of light cardio (jumping jacks, jogging in place) and dynamic "
    "stretches (arm circles, leg swings, torso twists)."
)
DEFAULT_COOLDOWN = (
    "Finish with 5 minutes of static stretching, focusing on all major muscle groups "
    "worked today. Hold each stretch for 30 seconds."
)

MOTIVATION = {
    EquipmentTier.NONE: "No equipment, no problem! Your body is the best tool you've got. Let's make it count!",
    EquipmentTier.BASIC: "You've got everything you need to crush this workout at home!",
    EquipmentTier.GYM: "The whole gym is yours today. Let's put it to work!",
}

COACH_PROMPT = PromptTemplate.from_template(
    """
    You are an intelligent workout planner for the app Guided Gains.
    Generate a personalized workout plan tailored to the user's profile and the equipment available.

    The user's experience level is {experience}, their workout focus is {focus}, and their selected equipment type for this session is {equipment}.

    {equipment_guidance}

    Always check the following when building the workout:
    - Do not include exercises that require equipment the user does not have.
    - Favor functional and realistic movements that fit the chosen environment.
    - Avoid gym-specific machines unless the equipment type is "gym".
    - Include warm-up and cool-down suggestions.

    List 6-10 exercises. For each give the name, targeted muscle group, equipment needed (or "Bodyweight"), sets and reps or a duration in seconds, and a short tip.
    Ensure the overall plan fits within {duration} minutes.

    Return only a JSON object with this exact structure:
    {{"title": "...", "motivationalMessage": "...", "warmup": "...", "exercises": [{{"name": "...", "muscleGroup": "...", "equipment": "...", "sets": 3, "reps": 12, "duration": null, "tip": "..."}}], "cooldown": "...", "estimatedDuration": {duration}}}
    """
)


def equipment_guidance(req: PlanRequest) -> str:
    if req.equipment == EquipmentTier.NONE:
        return "The user has NO equipment. Generate a bodyweight-only workout that still challenges different muscle groups."
    if req.equipment == EquipmentTier.GYM:
        return "The user has access to a full gym. Include gym equipment and machines as appropriate."
    owned = ", ".join(req.owned_equipment) if req.owned_equipment else "None - bodyweight only"
    return (
        f"The user has the following equipment at home: {owned}. "
        "Only include exercises that use this equipment or need no equipment at all."
    )


def build_prompt(req: PlanRequest) -> str:
    return COACH_PROMPT.format(
        experience=req.difficulty.value,
        focus=focus_label(req.focus_areas).lower(),
        equipment=req.equipment.value,
        equipment_guidance=equipment_guidance(req),
        duration=req.duration,
    )


def _json_payload(text: str) -> Dict[str, Any]:
    fenced = re.search(r"```(?:json)?\s*(.*?)```", text, re.DOTALL)
    if fenced:
        text = fenced.group(1)
    data = json.loads(text)
    if not isinstance(data, dict):
        raise ValueError("Model reply is not a JSON object")
    return data


def parse_ai_reply(text: str, duration: int) -> AIWorkout:
    data = _json_payload(text)
    exercises: List[AIExercise] = [
        AIExercise(
            name=item["name"],
            muscle_group=item.get("muscleGroup") or item.get("muscle_group") or "",
            equipment=item.get("equipment") or "Bodyweight",
            sets=item.get("sets"),
            reps=item.get("reps"),
            duration=item.get("duration"),
            tip=item.get("tip"),
        )
        for item in data.get("exercises", [])
    ]
    if not exercises:
        raise ValueError("Model reply has no exercises")
    return AIWorkout(
        title=data.get("title") or "Your Workout",
        motivational_message=data.get("motivationalMessage") or "",
        warmup=data.get("warmup") or DEFAULT_WARMUP,
        exercises=exercises,
        cooldown=data.get("cooldown") or DEFAULT_COOLDOWN,
        estimated_duration=int(data.get("estimatedDuration") or duration),
        source="llm",
    )


def plan_to_ai_workout(plan: WorkoutPlan) -> AIWorkout:
    warm = [e.name for e in plan.exercises if e.is_warmup]
    cool = [e.name for e in plan.exercises if e.is_cooldown]
    main = [e for e in plan.exercises if not (e.is_warmup or e.is_cooldown)]
    return AIWorkout(
        title=plan.name,
        motivational_message=MOTIVATION[plan.equipment],
        warmup=f"Warm up with {' and '.join(warm)}." if warm else DEFAULT_WARMUP,
        exercises=[
            AIExercise(
                name=e.name,
                muscle_group=", ".join(m.title() for m in e.muscle_groups),
                equipment=e.equipment_required or "Bodyweight",
                sets=e.sets,
                reps=e.reps,
                duration=None if e.reps else e.duration,
                tip=e.description or None,
            )
            for e in main
        ],
        cooldown=f"Cool down with {' and '.join(cool)}." if cool else DEFAULT_COOLDOWN,
        estimated_duration=plan.realized_duration,
        source="catalog",
    )


class WorkoutCoach:
    """Asks a chat model for a workout, falling back to the catalog planner."""

    def __init__(self, planner: Planner, settings: Optional[Settings] = None, llm: Optional[Any] = None) -> None:
        self.planner = planner
        self.settings = settings or get_settings()
        self._llm = llm

    @property
    def llm(self) -> Optional[Any]:
        if self._llm is None and self.settings.has_llm:
            self._llm = ChatOpenAI(
                model=self.settings.openai_model,
                temperature=0.7,
                api_key=self.settings.openai_api_key,
            )
        return self._llm

    def generate(self, req: PlanRequest, recent_plans: Sequence[WorkoutPlan] = ()) -> AIWorkoutResponse:
        req = req.model_copy(update={"mode": PlanMode.SINGLE})
        prompt = build_prompt(req)
        llm = self.llm
        if llm is not None:
            reply = llm.invoke(prompt)
            content = getattr(reply, "content", reply)
            try:
                workout = parse_ai_reply(str(content), req.duration)
                return AIWorkoutResponse(success=True, workout=workout, prompt=prompt)
            except (ValueError, KeyError, TypeError, ValidationError) as e:
                logger.warning("Unusable model reply, using catalog planner", extra={"ctx_error": str(e)})

        plan = self.planner.generate(req, recent_plans)
        return AIWorkoutResponse(success=True, workout=plan_to_ai_workout(plan), prompt=prompt)
