from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import List, Optional, Dict, Any, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Category(str, Enum):
    CARDIO = "cardio"
    CHEST = "chest"
    BACK = "back"
    SHOULDERS = "shoulders"
    ARMS = "arms"
    LEGS = "legs"
    CORE = "core"
    FLEXIBILITY = "flexibility"
    FUNCTIONAL = "functional"


class EquipmentTier(str, Enum):
    NONE = "none"
    BASIC = "basic"
    GYM = "gym"


class Difficulty(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class FocusArea(str, Enum):
    FULL_BODY = "full-body"
    UPPER_BODY = "upper-body"
    LOWER_BODY = "lower-body"
    CARDIO = "cardio"
    CHEST = "chest"
    BACK = "back"
    SHOULDERS = "shoulders"
    ARMS = "arms"
    LEGS = "legs"
    CORE = "core"
    FLEXIBILITY = "flexibility"
    FUNCTIONAL = "functional"


class PlanMode(str, Enum):
    SINGLE = "single"
    WEEKLY = "weekly"


class Weekday(str, Enum):
    MONDAY = "Monday"
    TUESDAY = "Tuesday"
    WEDNESDAY = "Wednesday"
    THURSDAY = "Thursday"
    FRIDAY = "Friday"
    SATURDAY = "Saturday"
    SUNDAY = "Sunday"

    @property
    def position(self) -> int:
        return list(Weekday).index(self)


class Exercise(BaseModel):
    """Catalog entry. Request-scoped fields stay unset on the shared catalog copy."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str = ""
    category: Category
    equipment: EquipmentTier
    difficulty: Difficulty
    duration: Optional[int] = Field(default=None, ge=0, description="seconds")
    sets: Optional[int] = Field(default=None, ge=1)
    reps: Optional[int] = Field(default=None, ge=1)
    muscle_groups: Tuple[str, ...] = Field(min_length=1)

    # request-scoped annotation
    rest_time: Optional[int] = None
    equipment_required: Optional[str] = None
    equipment_optional: Optional[str] = None
    is_warmup: bool = False
    is_cooldown: bool = False

    @property
    def text(self) -> str:
        return f"{self.name} {self.description}".lower()


class PlanRequest(BaseModel):
    duration: int = Field(ge=1, le=240, description="target session minutes")
    focus_areas: List[FocusArea] = Field(default_factory=list)
    difficulty: Difficulty = Difficulty.BEGINNER
    equipment: EquipmentTier = EquipmentTier.NONE
    owned_equipment: List[str] = Field(default_factory=list)
    mode: PlanMode = PlanMode.SINGLE
    frequency: int = Field(default=3, ge=3, le=6)
    weekdays: List[Weekday] = Field(default_factory=list)
    user_id: str = "anonymous"
    seed: Optional[int] = None

    @field_validator("owned_equipment")
    @classmethod
    def _strip_blank_equipment(cls, v: List[str]) -> List[str]:
        return [s.strip() for s in v if s and s.strip()]

    @field_validator("weekdays")
    @classmethod
    def _unique_weekdays(cls, v: List[Weekday]) -> List[Weekday]:
        return sorted(set(v), key=lambda d: d.position)


class WorkoutPlan(BaseModel):
    id: str
    user_id: str
    name: str
    description: str
    exercises: List[Exercise] = Field(default_factory=list)
    duration: int = Field(description="target minutes")
    realized_duration: int = Field(default=0, description="planned minutes actually filled")
    difficulty: Difficulty
    category: str
    equipment: EquipmentTier
    created_at: datetime = Field(default_factory=datetime.now)
    is_weekly_plan: bool = False
    weekly_workouts: List["WorkoutPlan"] = Field(default_factory=list)
    day_of_week: Optional[Weekday] = None
    scheduled_date: Optional[date] = None
    focus_area: Optional[FocusArea] = None
    rest_days: List[Weekday] = Field(default_factory=list)


class GenerateBody(BaseModel):
    filters: PlanRequest
    recent_plans: List[WorkoutPlan] = Field(default_factory=list)


class AIExercise(BaseModel):
    name: str
    muscle_group: str
    equipment: str = "Bodyweight"
    sets: Optional[int] = None
    reps: Optional[int] = None
    duration: Optional[int] = None
    tip: Optional[str] = None


class AIWorkout(BaseModel):
    title: str
    motivational_message: str
    warmup: str
    exercises: List[AIExercise]
    cooldown: str
    estimated_duration: int
    source: str = Field(default="catalog", description="catalog | llm")


class AIWorkoutResponse(BaseModel):
    success: bool
    workout: AIWorkout
    prompt: str


class ProgressBody(BaseModel):
    completed_dates: List[date] = Field(default_factory=list)
    today: Optional[date] = None


class ProgressStats(BaseModel):
    total_workouts: int
    this_week: int
    current_streak_days: int
    longest_streak_days: int
    last_workout_date: Optional[date] = None
    metadata: Dict[str, Any] = Field(default_factory=dict)
