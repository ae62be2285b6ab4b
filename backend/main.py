from typing import List, Optional

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from .catalog import CatalogError, load_catalog
from .coach import WorkoutCoach
from .config import get_settings
from .logging_config import get_logger, setup_logging
from .models import (
    AIWorkoutResponse,
    Category,
    Difficulty,
    EquipmentTier,
    Exercise,
    GenerateBody,
    ProgressBody,
    ProgressStats,
    WorkoutPlan,
)
from .planner import Planner
from .progress import workout_stats

settings = get_settings()
setup_logging(settings.log_level, settings.app_env)
logger = get_logger(__name__)

app = FastAPI(title="Guided Gains Workout API", version="0.2.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

planner = Planner(catalog=load_catalog(settings.catalog_path), settings=settings)
coach = WorkoutCoach(planner, settings=settings)


@app.get("/health")
def health():
    return {"status": "ok", "exercises": len(planner.catalog)}


@app.get("/exercises", response_model=List[Exercise])
def list_exercises(
    category: Optional[Category] = None,
    difficulty: Optional[Difficulty] = None,
    equipment: Optional[EquipmentTier] = None,
):
    return [
        e for e in planner.catalog
        if (category is None or e.category == category)
        and (difficulty is None or e.difficulty == difficulty)
        and (equipment is None or e.equipment == equipment)
    ]


@app.post("/generate-workout", response_model=WorkoutPlan)
def generate_workout(body: GenerateBody):
    try:
        return planner.generate(body.filters, body.recent_plans)
    except (FileNotFoundError, CatalogError) as e:
        logger.exception("Catalog unavailable")
        raise HTTPException(status_code=500, detail=str(e))
    except Exception as e:
        logger.exception("Workout generation failed")
        raise HTTPException(status_code=400, detail=f"Failed to generate workout: {e}")


@app.post("/ai-workout", response_model=AIWorkoutResponse)
def ai_workout(body: GenerateBody):
    try:
        return coach.generate(body.filters, body.recent_plans)
    except Exception as e:
        logger.exception("AI workout generation failed")
        raise HTTPException(status_code=500, detail=f"AI workout error: {e}")


@app.post("/progress/stats", response_model=ProgressStats)
def progress_stats(body: ProgressBody):
    return workout_stats(body.completed_dates, today=body.today)
