import pytest

from backend.catalog import ExerciseCatalog, load_catalog
from backend.config import Settings
from backend.models import Exercise
from backend.planner import Planner


def make_exercise(id, **overrides):
    base = {
        "id": id,
        "name": id.replace("-", " ").title(),
        "description": "",
        "category": "chest",
        "equipment": "none",
        "difficulty": "beginner",
        "duration": 120,
        "muscle_groups": ["chest"],
    }
    base.update(overrides)
    return Exercise(**base)


def stretches(n=4):
    return [
        make_exercise(f"stretch-{i}", category="flexibility", duration=60, muscle_groups=["back"])
        for i in range(n)
    ]


@pytest.fixture
def settings():
    return Settings()


@pytest.fixture
def catalog():
    return load_catalog()


@pytest.fixture
def planner(catalog, settings):
    return Planner(catalog=catalog, settings=settings)


@pytest.fixture
def tiny_planner(settings):
    def build(exercises):
        return Planner(catalog=ExerciseCatalog(exercises), settings=settings)
    return build
