from __future__ import annotations

import os
from functools import lru_cache
from typing import Iterable, Iterator, List, Optional, Tuple

import pandas as pd
from pydantic import ValidationError

from .config import DEFAULT_CATALOG_PATH
from .logging_config import get_logger
from .models import Category, Difficulty, EquipmentTier, Exercise

logger = get_logger(__name__)

REQUIRED_COLUMNS = ("id", "name", "category", "equipment", "difficulty", "muscle_groups")


class CatalogError(ValueError):
    """Raised when a catalog file cannot be turned into exercises."""


def _cell(row: pd.Series, col: str) -> Optional[str]:
    if col in row and pd.notna(row[col]) and str(row[col]).strip() != "":
        return str(row[col]).strip()
    return None


def _int_cell(row: pd.Series, col: str) -> Optional[int]:
    val = _cell(row, col)
    return int(float(val)) if val is not None else None


def exercise_from_row(row: pd.Series) -> Exercise:
    muscles = _cell(row, "muscle_groups") or ""
    return Exercise(
        id=_cell(row, "id") or "",
        name=_cell(row, "name") or "Unknown Exercise",
        description=_cell(row, "description") or "",
        category=Category((_cell(row, "category") or "").lower()),
        equipment=EquipmentTier((_cell(row, "equipment") or "").lower()),
        difficulty=Difficulty((_cell(row, "difficulty") or "").lower()),
        duration=_int_cell(row, "duration"),
        sets=_int_cell(row, "sets"),
        reps=_int_cell(row, "reps"),
        # Split on semicolon or comma
        muscle_groups=[m.strip().lower() for m in muscles.replace(",", ";").split(";") if m.strip()],
    )


class ExerciseCatalog:
    """Read-only set of exercises shared by every generation request."""

    def __init__(self, exercises: Iterable[Exercise]) -> None:
        self._exercises: Tuple[Exercise, ...] = tuple(exercises)
        seen = set()
        for e in self._exercises:
            if e.duration is None and e.reps is None:
                raise CatalogError(f"Exercise {e.id!r} has neither a duration nor reps")
            if e.id in seen:
                raise CatalogError(f"Duplicate exercise id {e.id!r}")
            seen.add(e.id)

    @classmethod
    def from_csv(cls, path: str) -> "ExerciseCatalog":
        if not os.path.exists(path):
            raise FileNotFoundError(f"Exercise catalog not found: {path}")
        df = pd.read_csv(path, keep_default_na=False, na_values=[""])
        # Normalize columns for safer access
        df.columns = [str(c).strip().lower() for c in df.columns]
        missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
        if missing:
            raise CatalogError(f"Catalog {path} is missing columns: {', '.join(missing)}")

        exercises: List[Exercise] = []
        for idx, row in df.iterrows():
            try:
                exercises.append(exercise_from_row(row))
            except (ValueError, ValidationError) as e:
                raise CatalogError(f"Invalid catalog row {idx + 2} in {path}: {e}") from e
        logger.info("Loaded exercise catalog", extra={"ctx_path": path, "ctx_size": len(exercises)})
        return cls(exercises)

    def __iter__(self) -> Iterator[Exercise]:
        return iter(self._exercises)

    def __len__(self) -> int:
        return len(self._exercises)

    @property
    def exercises(self) -> Tuple[Exercise, ...]:
        return self._exercises

    def get(self, exercise_id: str) -> Optional[Exercise]:
        for e in self._exercises:
            if e.id == exercise_id:
                return e
        return None

    def by_category(self, category: Category) -> List[Exercise]:
        return [e for e in self._exercises if e.category == category]


@lru_cache(maxsize=4)
def load_catalog(path: str = DEFAULT_CATALOG_PATH) -> ExerciseCatalog:
    return ExerciseCatalog.from_csv(path)
