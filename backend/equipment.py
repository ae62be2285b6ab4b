"""Equipment rules: which exercises a requester can do, and what to tell them to grab.

Matching (``is_equipment_usable``) and labelling (``equipment_labels``) both read
the exercise's name and description, but they are independent: a label is
derived after selection and never feeds back into the filter.
"""

from __future__ import annotations

import re
from typing import Iterable, List, Optional, Sequence, Tuple

from .models import EquipmentTier, Exercise

# keyword pattern found in exercise text -> substrings accepted in the owned list
EQUIPMENT_KEYWORDS: List[Tuple[str, Tuple[str, ...]]] = [
    (r"dumbbells?", ("dumbbell",)),
    (r"kettlebells?", ("kettlebell",)),
    (r"(resistance )?bands?", ("band",)),
    (r"pull-up bar|pull-ups?|chin-ups?", ("pull-up", "pull up", "pullup", "chin-up", "chin up")),
    (r"bench", ("bench",)),
    (r"medicine ball", ("medicine ball", "med ball")),
    (r"ab wheel", ("ab wheel", "ab roller")),
    (r"jump rope|skipping rope", ("jump rope", "skipping rope")),
    (r"trx|suspension", ("trx", "suspension")),
    (r"stability ball|swiss ball|exercise ball", ("stability ball", "swiss ball", "exercise ball")),
    (r"barbells?", ("barbell",)),
    (r"battle ropes?", ("battle rope",)),
    (r"rings", ("rings",)),
    (r"rower|rowing machine", ("rower", "rowing")),
    (r"treadmill", ("treadmill",)),
    (r"stationary bike|exercise bike|spin bike", ("bike",)),
    (r"elliptical", ("elliptical",)),
]

# first match wins
REQUIRED_LABELS: List[Tuple[str, str]] = [
    (r"dumbbells?", "Dumbbells"),
    (r"kettlebells?", "Kettlebell"),
    (r"barbells?", "Barbell"),
    (r"pull-up bar|pull-ups?|chin-ups?", "Pull-up bar"),
    (r"resistance bands?|bands?", "Resistance band"),
    (r"medicine ball", "Medicine ball"),
    (r"ab wheel", "Ab wheel"),
    (r"jump rope|skipping rope", "Jump rope"),
    (r"trx|suspension", "Suspension trainer"),
    (r"stability ball|swiss ball", "Stability ball"),
    (r"battle ropes?", "Battle ropes"),
    (r"rings", "Gymnastic rings"),
    (r"rower|rowing machine", "Rowing machine"),
    (r"treadmill", "Treadmill"),
    (r"stationary bike|exercise bike", "Stationary bike"),
    (r"cable", "Cable machine"),
    (r"leg press", "Leg press machine"),
    (r"sled", "Sled"),
    (r"machine", "Machine"),
    (r"bench", "Bench"),
    (r"chair", "Sturdy chair"),
]

OPTIONAL_LABELS: List[Tuple[str, str]] = [
    (r"step-ups?", "Sturdy step or box"),
    (r"goblet squats?", "Dumbbell or kettlebell"),
    (r"elevated|incline|decline", "Bench or sturdy surface"),
    (r"table", "Sturdy table"),
]

# none-class squats and lunges can be loaded with anything at hand
LOADABLE_BODYWEIGHT = re.compile(r"\b(squats?|lunges?)\b")
LOADABLE_LABEL = "Dumbbells or kettlebell for extra load"


def _find(pattern: str, text: str) -> bool:
    return re.search(rf"\b(?:{pattern})\b", text) is not None


def recognized_keywords(exercise: Exercise) -> List[Tuple[str, ...]]:
    """Owned-equipment aliases for every implement the exercise text mentions."""
    text = exercise.text
    return [aliases for pattern, aliases in EQUIPMENT_KEYWORDS if _find(pattern, text)]


def _owns(owned: Sequence[str], aliases: Iterable[str]) -> bool:
    return any(alias in item for item in owned for alias in aliases)


def is_equipment_usable(
    exercise: Exercise,
    tier: EquipmentTier,
    owned_equipment: Optional[Sequence[str]] = None,
    lenient_unrecognized: bool = True,
) -> bool:
    if exercise.equipment == EquipmentTier.NONE:
        return True
    if tier == EquipmentTier.NONE:
        return False
    if tier == EquipmentTier.GYM:
        return True

    # basic tier
    if exercise.equipment != EquipmentTier.BASIC:
        return False
    owned = [o.lower() for o in (owned_equipment or []) if o and o.strip()]
    if not owned:
        return False
    needed = recognized_keywords(exercise)
    if not needed:
        return lenient_unrecognized
    return all(_owns(owned, aliases) for aliases in needed)


def filter_by_equipment(
    exercises: Iterable[Exercise],
    tier: EquipmentTier,
    owned_equipment: Optional[Sequence[str]] = None,
    lenient_unrecognized: bool = True,
) -> List[Exercise]:
    return [
        e for e in exercises
        if is_equipment_usable(e, tier, owned_equipment, lenient_unrecognized)
    ]


def equipment_labels(exercise: Exercise) -> Tuple[Optional[str], Optional[str]]:
    """Return ``(required, optional)`` display labels for an exercise.

    The required label reads the whole text. Optional labels read the name
    only and are dropped once something is required.
    """
    required = next((label for pattern, label in REQUIRED_LABELS if _find(pattern, exercise.text)), None)
    if required is not None:
        return required, None
    name = exercise.name.lower()
    optional = next((label for pattern, label in OPTIONAL_LABELS if _find(pattern, name)), None)
    if optional is None and exercise.equipment == EquipmentTier.NONE and LOADABLE_BODYWEIGHT.search(name):
        optional = LOADABLE_LABEL
    if optional is None and exercise.equipment != EquipmentTier.NONE:
        required = exercise.equipment.value.capitalize() + " equipment"
    return required, optional
