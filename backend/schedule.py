from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import List, Optional, Sequence

from .models import FocusArea, Weekday

DEFAULT_ROTATION = [FocusArea.UPPER_BODY, FocusArea.LOWER_BODY, FocusArea.CARDIO, FocusArea.CORE]

CANONICAL_DAYS = {
    3: [Weekday.MONDAY, Weekday.WEDNESDAY, Weekday.FRIDAY],
    4: [Weekday.MONDAY, Weekday.TUESDAY, Weekday.THURSDAY, Weekday.SATURDAY],
    5: [Weekday.MONDAY, Weekday.TUESDAY, Weekday.THURSDAY, Weekday.FRIDAY, Weekday.SATURDAY],
    6: [Weekday.MONDAY, Weekday.TUESDAY, Weekday.WEDNESDAY, Weekday.THURSDAY, Weekday.FRIDAY, Weekday.SATURDAY],
}

SUGGESTED_REST_DAYS = {
    3: [Weekday.WEDNESDAY, Weekday.SATURDAY, Weekday.SUNDAY],
    4: [Weekday.WEDNESDAY, Weekday.SATURDAY, Weekday.SUNDAY],
    5: [Weekday.WEDNESDAY, Weekday.SUNDAY],
    6: [Weekday.SUNDAY],
}


@dataclass(frozen=True)
class ScheduledDay:
    weekday: Weekday
    scheduled_date: date
    focus: FocusArea


def week_start(today: date) -> date:
    """Monday of the week containing ``today``."""
    return today - timedelta(days=today.weekday())


def date_for_weekday(weekday: Weekday, today: date) -> date:
    return week_start(today) + timedelta(days=weekday.position)


def training_days(frequency: int, weekdays: Sequence[Weekday] = ()) -> List[Weekday]:
    if weekdays:
        return sorted(set(weekdays), key=lambda d: d.position)
    if frequency not in CANONICAL_DAYS:
        frequency = min(max(frequency, 3), 6)
    return list(CANONICAL_DAYS[frequency])


def build_week(
    frequency: int,
    weekdays: Sequence[Weekday] = (),
    focus_areas: Sequence[FocusArea] = (),
    today: Optional[date] = None,
) -> List[ScheduledDay]:
    """Pin each training day to this week's calendar and give it a rotating focus."""
    today = today or date.today()
    rotation = list(focus_areas) or DEFAULT_ROTATION
    days = training_days(frequency, weekdays)
    return [
        ScheduledDay(
            weekday=day,
            scheduled_date=date_for_weekday(day, today),
            focus=rotation[i % len(rotation)],
        )
        for i, day in enumerate(days)
    ]


def suggested_rest_days(frequency: int, weekdays: Sequence[Weekday] = ()) -> List[Weekday]:
    """Display-only rest suggestion.

    Explicit day picks override the table: every unpicked day is a rest day.
    Otherwise the table entry is used, minus any day the canonical split trains on.
    """
    if weekdays:
        picked = set(weekdays)
        return [d for d in Weekday if d not in picked]
    trained = set(training_days(frequency))
    table = SUGGESTED_REST_DAYS.get(min(max(frequency, 3), 6), [])
    return [d for d in table if d not in trained]
