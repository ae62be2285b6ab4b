from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Iterable, List, Optional

import pandas as pd

from .models import ProgressStats


def _unique_days(dates: Iterable[date]) -> List[date]:
    days = {d.date() if isinstance(d, datetime) else d for d in dates}
    return sorted(days, reverse=True)


def calculate_streak(dates: Iterable[date], today: Optional[date] = None) -> int:
    """Consecutive workout days ending today or yesterday; 0 if the run is already broken."""
    today = today or date.today()
    days = [d for d in _unique_days(dates) if d <= today]
    if not days:
        return 0
    if days[0] not in (today, today - timedelta(days=1)):
        return 0

    streak = 1
    current = days[0]
    for d in days[1:]:
        if d == current - timedelta(days=1):
            streak += 1
            current = d
        else:
            break
    return streak


def longest_streak(dates: Iterable[date]) -> int:
    days = sorted(_unique_days(dates))
    if not days:
        return 0
    # consecutive days share the same (day - position) anchor
    s = pd.Series(pd.to_datetime(days))
    offsets = pd.Series(pd.to_timedelta(list(range(len(s))), unit="D"))
    anchors = s - offsets
    return int(anchors.value_counts().max())


def workout_stats(dates: Iterable[date], today: Optional[date] = None) -> ProgressStats:
    today = today or date.today()
    all_dates = list(dates)
    days = _unique_days(all_dates)
    week_ago = today - timedelta(days=7)
    this_week = sum(1 for d in all_dates if week_ago < (d.date() if isinstance(d, datetime) else d) <= today)
    return ProgressStats(
        total_workouts=len(all_dates),
        this_week=this_week,
        current_streak_days=calculate_streak(days, today),
        longest_streak_days=longest_streak(days),
        last_workout_date=days[0] if days else None,
    )
