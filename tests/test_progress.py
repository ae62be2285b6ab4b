from datetime import date, datetime

from backend.progress import calculate_streak, longest_streak, workout_stats

TODAY = date(2026, 10, 19)


def d(day, month=10):
    return date(2026, month, day)


def test_streak_counts_back_from_today():
    assert calculate_streak([d(19), d(18), d(17), d(15)], today=TODAY) == 3


def test_streak_can_end_yesterday():
    assert calculate_streak([d(18), d(17)], today=TODAY) == 2


def test_broken_streak_is_zero():
    assert calculate_streak([d(17), d(16)], today=TODAY) == 0
    assert calculate_streak([], today=TODAY) == 0


def test_streak_ignores_duplicates_and_times():
    dates = [d(19), datetime(2026, 10, 19, 7, 30), d(18)]
    assert calculate_streak(dates, today=TODAY) == 2


def test_streak_crosses_month_boundary():
    dates = [d(1, 11), d(31), d(30)]
    assert calculate_streak(dates, today=d(1, 11)) == 3


def test_longest_streak():
    dates = [d(1), d(2), d(3), d(10), d(11), d(3)]
    assert longest_streak(dates) == 3
    assert longest_streak([]) == 0


def test_workout_stats():
    dates = [d(19), d(18), d(13), d(12), d(1)]
    stats = workout_stats(dates, today=TODAY)
    assert stats.total_workouts == 5
    assert stats.this_week == 3
    assert stats.current_streak_days == 2
    assert stats.longest_streak_days == 2
    assert stats.last_workout_date == d(19)


def test_workout_stats_empty():
    stats = workout_stats([], today=TODAY)
    assert stats.total_workouts == 0
    assert stats.last_workout_date is None
