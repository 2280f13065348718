"""
Unit tests for streaks, rollups and the wellness score
"""
import random
from datetime import date, timedelta
from types import SimpleNamespace

import pytest

from wellness_tracker.analytics import (
    current_streak, longest_streak, streak_history, streak_runs,
    count_in_window, rollup_counts, week_bounds, date_range, percentage,
    wellness_score, metric_subscore, metric_summary, metric_analytics,
    present_averages, round_half_up
)


D = date(2024, 6, 15)


def metric(metric_type, value, day, target=None):
    return SimpleNamespace(metric_type=metric_type, value=value, date=day, target_value=target)


class TestCurrentStreak:
    """Consecutive-day run ending at the most recent date"""

    def test_empty(self):
        assert current_streak([]) == 0

    def test_single_date(self):
        assert current_streak([D]) == 1

    def test_consecutive_dates(self):
        assert current_streak([D, D - timedelta(days=1), D - timedelta(days=2)]) == 3

    def test_gap_stops_the_run(self):
        assert current_streak([D, D - timedelta(days=2)]) == 1

    def test_order_invariant(self):
        dates = [D - timedelta(days=i) for i in range(5)] + [D - timedelta(days=9)]
        shuffled = dates[:]
        random.Random(7).shuffle(shuffled)
        assert current_streak(shuffled) == current_streak(dates) == 5

    def test_duplicates_are_ignored(self):
        assert current_streak([D, D, D - timedelta(days=1), D - timedelta(days=1)]) == 2

    def test_leap_day_month_boundary(self):
        dates = [date(2024, 3, 1), date(2024, 2, 29), date(2024, 2, 28)]
        assert current_streak(dates) == 3

    def test_year_boundary(self):
        assert current_streak([date(2024, 1, 1), date(2023, 12, 31)]) == 2

    def test_most_recent_date_need_not_be_today(self):
        old = date(2020, 5, 3)
        assert current_streak([old, old - timedelta(days=1)]) == 2


class TestStreakHistory:

    def test_runs_most_recent_first(self):
        dates = [D, D - timedelta(days=1), D - timedelta(days=5), D - timedelta(days=6), D - timedelta(days=7)]
        assert streak_runs(dates) == [
            (2, D - timedelta(days=1), D),
            (3, D - timedelta(days=7), D - timedelta(days=5)),
        ]

    def test_longest_streak(self):
        dates = [D, D - timedelta(days=5), D - timedelta(days=6), D - timedelta(days=7)]
        assert longest_streak(dates) == 3
        assert longest_streak([]) == 0

    def test_history_limit(self):
        dates = [D - timedelta(days=2 * i) for i in range(15)]
        history = streak_history(dates, limit=10)
        assert len(history) == 10
        assert history[0] == {"streak_length": 1, "start_date": D, "end_date": D}


class TestRollups:

    def test_today(self):
        assert count_in_window([D, D, D - timedelta(days=1)], "today", D) == 2

    def test_iso_week(self):
        # 2024-06-15 is a Saturday; its ISO week runs Monday 10th to Sunday 16th
        dates = [date(2024, 6, 10), date(2024, 6, 16), date(2024, 6, 9), date(2024, 6, 17)]
        assert count_in_window(dates, "week", D) == 2

    def test_iso_week_across_year_boundary(self):
        # 2024-12-30 belongs to ISO week 1 of 2025
        assert count_in_window([date(2024, 12, 30)], "week", date(2025, 1, 2)) == 1

    def test_month(self):
        dates = [date(2024, 6, 1), date(2024, 6, 30), date(2024, 5, 31), date(2023, 6, 15)]
        assert count_in_window(dates, "month", D) == 2

    def test_unknown_window(self):
        with pytest.raises(ValueError):
            count_in_window([D], "decade", D)

    def test_rollup_counts(self):
        dates = [D, date(2024, 6, 10), date(2024, 6, 1)]
        assert rollup_counts(dates, D) == {"today": 1, "week": 2, "month": 3}

    def test_rollup_counts_accepts_a_generator(self):
        dates = (D - timedelta(days=offset) for offset in range(3))
        # 2024-06-15 is a Saturday, so all three fall in the same ISO week
        assert rollup_counts(dates, D) == {"today": 1, "week": 3, "month": 3}

    def test_week_bounds_and_range(self):
        monday, sunday = week_bounds(D)
        assert monday == date(2024, 6, 10)
        assert sunday == date(2024, 6, 16)
        assert len(date_range(monday, sunday)) == 7

    def test_percentage(self):
        assert percentage(1, 3) == 33
        assert percentage(2, 3) == 67
        assert percentage(1, 0) == 0


class TestWellnessScore:

    def test_no_metrics(self):
        assert wellness_score({}) == 0

    def test_sleep_only_in_best_band(self):
        assert wellness_score({"sleep_hours": 8}) == 100

    def test_water_and_exercise(self):
        assert wellness_score({"water_intake": 4, "exercise_minutes": 30}) == 75

    @pytest.mark.parametrize("hours,expected", [
        (7, 100), (9, 100), (6.5, 80), (10, 80), (5, 60), (11, 60), (4, 40), (12, 40),
    ])
    def test_sleep_bands(self, hours, expected):
        assert metric_subscore("sleep_hours", hours) == expected

    def test_subscores_are_capped(self):
        assert metric_subscore("water_intake", 16) == 100
        assert metric_subscore("meditation_minutes", 60) == 100

    def test_all_metrics(self):
        averages = {
            "water_intake": 8,
            "sleep_hours": 4,
            "exercise_minutes": 18,
            "meditation_minutes": 10,
        }
        # 100*0.25 + 40*0.30 + 60*0.25 + 100*0.20 = 72
        assert wellness_score(averages) == 72

    def test_round_half_up(self):
        assert round_half_up(0.5) == 1
        assert round_half_up(2.5) == 3
        assert round_half_up(2.49) == 2


class TestMetricAggregates:

    def test_summary(self):
        rows = [
            metric("water_intake", 6, D),
            metric("water_intake", 7, D - timedelta(days=1)),
            metric("sleep_hours", 7.5, D),
        ]
        summary = metric_summary(rows)
        assert summary["water_intake"] == {"total": 13, "average": 6.5, "count": 2}
        assert summary["sleep_hours"]["count"] == 1
        assert summary["meditation_minutes"] == {"total": 0, "average": 0, "count": 0}

    def test_analytics_and_present_averages(self):
        rows = [
            metric("exercise_minutes", 40, D, target=30),
            metric("exercise_minutes", 20, D - timedelta(days=1), target=30),
        ]
        analytics = metric_analytics(rows)
        exercise = analytics["exercise_minutes"]
        assert exercise["max"] == 40
        assert exercise["min"] == 20
        assert exercise["average"] == 30
        assert [point["date"] for point in exercise["data"]] == [D - timedelta(days=1), D]
        assert analytics["water_intake"]["count"] == 0

        assert present_averages(analytics) == {"exercise_minutes": 30}
        assert wellness_score(present_averages(analytics)) == 100
