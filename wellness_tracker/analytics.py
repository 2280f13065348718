"""
Analytics for Wellness Tracker API
Streaks, periodic rollups and the wellness score.

Everything here is a pure function over rows that the routers already
fetched; nothing is cached between requests.
"""
import math
from datetime import date, timedelta
from typing import Dict, Iterable, List, Optional, Tuple

METRIC_TYPES = ("water_intake", "sleep_hours", "exercise_minutes", "meditation_minutes")

WELLNESS_WEIGHTS = {
    "water_intake": 0.25,
    "sleep_hours": 0.30,
    "exercise_minutes": 0.25,
    "meditation_minutes": 0.20,
}

# Daily targets
WATER_TARGET_GLASSES = 8
EXERCISE_TARGET_MINUTES = 30
MEDITATION_TARGET_MINUTES = 10


def round_half_up(value: float) -> int:
    """Rounds .5 away from zero for non-negative values"""
    return int(math.floor(value + 0.5))


# =============================================================================
# STREAKS
# =============================================================================

def _sorted_unique_desc(dates: Iterable[date]) -> List[date]:
    return sorted(set(dates), reverse=True)


def streak_runs(dates: Iterable[date]) -> List[Tuple[int, date, date]]:
    """
    Splits completion dates into runs of consecutive days.

    Returns:
        List of (length, start_date, end_date), most recent run first
    """
    runs = []
    ordered = _sorted_unique_desc(dates)
    if not ordered:
        return runs

    end = start = ordered[0]
    for current in ordered[1:]:
        if start - current == timedelta(days=1):
            start = current
        else:
            runs.append(((end - start).days + 1, start, end))
            end = start = current
    runs.append(((end - start).days + 1, start, end))
    return runs


def current_streak(dates: Iterable[date]) -> int:
    """
    Length of the consecutive-day run ending at the most recent date.

    The most recent date does not have to be today.
    """
    runs = streak_runs(dates)
    return runs[0][0] if runs else 0


def longest_streak(dates: Iterable[date]) -> int:
    """Length of the longest consecutive-day run"""
    return max((length for length, _, _ in streak_runs(dates)), default=0)


def streak_history(dates: Iterable[date], limit: int = 10) -> List[dict]:
    """Most recent runs as JSON-ready dicts"""
    return [
        {"streak_length": length, "start_date": start, "end_date": end}
        for length, start, end in streak_runs(dates)[:limit]
    ]


# =============================================================================
# PERIODIC ROLLUPS
# =============================================================================

def in_window(day: date, window: str, reference: date) -> bool:
    """
    Checks whether a day falls in the reference window

    Args:
        day: Date to test
        window: 'today', 'week' (ISO week) or 'month'
        reference: Day that anchors the window
    """
    if window == "today":
        return day == reference
    if window == "week":
        return day.isocalendar()[:2] == reference.isocalendar()[:2]
    if window == "month":
        return (day.year, day.month) == (reference.year, reference.month)
    raise ValueError(f"Unknown window: {window}")


def count_in_window(dates: Iterable[date], window: str, reference: Optional[date] = None) -> int:
    """Counts the dates that fall in the window around the reference day"""
    reference = reference or date.today()
    return sum(1 for day in dates if in_window(day, window, reference))


def rollup_counts(dates: Iterable[date], reference: Optional[date] = None) -> Dict[str, int]:
    """Today / ISO week / calendar month counts"""
    reference = reference or date.today()
    dates = list(dates)
    return {window: count_in_window(dates, window, reference) for window in ("today", "week", "month")}


def week_bounds(reference: date) -> Tuple[date, date]:
    """Monday and Sunday of the reference day's ISO week"""
    monday = reference - timedelta(days=reference.weekday())
    return monday, monday + timedelta(days=6)


def date_range(start: date, end: date) -> List[date]:
    """Inclusive list of days between start and end"""
    return [start + timedelta(days=offset) for offset in range((end - start).days + 1)]


def percentage(part: int, whole: int) -> int:
    return round_half_up(part / whole * 100) if whole > 0 else 0


# =============================================================================
# WELLNESS SCORE
# =============================================================================

def sleep_subscore(average: float) -> int:
    if 7 <= average <= 9:
        return 100
    if 6 <= average <= 10:
        return 80
    if 5 <= average <= 11:
        return 60
    return 40


def metric_subscore(metric_type: str, average: float) -> float:
    """Normalized 0-100 score of one metric's average against its daily target"""
    if metric_type == "water_intake":
        return min(average / WATER_TARGET_GLASSES, 1) * 100
    if metric_type == "sleep_hours":
        return sleep_subscore(average)
    if metric_type == "exercise_minutes":
        return min(average / EXERCISE_TARGET_MINUTES, 1) * 100
    if metric_type == "meditation_minutes":
        return min(average / MEDITATION_TARGET_MINUTES, 1) * 100
    raise ValueError(f"Unknown metric type: {metric_type}")


def wellness_score(averages: Dict[str, float]) -> int:
    """
    Weighted wellness score from per-metric averages.

    Only the metric types present in ``averages`` contribute and the
    weights are renormalized over them, so a user who only logs sleep is
    scored on sleep alone. Returns 0 when no metric is present.

    >>> wellness_score({"sleep_hours": 8})
    100
    >>> wellness_score({"water_intake": 4, "exercise_minutes": 30})
    75
    """
    score = 0.0
    total_weight = 0.0
    for metric_type, weight in WELLNESS_WEIGHTS.items():
        if metric_type not in averages:
            continue
        score += metric_subscore(metric_type, float(averages[metric_type])) * weight
        total_weight += weight

    if total_weight == 0:
        return 0
    return round_half_up(score / total_weight)


# =============================================================================
# METRIC AGGREGATES
# =============================================================================

def _values_by_type(metrics) -> Dict[str, list]:
    grouped = {metric_type: [] for metric_type in METRIC_TYPES}
    for metric in metrics:
        grouped.setdefault(metric.metric_type, []).append(metric)
    return grouped


def metric_summary(metrics) -> Dict[str, dict]:
    """Per type total / average / count; types without rows report zeros"""
    summary = {}
    for metric_type, rows in _values_by_type(metrics).items():
        values = [float(row.value) for row in rows]
        total = sum(values)
        summary[metric_type] = {
            "total": round(total, 2),
            "average": round(total / len(values), 2) if values else 0,
            "count": len(values),
        }
    return summary


def metric_analytics(metrics) -> Dict[str, dict]:
    """Per type aggregates plus the chronological data points"""
    analytics = {}
    for metric_type, rows in _values_by_type(metrics).items():
        rows = sorted(rows, key=lambda row: row.date)
        values = [float(row.value) for row in rows]
        if not values:
            analytics[metric_type] = {
                "total": 0, "average": 0, "max": 0, "min": 0, "count": 0, "data": []
            }
            continue
        total = sum(values)
        analytics[metric_type] = {
            "total": round(total, 2),
            "average": round(total / len(values), 2),
            "max": max(values),
            "min": min(values),
            "count": len(values),
            "data": [
                {
                    "date": row.date,
                    "value": float(row.value),
                    "target": float(row.target_value) if row.target_value is not None else None,
                }
                for row in rows
            ],
        }
    return analytics


def present_averages(aggregates: Dict[str, dict]) -> Dict[str, float]:
    """Averages of the metric types with at least one recorded value"""
    return {
        metric_type: values["average"]
        for metric_type, values in aggregates.items()
        if values["count"] > 0
    }
