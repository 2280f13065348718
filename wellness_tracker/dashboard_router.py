"""
FastAPI Router for the dashboard
Endpoints: /api/dashboard
"""
import calendar
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.sql.expression import func
from sqlalchemy.orm import Session
from typing import Optional
from datetime import date
from loguru import logger

from .database import get_db, User
from .auth import get_current_user
from .analytics import (
    current_streak, longest_streak, streak_history, rollup_counts,
    week_bounds, date_range, percentage, round_half_up
)
from .dashboard_models import Badge, UserBadge, MotivationalQuote
from .habit_models import Habit, HabitCompletion
from .habit_router import habits_with_today
from .progress_models import ProgressMetric
from .progress_router import MetricResponse

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])

RECENT_METRICS_LIMIT = 7
STREAK_HISTORY_LIMIT = 10


def _completion_dates(db: Session, user_id: int):
    return [
        row.completed_date for row in db.query(HabitCompletion.completed_date).filter(
            HabitCompletion.user_id == user_id
        ).all()
    ]


def _active_habits(db: Session, user_id: int):
    return db.query(Habit).filter(
        Habit.user_id == user_id,
        Habit.is_active.is_(True)
    ).all()


def _completions_per_day(db: Session, user_id: int, start: date, end: date) -> dict:
    counts = {}
    for row in db.query(HabitCompletion.completed_date).filter(
        HabitCompletion.user_id == user_id,
        HabitCompletion.completed_date >= start,
        HabitCompletion.completed_date <= end
    ).all():
        counts[row.completed_date] = counts.get(row.completed_date, 0) + 1
    return counts


def _habit_summary(habit: Habit) -> dict:
    return {"id": habit.id, "name": habit.name, "icon": habit.icon}


@router.get("")
async def get_dashboard(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Dashboard overview: a random motivational quote, today's habits,
    completion stats, earned badges and the most recent metrics
    """
    try:
        today = date.today()

        quote = db.query(MotivationalQuote).filter(
            MotivationalQuote.is_active.is_(True)
        ).order_by(func.random()).first()

        habits = habits_with_today(db, current_user.id, today)
        dates = _completion_dates(db, current_user.id)
        counts = rollup_counts(dates, today)

        total_habits = len(habits)
        completed_habits = sum(1 for habit in habits if habit.completed_today)

        badges = db.query(Badge, UserBadge.earned_at).join(
            UserBadge, UserBadge.badge_id == Badge.id
        ).filter(
            UserBadge.user_id == current_user.id
        ).order_by(UserBadge.earned_at.desc()).all()

        recent_metrics = db.query(ProgressMetric).filter(
            ProgressMetric.user_id == current_user.id
        ).order_by(ProgressMetric.date.desc(), ProgressMetric.id.desc()).limit(RECENT_METRICS_LIMIT).all()

        return {
            "quote": {"id": quote.id, "quote": quote.quote, "author": quote.author} if quote else None,
            "habits": habits,
            "stats": {
                "current_streak": current_streak(dates),
                "today_completions": counts["today"],
                "weekly_completions": counts["week"],
                "monthly_completions": counts["month"],
                "total_habits": total_habits,
                "completed_habits": completed_habits,
                "completion_percentage": percentage(completed_habits, total_habits),
            },
            "badges": [
                {
                    "id": badge.id,
                    "name": badge.name,
                    "description": badge.description,
                    "icon": badge.icon,
                    "earned_at": earned_at,
                }
                for badge, earned_at in badges
            ],
            "recent_metrics": [MetricResponse.model_validate(m) for m in recent_metrics],
        }

    except Exception as e:
        logger.error(f"Get dashboard error: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to get dashboard data"
        )


@router.get("/weekly-progress")
async def weekly_progress(
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Per-day completion percentage; defaults to the current ISO week"""
    if not (start_date and end_date):
        start_date, end_date = week_bounds(date.today())
    if end_date < start_date:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="end_date must not be before start_date"
        )

    habits = _active_habits(db, current_user.id)
    per_day = _completions_per_day(db, current_user.id, start_date, end_date)
    total_habits = len(habits)

    return {
        "start_date": start_date,
        "end_date": end_date,
        "habits": [_habit_summary(h) for h in habits],
        "weekly_data": [
            {
                "date": day,
                "day_name": day.strftime("%a"),
                "completions": per_day.get(day, 0),
                "total_habits": total_habits,
                "percentage": percentage(per_day.get(day, 0), total_habits),
            }
            for day in date_range(start_date, end_date)
        ],
    }


@router.get("/monthly-progress")
async def monthly_progress(
    year: Optional[int] = Query(None, ge=1970, le=9999),
    month: Optional[int] = Query(None, ge=1, le=12),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Calendar month completion data and totals"""
    today = date.today()
    year = year or today.year
    month = month or today.month
    days_in_month = calendar.monthrange(year, month)[1]
    first_day = date(year, month, 1)
    last_day = date(year, month, days_in_month)

    habits = _active_habits(db, current_user.id)
    per_day = _completions_per_day(db, current_user.id, first_day, last_day)
    total_habits = len(habits)
    total_completions = sum(per_day.values())
    total_possible = total_habits * days_in_month

    return {
        "year": year,
        "month": month,
        "month_name": calendar.month_name[month],
        "habits": [_habit_summary(h) for h in habits],
        "monthly_data": [
            {
                "day": day.day,
                "date": day,
                "completions": per_day.get(day, 0),
                "total_habits": total_habits,
                "percentage": percentage(per_day.get(day, 0), total_habits),
            }
            for day in date_range(first_day, last_day)
        ],
        "stats": {
            "total_completions": total_completions,
            "total_possible": total_possible,
            "monthly_percentage": percentage(total_completions, total_possible),
            "average_daily_completions": round_half_up(total_completions / days_in_month),
        },
    }


@router.get("/streaks")
async def get_streaks(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Current and longest streak across all habits plus recent runs"""
    dates = _completion_dates(db, current_user.id)
    return {
        "current_streak": current_streak(dates),
        "longest_streak": longest_streak(dates),
        "streak_history": streak_history(dates, STREAK_HISTORY_LIMIT),
    }
