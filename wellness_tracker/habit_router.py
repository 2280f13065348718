"""
FastAPI Router for Habit Tracker
Endpoints: /api/habits
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import date
from loguru import logger

from .database import get_db, User
from .auth import get_current_user
from .analytics import current_streak, rollup_counts
from .habit_models import Habit, HabitCompletion
from .habit_schemas import (
    HabitCreate, HabitUpdate, HabitResponse, HabitWithTodayResponse,
    HabitMutationResponse, ToggleCompletionRequest, ToggleCompletionResponse,
    HabitCompletionResponse, HabitStatsResponse,
    ListHabitsResponse, ListCompletionsResponse, DeleteResponse
)

router = APIRouter(prefix="/api/habits", tags=["habits"])


def get_owned_habit(db: Session, habit_id: int, user_id: int, active_only: bool = False) -> Habit:
    """Loads a habit owned by the user or raises 404"""
    query = db.query(Habit).filter(Habit.id == habit_id, Habit.user_id == user_id)
    if active_only:
        query = query.filter(Habit.is_active.is_(True))
    habit = query.first()
    if not habit:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Habit not found"
        )
    return habit


def habits_with_today(db: Session, user_id: int, today: Optional[date] = None) -> List[HabitWithTodayResponse]:
    """Active habits, newest first, annotated with today's completion"""
    today = today or date.today()
    habits = db.query(Habit).filter(
        Habit.user_id == user_id,
        Habit.is_active.is_(True)
    ).order_by(Habit.created_at.desc(), Habit.id.desc()).all()

    completions = {
        completion.habit_id: completion
        for completion in db.query(HabitCompletion).filter(
            HabitCompletion.user_id == user_id,
            HabitCompletion.completed_date == today
        ).all()
    }

    items = []
    for habit in habits:
        completion = completions.get(habit.id)
        item = HabitWithTodayResponse.model_validate(habit)
        item.completed_today = completion is not None
        if completion is not None:
            item.today_completion_time = completion.completed_at
            item.today_notes = completion.notes
        items.append(item)
    return items


# =============================================================================
# HABIT ENDPOINTS
# =============================================================================

@router.get("", response_model=ListHabitsResponse)
async def list_habits(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Active habits with today's completion status"""
    items = habits_with_today(db, current_user.id)
    return ListHabitsResponse(items=items, count=len(items))


@router.post("", response_model=HabitMutationResponse, status_code=status.HTTP_201_CREATED)
async def create_habit(
    habit_data: HabitCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    try:
        habit = Habit(user_id=current_user.id, **habit_data.model_dump())
        db.add(habit)
        db.commit()
        db.refresh(habit)
        logger.info(f"Habit {habit.id} created for user {current_user.id}")
        return HabitMutationResponse(message="Habit created successfully", habit=HabitResponse.model_validate(habit))

    except Exception as e:
        db.rollback()
        logger.error(f"Create habit error: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create habit"
        )


@router.put("/{habit_id}", response_model=HabitMutationResponse)
async def update_habit(
    habit_id: int,
    habit_data: HabitUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Partially updates a habit, including deactivation"""
    habit = get_owned_habit(db, habit_id, current_user.id)

    update_data = habit_data.model_dump(exclude_unset=True)
    if not update_data:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No fields to update"
        )

    try:
        for field, value in update_data.items():
            setattr(habit, field, value)
        db.commit()
        db.refresh(habit)
        return HabitMutationResponse(message="Habit updated successfully", habit=HabitResponse.model_validate(habit))

    except Exception as e:
        db.rollback()
        logger.error(f"Update habit error: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update habit"
        )


@router.delete("/{habit_id}", response_model=DeleteResponse)
async def delete_habit(
    habit_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Deletes a habit together with its completions"""
    habit = get_owned_habit(db, habit_id, current_user.id)

    try:
        db.query(HabitCompletion).filter(HabitCompletion.habit_id == habit.id).delete(synchronize_session=False)
        db.delete(habit)
        db.commit()
        logger.info(f"Habit {habit_id} deleted for user {current_user.id}")
        return DeleteResponse(message="Habit deleted successfully", id=habit_id)

    except Exception as e:
        db.rollback()
        logger.error(f"Delete habit error: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete habit"
        )


# =============================================================================
# COMPLETION ENDPOINTS
# =============================================================================

@router.post("/{habit_id}/toggle", response_model=ToggleCompletionResponse)
async def toggle_completion(
    habit_id: int,
    request: Optional[ToggleCompletionRequest] = None,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Flips the completion of an active habit for a date (default today).

    An existing completion for the date is removed, otherwise one is
    inserted, so toggling twice restores the previous state.
    """
    request = request or ToggleCompletionRequest()
    habit = get_owned_habit(db, habit_id, current_user.id, active_only=True)
    completed_date = request.completed_date or date.today()

    try:
        existing = db.query(HabitCompletion).filter(
            HabitCompletion.habit_id == habit.id,
            HabitCompletion.completed_date == completed_date
        ).first()

        if existing:
            db.delete(existing)
            db.commit()
            return ToggleCompletionResponse(
                message="Habit marked as incomplete",
                completed=False,
                date=completed_date
            )

        db.add(HabitCompletion(
            habit_id=habit.id,
            user_id=current_user.id,
            completed_date=completed_date,
            notes=request.notes,
        ))
        db.commit()
        return ToggleCompletionResponse(
            message="Habit marked as complete",
            completed=True,
            date=completed_date
        )

    except Exception as e:
        db.rollback()
        logger.error(f"Toggle habit completion error: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to toggle habit completion"
        )


@router.get("/{habit_id}/history", response_model=ListCompletionsResponse)
async def get_habit_history(
    habit_id: int,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Completions of a habit, newest first"""
    get_owned_habit(db, habit_id, current_user.id)

    query = db.query(HabitCompletion).filter(HabitCompletion.habit_id == habit_id)
    if start_date:
        query = query.filter(HabitCompletion.completed_date >= start_date)
    if end_date:
        query = query.filter(HabitCompletion.completed_date <= end_date)

    completions = query.order_by(HabitCompletion.completed_date.desc()).all()
    return ListCompletionsResponse(
        items=[HabitCompletionResponse.model_validate(c) for c in completions],
        count=len(completions)
    )


@router.get("/{habit_id}/stats", response_model=HabitStatsResponse)
async def get_habit_stats(
    habit_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Totals, current streak and this week's / month's completions"""
    get_owned_habit(db, habit_id, current_user.id)

    dates = [
        row.completed_date for row in db.query(HabitCompletion.completed_date).filter(
            HabitCompletion.habit_id == habit_id
        ).all()
    ]
    counts = rollup_counts(dates)

    return HabitStatsResponse(
        total_completions=len(dates),
        current_streak=current_streak(dates),
        weekly_completions=counts["week"],
        monthly_completions=counts["month"],
    )
