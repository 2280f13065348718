"""
FastAPI Router for reminders
Endpoints: /api/reminders
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
from datetime import datetime
from loguru import logger

from .database import get_db, User
from .auth import get_current_user
from .reminder_models import Reminder
from .validators import normalize_time, validate_days, strip_required, reject_null, applies_on, sunday_based_weekday

router = APIRouter(prefix="/api/reminders", tags=["reminders"])

UPCOMING_LIMIT = 10


# =============================================================================
# PYDANTIC MODELS
# =============================================================================

class ReminderBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=1000)
    reminder_time: str
    days_of_week: Optional[List[int]] = Field(default=None, description="0 = Sunday ... 6 = Saturday")
    is_active: bool = True

    @field_validator('title')
    @classmethod
    def title_not_empty(cls, v):
        return strip_required(v)

    @field_validator('reminder_time')
    @classmethod
    def valid_time(cls, v):
        return normalize_time(v)

    @field_validator('days_of_week')
    @classmethod
    def valid_days(cls, v):
        return validate_days(v)


class ReminderUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = Field(None, max_length=1000)
    reminder_time: Optional[str] = None
    days_of_week: Optional[List[int]] = None
    is_active: Optional[bool] = None

    @field_validator('title', 'reminder_time', 'is_active', mode='before')
    @classmethod
    def not_null(cls, v):
        return reject_null(v)

    @field_validator('title')
    @classmethod
    def title_not_empty(cls, v):
        return strip_required(v)

    @field_validator('reminder_time')
    @classmethod
    def valid_time(cls, v):
        return normalize_time(v)

    @field_validator('days_of_week')
    @classmethod
    def valid_days(cls, v):
        return validate_days(v)


class ReminderResponse(BaseModel):
    id: int
    title: str
    description: Optional[str] = None
    reminder_time: str
    days_of_week: Optional[List[int]] = None
    is_active: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class UpcomingReminderResponse(ReminderResponse):
    days_until: int


def db_model_to_response(reminder: Reminder) -> ReminderResponse:
    return ReminderResponse.model_validate(reminder)


def days_until(days_of_week: Optional[List[int]], reminder_time: str, weekday: int, current_time: str) -> int:
    """
    Days until the reminder next fires.

    0 if it fires later today, otherwise the offset (1-6) of the next
    matching weekday, or 7 when it only fires on today's weekday and that
    time has already passed.

    Args:
        days_of_week: Weekdays (0 = Sunday); empty means every day
        reminder_time: HH:MM
        weekday: Current weekday (0 = Sunday)
        current_time: Current HH:MM
    """
    if applies_on(days_of_week, weekday) and reminder_time > current_time:
        return 0
    for offset in range(1, 7):
        if applies_on(days_of_week, (weekday + offset) % 7):
            return offset
    return 7


def get_owned_reminder(db: Session, reminder_id: int, user_id: int) -> Reminder:
    reminder = db.query(Reminder).filter(
        Reminder.id == reminder_id,
        Reminder.user_id == user_id
    ).first()
    if not reminder:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Reminder not found"
        )
    return reminder


# =============================================================================
# ENDPOINTS
# =============================================================================

@router.get("", response_model=List[ReminderResponse])
async def list_reminders(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    reminders = db.query(Reminder).filter(
        Reminder.user_id == current_user.id
    ).order_by(Reminder.reminder_time.asc()).all()
    return [db_model_to_response(r) for r in reminders]


@router.get("/today", response_model=List[ReminderResponse])
async def today_reminders(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Active reminders that fire on today's weekday"""
    weekday = sunday_based_weekday(datetime.now())
    reminders = db.query(Reminder).filter(
        Reminder.user_id == current_user.id,
        Reminder.is_active.is_(True)
    ).order_by(Reminder.reminder_time.asc()).all()
    return [db_model_to_response(r) for r in reminders if applies_on(r.days_of_week, weekday)]


@router.get("/upcoming", response_model=List[UpcomingReminderResponse])
async def upcoming_reminders(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Next active reminders ordered by days until they fire, then time"""
    now = datetime.now()
    weekday = sunday_based_weekday(now)
    current_time = now.strftime("%H:%M")

    reminders = db.query(Reminder).filter(
        Reminder.user_id == current_user.id,
        Reminder.is_active.is_(True)
    ).all()

    upcoming = [
        UpcomingReminderResponse(
            **db_model_to_response(r).model_dump(),
            days_until=days_until(r.days_of_week, r.reminder_time, weekday, current_time)
        )
        for r in reminders
    ]
    upcoming.sort(key=lambda r: (r.days_until, r.reminder_time))
    return upcoming[:UPCOMING_LIMIT]


@router.post("", response_model=ReminderResponse, status_code=status.HTTP_201_CREATED)
async def create_reminder(
    reminder_data: ReminderBase,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    try:
        reminder = Reminder(user_id=current_user.id, **reminder_data.model_dump())
        db.add(reminder)
        db.commit()
        db.refresh(reminder)
        logger.info(f"Reminder {reminder.id} created for user {current_user.id}")
        return db_model_to_response(reminder)

    except Exception as e:
        db.rollback()
        logger.error(f"Create reminder error: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create reminder"
        )


@router.put("/{reminder_id}", response_model=ReminderResponse)
async def update_reminder(
    reminder_id: int,
    reminder_data: ReminderUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    reminder = get_owned_reminder(db, reminder_id, current_user.id)

    update_data = reminder_data.model_dump(exclude_unset=True)
    if not update_data:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No fields to update"
        )

    try:
        for field, value in update_data.items():
            setattr(reminder, field, value)
        db.commit()
        db.refresh(reminder)
        return db_model_to_response(reminder)

    except Exception as e:
        db.rollback()
        logger.error(f"Update reminder error: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update reminder"
        )


@router.delete("/{reminder_id}")
async def delete_reminder(
    reminder_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    reminder = get_owned_reminder(db, reminder_id, current_user.id)

    try:
        db.delete(reminder)
        db.commit()
        return {"message": "Reminder deleted successfully", "id": reminder_id}

    except Exception as e:
        db.rollback()
        logger.error(f"Delete reminder error: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete reminder"
        )


@router.patch("/{reminder_id}/toggle")
async def toggle_reminder(
    reminder_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Flips the active flag"""
    reminder = get_owned_reminder(db, reminder_id, current_user.id)

    try:
        reminder.is_active = not reminder.is_active
        db.commit()
        state = "activated" if reminder.is_active else "deactivated"
        return {"message": f"Reminder {state} successfully", "is_active": reminder.is_active}

    except Exception as e:
        db.rollback()
        logger.error(f"Toggle reminder error: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to toggle reminder"
        )
