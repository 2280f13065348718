"""
FastAPI Router for daily schedules
Endpoints: /api/schedules
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from pydantic import BaseModel, Field, field_validator
from typing import Optional, List, Literal, Dict
from datetime import datetime, date
from loguru import logger

from .database import get_db, User
from .auth import get_current_user
from .reminder_models import Schedule
from .validators import normalize_time, validate_days, strip_required, reject_null, applies_on, sunday_based_weekday

router = APIRouter(prefix="/api/schedules", tags=["schedules"])

ActivityType = Literal['sleep', 'breakfast', 'lunch', 'dinner', 'work', 'exercise', 'other']


# =============================================================================
# PYDANTIC MODELS
# =============================================================================

class ScheduleBase(BaseModel):
    activity_name: str = Field(..., min_length=1, max_length=255)
    activity_type: ActivityType
    start_time: str
    end_time: Optional[str] = None
    days_of_week: Optional[List[int]] = None
    is_active: bool = True

    @field_validator('activity_name')
    @classmethod
    def name_not_empty(cls, v):
        return strip_required(v)

    @field_validator('start_time', 'end_time')
    @classmethod
    def valid_time(cls, v):
        return normalize_time(v)

    @field_validator('days_of_week')
    @classmethod
    def valid_days(cls, v):
        return validate_days(v)


class ScheduleUpdate(BaseModel):
    activity_name: Optional[str] = Field(None, min_length=1, max_length=255)
    activity_type: Optional[ActivityType] = None
    start_time: Optional[str] = None
    end_time: Optional[str] = None
    days_of_week: Optional[List[int]] = None
    is_active: Optional[bool] = None

    @field_validator('activity_name', 'activity_type', 'start_time', 'is_active', mode='before')
    @classmethod
    def not_null(cls, v):
        return reject_null(v)

    @field_validator('activity_name')
    @classmethod
    def name_not_empty(cls, v):
        return strip_required(v)

    @field_validator('start_time', 'end_time')
    @classmethod
    def valid_time(cls, v):
        return normalize_time(v)

    @field_validator('days_of_week')
    @classmethod
    def valid_days(cls, v):
        return validate_days(v)


class ScheduleResponse(BaseModel):
    id: int
    activity_name: str
    activity_type: str
    start_time: str
    end_time: Optional[str] = None
    days_of_week: Optional[List[int]] = None
    is_active: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class TimelineSlot(BaseModel):
    time: str
    hour: int
    activities: List[ScheduleResponse]


class TimelineResponse(BaseModel):
    date: date
    day_of_week: int
    schedules: List[ScheduleResponse]
    timeline: List[TimelineSlot]


class ScheduleStatsResponse(BaseModel):
    total: int
    active: int
    by_type: Dict[str, int]
    by_day: Dict[int, int]


def covers_hour(schedule, hour: int) -> bool:
    """
    A schedule covers [start hour, end hour); without an end time it covers one hour

    A schedule starting and ending within the same hour still covers that hour.
    Overnight schedules (end before start) cover nothing.
    """
    start_hour = int(schedule.start_time.split(":")[0])
    if not schedule.end_time:
        return hour == start_hour
    end_hour = int(schedule.end_time.split(":")[0])
    if end_hour == start_hour and schedule.end_time > schedule.start_time:
        end_hour += 1
    return start_hour <= hour < end_hour


def build_timeline(schedules) -> List[TimelineSlot]:
    """24 hourly slots, each listing the schedules that cover that hour"""
    return [
        TimelineSlot(
            time=f"{hour:02d}:00",
            hour=hour,
            activities=[ScheduleResponse.model_validate(s) for s in schedules if covers_hour(s, hour)]
        )
        for hour in range(24)
    ]


def _active_schedules(db: Session, user_id: int) -> List[Schedule]:
    return db.query(Schedule).filter(
        Schedule.user_id == user_id,
        Schedule.is_active.is_(True)
    ).order_by(Schedule.start_time.asc()).all()


def get_owned_schedule(db: Session, schedule_id: int, user_id: int) -> Schedule:
    schedule = db.query(Schedule).filter(
        Schedule.id == schedule_id,
        Schedule.user_id == user_id
    ).first()
    if not schedule:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Schedule not found"
        )
    return schedule


# =============================================================================
# QUERY ENDPOINTS
# =============================================================================

@router.get("", response_model=List[ScheduleResponse])
async def list_schedules(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    schedules = db.query(Schedule).filter(
        Schedule.user_id == current_user.id
    ).order_by(Schedule.start_time.asc()).all()
    return [ScheduleResponse.model_validate(s) for s in schedules]


@router.get("/today", response_model=List[ScheduleResponse])
async def today_schedules(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    weekday = sunday_based_weekday(date.today())
    return [
        ScheduleResponse.model_validate(s)
        for s in _active_schedules(db, current_user.id)
        if applies_on(s.days_of_week, weekday)
    ]


@router.get("/weekly", response_model=Dict[int, List[ScheduleResponse]])
async def weekly_schedule(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Active schedules grouped by weekday (0 = Sunday)"""
    schedules = _active_schedules(db, current_user.id)
    return {
        day: [ScheduleResponse.model_validate(s) for s in schedules if applies_on(s.days_of_week, day)]
        for day in range(7)
    }


@router.get("/timeline", response_model=TimelineResponse)
async def schedule_timeline(
    date: Optional[date] = None,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Hour-by-hour view of one day's active schedules"""
    target_date = date or datetime.now().date()
    weekday = sunday_based_weekday(target_date)
    schedules = [
        s for s in _active_schedules(db, current_user.id)
        if applies_on(s.days_of_week, weekday)
    ]

    return TimelineResponse(
        date=target_date,
        day_of_week=weekday,
        schedules=[ScheduleResponse.model_validate(s) for s in schedules],
        timeline=build_timeline(schedules)
    )


@router.get("/stats", response_model=ScheduleStatsResponse)
async def schedule_stats(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    schedules = db.query(Schedule).filter(Schedule.user_id == current_user.id).all()
    active = [s for s in schedules if s.is_active]

    by_type: Dict[str, int] = {}
    for s in schedules:
        by_type[s.activity_type] = by_type.get(s.activity_type, 0) + 1

    return ScheduleStatsResponse(
        total=len(schedules),
        active=len(active),
        by_type=by_type,
        by_day={day: sum(1 for s in active if applies_on(s.days_of_week, day)) for day in range(7)}
    )


# =============================================================================
# CRUD ENDPOINTS
# =============================================================================

@router.post("", response_model=ScheduleResponse, status_code=status.HTTP_201_CREATED)
async def create_schedule(
    schedule_data: ScheduleBase,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    try:
        schedule = Schedule(user_id=current_user.id, **schedule_data.model_dump())
        db.add(schedule)
        db.commit()
        db.refresh(schedule)
        logger.info(f"Schedule {schedule.id} created for user {current_user.id}")
        return ScheduleResponse.model_validate(schedule)

    except Exception as e:
        db.rollback()
        logger.error(f"Create schedule error: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create schedule"
        )


@router.put("/{schedule_id}", response_model=ScheduleResponse)
async def update_schedule(
    schedule_id: int,
    schedule_data: ScheduleUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    schedule = get_owned_schedule(db, schedule_id, current_user.id)

    update_data = schedule_data.model_dump(exclude_unset=True)
    if not update_data:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No fields to update"
        )

    try:
        for field, value in update_data.items():
            setattr(schedule, field, value)
        db.commit()
        db.refresh(schedule)
        return ScheduleResponse.model_validate(schedule)

    except Exception as e:
        db.rollback()
        logger.error(f"Update schedule error: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update schedule"
        )


@router.delete("/{schedule_id}")
async def delete_schedule(
    schedule_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    schedule = get_owned_schedule(db, schedule_id, current_user.id)

    try:
        db.delete(schedule)
        db.commit()
        return {"message": "Schedule deleted successfully", "id": schedule_id}

    except Exception as e:
        db.rollback()
        logger.error(f"Delete schedule error: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete schedule"
        )
