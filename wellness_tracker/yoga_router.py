"""
FastAPI Router for yoga content and practice sessions
Endpoints: /api/yoga
"""
from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy.orm import Session
from pydantic import BaseModel, Field, field_validator
from typing import Optional, List
from datetime import datetime, date, time, timedelta
from loguru import logger

from .database import get_db, User
from .auth import get_current_user
from .analytics import round_half_up
from .validators import strip_required
from .yoga_catalog import filter_poses, find_pose, find_routine, YOGA_ROUTINES
from .yoga_models import YogaSession

router = APIRouter(prefix="/api/yoga", tags=["yoga"])

POPULAR_POSES_LIMIT = 5


class YogaSessionCreate(BaseModel):
    pose_name: str = Field(..., min_length=1, max_length=255)
    duration_minutes: int = Field(..., ge=1, le=180)
    notes: Optional[str] = Field(None, max_length=1000)

    @field_validator('pose_name')
    @classmethod
    def pose_name_not_empty(cls, v):
        return strip_required(v)


class YogaSessionResponse(BaseModel):
    id: int
    pose_name: str
    duration_minutes: int
    notes: Optional[str] = None
    completed_at: datetime

    model_config = {"from_attributes": True}


class PopularPose(BaseModel):
    pose_name: str
    count: int


class YogaStatsResponse(BaseModel):
    total_sessions: int
    total_duration: int
    weekly_sessions: int
    monthly_sessions: int
    average_duration: int
    popular_poses: List[PopularPose]


# =============================================================================
# CATALOG ENDPOINTS (public)
# =============================================================================

@router.get("/poses")
async def list_poses(
    category: Optional[str] = None,
    difficulty: Optional[str] = None,
    limit: Optional[int] = Query(None, ge=0)
):
    return {"poses": filter_poses(category, difficulty, limit)}


@router.get("/poses/{pose_id}")
async def get_pose(pose_id: int):
    pose = find_pose(pose_id)
    if not pose:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Yoga pose not found"
        )
    return {"pose": pose}


@router.get("/routines")
async def list_routines():
    return {"routines": YOGA_ROUTINES}


@router.get("/routines/{routine_id}")
async def get_routine(routine_id: int):
    routine = find_routine(routine_id)
    if not routine:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Yoga routine not found"
        )
    return {"routine": routine}


# =============================================================================
# SESSION ENDPOINTS
# =============================================================================

@router.get("/sessions", response_model=List[YogaSessionResponse])
async def list_sessions(
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Practice sessions, newest first, filtered by completion day"""
    query = db.query(YogaSession).filter(YogaSession.user_id == current_user.id)
    if start_date:
        query = query.filter(YogaSession.completed_at >= datetime.combine(start_date, time.min))
    if end_date:
        query = query.filter(YogaSession.completed_at < datetime.combine(end_date + timedelta(days=1), time.min))

    sessions = query.order_by(YogaSession.completed_at.desc(), YogaSession.id.desc()).all()
    return [YogaSessionResponse.model_validate(s) for s in sessions]


@router.post("/sessions", status_code=status.HTTP_201_CREATED)
async def create_session(
    session_data: YogaSessionCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    try:
        session = YogaSession(user_id=current_user.id, **session_data.model_dump())
        db.add(session)
        db.commit()
        db.refresh(session)
        logger.info(f"Yoga session {session.id} recorded for user {current_user.id}")
        return {
            "message": "Yoga session recorded successfully",
            "session": YogaSessionResponse.model_validate(session)
        }

    except Exception as e:
        db.rollback()
        logger.error(f"Add yoga session error: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to add yoga session"
        )


@router.get("/stats", response_model=YogaStatsResponse)
async def yoga_stats(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Totals, recent activity (last 7 / 30 days) and most practiced poses"""
    sessions = db.query(YogaSession).filter(YogaSession.user_id == current_user.id).all()

    now = datetime.utcnow()
    week_start = now - timedelta(days=7)
    month_start = now - timedelta(days=30)
    total_duration = sum(s.duration_minutes for s in sessions)

    pose_counts = {}
    for s in sessions:
        pose_counts[s.pose_name] = pose_counts.get(s.pose_name, 0) + 1
    popular = sorted(pose_counts.items(), key=lambda item: (-item[1], item[0]))[:POPULAR_POSES_LIMIT]

    return YogaStatsResponse(
        total_sessions=len(sessions),
        total_duration=total_duration,
        weekly_sessions=sum(1 for s in sessions if s.completed_at >= week_start),
        monthly_sessions=sum(1 for s in sessions if s.completed_at >= month_start),
        average_duration=round_half_up(total_duration / len(sessions)) if sessions else 0,
        popular_poses=[PopularPose(pose_name=name, count=count) for name, count in popular]
    )
