"""
FastAPI Router for wellness progress metrics
Endpoints: /api/progress
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from pydantic import BaseModel, Field
from typing import Optional, List, Literal
from datetime import datetime, date, timedelta
from loguru import logger

from .database import get_db, User
from .auth import get_current_user
from .analytics import metric_analytics, metric_summary, present_averages, wellness_score
from .progress_models import ProgressMetric

router = APIRouter(prefix="/api/progress", tags=["progress"])

MetricType = Literal['water_intake', 'sleep_hours', 'exercise_minutes', 'meditation_minutes']

PERIOD_DAYS = {"week": 7, "month": 30, "year": 365}


# =============================================================================
# PYDANTIC MODELS
# =============================================================================

class MetricCreate(BaseModel):
    metric_type: MetricType
    value: float = Field(..., ge=0)
    target_value: Optional[float] = Field(None, ge=0)
    date: date


class MetricUpdate(BaseModel):
    value: Optional[float] = Field(None, ge=0)
    target_value: Optional[float] = Field(None, ge=0)


class MetricResponse(BaseModel):
    id: int
    metric_type: str
    value: float
    target_value: Optional[float] = None
    date: date
    created_at: datetime

    model_config = {"from_attributes": True}


class MetricMutationResponse(BaseModel):
    message: str
    metric: MetricResponse


class ListMetricsResponse(BaseModel):
    items: List[MetricResponse]
    count: int


def get_owned_metric(db: Session, metric_id: int, user_id: int) -> ProgressMetric:
    metric = db.query(ProgressMetric).filter(
        ProgressMetric.id == metric_id,
        ProgressMetric.user_id == user_id
    ).first()
    if not metric:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Progress metric not found"
        )
    return metric


def _duplicate_metric() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_409_CONFLICT,
        detail="Metric already recorded for this date"
    )


# =============================================================================
# CRUD ENDPOINTS
# =============================================================================

@router.get("", response_model=ListMetricsResponse)
async def list_metrics(
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    metric_type: Optional[MetricType] = None,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Metrics of the current user, newest first"""
    query = db.query(ProgressMetric).filter(ProgressMetric.user_id == current_user.id)
    if start_date:
        query = query.filter(ProgressMetric.date >= start_date)
    if end_date:
        query = query.filter(ProgressMetric.date <= end_date)
    if metric_type:
        query = query.filter(ProgressMetric.metric_type == metric_type)

    metrics = query.order_by(ProgressMetric.date.desc(), ProgressMetric.id.desc()).all()
    return ListMetricsResponse(
        items=[MetricResponse.model_validate(m) for m in metrics],
        count=len(metrics)
    )


@router.post("", response_model=MetricMutationResponse, status_code=status.HTTP_201_CREATED)
async def create_metric(
    metric_data: MetricCreate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Records a metric; a second value for the same type and date is rejected"""
    existing = db.query(ProgressMetric).filter(
        ProgressMetric.user_id == current_user.id,
        ProgressMetric.metric_type == metric_data.metric_type,
        ProgressMetric.date == metric_data.date
    ).first()
    if existing:
        raise _duplicate_metric()

    try:
        metric = ProgressMetric(user_id=current_user.id, **metric_data.model_dump())
        db.add(metric)
        db.commit()
        db.refresh(metric)
        return MetricMutationResponse(
            message="Progress metric recorded successfully",
            metric=MetricResponse.model_validate(metric)
        )

    except IntegrityError:
        db.rollback()
        raise _duplicate_metric()
    except Exception as e:
        db.rollback()
        logger.error(f"Create progress metric error: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to record progress metric"
        )


@router.put("/{metric_id}", response_model=MetricMutationResponse)
async def update_metric(
    metric_id: int,
    metric_data: MetricUpdate,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    metric = get_owned_metric(db, metric_id, current_user.id)

    update_data = metric_data.model_dump(exclude_unset=True)
    if not update_data:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No fields to update"
        )
    if "value" in update_data and update_data["value"] is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Value cannot be null"
        )

    try:
        for field, value in update_data.items():
            setattr(metric, field, value)
        db.commit()
        db.refresh(metric)
        return MetricMutationResponse(
            message="Progress metric updated successfully",
            metric=MetricResponse.model_validate(metric)
        )

    except Exception as e:
        db.rollback()
        logger.error(f"Update progress metric error: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update progress metric"
        )


@router.delete("/{metric_id}")
async def delete_metric(
    metric_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    metric = get_owned_metric(db, metric_id, current_user.id)

    try:
        db.delete(metric)
        db.commit()
        return {"message": "Progress metric deleted successfully", "id": metric_id}

    except Exception as e:
        db.rollback()
        logger.error(f"Delete progress metric error: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete progress metric"
        )


# =============================================================================
# ANALYTICS ENDPOINTS
# =============================================================================

def _metrics_between(db: Session, user_id: int, start: date, end: date) -> List[ProgressMetric]:
    return db.query(ProgressMetric).filter(
        ProgressMetric.user_id == user_id,
        ProgressMetric.date >= start,
        ProgressMetric.date <= end
    ).order_by(ProgressMetric.date.asc()).all()


@router.get("/analytics")
async def get_analytics(
    period: str = "week",
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """
    Per-type aggregates over the last week, month or year plus the wellness score

    Unknown periods fall back to a week.
    """
    if period not in PERIOD_DAYS:
        period = "week"
    end_date = date.today()
    start_date = end_date - timedelta(days=PERIOD_DAYS[period])

    analytics = metric_analytics(_metrics_between(db, current_user.id, start_date, end_date))

    return {
        "period": period,
        "start_date": start_date,
        "end_date": end_date,
        "analytics": analytics,
        "wellness_score": wellness_score(present_averages(analytics)),
    }


@router.get("/summary")
async def get_summary(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Totals and averages for today, the last 7 days and the last 30 days"""
    today = date.today()
    month_metrics = _metrics_between(db, current_user.id, today - timedelta(days=30), today)
    week_start = today - timedelta(days=7)

    return {
        "summary": {
            "today": metric_summary([m for m in month_metrics if m.date == today]),
            "week": metric_summary([m for m in month_metrics if m.date >= week_start]),
            "month": metric_summary(month_metrics),
        }
    }
