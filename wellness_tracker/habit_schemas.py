"""
Pydantic Schemas for Habit Tracker API
Request/Response models for validation and serialization
"""
from pydantic import BaseModel, Field, field_validator
from typing import Optional, List, Literal
from datetime import datetime, date

from .validators import normalize_time, strip_required, reject_null

Frequency = Literal['daily', 'weekly', 'monthly']


# =============================================================================
# HABIT SCHEMAS
# =============================================================================

class HabitCreate(BaseModel):
    """Schema for creating a habit"""
    name: str = Field(..., min_length=1, max_length=255)
    icon: Optional[str] = Field(None, max_length=100)
    frequency: Frequency = 'daily'
    reminder_time: Optional[str] = None

    @field_validator('name')
    @classmethod
    def name_not_empty(cls, v):
        return strip_required(v)

    @field_validator('reminder_time')
    @classmethod
    def valid_reminder_time(cls, v):
        return normalize_time(v)


class HabitUpdate(BaseModel):
    """Schema for updating a habit; every field is optional"""
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    icon: Optional[str] = Field(None, max_length=100)
    frequency: Optional[Frequency] = None
    reminder_time: Optional[str] = None
    is_active: Optional[bool] = None

    @field_validator('name', 'frequency', 'is_active', mode='before')
    @classmethod
    def not_null(cls, v):
        return reject_null(v)

    @field_validator('name')
    @classmethod
    def name_not_empty(cls, v):
        return strip_required(v)

    @field_validator('reminder_time')
    @classmethod
    def valid_reminder_time(cls, v):
        return normalize_time(v)


class HabitResponse(BaseModel):
    id: int
    user_id: int
    name: str
    icon: Optional[str] = None
    frequency: str
    reminder_time: Optional[str] = None
    is_active: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class HabitWithTodayResponse(HabitResponse):
    """Habit with today's completion state"""
    completed_today: bool = False
    today_completion_time: Optional[datetime] = None
    today_notes: Optional[str] = None


class HabitMutationResponse(BaseModel):
    message: str
    habit: HabitResponse


# =============================================================================
# COMPLETION SCHEMAS
# =============================================================================

class ToggleCompletionRequest(BaseModel):
    completed_date: Optional[date] = None
    notes: Optional[str] = Field(None, max_length=1000)


class ToggleCompletionResponse(BaseModel):
    message: str
    completed: bool
    date: date


class HabitCompletionResponse(BaseModel):
    id: int
    habit_id: int
    completed_date: date
    notes: Optional[str] = None
    completed_at: datetime

    model_config = {"from_attributes": True}


class HabitStatsResponse(BaseModel):
    total_completions: int
    current_streak: int
    weekly_completions: int
    monthly_completions: int


class ListHabitsResponse(BaseModel):
    items: List[HabitWithTodayResponse]
    count: int


class ListCompletionsResponse(BaseModel):
    items: List[HabitCompletionResponse]
    count: int


class DeleteResponse(BaseModel):
    message: str
    id: int
