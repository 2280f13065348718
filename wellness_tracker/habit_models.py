"""
SQLAlchemy Models for Habit Tracker
"""
from sqlalchemy import Column, String, Integer, Date, Text, Boolean, ForeignKey, DateTime, UniqueConstraint
from datetime import datetime

from .database import Base


# =============================================================================
# MODEL: Habit
# =============================================================================

class Habit(Base):
    """
    Habit definition owned by a user
    """
    __tablename__ = 'habits'

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)

    name = Column(String(255), nullable=False)
    icon = Column(String(100), nullable=True)
    frequency = Column(String(10), default='daily', nullable=False)  # daily, weekly, monthly
    reminder_time = Column(String(5), nullable=True)  # HH:MM
    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<Habit(id={self.id}, name={self.name}, frequency={self.frequency})>"


# =============================================================================
# MODEL: HabitCompletion
# =============================================================================

class HabitCompletion(Base):
    """
    One completion of a habit on a calendar date
    """
    __tablename__ = 'habit_completions'
    __table_args__ = (
        UniqueConstraint('habit_id', 'completed_date', name='uq_habit_completion_date'),
    )

    id = Column(Integer, primary_key=True, index=True)
    habit_id = Column(Integer, ForeignKey('habits.id', ondelete='CASCADE'), nullable=False, index=True)
    user_id = Column(Integer, ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)

    completed_date = Column(Date, nullable=False)
    notes = Column(Text, nullable=True)
    completed_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<HabitCompletion(habit_id={self.habit_id}, date={self.completed_date})>"
