"""
SQLAlchemy Models for reminders and daily schedules
"""
from sqlalchemy import Column, String, Integer, Text, Boolean, ForeignKey, DateTime, JSON
from datetime import datetime

from .database import Base


class Reminder(Base):
    """
    Reminder firing at a time of day on selected weekdays
    """
    __tablename__ = 'reminders'

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    reminder_time = Column(String(5), nullable=False)  # HH:MM
    days_of_week = Column(JSON, nullable=True)  # [0-6], 0 = Sunday; empty = every day
    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<Reminder(id={self.id}, title={self.title}, time={self.reminder_time})>"


class Schedule(Base):
    """
    Recurring activity in the user's daily routine
    """
    __tablename__ = 'schedules'

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)

    activity_name = Column(String(255), nullable=False)
    activity_type = Column(String(20), nullable=False)  # sleep, breakfast, lunch, dinner, work, exercise, other
    start_time = Column(String(5), nullable=False)  # HH:MM
    end_time = Column(String(5), nullable=True)
    days_of_week = Column(JSON, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<Schedule(id={self.id}, activity={self.activity_name}, start={self.start_time})>"
