"""
SQLAlchemy Models for yoga practice
"""
from sqlalchemy import Column, String, Integer, Text, ForeignKey, DateTime
from datetime import datetime

from .database import Base


class YogaSession(Base):
    """Completed yoga practice session"""
    __tablename__ = 'yoga_sessions'

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)

    pose_name = Column(String(255), nullable=False)
    duration_minutes = Column(Integer, nullable=False)
    notes = Column(Text, nullable=True)
    completed_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<YogaSession(id={self.id}, pose={self.pose_name}, minutes={self.duration_minutes})>"
