"""
SQLAlchemy Models for wellness progress metrics
"""
from sqlalchemy import Column, String, Integer, Date, Numeric, ForeignKey, DateTime, UniqueConstraint
from datetime import datetime

from .database import Base


class ProgressMetric(Base):
    """Daily value of one wellness metric; at most one per (user, type, date)"""
    __tablename__ = 'progress_metrics'
    __table_args__ = (
        UniqueConstraint('user_id', 'metric_type', 'date', name='uq_progress_metric_user_type_date'),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)

    metric_type = Column(String(30), nullable=False)  # water_intake, sleep_hours, exercise_minutes, meditation_minutes
    value = Column(Numeric(10, 2), nullable=False)
    target_value = Column(Numeric(10, 2), nullable=True)
    date = Column(Date, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<ProgressMetric(type={self.metric_type}, date={self.date}, value={self.value})>"
