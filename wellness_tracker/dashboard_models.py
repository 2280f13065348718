"""
SQLAlchemy Models for dashboard content: badges and motivational quotes
"""
from sqlalchemy import Column, String, Integer, Text, Boolean, ForeignKey, DateTime, UniqueConstraint
from sqlalchemy.orm import Session
from datetime import datetime
from loguru import logger

from .database import Base


class Badge(Base):
    """Achievement from the static badge catalog"""
    __tablename__ = 'badges'

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), unique=True, nullable=False)
    description = Column(Text, nullable=True)
    icon = Column(String(100), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)


class UserBadge(Base):
    """Badge earned by a user"""
    __tablename__ = 'user_badges'
    __table_args__ = (
        UniqueConstraint('user_id', 'badge_id', name='uq_user_badge'),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey('users.id', ondelete='CASCADE'), nullable=False, index=True)
    badge_id = Column(Integer, ForeignKey('badges.id', ondelete='CASCADE'), nullable=False)
    earned_at = Column(DateTime, default=datetime.utcnow, nullable=False)


class MotivationalQuote(Base):
    __tablename__ = 'motivational_quotes'

    id = Column(Integer, primary_key=True, index=True)
    quote = Column(Text, nullable=False)
    author = Column(String(255), nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)


# Static catalogs loaded on first start
DEFAULT_BADGES = [
    ("First Step", "Completed your first habit", "🌱"),
    ("Week Warrior", "Kept a 7-day streak", "🔥"),
    ("Monthly Master", "Kept a 30-day streak", "🏆"),
    ("Hydration Hero", "Reached your water goal 7 days in a row", "💧"),
    ("Zen Master", "Meditated 10 minutes a day for a week", "🧘"),
    ("Early Bird", "Completed a morning yoga routine", "🌅"),
]

DEFAULT_QUOTES = [
    ("We are what we repeatedly do. Excellence, then, is not an act, but a habit.", "Will Durant"),
    ("Take care of your body. It's the only place you have to live.", "Jim Rohn"),
    ("Small daily improvements over time lead to stunning results.", "Robin Sharma"),
    ("The secret of getting ahead is getting started.", "Mark Twain"),
    ("Motivation is what gets you started. Habit is what keeps you going.", "Jim Ryun"),
    ("Health is a state of complete harmony of the body, mind and spirit.", "B.K.S. Iyengar"),
]


def seed_catalogs(db: Session):
    """Inserts the default badges and quotes into empty tables"""
    if db.query(Badge).count() == 0:
        db.add_all(Badge(name=name, description=description, icon=icon) for name, description, icon in DEFAULT_BADGES)
        logger.info(f"Seeded {len(DEFAULT_BADGES)} badges")
    if db.query(MotivationalQuote).count() == 0:
        db.add_all(MotivationalQuote(quote=quote, author=author) for quote, author in DEFAULT_QUOTES)
        logger.info(f"Seeded {len(DEFAULT_QUOTES)} motivational quotes")
    db.commit()
