"""
Database Module for Wellness Tracker API
SQLAlchemy engine, session dependency and account-level models
"""
from sqlalchemy import create_engine, Column, Integer, String, Boolean, Text, ForeignKey, DateTime, text
from sqlalchemy.ext.declarative import declarative_base
from sqlalchemy.orm import sessionmaker, Session
from datetime import datetime
from typing import Generator
from loguru import logger

from .config import settings


def _engine_options(database_url: str) -> dict:
    """Connection options for the configured backend"""
    if database_url.startswith("sqlite"):
        return {"connect_args": {"check_same_thread": False}}
    return {
        "pool_pre_ping": True,  # checks the connection before use
        "pool_recycle": 3600,   # refreshes connections every hour
    }


# SQLAlchemy setup
engine = create_engine(
    settings.DATABASE_URL,
    echo=False,
    **_engine_options(settings.DATABASE_URL)
)

SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
Base = declarative_base()


# Dependency for FastAPI
def get_db() -> Generator[Session, None, None]:
    """
    Dependency yielding a database session
    Used by FastAPI endpoints
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def init_db():
    """
    Creates tables for every registered model and seeds the static catalogs
    """
    # Import all models so SQLAlchemy registers them
    from . import habit_models  # noqa: F401
    from . import progress_models  # noqa: F401
    from . import reminder_models  # noqa: F401
    from . import yoga_models  # noqa: F401
    from . import dashboard_models

    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created/verified")

    db = SessionLocal()
    try:
        dashboard_models.seed_catalogs(db)
    except Exception as e:
        db.rollback()
        logger.warning(f"Catalog seeding skipped: {e}")
    finally:
        db.close()


def test_connection() -> bool:
    """
    Tests the database connection

    Returns:
        True if the connection works, False otherwise
    """
    try:
        with engine.connect() as connection:
            connection.execute(text("SELECT 1"))
        return True
    except Exception as e:
        logger.error(f"Database connection error: {e}")
        return False


# =============================================================================
# ACCOUNT MODELS
# =============================================================================

class User(Base):
    """Registered user, identified by email and/or mobile number"""
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=True)
    mobile = Column(String(20), unique=True, index=True, nullable=True)
    password = Column(Text, nullable=False)  # bcrypt hash
    avatar = Column(Text, nullable=True)
    is_verified = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)


class OTPCode(Base):
    """One-time passcode sent by email or SMS"""
    __tablename__ = "otp_codes"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    otp = Column(String(10), nullable=False)
    type = Column(String(10), nullable=False)  # email, mobile
    expires_at = Column(DateTime, nullable=False)
    is_used = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow)
