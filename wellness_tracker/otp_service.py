"""
OTP Service Module
Generates, delivers, verifies and purges one-time passcodes
"""
import asyncio
import random
import string
from datetime import datetime, timedelta
from typing import Callable, Optional
from sqlalchemy import or_
from sqlalchemy.orm import Session
from loguru import logger

from .config import settings
from .database import OTPCode, SessionLocal, User
from .email_service import get_email_service
from .sms_service import get_sms_service

OTP_TYPES = ("email", "mobile")


def generate_otp(length: Optional[int] = None) -> str:
    """
    Generates a random numeric code

    Args:
        length: Code length (defaults to OTP_LENGTH)
    """
    return ''.join(random.choices(string.digits, k=length or settings.OTP_LENGTH))


def store_otp(db: Session, user_id: int, otp: str, otp_type: str) -> OTPCode:
    """Persists a code that expires after OTP_EXPIRE_MINUTES"""
    record = OTPCode(
        user_id=user_id,
        otp=otp,
        type=otp_type,
        expires_at=datetime.utcnow() + timedelta(minutes=settings.OTP_EXPIRE_MINUTES),
        is_used=False,
    )
    db.add(record)
    db.commit()
    db.refresh(record)
    return record


def send_otp(db: Session, user: User, otp_type: str) -> bool:
    """
    Creates a fresh code for the user and delivers it on the given channel.

    Delivery failures are logged and reported as False; nothing is retried.

    Args:
        db: Database session
        user: Recipient
        otp_type: 'email' or 'mobile'

    Returns:
        True if the provider accepted the message
    """
    if otp_type == "email":
        destination = user.email
    elif otp_type == "mobile":
        destination = user.mobile
    else:
        raise ValueError(f"Unknown OTP type: {otp_type}")

    if not destination:
        logger.warning(f"User {user.id} has no {otp_type} to send an OTP to")
        return False

    otp = generate_otp()
    store_otp(db, user.id, otp, otp_type)

    if otp_type == "email":
        sent = get_email_service().send_otp_email(destination, otp)
    else:
        sent = get_sms_service().send_otp_sms(destination, otp)

    if sent:
        logger.info(f"OTP sent to user {user.id} via {otp_type}")
    else:
        logger.error(f"OTP delivery via {otp_type} failed for user {user.id}")
    return sent


def verify_otp(db: Session, user_id: int, otp: str, otp_type: str) -> bool:
    """
    Consumes the newest matching, unexpired and unused code

    Returns:
        True if a code matched and was marked used
    """
    record = db.query(OTPCode).filter(
        OTPCode.user_id == user_id,
        OTPCode.otp == otp,
        OTPCode.type == otp_type,
        OTPCode.is_used.is_(False),
        OTPCode.expires_at > datetime.utcnow(),
    ).order_by(OTPCode.created_at.desc(), OTPCode.id.desc()).first()

    if record is None:
        return False

    record.is_used = True
    db.commit()
    return True


def clean_expired_otps(db: Session) -> int:
    """
    Deletes codes that are expired or already used

    Returns:
        Number of deleted rows
    """
    deleted = db.query(OTPCode).filter(
        or_(OTPCode.expires_at < datetime.utcnow(), OTPCode.is_used.is_(True))
    ).delete(synchronize_session=False)
    db.commit()
    if deleted:
        logger.info(f"Cleaned {deleted} expired/used OTP codes")
    return deleted


class OTPCleanupTask:
    """
    Background task that purges expired or used codes on a fixed interval.

    Owned by the application lifespan: ``start()`` on startup,
    ``await stop()`` on shutdown.
    """

    def __init__(
        self,
        interval_seconds: Optional[float] = None,
        session_factory: Callable[[], Session] = SessionLocal
    ):
        self.interval_seconds = interval_seconds or settings.OTP_CLEANUP_INTERVAL_SECONDS
        self.session_factory = session_factory
        self._task: Optional[asyncio.Task] = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def sweep(self) -> int:
        """Runs one cleanup pass in its own session"""
        db = self.session_factory()
        try:
            return clean_expired_otps(db)
        except Exception as e:
            db.rollback()
            logger.error(f"OTP cleanup failed: {e}")
            return 0
        finally:
            db.close()

    async def _run(self):
        while True:
            await asyncio.sleep(self.interval_seconds)
            await asyncio.to_thread(self.sweep)

    def start(self):
        if self.running:
            return
        self._task = asyncio.create_task(self._run())
        logger.info(f"OTP cleanup task started (every {self.interval_seconds}s)")

    async def stop(self):
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("OTP cleanup task stopped")
