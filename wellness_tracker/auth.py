"""
Authentication Utilities for Wellness Tracker API
Password hashing, JWT access tokens and the current-user dependency
"""
import bcrypt
from datetime import datetime, timedelta
from typing import Optional
from jose import JWTError, jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from loguru import logger

from .config import settings
from .database import get_db, User

# Security scheme for FastAPI
security = HTTPBearer(auto_error=False)


def hash_password(password: str, rounds: Optional[int] = None) -> str:
    """
    Hashes a password with bcrypt

    Args:
        password: Plain text password
        rounds: bcrypt cost factor (defaults to BCRYPT_ROUNDS)

    Returns:
        Hashed password as string
    """
    try:
        salt = bcrypt.gensalt(rounds=rounds or settings.BCRYPT_ROUNDS)
        hashed = bcrypt.hashpw(password.encode('utf-8'), salt)
        return hashed.decode('utf-8')
    except Exception as e:
        logger.error(f"Error hashing password: {e}")
        raise


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Checks a plain password against a stored bcrypt hash

    Returns:
        True if the passwords match, False otherwise
    """
    try:
        return bcrypt.checkpw(
            plain_password.encode('utf-8'),
            hashed_password.encode('utf-8')
        )
    except Exception as e:
        logger.error(f"Error verifying password: {e}")
        return False


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """
    Creates a JWT access token

    Args:
        data: Claims to encode (``sub`` holds the user id)
        expires_delta: Optional token lifetime

    Returns:
        Encoded JWT
    """
    to_encode = data.copy()

    if expires_delta:
        expire = datetime.utcnow() + expires_delta
    else:
        expire = datetime.utcnow() + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)

    to_encode.update({"exp": expire, "type": "access"})

    try:
        return jwt.encode(
            to_encode,
            settings.SECRET_KEY,
            algorithm=settings.ALGORITHM
        )
    except Exception as e:
        logger.error(f"Error creating access token: {e}")
        raise


def create_user_token(user_id: int) -> str:
    """Access token for a user id"""
    return create_access_token(data={"sub": str(user_id)})


def decode_token(token: str) -> Optional[dict]:
    """
    Decodes and verifies a JWT

    Returns:
        Token payload, or None if the token is invalid or expired
    """
    try:
        return jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.ALGORITHM]
        )
    except JWTError as e:
        logger.warning(f"Invalid token: {e}")
        return None


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
    db: Session = Depends(get_db)
) -> User:
    """
    FastAPI dependency - verifies the bearer token and loads the user.

    Raises:
        HTTPException 401: missing, invalid or expired token, or unknown user
    """
    if credentials is None:
        raise _unauthorized("Access token required")

    payload = decode_token(credentials.credentials)
    if payload is None:
        raise _unauthorized("Invalid or expired token")

    if payload.get("type") != "access":
        logger.warning(f"Invalid token type: {payload.get('type')}")
        raise _unauthorized("Invalid token type")

    try:
        user_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        raise _unauthorized("Invalid token payload")

    user = db.query(User).filter(User.id == user_id).first()
    if user is None:
        raise _unauthorized("User not found")

    return user
