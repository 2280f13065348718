"""
Authentication Router for Wellness Tracker API
Registration, OTP verification, login and profile endpoints
"""
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator
from typing import Optional, Literal
from datetime import datetime
from loguru import logger

from .database import get_db, User
from .auth import hash_password, verify_password, create_user_token, get_current_user
from .otp_service import send_otp, verify_otp

router = APIRouter(prefix="/api/auth", tags=["Authentication"])

MOBILE_PATTERN = r"^\+?[0-9]{7,15}$"


# =============================================================================
# PYDANTIC MODELS (Request/Response schemas)
# =============================================================================

class RegisterRequest(BaseModel):
    """Registration request"""
    name: str = Field(..., min_length=2, max_length=255)
    email: Optional[EmailStr] = None
    mobile: Optional[str] = Field(default=None, pattern=MOBILE_PATTERN)
    password: str = Field(..., min_length=6, description="Password must be at least 6 characters")

    @field_validator('name')
    @classmethod
    def name_not_blank(cls, v):
        v = v.strip()
        if len(v) < 2:
            raise ValueError('Name must be at least 2 characters')
        return v

    @model_validator(mode='after')
    def email_or_mobile(self):
        if not self.email and not self.mobile:
            raise ValueError('Email or mobile number is required')
        return self


class RegisterResponse(BaseModel):
    message: str
    user_id: int
    otp_sent: bool
    verification_required: bool


class SendOTPRequest(BaseModel):
    user_id: int
    type: Literal["email", "mobile"]


class VerifyOTPRequest(BaseModel):
    user_id: int
    otp: str = Field(..., min_length=6, max_length=6, pattern="^[0-9]{6}$")
    type: Literal["email", "mobile"]


class LoginRequest(BaseModel):
    """Login with email or mobile number"""
    identifier: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class UserResponse(BaseModel):
    id: int
    name: str
    email: Optional[str] = None
    mobile: Optional[str] = None
    avatar: Optional[str] = None
    is_verified: bool
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class LoginResponse(BaseModel):
    message: str
    token: str
    token_type: str = "bearer"
    user: UserResponse
    is_verified: bool


class ProfileUpdateRequest(BaseModel):
    name: Optional[str] = Field(default=None, min_length=2, max_length=255)
    avatar: Optional[str] = Field(default=None, pattern=r"^https?://\S+$")


class MessageResponse(BaseModel):
    message: str


# =============================================================================
# ENDPOINTS
# =============================================================================

def _user_exists() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail="User already exists"
    )


@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
async def register(request: RegisterRequest, db: Session = Depends(get_db)):
    """
    Registers a new user and sends a verification code

    The code goes to the email address when one is given, otherwise by SMS.
    """
    try:
        conditions = []
        if request.email:
            conditions.append(User.email == request.email)
        if request.mobile:
            conditions.append(User.mobile == request.mobile)

        if db.query(User).filter(or_(*conditions)).first():
            raise _user_exists()

        user = User(
            name=request.name,
            email=request.email,
            mobile=request.mobile,
            password=hash_password(request.password),
            is_verified=False,
        )
        db.add(user)
        try:
            db.commit()
        except IntegrityError:
            db.rollback()
            raise _user_exists()
        db.refresh(user)
        logger.info(f"User registered: {user.id}")

        otp_sent = send_otp(db, user, "email" if user.email else "mobile")

        return RegisterResponse(
            message="User registered successfully",
            user_id=user.id,
            otp_sent=otp_sent,
            verification_required=True,
        )

    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Registration error: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Registration failed"
        )


@router.post("/send-otp", response_model=MessageResponse)
async def send_otp_endpoint(request: SendOTPRequest, db: Session = Depends(get_db)):
    """Sends a new verification code on the requested channel"""
    try:
        user = db.query(User).filter(User.id == request.user_id).first()
        if not user:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail="User not found"
            )

        destination = user.email if request.type == "email" else user.mobile
        if not destination:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"{request.type} not found for user"
            )

        if not send_otp(db, user, request.type):
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Failed to send OTP"
            )

        return MessageResponse(message=f"OTP sent to your {request.type}")

    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Send OTP error: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to send OTP"
        )


@router.post("/verify-otp", response_model=MessageResponse)
async def verify_otp_endpoint(request: VerifyOTPRequest, db: Session = Depends(get_db)):
    """Verifies a code and marks the account as verified"""
    try:
        if not verify_otp(db, request.user_id, request.otp, request.type):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Invalid OTP"
            )

        user = db.query(User).filter(User.id == request.user_id).first()
        if user:
            user.is_verified = True
            db.commit()
            logger.info(f"User verified: {user.id}")

        return MessageResponse(message="Account verified successfully")

    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Verify OTP error: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="OTP verification failed"
        )


@router.post("/login", response_model=LoginResponse)
async def login(request: LoginRequest, db: Session = Depends(get_db)):
    """Logs in with email or mobile number and returns an access token"""
    try:
        identifier = request.identifier.strip()
        user = db.query(User).filter(
            or_(User.email == identifier, User.mobile == identifier)
        ).first()

        if not user or not verify_password(request.password, user.password):
            logger.warning(f"Failed login attempt for {identifier}")
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Invalid credentials"
            )

        return LoginResponse(
            message="Login successful",
            token=create_user_token(user.id),
            user=UserResponse.model_validate(user),
            is_verified=user.is_verified,
        )

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Login error: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Login failed"
        )


@router.get("/profile", response_model=UserResponse)
async def get_profile(current_user: User = Depends(get_current_user)):
    return current_user


@router.put("/profile", response_model=UserResponse)
async def update_profile(
    request: ProfileUpdateRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
):
    """Updates name and/or avatar"""
    update_data = request.model_dump(exclude_unset=True, exclude_none=True)
    if not update_data:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No fields to update"
        )

    try:
        for field, value in update_data.items():
            setattr(current_user, field, value.strip() if field == "name" else value)
        db.commit()
        db.refresh(current_user)
        return current_user

    except Exception as e:
        db.rollback()
        logger.error(f"Update profile error: {e}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update profile"
        )
