"""
Google OAuth and onboarding models
"""
from pydantic import EmailStr, Field, field_validator
from typing import Optional, Dict, Any
from datetime import datetime

from app.models.auth import UserRole
from app.models.profiles import CamelModel, Platform, Niche
from app.utils.password_validator import check_password


class GoogleUserInfo(CamelModel):
    """Claims taken from a verified Google ID token"""
    email: Optional[str] = None
    name: Optional[str] = None
    picture: Optional[str] = None
    email_verified: bool = False
    sub: str


class GoogleTokens(CamelModel):
    id_token: str
    access_token: str


class GoogleAuthRequest(CamelModel):
    id_token: str = Field(..., min_length=1)


class GoogleCallbackRequest(CamelModel):
    code: str = Field(..., min_length=1)
    state: Optional[str] = None


class OnboardingSession(CamelModel):
    """Verified Google identity waiting for its profile"""
    email: str
    name: str = ""
    picture: Optional[str] = None
    role: UserRole = UserRole.CREATOR
    completed_steps: int = 0
    expires_at: Optional[datetime] = None


class CompleteOnboardingRequest(CamelModel):
    onboarding_token: str = Field(..., min_length=1)
    role: UserRole
    brand_name: str = Field(..., min_length=2, max_length=50)
    social_media_handle: str = Field(..., min_length=3, max_length=50, pattern=r'^[a-zA-Z0-9_.]+$')
    platform: Platform
    niche: Niche
    country: str = Field(..., min_length=2, max_length=50)
    password: str = Field(..., min_length=8)
    # Clipper only
    follower_count: Optional[int] = Field(None, ge=0, le=500_000_000)
    price_per_post: Optional[float] = Field(None, ge=0, le=500_000_000)

    @field_validator("password")
    @classmethod
    def password_strength(cls, value: str) -> str:
        return check_password(value)


class GoogleAuthResponse(CamelModel):
    requires_onboarding: bool
    user: Optional[Dict[str, Any]] = None
    onboarding_token: Optional[str] = None
    token: Optional[str] = None
    refresh_token: Optional[str] = None


class OnboardingStatus(CamelModel):
    current_step: int
    total_steps: int
    role: UserRole
