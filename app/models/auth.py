"""
Authentication models for registration, login and session tokens
"""
from pydantic import EmailStr, Field, field_validator
from typing import Optional
from enum import Enum

from app.models.profiles import CamelModel, Platform, Niche, Profile
from app.utils.password_validator import check_password


class UserRole(str, Enum):
    """Tenant role, decided by which profile table holds the user's row"""
    CREATOR = "creator"
    CLIPPER = "clipper"


class Credentials(CamelModel):
    """Email/password pair handed to the identity provider"""
    email: EmailStr
    password: str


class IdentityRecord(CamelModel):
    """What the identity provider hands back for a created or verified identity"""
    id: Optional[str] = None
    email: Optional[str] = None
    token: Optional[str] = None
    refresh_token: Optional[str] = None


class RegisterCreatorRequest(CamelModel):
    """Creator registration form"""
    full_name: str = Field(..., min_length=2, max_length=50)
    brand_name: str = Field(..., min_length=2, max_length=50)
    email: EmailStr = Field(..., max_length=100)
    social_media_handle: str
    platform: Platform
    niche: Niche
    country: str = Field(..., min_length=2, max_length=50)
    password: str

    @field_validator("password")
    @classmethod
    def password_strength(cls, value: str) -> str:
        return check_password(value)

    def credentials(self) -> Credentials:
        return Credentials(email=self.email, password=self.password)

    def profile_fields(self) -> dict:
        """Everything except the password, snake_case keys"""
        return self.model_dump(exclude={"password"})


class RegisterClipperRequest(RegisterCreatorRequest):
    """Clipper registration form"""
    social_media_handle: str = Field(..., min_length=3, max_length=50, pattern=r'^[a-zA-Z0-9_.]+$')
    follower_count: int = Field(..., ge=0, le=500_000_000)
    price_per_post: float = Field(..., ge=0, le=500_000_000)


class SignInRequest(CamelModel):
    """Login request model"""
    email: EmailStr
    password: str = Field(..., min_length=1)

    def credentials(self) -> Credentials:
        return Credentials(email=self.email, password=self.password)


class ChangePasswordRequest(CamelModel):
    new_password: str

    @field_validator("new_password")
    @classmethod
    def password_strength(cls, value: str) -> str:
        return check_password(value)


class UserResponse(CamelModel):
    """Returned by registration, login and onboarding completion"""
    user: Optional[Profile] = None
    role: UserRole
    token: Optional[str] = None
    refresh_token: Optional[str] = None
