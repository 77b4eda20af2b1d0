"""
Profile models for the two tenant roles.

A profile's ``id`` is always the id of the identity that owns it. Which
table a row lives in decides the role; the models carry it explicitly as a
literal tag so callers can dispatch on ``profile.role``.
"""
from pydantic import BaseModel, EmailStr, Field
from pydantic.alias_generators import to_camel
from typing import Optional, Union, Literal
from datetime import datetime
from enum import Enum


class Platform(str, Enum):
    """Social platform a creator or clipper publishes on"""
    INSTAGRAM = "instagram"
    TIKTOK = "tiktok"
    YOUTUBE = "youtube"
    X = "x"


class Niche(str, Enum):
    """Content niche"""
    TRAVEL = "travel"
    ENTERTAINMENT = "entertainment"
    FOOD = "food"
    FITNESS = "fitness"
    TECHNOLOGY = "technology"
    BEAUTY = "beauty"
    GAMING = "gaming"
    SPORT = "sport"
    FASHION = "fashion"
    OTHER = "other"


class CamelModel(BaseModel):
    """Accepts snake_case or camelCase input, emits camelCase"""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        use_enum_values = True


class ProfileBase(CamelModel):
    """Fields shared by creator and clipper profiles"""
    id: str
    full_name: str
    brand_name: str
    email: EmailStr
    social_media_handle: Optional[str] = None
    platform: Platform
    niche: Niche
    country: str
    brand_profile_picture: Optional[str] = None
    created_at: Optional[datetime] = None


class CreatorProfile(ProfileBase):
    role: Literal["creator"] = "creator"


class ClipperProfile(ProfileBase):
    follower_count: int = 0
    price_per_post: float = 0
    role: Literal["clipper"] = "clipper"


Profile = Union[CreatorProfile, ClipperProfile]


class UpdateCreatorRequest(CamelModel):
    """Partial creator update; unset fields are left untouched"""
    full_name: Optional[str] = Field(None, min_length=2, max_length=50)
    brand_name: Optional[str] = Field(None, min_length=2, max_length=50)
    social_media_handle: Optional[str] = None
    platform: Optional[Platform] = None
    niche: Optional[Niche] = None
    country: Optional[str] = Field(None, min_length=2, max_length=50)


class UpdateClipperRequest(UpdateCreatorRequest):
    social_media_handle: Optional[str] = Field(
        None, min_length=3, max_length=50, pattern=r'^[a-zA-Z0-9_.]+$'
    )
    follower_count: Optional[int] = Field(None, ge=0, le=500_000_000)
    price_per_post: Optional[float] = Field(None, ge=0, le=500_000_000)


class UploadFileResponse(CamelModel):
    url: str
    path: str
