"""
Clip submission models
"""
from pydantic import Field
from typing import Optional
from datetime import datetime
from enum import Enum

from app.models.profiles import CamelModel


class ClipStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"


class ClipSubmission(CamelModel):
    id: str
    creator_id: str
    clipper_id: str
    title: Optional[str] = None
    description: Optional[str] = None
    clip_url: str
    thumbnail_url: Optional[str] = None
    status: ClipStatus
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class SubmitClipRequest(CamelModel):
    """Form fields sent next to the video and thumbnail files"""
    clipper_id: str = Field(..., min_length=1)
    title: str = Field(..., min_length=1)
    description: str = ""


class UpdateClipStatusRequest(CamelModel):
    clip_id: str = Field(..., min_length=1)
    status: ClipStatus
