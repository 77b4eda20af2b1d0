"""
Clipper portfolio and guideline models
"""
from pydantic import Field
from typing import Optional

from app.models.profiles import CamelModel


class PortfolioImage(CamelModel):
    id: str
    clipper_id: Optional[str] = None
    image_url: str
    position: Optional[int] = None


class GuidelineRequest(CamelModel):
    guideline: str = Field(..., min_length=2, max_length=200)


class Guideline(CamelModel):
    id: str
    clipper_id: str
    guideline: str
