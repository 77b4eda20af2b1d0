from pydantic_settings import BaseSettings
from typing import List
import os
from dotenv import load_dotenv

load_dotenv()


class Settings(BaseSettings):
    # API Configuration
    API_HOST: str = os.getenv("API_HOST", "0.0.0.0")
    API_PORT: int = int(os.getenv("PORT", os.getenv("API_PORT", "8080")))
    DEBUG: bool = os.getenv("DEBUG", "false").lower() == "true"
    ALLOWED_ORIGINS: str = os.getenv("ALLOWED_ORIGINS", "http://localhost:3000")

    # Logging
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")
    LOG_DIR: str = os.getenv("LOG_DIR", "logs")

    # Supabase
    SUPABASE_URL: str = os.getenv("SUPABASE_URL", "")
    SUPABASE_KEY: str = os.getenv("SUPABASE_KEY", "")
    SUPABASE_SERVICE_KEY: str = os.getenv("SUPABASE_SERVICE_KEY", "")

    # Google OAuth
    GOOGLE_CLIENT_ID: str = os.getenv("GOOGLE_CLIENT_ID", "")
    GOOGLE_CLIENT_SECRET: str = os.getenv("GOOGLE_CLIENT_SECRET", "")
    GOOGLE_REDIRECT_URI: str = os.getenv("GOOGLE_REDIRECT_URI", "")
    GOOGLE_HTTP_TIMEOUT: float = float(os.getenv("GOOGLE_HTTP_TIMEOUT", "10"))

    # Onboarding sessions
    ONBOARDING_TOKEN_TTL_SECONDS: int = int(os.getenv("ONBOARDING_TOKEN_TTL_SECONDS", "3600"))
    ONBOARDING_STORE_BACKEND: str = os.getenv("ONBOARDING_STORE_BACKEND", "memory")  # memory or redis
    REDIS_URL: str = os.getenv("REDIS_URL", "redis://localhost:6379/0")

    # Storage buckets
    CREATOR_PICTURE_BUCKET: str = os.getenv("CREATOR_PICTURE_BUCKET", "brand-profile-pic")
    CLIPPER_PICTURE_BUCKET: str = os.getenv("CLIPPER_PICTURE_BUCKET", "clipper-profile-pictures")
    PORTFOLIO_BUCKET: str = os.getenv("PORTFOLIO_BUCKET", "portfolio-images")
    CLIP_BUCKET: str = os.getenv("CLIP_BUCKET", "clip-submissions")
    THUMBNAIL_BUCKET: str = os.getenv("THUMBNAIL_BUCKET", "clip-thumbnails")

    # Upload limits
    PORTFOLIO_MAX_IMAGES: int = int(os.getenv("PORTFOLIO_MAX_IMAGES", "4"))
    PROFILE_IMAGE_MAX_BYTES: int = int(os.getenv("PROFILE_IMAGE_MAX_BYTES", str(2 * 1024 * 1024)))
    CLIP_MAX_BYTES: int = int(os.getenv("CLIP_MAX_BYTES", str(100 * 1024 * 1024)))

    # Clip workflow
    CLIP_STATUS_STRICT_TRANSITIONS: bool = os.getenv("CLIP_STATUS_STRICT_TRANSITIONS", "false").lower() == "true"

    class Config:
        case_sensitive = True

    @property
    def allowed_origins(self) -> List[str]:
        return [origin.strip() for origin in self.ALLOWED_ORIGINS.split(",") if origin.strip()]


settings = Settings()
