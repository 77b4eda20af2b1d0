from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from contextlib import asynccontextmanager
from datetime import datetime, timezone
import pydantic
import uvicorn
import logging

from app.core.config import settings
from app.core.logging_config import setup_logging
from app.database import supabase_manager
from app.api.auth_routes import router as auth_router
from app.api.google_auth_routes import router as google_auth_router
from app.api.clippers_routes import router as clippers_router
from app.api.clips_routes import router as clips_router
from app.utils.api_response import error_response

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    setup_logging()
    logger.info("Starting Creator Marketplace Backend...")

    # Missing credentials surface as ConfigurationException on first use
    if supabase_manager.init():
        logger.info("Connected to Supabase")
    else:
        logger.warning("WARNING: Supabase is not configured, auth and storage routes will fail")

    yield

    # Shutdown
    logger.info("Shutting down Creator Marketplace Backend")


app = FastAPI(
    title="Creator Marketplace Backend",
    description="Creators, clippers and clip submissions",
    version="1.0.0",
    lifespan=lifespan
)


def _validation_message(errors) -> str:
    messages = []
    for error in errors:
        location = ".".join(str(part) for part in error.get("loc", ()) if part != "body")
        messages.append(f"{location}: {error.get('msg')}" if location else error.get("msg", ""))
    return "; ".join(messages) or "Invalid request"


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code >= 500:
        logger.error(f"ERROR: {request.method} {request.url.path} -> {exc.status_code}: {exc.detail}")
    return JSONResponse(
        status_code=exc.status_code,
        content=error_response(str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.warning(f"VALIDATION ERROR on {request.url.path}: {exc.errors()}")
    return JSONResponse(status_code=422, content=error_response(_validation_message(exc.errors())))


@app.exception_handler(pydantic.ValidationError)
async def model_validation_exception_handler(request: Request, exc: pydantic.ValidationError):
    logger.warning(f"VALIDATION ERROR on {request.url.path}: {exc.errors()}")
    return JSONResponse(status_code=422, content=error_response(_validation_message(exc.errors())))


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"ERROR: Unhandled error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content=error_response("There was an internal server error"))


app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

# /auth/google before /auth so the Google paths are matched first
app.include_router(google_auth_router, prefix="/api/v1")
app.include_router(auth_router, prefix="/api/v1")
app.include_router(clippers_router, prefix="/api/v1")
app.include_router(clips_router, prefix="/api/v1")


@app.get("/")
async def root():
    return {"message": "Creator Marketplace Backend API", "status": "running"}


@app.get("/health")
async def health_check():
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "supabase_configured": bool(settings.SUPABASE_URL and (settings.SUPABASE_SERVICE_KEY or settings.SUPABASE_KEY)),
        "onboarding_store": settings.ONBOARDING_STORE_BACKEND,
    }


if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=settings.DEBUG
    )
