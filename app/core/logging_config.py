import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

from app.core.config import settings

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(level: str = None, log_dir: str = None):
    """Configure logging for the application"""
    level = (level or settings.LOG_LEVEL).upper()
    handlers = [logging.StreamHandler(sys.stdout)]

    # File logging is off when LOG_DIR is empty
    log_dir = settings.LOG_DIR if log_dir is None else log_dir
    if log_dir:
        logs_dir = Path(log_dir)
        logs_dir.mkdir(parents=True, exist_ok=True)
        handlers.append(
            RotatingFileHandler(
                logs_dir / "app.log",
                maxBytes=10*1024*1024,  # 10MB
                backupCount=5
            )
        )

    logging.basicConfig(level=level, format=LOG_FORMAT, handlers=handlers, force=True)

    # Third-party noise
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("hpack").setLevel(logging.WARNING)
    logging.getLogger("uvicorn").setLevel(logging.INFO)

    # Compensation failures are logged at CRITICAL from these two
    logging.getLogger("app.services.registration_saga").setLevel(logging.DEBUG)
    logging.getLogger("app.services.user_facade_service").setLevel(logging.DEBUG)
