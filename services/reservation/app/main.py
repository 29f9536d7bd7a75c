"""Entry point for the Reservation FastAPI application."""

from fastapi import FastAPI

from app import models  # noqa: F401  registers tables on Base.metadata
from app.api.v1 import router as v1_router
from app.core.config import settings
from app.core.database import Base, engine
from app.core.error_handlers import register_exception_handlers
from app.core.logging_config import configure_logging

configure_logging()

# Ensure database tables exist when the application starts (for development purposes).
Base.metadata.create_all(bind=engine)

app = FastAPI(title=settings.PROJECT_NAME)

register_exception_handlers(app)

app.include_router(v1_router, prefix=settings.API_PREFIX)
