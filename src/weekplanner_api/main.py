import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from sqlmodel import Session

from weekplanner_api.common.error_handlers import ServiceError
from weekplanner_api.config import settings
from weekplanner_api.database import db
from weekplanner_api.exceptions import (
    general_exception_handler,
    http_exception_handler,
    service_exception_handler,
    validation_exception_handler,
)
from weekplanner_api.routers import habits, scheduler, settings as settings_router
from weekplanner_api.routers import tasks, time_blocks
from weekplanner_api.seed import seed_database


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logging.basicConfig(level=getattr(logging, settings.log_level))
    logger = logging.getLogger(__name__)
    logger.info("🚀 FastAPI server starting up...")

    logger.info(f"Environment: {settings.environment}")
    logger.info(f"Host: {settings.host}, Port: {settings.port}")
    logger.info(f"Debug mode: {settings.debug}")

    db.create_db_and_tables()

    if settings.seed_demo_data:
        with Session(db.get_engine()) as session:
            seed_database(session)

    logger.info("✅ FastAPI server startup complete")
    yield
    # Shutdown
    logger.info("🔄 FastAPI server shutting down...")


# Initialize FastAPI app
app = FastAPI(
    title=settings.api_title,
    description=settings.api_description,
    version=settings.api_version,
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

# Exception handlers
app.add_exception_handler(HTTPException, http_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(ServiceError, service_exception_handler)
app.add_exception_handler(Exception, general_exception_handler)

# Include routers
app.include_router(tasks.router)
app.include_router(habits.router)
app.include_router(time_blocks.router)
app.include_router(settings_router.router)
app.include_router(scheduler.router)


@app.get("/")
async def root():
    """Root endpoint"""
    return {"message": settings.api_title, "version": settings.api_version}


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    database_ok = db.health_check()
    return {
        "status": "healthy" if database_ok else "degraded",
        "database": "connected" if database_ok else "unavailable",
        "version": settings.api_version,
    }
