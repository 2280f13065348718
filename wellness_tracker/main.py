"""
Main FastAPI Application for Wellness Tracker API
Application setup, lifespan, error handlers and status endpoints
"""
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from typing import Dict
import uvicorn
import logging

from .config import settings

# Logging configuration
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.StreamHandler()
    ]
)

# Logger for the main application
logger = logging.getLogger("main")

from .database import test_connection, init_db
from .otp_service import OTPCleanupTask
from .auth_router import router as auth_router
from .habit_router import router as habit_router
from .reminders_router import router as reminders_router
from .progress_router import router as progress_router
from .schedules_router import router as schedules_router
from .yoga_router import router as yoga_router
from .dashboard_router import router as dashboard_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Creates tables on startup and owns the OTP cleanup task"""
    logger.info(f"Starting {settings.API_TITLE} v{settings.API_VERSION} ({settings.ENVIRONMENT})")
    init_db()

    cleanup_task = OTPCleanupTask()
    app.state.otp_cleanup = cleanup_task
    if settings.OTP_CLEANUP_ENABLED:
        cleanup_task.start()

    yield

    await cleanup_task.stop()
    logger.info("Application shutdown complete")


app = FastAPI(
    title=settings.API_TITLE,
    version=settings.API_VERSION,
    description=settings.API_DESCRIPTION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS_LIST,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth_router)
app.include_router(habit_router)
app.include_router(reminders_router)
app.include_router(progress_router)
app.include_router(schedules_router)
app.include_router(yoga_router)
app.include_router(dashboard_router)


# =============================================================================
# ERROR HANDLERS
# =============================================================================

@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Field validation errors as 400 with a list of {field, message}"""
    errors = []
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        errors.append({
            "field": ".".join(location) or "body",
            "message": error.get("msg", "Invalid value"),
        })
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"errors": errors}
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(f"Unhandled error on {request.method} {request.url.path}: {exc}", exc_info=exc)
    content = {"detail": "Internal server error"}
    if settings.DEBUG:
        content["message"] = str(exc)
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=content)


# =============================================================================
# HEALTH CHECK & STATUS ENDPOINTS
# =============================================================================

@app.get("/", tags=["Status"])
async def root() -> Dict[str, str]:
    return {
        "message": settings.API_TITLE,
        "version": settings.API_VERSION,
        "status": "running",
        "docs": "/docs"
    }


@app.get("/api/health", tags=["Status"])
async def health_check() -> Dict[str, str]:
    db_status = "connected" if test_connection() else "disconnected"
    return {
        "status": "OK" if db_status == "connected" else "DEGRADED",
        "database": db_status,
        "version": settings.API_VERSION
    }


def run():
    """Console entry point"""
    uvicorn.run(
        "wellness_tracker.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
        log_level=settings.LOG_LEVEL.lower()
    )


if __name__ == "__main__":
    run()
