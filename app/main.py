import asyncio
import logging
import os
from contextlib import asynccontextmanager
from datetime import datetime

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

# Import models so they're registered with SQLAlchemy Base before create_all
from . import models  # noqa: F401
from .config import REMINDER_INTERVAL_SECONDS, REMINDER_LOOP_ENABLED
from .database import Base, engine
from .domain.appointments.router import router as appointments_router
from .domain.blocks.router import days_router as blocked_days_router
from .domain.blocks.router import slots_router as blocked_time_slots_router
from .domain.catalog.router import qualifications_router
from .domain.catalog.router import router as services_router
from .domain.scheduling.router import router as availability_router
from .domain.tenants.router import professionals_router
from .domain.tenants.router import router as tenants_router
from .domain.working_hours.router import router as working_hours_router
from .errors import BookingError
from .reminders import reminder_loop

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Reduce verbosity of third-party libraries
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("Application starting up...")
    try:
        Base.metadata.create_all(bind=engine, checkfirst=True)
        logger.info("Database tables created successfully")
    except Exception as e:
        # Ignore "already exists" errors from race conditions between workers
        error_msg = str(e)
        if "already exists" in error_msg or "duplicate key" in error_msg:
            logger.info("Database tables already exist (created by another worker)")
        else:
            logger.error(f"Failed to create database tables: {e}")

    stop_event = asyncio.Event()
    reminder_task = None
    if REMINDER_LOOP_ENABLED:
        reminder_task = asyncio.create_task(reminder_loop(stop_event, REMINDER_INTERVAL_SECONDS))
    else:
        logger.info("Reminder loop disabled - expecting the ARQ worker to run reminders")

    yield

    logger.info("Application shutting down...")
    stop_event.set()
    if reminder_task is not None:
        await reminder_task


app = FastAPI(title="Salon Booking API", version="1.0.0", lifespan=lifespan)


def _error_body(status_code: int, message: str, **fields) -> dict:
    return {
        "status": status_code,
        "message": message,
        "timestamp": datetime.now().isoformat(),
        **fields,
    }


@app.exception_handler(BookingError)
async def booking_error_handler(request: Request, exc: BookingError):
    """Map each error kind to its status code with the structured fields in the body"""
    body = _error_body(exc.status_code, exc.message)
    body.update(exc.to_dict())
    return JSONResponse(status_code=exc.status_code, content=body)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Report schema violations as 400 with one message per field"""
    errors = {}
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        errors[".".join(loc) or "request"] = error.get("msg", "invalid value")

    logger.warning(f"⚠️ Validation failed for {request.method} {request.url.path}: {errors}")
    return JSONResponse(
        status_code=400, content=_error_body(400, "validation failed", errors=errors)
    )


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error(f"❌ {request.method} {request.url.path} - Unhandled error: {exc}", exc_info=exc)
    return JSONResponse(status_code=500, content=_error_body(500, "internal server error"))


# CORS Configuration
ALLOWED_ORIGINS = os.getenv(
    "ALLOWED_ORIGINS",
    "http://localhost:5173,http://localhost:3000",
).split(",")

logger.info(f"CORS allowed origins: {ALLOWED_ORIGINS}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS", "PATCH"],
    allow_headers=["*"],
)

app.include_router(tenants_router)
app.include_router(professionals_router)
app.include_router(qualifications_router)
app.include_router(services_router)
app.include_router(working_hours_router)
app.include_router(blocked_days_router)
app.include_router(blocked_time_slots_router)
app.include_router(availability_router)
app.include_router(appointments_router)

# Routes


@app.get("/")
def root():
    return {"message": "Salon Booking API is running"}


@app.get("/health")
def health():
    return {"status": "healthy"}
