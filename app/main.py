import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import models  # noqa: F401 - register models with Base
from .config import ALLOWED_ORIGINS
from .database import init_db
from .domain.clients.router import router as clients_router
from .domain.documents.router import router as documents_router
from .domain.email.router import router as email_router
from .domain.intake.router import router as intake_router
from .domain.notifications.router import router as notifications_router
from .domain.payments.router import router as payments_router
from .domain.recordings.router import ai_router
from .domain.recordings.router import router as recordings_router
from .domain.recurring.router import router as recurring_router
from .domain.reports.router import router as reports_router
from .domain.sessions.router import router as sessions_router
from .domain.tasks.router import router as tasks_router
from .domain.users.router import auth_router
from .domain.users.router import router as users_router
from .rate_limiter import get_redis_client
from .routes.cron import router as cron_router
from .routes.uploads import router as uploads_router
from .schemas import HealthResponse
from .security_headers import SecurityHeadersMiddleware

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# Reduce verbosity of third-party libraries
logging.getLogger("httpx").setLevel(logging.WARNING)
logging.getLogger("httpcore").setLevel(logging.WARNING)

SECURITY_HEADERS_ENABLED = os.getenv("SECURITY_HEADERS_ENABLED", "true").lower() == "true"


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("🚀 Tipul API starting up")
    init_db()

    if get_redis_client() is None:
        logger.warning("⚠️ Redis unavailable - rate limiting uses in-memory counters")

    yield
    logger.info("Tipul API shutting down")


app = FastAPI(title="Tipul API", version="1.0.0", lifespan=lifespan)


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    Convert 422 validation errors from HTTPBearer to 401 authentication errors
    when the issue is with the Authorization header
    """
    for error in exc.errors():
        if error.get("loc") and "authorization" in str(error.get("loc")).lower():
            logger.warning(
                f"Authentication failed for {request.url.path}: Missing or invalid Authorization header"
            )
            return JSONResponse(
                status_code=401,
                content={
                    "detail": "Not authenticated. Please provide a valid Bearer token in the Authorization header."
                },
            )

    logger.warning(f"Validation error for {request.url.path}: {exc.errors()}")
    return JSONResponse(status_code=422, content={"detail": jsonable_errors(exc)})


def jsonable_errors(exc: RequestValidationError) -> list:
    """Validation errors with the offending input and context made JSON-safe"""
    errors = []
    for error in exc.errors():
        error = dict(error)
        error.pop("input", None)
        if "ctx" in error:
            error["ctx"] = {k: str(v) for k, v in error["ctx"].items()}
        errors.append(error)
    return errors


@app.middleware("http")
async def log_requests(request: Request, call_next):
    try:
        response = await call_next(request)
        return response
    except Exception as e:
        logger.error(f"{request.method} {request.url.path} - Error: {str(e)}")
        raise


if SECURITY_HEADERS_ENABLED:
    app.add_middleware(SecurityHeadersMiddleware, exclude_paths=["/health", "/docs", "/openapi.json"])
    logger.info("Security headers enabled")
else:
    logger.warning("Security headers DISABLED - only use in development!")

logger.info(f"CORS allowed origins: {ALLOWED_ORIGINS}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["*"],
)

# Routes
app.include_router(auth_router)
app.include_router(users_router)
app.include_router(clients_router)
app.include_router(sessions_router)
app.include_router(payments_router)
app.include_router(recordings_router)
app.include_router(ai_router)
app.include_router(documents_router)
app.include_router(uploads_router)
app.include_router(tasks_router)
app.include_router(cron_router)
app.include_router(notifications_router)
app.include_router(recurring_router)
app.include_router(email_router)
app.include_router(intake_router)
app.include_router(reports_router)


@app.get("/health", response_model=HealthResponse)
def health_check():
    return {"status": "healthy"}
