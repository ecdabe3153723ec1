# /student_portal/main.py
import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

# --- Core / Config ---
from student_portal.core.config import settings
from student_portal.core.exceptions import (
    PortalError, ValidationFailed, ConstraintViolation, AccessDenied,
    RecordNotFound, TransportFailure, InvalidConfirmation
)
from student_portal.db.session import SessionLocal, create_tables
from student_portal.services.auth_service import seed_admin

# --- API Routers ---
from student_portal.api.routes import auth as auth_router
from student_portal.api.routes import admin as admin_router
from student_portal.api.routes import student as student_router
from student_portal.api.routes import dashboard as dashboard_router
from student_portal.api.routes import profile as profile_router


logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL, logging.INFO),
    format="%(asctime)s - %(levelname)s - %(message)s",
    force=True
)
logger = logging.getLogger(__name__)


# --- Lifespan ---
@asynccontextmanager
async def lifespan(app: FastAPI):
    create_tables()
    db = SessionLocal()
    try:
        seed_admin(db)
    finally:
        db.close()

    yield

# --- FastAPI App Instance ---
app = FastAPI(
    title="Student Portal API",
    lifespan=lifespan
)

@app.middleware("http")
async def add_process_time_header(request: Request, call_next):
    start_time = time.time()

    response = await call_next(request)

    process_time = time.time() - start_time
    response.headers["X-Process-Time"] = str(process_time)

    logger.info(
        f"Request processed: {request.method} {request.url.path} - {response.status_code} in {process_time:.4f} secs"
    )

    return response


# --- Domain errors -> user-facing responses ---
ERROR_STATUS = {
    ValidationFailed: 422,
    ConstraintViolation: 409,
    AccessDenied: 403,
    RecordNotFound: 404,
    TransportFailure: 503,
    InvalidConfirmation: 400,
}


@app.exception_handler(PortalError)
async def portal_error_handler(request: Request, exc: PortalError):
    status_code = ERROR_STATUS.get(type(exc), 500)
    body = {"detail": exc.message}
    if isinstance(exc, ValidationFailed):
        body["errors"] = exc.errors
    elif isinstance(exc, ConstraintViolation):
        body["field"] = exc.field
    return JSONResponse(status_code=status_code, content=body)


# --- CORS ---
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# --- Routes ---
app.include_router(
    auth_router.router,
    prefix="/api/v1/auth",
    tags=["Authentication"]
)

app.include_router(
    admin_router.router,
    prefix="/api/v1/admin",
    tags=["admin"]
)

app.include_router(
    student_router.router,
    prefix="/api/v1/students",
    tags=["students"]
)

app.include_router(
    dashboard_router.router,
    prefix="/api/v1/dashboard",
    tags=["dashboard"]
)

app.include_router(
    profile_router.router,
    prefix="/api/v1/profile",
    tags=["profile"]
)


@app.get("/health", tags=["Health"])
def health_check():
    return {"status": "healthy", "service": "student-portal"}
