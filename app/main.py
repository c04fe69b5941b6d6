import logging
import os
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

# Models must be imported before create_all so their tables are registered
from . import models  # noqa: F401
from .authorization import AuthorizationDenied
from .config import FRONTEND_URL, SEED_DEMO_DATA
from .database import Base, SessionLocal, engine
from .domain.schedules.router import router as schedules_router
from .security_headers import SecurityHeadersMiddleware

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

# SQL statements are covered by the slow query listener in database.py
logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)

SECURITY_HEADERS_ENABLED = os.getenv("SECURITY_HEADERS_ENABLED", "true").lower() == "true"
NOT_AUTHENTICATED = "Not authenticated. Please provide a valid Bearer token in the Authorization header."


def create_tables() -> None:
    try:
        Base.metadata.create_all(bind=engine, checkfirst=True)
        logger.info("✅ Schedule tables ready")
    except Exception as e:
        # Several uvicorn workers may race to create the same tables
        if "already exists" in str(e):
            logger.info("Schedule tables already created by another worker")
        else:
            logger.error(f"❌ Failed to create tables: {e}")
            raise


def seed_demo_data() -> None:
    from .seed import seed_database

    db = SessionLocal()
    try:
        seed_database(db)
    except Exception as e:
        db.rollback()
        logger.error(f"❌ Demo data seeding failed: {e}")
    finally:
        db.close()


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("🚀 Shift Scheduler API starting")
    create_tables()
    if SEED_DEMO_DATA:
        seed_demo_data()
    yield
    logger.info("Shift Scheduler API stopped")


app = FastAPI(title="Shift Scheduler API", version="1.0.0", lifespan=lifespan)


def _is_authorization_header_error(error: dict) -> bool:
    return "authorization" in str(error.get("loc") or "").lower()


def jsonable_errors(exc: RequestValidationError) -> list:
    """Pydantic error dicts can carry exception objects in ctx; keep them printable"""
    errors = []
    for error in exc.errors():
        error = dict(error)
        if "ctx" in error:
            error["ctx"] = {key: str(value) for key, value in error["ctx"].items()}
        errors.append(error)
    return errors


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """
    A bad Authorization header is an authentication problem (401), anything
    else is a regular field validation error (422).
    """
    if any(_is_authorization_header_error(error) for error in exc.errors()):
        logger.warning(f"⚠️ Rejected {request.method} {request.url.path}: bad Authorization header")
        return JSONResponse(status_code=401, content={"detail": NOT_AUTHENTICATED})

    errors = jsonable_errors(exc)
    logger.info(f"Invalid input for {request.method} {request.url.path}: {[e.get('loc') for e in errors]}")
    return JSONResponse(status_code=422, content={"detail": errors})


@app.exception_handler(AuthorizationDenied)
async def authorization_denied_handler(request: Request, exc: AuthorizationDenied):
    # Which policy failed stays in the logs
    logger.info(
        f"🔒 {request.method} {request.url.path} forbidden: "
        f"operation={exc.operation.value}, schedule={exc.resource_id}"
    )
    return JSONResponse(status_code=403, content={"detail": exc.detail})


@app.middleware("http")
async def log_requests(request: Request, call_next):
    started = time.perf_counter()
    try:
        return await call_next(request)
    except Exception as e:
        elapsed = (time.perf_counter() - started) * 1000
        logger.error(f"❌ {request.method} {request.url.path} failed after {elapsed:.0f}ms: {e}")
        raise


if SECURITY_HEADERS_ENABLED:
    app.add_middleware(SecurityHeadersMiddleware, exclude_paths=["/docs", "/redoc", "/openapi.json"])
else:
    logger.warning("Security headers DISABLED - only use in development!")

ALLOWED_ORIGINS = [
    origin.strip()
    for origin in os.getenv("ALLOWED_ORIGINS", f"{FRONTEND_URL},http://localhost:3000").split(",")
    if origin.strip()
]
logger.info(f"CORS allowed origins: {ALLOWED_ORIGINS}")

app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Authorization", "Content-Type"],
)

app.include_router(schedules_router)


@app.get("/")
def root():
    return {"message": "Shift Scheduler API is running"}


@app.get("/health")
def health():
    return {"status": "healthy"}
