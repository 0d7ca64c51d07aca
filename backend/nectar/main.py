"""Class Nectar — FastAPI Application Entry Point."""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from nectar import models  # noqa: F401  registers every table on Base.metadata
from nectar.config import settings
from nectar.database import Base, BackendError, engine
from nectar.errors import ServiceError
from nectar.middleware.rate_limit import limiter
from nectar.routers import admin, auth, me, search, shared, student, teacher

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

# Create all tables on startup
Base.metadata.create_all(bind=engine)

# ── CORS origins from env (supports dev localhost + production domain) ──────
_cors_origins = [o.strip() for o in settings.ALLOWED_ORIGINS.split(",") if o.strip()]

app = FastAPI(
    title="Class Nectar",
    description="Academic management backend: classes, enrollment, attendance and notices.",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# Rate limiting
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=_cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ServiceError)
async def service_error_handler(request: Request, exc: ServiceError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


@app.exception_handler(BackendError)
async def backend_error_handler(request: Request, exc: BackendError):
    """Database failures the services did not map to a domain error."""
    logger.error("%s %s backend error: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=500, content={"detail": f"Database error: {exc}"})


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    problems = "; ".join(
        f"{'.'.join(str(p) for p in err['loc'] if p != 'body')}: {err['msg']}"
        for err in exc.errors()
    )
    return JSONResponse(status_code=400, content={"detail": f"Invalid input: {problems}"})


# Routers
app.include_router(auth.router)
app.include_router(me.router)
app.include_router(admin.router)
app.include_router(teacher.router)
app.include_router(student.router)
app.include_router(shared.router)
app.include_router(search.router)


@app.get("/")
def root():
    return {
        "name": "Class Nectar API",
        "version": "1.0.0",
        "docs": "/docs",
    }


@app.get("/health")
def health():
    return {"status": "ok"}


@app.get("/ping")
def ping():
    return {"message": "pong"}
