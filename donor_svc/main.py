"""
FastAPI application entry point for Donor Service API.

This module configures and creates the FastAPI application with:
- Structured JSON Logging: Request/response logging for Grafana/Loki
- Request ID Propagation: request tracking across logs via X-Request-ID
- Dependency Injection: Services and repositories injected via Depends()
- Exception Handling: Consistent error responses via setup_exception_handlers()
- Lifespan Management: Database initialization, default hospital, sample data
- Metrics Collection: In-memory metrics for Prometheus/Grafana scraping

Architecture Overview:
    ┌─────────────────────────────────────────────────────────────┐
    │                     FastAPI Application                     │
    ├─────────────────────────────────────────────────────────────┤
    │  Middleware Stack (order matters!)                          │
    │    ├── LoggingMiddleware  - Request logging & metrics       │
    │    └── CORSMiddleware     - Cross-origin support            │
    ├─────────────────────────────────────────────────────────────┤
    │  Routers (api/routers/)                                     │
    │    ├── health.py       - /health, /ready, /metrics          │
    │    ├── auth.py         - Hospital login                     │
    │    ├── hospitals.py    - Hospital accounts                  │
    │    ├── donors.py       - Registration & directory           │
    │    ├── alerts.py       - Emergency SMS broadcasts           │
    │    ├── blood_banks.py  - Blood bank list                    │
    │    ├── inventory.py    - Stock levels & low-stock check     │
    │    ├── meta.py         - Blood groups & areas               │
    │    └── views.py        - /map HTML page                     │
    ├─────────────────────────────────────────────────────────────┤
    │  Services (services/)     ← Injected via Depends()          │
    ├─────────────────────────────────────────────────────────────┤
    │  Repositories (repositories/)   ← Injected into Services    │
    ├─────────────────────────────────────────────────────────────┤
    │  Database (SQLite)              ← Injected into Repositories│
    └─────────────────────────────────────────────────────────────┘

The hourly low-stock sweep runs in the Celery worker (see celery_app.py).
"""
import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import uvicorn

from core.config import API_HOST, API_PORT, API_RELOAD, settings
from core.dependencies import get_database, get_hospital_service, get_seed_service
from core.exceptions import DatabaseConnectionError, setup_exception_handlers
from core.logging_config import setup_logging
from core.middleware import LoggingMiddleware
from api.routers import (
    health_router,
    auth_router,
    hospitals_router,
    donors_router,
    alerts_router,
    blood_banks_router,
    inventory_router,
    meta_router,
    views_router,
)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Startup:
        - Configures structured JSON logging
        - Initializes the database; exits with status 1 if that fails
        - Creates the default hospital account when missing
        - Seeds sample blood banks and inventory into empty tables
    """
    setup_logging(level="INFO", json_format=True)

    logger = logging.getLogger(__name__)
    logger.info("Starting Donor Service API...")

    try:
        db = get_database()
    except DatabaseConnectionError:
        logger.critical("Cannot start without a database, exiting")
        sys.exit(1)
    logger.info("Database initialized", extra={"db_path": db.db_path})

    get_hospital_service().ensure_default_hospital(
        username=settings.hospital_username,
        password=settings.hospital_password,
        name=settings.hospital_name,
        area=settings.hospital_area
    )

    if settings.donor_svc_seed_sample_data:
        get_seed_service().seed()

    if not settings.twilio_configured:
        logger.warning("Twilio not configured, SMS alerts will only be logged")

    yield

    logger.info("Donor Service API shutting down...")


app = FastAPI(
    title="Donor Service API",
    description="Blood donor coordination: donor registration, hospital emergency alerts over SMS, "
                "blood bank inventory and a periodic low-stock check.",
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan
)

# =============================================================================
# EXCEPTION HANDLERS
# =============================================================================
setup_exception_handlers(app)

# =============================================================================
# MIDDLEWARE
# =============================================================================
# Middleware is executed in REVERSE order of registration.

# 1. CORS Middleware (innermost - closest to routes)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# 2. Logging Middleware (outermost - captures all requests)
app.add_middleware(LoggingMiddleware)

# =============================================================================
# ROUTERS
# =============================================================================
app.include_router(health_router)
app.include_router(auth_router)
app.include_router(hospitals_router)
app.include_router(donors_router)
app.include_router(alerts_router)
app.include_router(blood_banks_router)
app.include_router(inventory_router)
app.include_router(meta_router)
app.include_router(views_router)


if __name__ == "__main__":
    uvicorn.run(
        "main:app",
        host=API_HOST,
        port=API_PORT,
        reload=API_RELOAD,
        # LoggingMiddleware logs requests by route template; the access log
        # would print raw paths with donor phone numbers
        access_log=False
    )
