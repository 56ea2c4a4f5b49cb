"""
Health, readiness, and metrics endpoints for operational visibility.

This module provides:
- /health: Liveness probe (is the process running?)
- /ready: Readiness probe (database critical, Celery broker non-critical)
- /metrics: Prometheus text format; /metrics/json for ad-hoc inspection
- /: Service info

No authentication required (internal/infrastructure use).
"""
import logging
import time
from typing import Any, Dict, List, Optional

import redis
from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel

from repositories import Database
from core.config import REDIS_URL
from core.datetime_utils import format_iso, utc_now
from core.dependencies import get_database
from core.middleware import get_metrics_collector

logger = logging.getLogger(__name__)

SERVICE_NAME = "Donor Service API"
SERVICE_VERSION = "1.0.0"

router = APIRouter(tags=["Health & Observability"])


# =============================================================================
# RESPONSE MODELS
# =============================================================================

class HealthResponse(BaseModel):
    status: str  # "healthy"
    version: str
    timestamp: str  # ISO 8601 UTC


class DependencyStatus(BaseModel):
    name: str
    status: str  # "ok", "degraded", "unavailable"
    latency_ms: Optional[float] = None
    message: Optional[str] = None


class ReadyResponse(BaseModel):
    status: str  # "ready", "degraded", "not_ready"
    dependencies: List[DependencyStatus]
    timestamp: str


class MetricsResponse(BaseModel):
    http_requests_total: int
    http_requests_2xx_total: int
    http_requests_4xx_total: int
    http_requests_5xx_total: int
    http_request_duration_ms_p50: float
    http_request_duration_ms_p95: float
    http_request_duration_ms_p99: float
    background_tasks_success_total: int
    background_tasks_failure_total: int
    low_stock_sweeps_total: int
    sms_sent_total: int
    sms_failed_total: int


# =============================================================================
# HEALTH ENDPOINT (LIVENESS)
# =============================================================================

@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Liveness probe",
    description="Returns immediately without checking dependencies."
)
async def health_check() -> HealthResponse:
    return HealthResponse(
        status="healthy",
        version=SERVICE_VERSION,
        timestamp=format_iso(utc_now())
    )


# =============================================================================
# READINESS ENDPOINT
# =============================================================================

def _elapsed_ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000, 2)


def _check_database(db: Database) -> DependencyStatus:
    start = time.perf_counter()
    try:
        db.ping()
    except Exception as e:
        logger.error("Database health check failed", extra={"error": str(e)})
        return DependencyStatus(
            name="database",
            status="unavailable",
            latency_ms=_elapsed_ms(start),
            message=f"Connection failed: {type(e).__name__}"
        )

    return DependencyStatus(
        name="database",
        status="ok",
        latency_ms=_elapsed_ms(start),
        message="SQLite connection healthy"
    )


def _check_celery_broker() -> DependencyStatus:
    """
    Ping the Redis broker used by the low-stock scheduler.

    A down broker only stops the hourly sweep; requests are still served.
    """
    start = time.perf_counter()
    try:
        client = redis.from_url(REDIS_URL, socket_timeout=2)
        client.ping()
    except Exception as e:
        logger.warning("Celery broker health check failed", extra={"error": str(e)})
        return DependencyStatus(
            name="celery_broker",
            status="degraded",
            latency_ms=_elapsed_ms(start),
            message=f"Broker unavailable: {type(e).__name__}"
        )

    return DependencyStatus(
        name="celery_broker",
        status="ok",
        latency_ms=_elapsed_ms(start),
        message="Redis broker healthy"
    )


@router.get(
    "/ready",
    response_model=ReadyResponse,
    summary="Readiness probe",
    description="503 when the database is unavailable, 'degraded' when only the Celery broker is down."
)
def readiness_check(
    response: Response,
    db: Database = Depends(get_database)
) -> ReadyResponse:
    db_status = _check_database(db)
    broker_status = _check_celery_broker()
    dependencies = [db_status, broker_status]

    if db_status.status == "unavailable":
        status = "not_ready"
        response.status_code = 503
    elif any(d.status != "ok" for d in dependencies):
        status = "degraded"
    else:
        status = "ready"

    return ReadyResponse(
        status=status,
        dependencies=dependencies,
        timestamp=format_iso(utc_now())
    )


# =============================================================================
# METRICS ENDPOINTS
# =============================================================================

@router.get(
    "/metrics",
    summary="Prometheus metrics",
    description="HTTP request counts, latency percentiles, sweep and SMS counters in Prometheus text format."
)
async def get_metrics() -> Response:
    return Response(
        content=get_metrics_collector().get_prometheus_format(),
        media_type="text/plain; version=0.0.4; charset=utf-8"
    )


@router.get(
    "/metrics/json",
    response_model=MetricsResponse,
    summary="JSON metrics"
)
async def get_metrics_json() -> MetricsResponse:
    return MetricsResponse(**get_metrics_collector().get_summary())


# =============================================================================
# ROOT ENDPOINT
# =============================================================================

@router.get("/", summary="API root")
async def root() -> Dict[str, Any]:
    return {
        "service": SERVICE_NAME,
        "version": SERVICE_VERSION,
        "docs": "/docs",
        "map": "/map",
        "health": "/health",
        "ready": "/ready",
        "metrics": "/metrics"
    }
