"""
Request logging middleware and the in-memory metrics behind /metrics.

Requests are labelled by their route template (``/api/v1/donors/{phone}``),
never by the raw path, so donor phone numbers stay out of logs and metric
labels.

Middleware order (see main.py): LoggingMiddleware wraps CORS, which wraps
the routes.
"""

import logging
import threading
import time
import uuid
from collections import Counter, deque
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Deque, Dict, List, Sequence, Tuple

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import Response

from core.datetime_utils import utc_now
from core.logging_config import bind_request_id, reset_request_id

logger = logging.getLogger(__name__)

REQUEST_ID_HEADER = "X-Request-ID"
LATENCY_WINDOW = 1000


@dataclass
class RequestMetrics:
    timestamp: datetime
    method: str
    path: str
    status_code: int
    duration_ms: float
    request_id: str


def _status_class(status_code: int) -> str:
    return f"{status_code // 100}xx"


def _nearest_rank(sorted_values: Sequence[float], pct: float) -> float:
    if not sorted_values:
        return 0.0
    index = min(int(len(sorted_values) * pct / 100), len(sorted_values) - 1)
    return round(sorted_values[index], 2)


@dataclass
class MetricsCollector:
    """
    Process-local counters. They reset on restart; Prometheus keeps history.

    Routers call record_sweep after a low-stock sweep; the Celery worker
    records task outcomes in its own process.
    """
    _latencies: Deque[float] = field(default_factory=lambda: deque(maxlen=LATENCY_WINDOW))
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    by_status: Counter = field(default_factory=Counter)
    by_route: Counter = field(default_factory=Counter)
    tasks: Counter = field(default_factory=Counter)
    sms: Counter = field(default_factory=Counter)
    low_stock_sweeps: int = 0

    @property
    def task_success(self) -> int:
        return self.tasks["success"]

    @property
    def task_failure(self) -> int:
        return self.tasks["failure"]

    def record_request(self, metrics: RequestMetrics) -> None:
        with self._lock:
            self._latencies.append(metrics.duration_ms)
            self.by_status[_status_class(metrics.status_code)] += 1
            self.by_route[(metrics.method, metrics.path)] += 1

    def record_task_result(self, success: bool) -> None:
        with self._lock:
            self.tasks["success" if success else "failure"] += 1

    def record_sweep(self, messages_sent: int, messages_failed: int) -> None:
        with self._lock:
            self.low_stock_sweeps += 1
        self.record_sms(messages_sent, messages_failed)

    def record_sms(self, sent: int, failed: int) -> None:
        with self._lock:
            self.sms["sent"] += sent
            self.sms["failed"] += failed

    def get_latency_percentiles(self) -> Dict[str, float]:
        with self._lock:
            ordered = sorted(self._latencies)
        return {f"p{pct}": _nearest_rank(ordered, pct) for pct in (50, 95, 99)}

    def get_summary(self) -> Dict[str, Any]:
        latencies = self.get_latency_percentiles()
        return {
            "http_requests_total": sum(self.by_status.values()),
            "http_requests_2xx_total": self.by_status["2xx"],
            "http_requests_4xx_total": self.by_status["4xx"],
            "http_requests_5xx_total": self.by_status["5xx"],
            "http_request_duration_ms_p50": latencies["p50"],
            "http_request_duration_ms_p95": latencies["p95"],
            "http_request_duration_ms_p99": latencies["p99"],
            "background_tasks_success_total": self.task_success,
            "background_tasks_failure_total": self.task_failure,
            "low_stock_sweeps_total": self.low_stock_sweeps,
            "sms_sent_total": self.sms["sent"],
            "sms_failed_total": self.sms["failed"],
        }

    def get_prometheus_format(self) -> str:
        """Prometheus text exposition of get_summary() plus per-route counts."""
        summary = self.get_summary()
        with self._lock:
            routes = sorted(self.by_route.items())

        families: List[Tuple[str, str, str, List[Tuple[str, Any]]]] = [
            ("http_requests_total", "counter", "Total HTTP requests",
             [("", summary["http_requests_total"])]),
            ("http_requests_by_status", "counter", "HTTP requests by status class",
             [(f'status="{cls}"', summary[f"http_requests_{cls}_total"]) for cls in ("2xx", "4xx", "5xx")]),
            ("http_requests_by_route", "counter", "HTTP requests by method and route template",
             [(f'method="{method}",route="{route}"', count) for (method, route), count in routes]),
            ("http_request_duration_ms", "gauge", "Request duration in milliseconds",
             [(f'quantile="{q}"', summary[f"http_request_duration_ms_p{p}"])
              for q, p in (("0.5", 50), ("0.95", 95), ("0.99", 99))]),
            ("background_tasks_total", "counter", "Celery task completions",
             [('result="success"', summary["background_tasks_success_total"]),
              ('result="failure"', summary["background_tasks_failure_total"])]),
            ("low_stock_sweeps_total", "counter", "Completed low-stock sweeps",
             [("", summary["low_stock_sweeps_total"])]),
            ("sms_messages_total", "counter", "Low-stock SMS deliveries by result",
             [('result="sent"', summary["sms_sent_total"]),
              ('result="failed"', summary["sms_failed_total"])]),
        ]

        lines: List[str] = []
        for name, metric_type, help_text, samples in families:
            lines.append(f"# HELP {name} {help_text}")
            lines.append(f"# TYPE {name} {metric_type}")
            for labels, value in samples:
                lines.append(f"{name}{{{labels}}} {value}" if labels else f"{name} {value}")
            lines.append("")
        return "\n".join(lines)


metrics_collector = MetricsCollector()


def get_metrics_collector() -> MetricsCollector:
    return metrics_collector


def route_template(request: Request) -> str:
    route = request.scope.get("route")
    return getattr(route, "path", None) or request.url.path


class LoggingMiddleware(BaseHTTPMiddleware):
    """
    Binds a request id, logs start and completion, records latency.

    An incoming X-Request-ID is reused, otherwise a short random id is
    generated; either way it is echoed back on the response.
    """

    QUIET_PATHS = frozenset({"/health", "/ready", "/metrics", "/metrics/json", "/docs", "/redoc", "/openapi.json"})

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex[:8]
        token = bind_request_id(request_id)
        quiet = request.url.path in self.QUIET_PATHS
        started = time.perf_counter()

        if not quiet:
            logger.debug("Request started", extra={"method": request.method})

        try:
            response = await call_next(request)
        except Exception:
            logger.exception(
                "Unhandled error",
                extra={"method": request.method, "route": route_template(request)}
            )
            reset_request_id(token)
            raise

        duration_ms = (time.perf_counter() - started) * 1000
        route = route_template(request)
        metrics_collector.record_request(RequestMetrics(
            timestamp=utc_now(),
            method=request.method,
            path=route,
            status_code=response.status_code,
            duration_ms=duration_ms,
            request_id=request_id,
        ))

        if not quiet:
            logger.log(
                logging.WARNING if response.status_code >= 400 else logging.INFO,
                "Request completed",
                extra={
                    "method": request.method,
                    "route": route,
                    "status_code": response.status_code,
                    "duration_ms": round(duration_ms, 2),
                }
            )
        reset_request_id(token)

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
