"""
Celery tasks for the periodic low-stock sweep.

Celery tasks run outside the FastAPI request context, so they cannot use
FastAPI's Depends() mechanism. They build services directly with the DI
helper functions from core.dependencies.

The sweep is scheduled by celery_app.beat_schedule and is never retried;
the next scheduled run picks up whatever this one missed.
"""
import logging
from typing import Dict, Optional

from celery import shared_task

from core.dependencies import get_low_stock_service

logger = logging.getLogger(__name__)


def _record_task_metrics(success: bool, summary: Optional[Dict[str, int]] = None) -> None:
    """
    Record task completion for /metrics.

    Only visible when the worker shares a process with the API (eager mode,
    tests); a standalone worker keeps its own counters.
    """
    try:
        from core.middleware import get_metrics_collector
        collector = get_metrics_collector()
        collector.record_task_result(success=success)
        if summary is not None:
            collector.record_sweep(summary["messages_sent"], summary["messages_failed"])
    except Exception as e:
        logger.warning(f"Failed to record task metrics: {e}")


@shared_task(bind=True, name="tasks.stock_tasks.check_low_stock")
def check_low_stock(self) -> Dict[str, int]:
    """
    Run one low-stock sweep.

    Returns:
        Sweep summary dict (items_checked, items_alerted, messages_sent,
        messages_failed). JSON-serializable for the result backend.
    """
    logger.info("Low stock sweep started", extra={"task_id": self.request.id})

    try:
        summary = get_low_stock_service().check_low_stock().to_dict()
    except Exception:
        # Service construction failed (database unavailable)
        logger.exception("Low stock sweep failed", extra={"task_id": self.request.id})
        _record_task_metrics(success=False)
        raise

    logger.info(
        "Low stock sweep finished",
        extra={"task_id": self.request.id, **summary}
    )
    _record_task_metrics(success=True, summary=summary)
    return summary
