"""
Celery application configuration.

Run the worker together with the beat scheduler:
    celery -A celery_app worker -B --loglevel=info
"""
from celery import Celery

from core.config import (
    CELERY_BROKER_URL,
    CELERY_RESULT_BACKEND,
    CELERY_TASK_SERIALIZER,
    CELERY_RESULT_SERIALIZER,
    CELERY_ACCEPT_CONTENT,
    CELERY_TIMEZONE,
    CELERY_ENABLE_UTC,
    LOW_STOCK_CHECK_INTERVAL_SECONDS,
)

celery_app = Celery(
    "donor_svc",
    broker=CELERY_BROKER_URL,
    backend=CELERY_RESULT_BACKEND,
    include=["tasks.stock_tasks"]
)

celery_app.conf.update(
    task_serializer=CELERY_TASK_SERIALIZER,
    result_serializer=CELERY_RESULT_SERIALIZER,
    accept_content=CELERY_ACCEPT_CONTENT,
    timezone=CELERY_TIMEZONE,
    enable_utc=CELERY_ENABLE_UTC,
    beat_schedule={
        "check-low-stock": {
            "task": "tasks.stock_tasks.check_low_stock",
            "schedule": float(LOW_STOCK_CHECK_INTERVAL_SECONDS),
        },
    },
)
