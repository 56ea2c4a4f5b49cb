"""
Tests for the Celery low-stock task and beat schedule.
"""
from unittest.mock import patch

import pytest

from celery_app import celery_app
from core.middleware import get_metrics_collector
from tasks.stock_tasks import check_low_stock


def test_beat_schedule_runs_sweep_hourly():
    entry = celery_app.conf.beat_schedule["check-low-stock"]
    assert entry["task"] == "tasks.stock_tasks.check_low_stock"
    assert entry["schedule"] == 3600.0


def test_task_returns_summary(low_stock_service, inventory_repo, make_donor):
    inventory_repo.upsert("Sahyadri Hospital Blood Bank", "Kothrud", "O+", units=1, min_level=10)
    make_donor(area="Kothrud", blood_group="O+")

    collector = get_metrics_collector()
    before = collector.task_success

    # For testing Celery tasks, call the .run() method directly
    with patch("tasks.stock_tasks.get_low_stock_service", return_value=low_stock_service):
        result = check_low_stock.run()

    assert result == {
        "items_checked": 1,
        "items_alerted": 1,
        "messages_sent": 1,
        "messages_failed": 0,
    }
    assert collector.task_success == before + 1


def test_task_records_failure_when_database_unavailable():
    collector = get_metrics_collector()
    before = collector.task_failure

    with patch("tasks.stock_tasks.get_low_stock_service", side_effect=RuntimeError("no database")):
        with pytest.raises(RuntimeError):
            check_low_stock.run()

    assert collector.task_failure == before + 1
