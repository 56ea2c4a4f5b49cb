"""
Shared pytest fixtures for API tests.

Key patterns:

1. Database Isolation: Each test gets a fresh temporary database
2. DI Override: Use app.dependency_overrides to inject test dependencies
3. SMS Isolation: The Twilio client is a MagicMock, nothing leaves the process

Fixture Hierarchy:
    temp_db → repositories → services → test_app → client
"""
import logging
import os
import tempfile
from unittest.mock import MagicMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

# Set the token secret before importing config modules
# This must happen before any config imports
TEST_JWT_SECRET = "test-jwt-secret-for-testing-purposes-1234567890"
os.environ.setdefault("DONOR_SVC_JWT_SECRET", TEST_JWT_SECRET)

from repositories import (
    Database,
    DonorRepository,
    HospitalRepository,
    BloodBankRepository,
    InventoryRepository,
)
from services import (
    SmsService,
    LowStockService,
    DonorService,
    HospitalService,
    AlertService,
    BloodBankService,
    InventoryService,
    MapService,
)
from core.auth import create_access_token
from core.exceptions import setup_exception_handlers
from core.middleware import LoggingMiddleware
from core import dependencies as deps

TEST_HOSPITAL = {
    "username": "cityhospital",
    "password": "correct-horse-battery",
    "name": "City Hospital",
    "area": "Kothrud",
}


@pytest.fixture(autouse=True)
def _isolate_log_capture(caplog):
    """
    Keep log capture test-local: the TestClient's own httpx request line
    (which carries the raw URL) stays out of caplog, and filters a test adds
    to the shared capture handler are removed afterwards.
    """
    httpx_logger = logging.getLogger("httpx")
    previous_level = httpx_logger.level
    httpx_logger.setLevel(logging.WARNING)
    filters = list(caplog.handler.filters)
    yield
    caplog.handler.filters[:] = filters
    httpx_logger.setLevel(previous_level)


@pytest.fixture
def temp_db():
    """
    Create a temporary database for testing.

    A fresh SQLite file per test keeps tests fully isolated.
    """
    fd, db_path = tempfile.mkstemp(suffix='.db')
    os.close(fd)

    db = Database(db_path=db_path)
    yield db

    for suffix in ("", "-wal", "-shm"):
        if os.path.exists(db_path + suffix):
            os.unlink(db_path + suffix)


@pytest.fixture
def donor_repo(temp_db):
    return DonorRepository(db=temp_db)


@pytest.fixture
def hospital_repo(temp_db):
    return HospitalRepository(db=temp_db)


@pytest.fixture
def blood_bank_repo(temp_db):
    return BloodBankRepository(db=temp_db)


@pytest.fixture
def inventory_repo(temp_db):
    return InventoryRepository(db=temp_db)


@pytest.fixture
def twilio_client():
    """Stand-in for twilio.rest.Client; messages.create() succeeds by default."""
    client = MagicMock()
    client.messages.create.return_value = MagicMock(sid="SM00000000000000000000000000000000")
    return client


@pytest.fixture
def sms_service(twilio_client):
    """A configured SmsService backed by the mock Twilio client."""
    return SmsService(
        account_sid="AC00000000000000000000000000000000",
        auth_token="test-auth-token",
        from_number="+15005550006",
        client=twilio_client
    )


@pytest.fixture
def unconfigured_sms_service():
    return SmsService(account_sid="", auth_token="", from_number="")


@pytest.fixture
def low_stock_service(donor_repo, inventory_repo, sms_service):
    return LowStockService(
        donor_repository=donor_repo,
        inventory_repository=inventory_repo,
        sms_service=sms_service,
        donor_threshold=10
    )


@pytest.fixture
def donor_service(donor_repo, low_stock_service):
    return DonorService(donor_repository=donor_repo, low_stock_service=low_stock_service)


@pytest.fixture
def hospital_service(hospital_repo):
    return HospitalService(hospital_repository=hospital_repo)


@pytest.fixture
def alert_service(donor_repo, sms_service):
    return AlertService(donor_repository=donor_repo, sms_service=sms_service)


@pytest.fixture
def blood_bank_service(blood_bank_repo):
    return BloodBankService(blood_bank_repository=blood_bank_repo)


@pytest.fixture
def inventory_service(inventory_repo, blood_bank_repo, low_stock_service):
    return InventoryService(
        inventory_repository=inventory_repo,
        blood_bank_repository=blood_bank_repo,
        low_stock_service=low_stock_service
    )


@pytest.fixture
def map_service():
    return MapService()


@pytest.fixture
def test_app(
    temp_db,
    donor_repo,
    hospital_repo,
    blood_bank_repo,
    inventory_repo,
    sms_service,
    low_stock_service,
    donor_service,
    hospital_service,
    alert_service,
    blood_bank_service,
    inventory_service,
    map_service,
):
    """
    Create a FastAPI test app with dependency overrides.

    Uses the real routers and the real bearer-token check; only the
    dependency functions are replaced with test instances.
    """
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

    app = FastAPI(title="Donor Service API Test")
    setup_exception_handlers(app)
    app.add_middleware(LoggingMiddleware)

    app.dependency_overrides[deps.get_database] = lambda: temp_db
    app.dependency_overrides[deps.get_donor_repository] = lambda: donor_repo
    app.dependency_overrides[deps.get_hospital_repository] = lambda: hospital_repo
    app.dependency_overrides[deps.get_blood_bank_repository] = lambda: blood_bank_repo
    app.dependency_overrides[deps.get_inventory_repository] = lambda: inventory_repo
    app.dependency_overrides[deps.get_sms_service] = lambda: sms_service
    app.dependency_overrides[deps.get_low_stock_service] = lambda: low_stock_service
    app.dependency_overrides[deps.get_donor_service] = lambda: donor_service
    app.dependency_overrides[deps.get_hospital_service] = lambda: hospital_service
    app.dependency_overrides[deps.get_alert_service] = lambda: alert_service
    app.dependency_overrides[deps.get_blood_bank_service] = lambda: blood_bank_service
    app.dependency_overrides[deps.get_inventory_service] = lambda: inventory_service
    app.dependency_overrides[deps.get_map_service] = lambda: map_service

    for router in (
        health_router,
        auth_router,
        hospitals_router,
        donors_router,
        alerts_router,
        blood_banks_router,
        inventory_router,
        meta_router,
        views_router,
    ):
        app.include_router(router)

    return app


@pytest.fixture
def client(test_app):
    """Create a test client using the test app with DI overrides."""
    return TestClient(test_app)


@pytest.fixture
def hospital(hospital_service):
    """A registered hospital account; returns the plain-text credentials."""
    hospital_service.register(**TEST_HOSPITAL)
    return dict(TEST_HOSPITAL)


@pytest.fixture
def auth_headers():
    """Bearer header for the test hospital."""
    token, _ = create_access_token(
        username=TEST_HOSPITAL["username"],
        name=TEST_HOSPITAL["name"],
        area=TEST_HOSPITAL["area"]
    )
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def make_donor(donor_repo):
    """Insert donors directly through the repository."""
    counter = {"n": 0}

    def _make(area="Kothrud", blood_group="O+", phone=None, name=None):
        counter["n"] += 1
        phone = phone or f"+9190000000{counter['n']:02d}"
        return donor_repo.add(
            name=name or f"Donor {counter['n']}",
            area=area,
            phone=phone,
            blood_group=blood_group
        )

    return _make


@pytest.fixture
def blood_bank(blood_bank_repo):
    return blood_bank_repo.add(
        name="Sahyadri Hospital Blood Bank",
        address="Kothrud, Pune, Maharashtra 411038",
        phone="+91-20-67222222",
        lat=18.5081,
        lng=73.8165,
        area="Kothrud"
    )
