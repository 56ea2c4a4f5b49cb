"""
FastAPI Dependency Injection configuration for Donor Service API.

Architecture Flow:
    API Layer (Routers)
         ↓ Depends()
    Service Layer (Business Logic)
         ↓ Injected
    Repository Layer (Data Access)
         ↓ Injected
    Database (SQLite Connection)

Usage in Routers:
    from core.dependencies import get_donor_service

    @router.post("/donors")
    async def register_donor(
        donor: DonorCreate,
        donor_service: DonorService = Depends(get_donor_service)
    ):
        return donor_service.register(...)

Testing:
    # Override dependencies in tests
    app.dependency_overrides[get_donor_service] = lambda: test_service
"""
import logging
from typing import Optional

from core.config import settings

logger = logging.getLogger(__name__)


# =============================================================================
# DATABASE DEPENDENCY
# =============================================================================

# Lazy import to avoid circular dependencies
_database_instance: Optional["Database"] = None


def get_database() -> "Database":
    """
    Get the process-wide database instance, creating it on first use.

    Raises:
        DatabaseConnectionError: If the database file cannot be initialized.
    """
    global _database_instance

    if _database_instance is None:
        from repositories.base import Database

        logger.info(f"Initializing database: {settings.database_path}")
        _database_instance = Database(
            db_path=settings.database_path,
            busy_timeout=settings.donor_svc_db_busy_timeout
        )
        logger.info("Database initialized successfully")

    return _database_instance


def reset_database() -> None:
    """Drop the cached database instance (for testing only)."""
    global _database_instance
    _database_instance = None


# =============================================================================
# REPOSITORY DEPENDENCIES
# =============================================================================

def get_donor_repository() -> "DonorRepository":
    from repositories import DonorRepository

    return DonorRepository(db=get_database())


def get_hospital_repository() -> "HospitalRepository":
    from repositories import HospitalRepository

    return HospitalRepository(db=get_database())


def get_blood_bank_repository() -> "BloodBankRepository":
    from repositories import BloodBankRepository

    return BloodBankRepository(db=get_database())


def get_inventory_repository() -> "InventoryRepository":
    from repositories import InventoryRepository

    return InventoryRepository(db=get_database())


# =============================================================================
# SERVICE DEPENDENCIES
# =============================================================================

def get_sms_service() -> "SmsService":
    """
    Get an SmsService configured from the TWILIO_* settings.

    The service is usable without credentials; callers check is_configured
    and only log the message in that case.
    """
    from services.sms_service import SmsService

    return SmsService(
        account_sid=settings.twilio_account_sid,
        auth_token=settings.twilio_auth_token,
        from_number=settings.twilio_phone_number
    )


def get_low_stock_service() -> "LowStockService":
    from services.low_stock_service import LowStockService

    return LowStockService(
        donor_repository=get_donor_repository(),
        inventory_repository=get_inventory_repository(),
        sms_service=get_sms_service(),
        donor_threshold=settings.low_stock_donor_threshold
    )


def get_donor_service() -> "DonorService":
    """
    Get a DonorService with its repository and the low-stock sweep injected.

    The sweep runs after every successful donor delete.
    """
    from services import DonorService

    return DonorService(
        donor_repository=get_donor_repository(),
        low_stock_service=get_low_stock_service(),
        phone_pattern=settings.donor_phone_pattern
    )


def get_hospital_service() -> "HospitalService":
    from services import HospitalService

    return HospitalService(hospital_repository=get_hospital_repository())


def get_alert_service() -> "AlertService":
    from services import AlertService

    return AlertService(
        donor_repository=get_donor_repository(),
        sms_service=get_sms_service()
    )


def get_blood_bank_service() -> "BloodBankService":
    from services import BloodBankService

    return BloodBankService(blood_bank_repository=get_blood_bank_repository())


def get_inventory_service() -> "InventoryService":
    from services import InventoryService

    return InventoryService(
        inventory_repository=get_inventory_repository(),
        blood_bank_repository=get_blood_bank_repository(),
        low_stock_service=get_low_stock_service()
    )


def get_seed_service() -> "SeedService":
    from services import SeedService

    return SeedService(
        blood_bank_repository=get_blood_bank_repository(),
        inventory_repository=get_inventory_repository()
    )


def get_map_service() -> "MapService":
    """MapService is stateless and needs no repositories."""
    from services import MapService

    return MapService()
