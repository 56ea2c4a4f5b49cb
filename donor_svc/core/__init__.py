"""
Core module for application configuration, logging, and shared constants.

This module provides:
- Settings: Application configuration via pydantic-settings
- Dependency injection: FastAPI Depends() functions for services and repositories
- Exceptions: Domain-specific exception classes with HTTP status codes
- Datetime utilities: UTC-first datetime handling
- Blood group registry: the eight ABO/Rh groups and their compatibility
"""
from core.config import settings, Settings

# Dependency injection - import functions for FastAPI Depends()
from core.dependencies import (
    get_database,
    get_donor_repository,
    get_hospital_repository,
    get_blood_bank_repository,
    get_inventory_repository,
    get_sms_service,
    get_low_stock_service,
    get_donor_service,
    get_hospital_service,
    get_alert_service,
    get_blood_bank_service,
    get_inventory_service,
    get_seed_service,
    get_map_service,
    reset_database,
)

# Exception classes for consistent error handling
from core.exceptions import (
    DonorServiceError,
    DonorNotFoundError,
    DuplicateDonorError,
    InvalidPhoneNumberError,
    InvalidBloodGroupError,
    NoMatchingDonorsError,
    MissingCredentialsError,
    InvalidCredentialsError,
    DuplicateHospitalError,
    BloodBankNotFoundError,
    DuplicateBloodBankError,
    InventoryItemNotFoundError,
    DatabaseError,
    DatabaseConnectionError,
    ExternalServiceError,
    SmsDeliveryError,
    setup_exception_handlers,
)

# UTC datetime utilities
from core.datetime_utils import (
    utc_now,
    to_utc,
    parse_datetime,
    format_iso,
)

from core.blood_groups import (
    ALL,
    ANY_BLOOD_GROUP,
    BloodGroupDefinition,
    list_blood_groups,
    get_blood_group,
    is_valid_blood_group,
    normalize_blood_group,
    get_compatible_donors,
)

from core.config import (
    DATABASE_PATH,
    API_HOST,
    API_PORT,
    API_RELOAD,
    REDIS_URL,
    CELERY_BROKER_URL,
    CELERY_RESULT_BACKEND,
    LOW_STOCK_DONOR_THRESHOLD,
    LOW_STOCK_CHECK_INTERVAL_SECONDS,
)

__all__ = [
    # Settings
    "settings",
    "Settings",
    # Dependency injection
    "get_database",
    "get_donor_repository",
    "get_hospital_repository",
    "get_blood_bank_repository",
    "get_inventory_repository",
    "get_sms_service",
    "get_low_stock_service",
    "get_donor_service",
    "get_hospital_service",
    "get_alert_service",
    "get_blood_bank_service",
    "get_inventory_service",
    "get_seed_service",
    "get_map_service",
    "reset_database",
    # Exceptions
    "DonorServiceError",
    "DonorNotFoundError",
    "DuplicateDonorError",
    "InvalidPhoneNumberError",
    "InvalidBloodGroupError",
    "NoMatchingDonorsError",
    "MissingCredentialsError",
    "InvalidCredentialsError",
    "DuplicateHospitalError",
    "BloodBankNotFoundError",
    "DuplicateBloodBankError",
    "InventoryItemNotFoundError",
    "DatabaseError",
    "DatabaseConnectionError",
    "ExternalServiceError",
    "SmsDeliveryError",
    "setup_exception_handlers",
    # Datetime utilities
    "utc_now",
    "to_utc",
    "parse_datetime",
    "format_iso",
    # Blood groups
    "ALL",
    "ANY_BLOOD_GROUP",
    "BloodGroupDefinition",
    "list_blood_groups",
    "get_blood_group",
    "is_valid_blood_group",
    "normalize_blood_group",
    "get_compatible_donors",
    # Config constants
    "DATABASE_PATH",
    "API_HOST",
    "API_PORT",
    "API_RELOAD",
    "REDIS_URL",
    "CELERY_BROKER_URL",
    "CELERY_RESULT_BACKEND",
    "LOW_STOCK_DONOR_THRESHOLD",
    "LOW_STOCK_CHECK_INTERVAL_SECONDS",
]
