"""
Pydantic schemas for API request/response validation.

This module contains all Pydantic models used at API boundaries.
"""
from schemas.donor import (
    DonorCreate,
    DonorResponse,
    DonorRegistrationResponse,
    DonorStatsResponse,
    MessageResponse,
)
from schemas.hospital import (
    LoginRequest,
    LoginResponse,
    HospitalCreate,
    HospitalResponse,
)
from schemas.alert import AlertRequest, AlertResponse
from schemas.blood_bank import BloodBankCreate, BloodBankResponse
from schemas.inventory import (
    InventoryUpsert,
    InventoryItemResponse,
    InventoryUpdateResponse,
    InventoryStatsResponse,
    LowStockCheckResponse,
)

__all__ = [
    # Donor schemas
    "DonorCreate",
    "DonorResponse",
    "DonorRegistrationResponse",
    "DonorStatsResponse",
    "MessageResponse",
    # Hospital schemas
    "LoginRequest",
    "LoginResponse",
    "HospitalCreate",
    "HospitalResponse",
    # Alert schemas
    "AlertRequest",
    "AlertResponse",
    # Blood bank schemas
    "BloodBankCreate",
    "BloodBankResponse",
    # Inventory schemas
    "InventoryUpsert",
    "InventoryItemResponse",
    "InventoryUpdateResponse",
    "InventoryStatsResponse",
    "LowStockCheckResponse",
]
