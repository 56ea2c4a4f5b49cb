"""
Service layer for business logic.

This module contains all business logic and orchestration services.
"""
from services.sms_service import SmsService
from services.low_stock_service import LowStockService, LowStockSummary
from services.donor_service import DonorService
from services.hospital_service import HospitalService
from services.alert_service import AlertService
from services.blood_bank_service import BloodBankService
from services.inventory_service import InventoryService
from services.seed_service import SeedService
from services.map_service import MapService

__all__ = [
    "SmsService",
    "LowStockService",
    "LowStockSummary",
    "DonorService",
    "HospitalService",
    "AlertService",
    "BloodBankService",
    "InventoryService",
    "SeedService",
    "MapService",
]
