"""
Repository layer for database access.

This module contains all database access operations, encapsulating SQL and data persistence logic.
"""
from repositories.base import Database
from repositories.donor_repository import DonorRepository
from repositories.hospital_repository import HospitalRepository
from repositories.blood_bank_repository import BloodBankRepository
from repositories.inventory_repository import InventoryRepository

__all__ = [
    "Database",
    "DonorRepository",
    "HospitalRepository",
    "BloodBankRepository",
    "InventoryRepository",
]
