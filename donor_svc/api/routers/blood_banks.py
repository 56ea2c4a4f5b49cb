"""
Blood banks router - listing and adding blood banks.
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from schemas import BloodBankCreate, BloodBankResponse
from services import BloodBankService
from core.auth import get_current_hospital
from core.dependencies import get_blood_bank_service

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/v1/blood-banks",
    tags=["Blood Banks"],
)


@router.get(
    "",
    response_model=List[BloodBankResponse],
    summary="List blood banks",
    description="Blood banks ordered by name, optionally filtered by area and a free-text search."
)
async def list_blood_banks(
    area: Optional[str] = Query(None, description="Exact area, or 'All'"),
    search: Optional[str] = Query(None, max_length=100, description="Matches name, address or area"),
    blood_bank_service: BloodBankService = Depends(get_blood_bank_service)
):
    return blood_bank_service.list_blood_banks(area=area, search=search)


@router.post(
    "",
    response_model=BloodBankResponse,
    status_code=201,
    summary="Add a blood bank",
    description="Add a blood bank with map coordinates. Names must be unique. Requires a hospital token.",
    dependencies=[Depends(get_current_hospital)],
)
async def create_blood_bank(
    blood_bank: BloodBankCreate,
    blood_bank_service: BloodBankService = Depends(get_blood_bank_service)
):
    return blood_bank_service.create(**blood_bank.model_dump())
