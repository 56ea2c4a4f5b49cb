"""
Donors router - donor registration and the donor directory.

Registration and the directory are public. Deleting a donor requires a
hospital token and triggers the low-stock sweep.

Architecture:
    HTTP Request → Router (this file) → DonorService → DonorRepository → Database
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from schemas import (
    DonorCreate,
    DonorRegistrationResponse,
    DonorResponse,
    DonorStatsResponse,
    MessageResponse,
)
from services import DonorService
from core.auth import get_current_hospital
from core.dependencies import get_donor_service
from core.middleware import get_metrics_collector

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/v1/donors",
    tags=["Donors"],
)


@router.post(
    "",
    response_model=DonorRegistrationResponse,
    status_code=201,
    summary="Register a donor",
    description="Register a blood donor. Phone numbers must be unique and in +91XXXXXXXXXX form."
)
async def register_donor(
    donor: DonorCreate,
    donor_service: DonorService = Depends(get_donor_service)
):
    """
    Register a new donor.

    - **name**, **area**, **phone**, **blood_group**: all required

    Raises 400 for an invalid phone or blood group and 409 when the phone
    number is already registered.
    """
    created = donor_service.register(
        name=donor.name,
        area=donor.area,
        phone=donor.phone,
        blood_group=donor.blood_group
    )
    return DonorRegistrationResponse(message="Donor registered successfully", donor=created)


@router.get(
    "",
    response_model=List[DonorResponse],
    summary="List donors",
    description="Donor directory, newest first. Use 'All' (or omit) to skip a filter."
)
async def list_donors(
    area: Optional[str] = Query(None, description="Exact area, or 'All'"),
    blood_group: Optional[str] = Query(None, description="Blood group, or 'All'"),
    donor_service: DonorService = Depends(get_donor_service)
):
    return donor_service.list_donors(area=area, blood_group=blood_group)


@router.get(
    "/stats",
    response_model=DonorStatsResponse,
    summary="Donor directory stats",
    description="Total donors, distinct areas and most common blood group over the same filters as the list."
)
async def donor_stats(
    area: Optional[str] = Query(None, description="Exact area, or 'All'"),
    blood_group: Optional[str] = Query(None, description="Blood group, or 'All'"),
    donor_service: DonorService = Depends(get_donor_service)
):
    return donor_service.get_stats(area=area, blood_group=blood_group)


@router.delete(
    "/{phone}",
    response_model=MessageResponse,
    summary="Delete a donor",
    description="Remove a donor by phone number, then re-run the low-stock check. Requires a hospital token.",
    dependencies=[Depends(get_current_hospital)],
)
def delete_donor(
    phone: str,
    donor_service: DonorService = Depends(get_donor_service)
):
    summary = donor_service.delete(phone)
    get_metrics_collector().record_sweep(summary.messages_sent, summary.messages_failed)
    return MessageResponse(message="Donor deleted successfully")
