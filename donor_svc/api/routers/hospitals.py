"""
Hospitals router - hospital account management.

Only an authenticated hospital can create another hospital account.
"""
import logging

from fastapi import APIRouter, Depends

from schemas import HospitalCreate, HospitalResponse
from services import HospitalService
from core.auth import get_current_hospital
from core.dependencies import get_hospital_service

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/v1/hospitals",
    tags=["Hospitals"],
    dependencies=[Depends(get_current_hospital)],
)


@router.post(
    "",
    response_model=HospitalResponse,
    status_code=201,
    summary="Create a hospital account",
    description="Add a hospital login. Usernames must be unique (409 otherwise)."
)
def create_hospital(
    hospital: HospitalCreate,
    hospital_service: HospitalService = Depends(get_hospital_service)
):
    return hospital_service.register(
        username=hospital.username,
        password=hospital.password,
        name=hospital.name,
        area=hospital.area
    )
