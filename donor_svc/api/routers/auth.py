"""
Auth router - hospital login.

Architecture:
    HTTP Request → Router (this file) → HospitalService → HospitalRepository → Database
"""
import logging

from fastapi import APIRouter, Depends

from schemas import LoginRequest, LoginResponse
from services import HospitalService
from core.dependencies import get_hospital_service

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/v1/auth",
    tags=["Auth"],
)


@router.post(
    "/login",
    response_model=LoginResponse,
    summary="Hospital login",
    description="Exchange hospital credentials for a bearer token used by the protected endpoints."
)
def login(
    credentials: LoginRequest,
    hospital_service: HospitalService = Depends(get_hospital_service)
):
    """
    Log a hospital in.

    Returns 400 when username or password is empty and 401 when they do
    not match an account.
    """
    return hospital_service.login(credentials.username.strip(), credentials.password)
