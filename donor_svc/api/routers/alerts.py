"""
Alerts router - emergency blood request broadcasts.

Requires a hospital token. The logged-in hospital's name is used when the
request does not name a hospital.
"""
import logging

from fastapi import APIRouter, Depends

from schemas import AlertRequest, AlertResponse
from services import AlertService
from core.auth import AuthenticatedHospital, get_current_hospital
from core.dependencies import get_alert_service

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/v1/alerts",
    tags=["Alerts"],
)


# Sync handler: FastAPI runs it in the threadpool, so the per-donor SMS calls
# do not block the event loop.
@router.post(
    "",
    response_model=AlertResponse,
    summary="Broadcast an emergency alert",
    description="SMS every donor matching the area ('All' for every area) and blood group ('Any' for every group)."
)
def send_alert(
    alert: AlertRequest,
    hospital: AuthenticatedHospital = Depends(get_current_hospital),
    alert_service: AlertService = Depends(get_alert_service)
):
    """
    Broadcast an alert.

    Returns 404 when no donor matches. Donors whose number the SMS provider
    rejects as invalid are removed.
    """
    result = alert_service.broadcast(
        hospital_name=alert.hospital_name or hospital.name,
        area=alert.area,
        blood_group=alert.blood_group,
        additional_info=alert.additional_info
    )
    if result.removed_donors or result.failed_sends:
        logger.warning(
            "Alert broadcast had failures",
            extra={"failed_sends": result.failed_sends, "removed_donors": result.removed_donors}
        )
    return result
