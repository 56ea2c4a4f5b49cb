"""
Service layer for emergency alert broadcasts.

A hospital picks an area and a blood group; every matching donor gets an
SMS. Donors whose number the provider rejects as invalid are removed from
the directory so later broadcasts skip them.
"""
import logging
from typing import Optional

from repositories import DonorRepository
from schemas import AlertResponse
from services.sms_service import INVALID_NUMBER_ERROR_CODE, SmsService
from core.blood_groups import (
    ALL,
    ANY_BLOOD_GROUP,
    is_valid_blood_group,
    normalize_blood_group,
)
from core.exceptions import InvalidBloodGroupError, NoMatchingDonorsError, SmsDeliveryError

logger = logging.getLogger(__name__)


def build_alert_message(
    hospital_name: str,
    area: str,
    blood_group: str,
    additional_info: Optional[str] = None
) -> str:
    return (
        f"URGENT: Blood needed at {hospital_name} in {area}. "
        f"Blood type: {blood_group}. {additional_info or ''} "
        f"Please help if you can."
    )


class AlertService:
    """Broadcasts emergency blood requests to matching donors."""

    def __init__(self, donor_repository: DonorRepository, sms_service: SmsService):
        self._donors = donor_repository
        self._sms = sms_service

    def broadcast(
        self,
        hospital_name: str,
        area: str,
        blood_group: str,
        additional_info: Optional[str] = None
    ) -> AlertResponse:
        """
        Send an emergency alert.

        Args:
            hospital_name: Name quoted in the message.
            area: Target area, or "All" for every area.
            blood_group: Target group, or "Any" for every group.
            additional_info: Free text appended to the message.

        Raises:
            InvalidBloodGroupError: If blood_group is neither "Any" nor a known group.
            NoMatchingDonorsError: If no donor matches the filters.
        """
        group_filter = None
        if blood_group != ANY_BLOOD_GROUP:
            group_filter = normalize_blood_group(blood_group)
            if not is_valid_blood_group(group_filter):
                raise InvalidBloodGroupError(blood_group=blood_group)

        area_filter = None if area == ALL else area

        donors = self._donors.find(area=area_filter, blood_group=group_filter)
        if not donors:
            raise NoMatchingDonorsError(area=area)

        message = build_alert_message(hospital_name, area, blood_group, additional_info)

        if not self._sms.is_configured:
            logger.info(
                f"Twilio not configured, alert not sent: {message}",
                extra={"recipients": len(donors)}
            )
            return AlertResponse(
                message=f"Alert would be sent to {len(donors)} donor(s). Twilio not configured.",
                successful_sends=len(donors),
                failed_sends=0
            )

        sent = 0
        failed = 0
        removed = 0
        for donor in donors:
            try:
                self._sms.send(donor["phone"], message)
                sent += 1
            except SmsDeliveryError as e:
                failed += 1
                logger.error(f"Failed to send alert SMS: {e.detail}", extra={"phone": donor["phone"], "code": e.code})

                if e.code == INVALID_NUMBER_ERROR_CODE and self._donors.delete_by_phone(donor["phone"]):
                    removed += 1
                    logger.info("Removed donor with invalid phone number", extra={"phone": donor["phone"]})

        logger.info(
            "Alert broadcast finished",
            extra={
                "hospital": hospital_name,
                "area": area,
                "blood_group": blood_group,
                "successful_sends": sent,
                "failed_sends": failed,
            }
        )

        response_message = f"Alert sent to {sent} donor(s)."
        if failed:
            response_message += f" {failed} failed."

        return AlertResponse(
            message=response_message,
            successful_sends=sent,
            failed_sends=failed,
            removed_donors=removed
        )
