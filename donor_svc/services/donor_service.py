"""
Service layer for donor operations.

Architecture:
    API Layer (routers) → DonorService → DonorRepository → Database

Deleting a donor shrinks the donor pool, so the low-stock sweep runs
right after a successful delete.
"""
import logging
import re
from collections import Counter
from typing import List, Optional

from repositories import DonorRepository
from schemas import DonorResponse, DonorStatsResponse
from services.low_stock_service import LowStockService, LowStockSummary
from core.blood_groups import ALL, ANY_BLOOD_GROUP, is_valid_blood_group, normalize_blood_group
from core.config import settings
from core.exceptions import (
    DonorNotFoundError,
    DuplicateDonorError,
    InvalidBloodGroupError,
    InvalidPhoneNumberError,
)

logger = logging.getLogger(__name__)


def mask_phone(phone: str) -> str:
    """Hide the middle digits of a phone number: +919322659210 -> +91******9210."""
    if len(phone) < 13:
        return phone
    return phone[:3] + "******" + phone[9:]


def _area_filter(area: Optional[str]) -> Optional[str]:
    if not area or area == ALL:
        return None
    return area


def _blood_group_filter(blood_group: Optional[str]) -> Optional[str]:
    if not blood_group or blood_group in (ALL, ANY_BLOOD_GROUP):
        return None
    return normalize_blood_group(blood_group)


class DonorService:
    """
    Service layer for donor registration and the donor directory.
    """

    def __init__(
        self,
        donor_repository: DonorRepository,
        low_stock_service: LowStockService,
        phone_pattern: Optional[str] = None
    ):
        """
        Initialize the donor service.

        Args:
            donor_repository: DonorRepository instance for data access.
            low_stock_service: Sweep to run after a donor is deleted.
            phone_pattern: Regex every phone must match. Defaults to DONOR_PHONE_PATTERN.
        """
        self._repo = donor_repository
        self._low_stock = low_stock_service
        self._phone_re = re.compile(phone_pattern or settings.donor_phone_pattern)

    @staticmethod
    def _to_response(donor: dict) -> DonorResponse:
        return DonorResponse(
            id=donor["id"],
            name=donor["name"],
            area=donor["area"],
            phone=donor["phone"],
            masked_phone=mask_phone(donor["phone"]),
            blood_group=donor["blood_group"],
            created_at=donor["created_at"]
        )

    def register(self, name: str, area: str, phone: str, blood_group: str) -> DonorResponse:
        """
        Register a new donor.

        Raises:
            InvalidPhoneNumberError: If the phone does not match the configured pattern.
            InvalidBloodGroupError: If the blood group is unknown.
            DuplicateDonorError: If the phone number is already registered.
        """
        phone = phone.strip()
        if not self._phone_re.match(phone):
            raise InvalidPhoneNumberError(phone=phone)

        group = normalize_blood_group(blood_group)
        if not is_valid_blood_group(group):
            raise InvalidBloodGroupError(blood_group=blood_group)

        created = self._repo.add(name=name.strip(), area=area.strip(), phone=phone, blood_group=group)
        if created is None:
            logger.warning("Phone number already registered", extra={"phone": mask_phone(phone)})
            raise DuplicateDonorError(phone=phone)

        logger.info(
            f"Donor registered (id={created['id']})",
            extra={"area": created["area"], "blood_group": created["blood_group"]}
        )
        return self._to_response(created)

    def list_donors(
        self,
        area: Optional[str] = None,
        blood_group: Optional[str] = None
    ) -> List[DonorResponse]:
        """Donors matching the filters, newest first. "All" disables a filter."""
        donors = self._repo.find(area=_area_filter(area), blood_group=_blood_group_filter(blood_group))
        return [self._to_response(d) for d in donors]

    def get_stats(
        self,
        area: Optional[str] = None,
        blood_group: Optional[str] = None
    ) -> DonorStatsResponse:
        donors = self._repo.find(area=_area_filter(area), blood_group=_blood_group_filter(blood_group))

        # Groups in first-seen order (newest donor first); a tie goes to the later group
        groups = Counter(d["blood_group"] for d in donors)
        most_common = None
        for group, count in groups.items():
            if most_common is None or count >= groups[most_common]:
                most_common = group

        return DonorStatsResponse(
            total_donors=len(donors),
            total_areas=len({d["area"] for d in donors}),
            most_common_blood_group=most_common
        )

    def delete(self, phone: str) -> LowStockSummary:
        """
        Delete a donor by phone number, then run the low-stock sweep.

        Returns:
            Summary of the sweep that followed the delete.

        Raises:
            DonorNotFoundError: If no donor has this phone number.
        """
        if not self._repo.delete_by_phone(phone):
            raise DonorNotFoundError(phone=phone)

        logger.info("Donor deleted", extra={"phone": mask_phone(phone)})
        return self._low_stock.check_low_stock()
