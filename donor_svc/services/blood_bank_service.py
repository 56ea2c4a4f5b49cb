"""
Service layer for blood banks.
"""
import logging
from typing import List, Optional

from repositories import BloodBankRepository
from schemas import BloodBankResponse
from core.blood_groups import ALL
from core.exceptions import DuplicateBloodBankError

logger = logging.getLogger(__name__)


def matches_search(bank: dict, search: Optional[str]) -> bool:
    """Case-insensitive substring match over name, address and area."""
    if not search:
        return True
    needle = search.strip().lower()
    return any(needle in bank[field].lower() for field in ("name", "address", "area"))


class BloodBankService:
    """Blood bank listing and creation."""

    def __init__(self, blood_bank_repository: BloodBankRepository):
        self._repo = blood_bank_repository

    def list_blood_banks(
        self,
        area: Optional[str] = None,
        search: Optional[str] = None
    ) -> List[BloodBankResponse]:
        """
        Blood banks ordered by name.

        Args:
            area: Exact area, or "All"/None for every area.
            search: Optional free-text filter.
        """
        banks = self._repo.find(area=None if not area or area == ALL else area)
        return [BloodBankResponse(**bank) for bank in banks if matches_search(bank, search)]

    def create(
        self,
        name: str,
        address: str,
        phone: str,
        lat: float,
        lng: float,
        area: str
    ) -> BloodBankResponse:
        """
        Add a blood bank.

        Raises:
            DuplicateBloodBankError: If the name is taken.
        """
        created = self._repo.add(name=name, address=address, phone=phone, lat=lat, lng=lng, area=area)
        if created is None:
            raise DuplicateBloodBankError(name=name)

        logger.info(f"Blood bank created: {name} (id={created['id']})", extra={"area": area})
        return BloodBankResponse(**created)
