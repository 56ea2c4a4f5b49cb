"""
Service layer for blood inventory.

Architecture:
    API Layer (routers) → InventoryService → InventoryRepository → Database
                                           ↘ LowStockService (alert when below minimum)
"""
import logging
from typing import List, Tuple

from repositories import BloodBankRepository, InventoryRepository
from schemas import InventoryItemResponse, InventoryStatsResponse
from services.low_stock_service import LowStockService
from core.blood_groups import is_valid_blood_group, normalize_blood_group
from core.exceptions import (
    BloodBankNotFoundError,
    InvalidBloodGroupError,
    InventoryItemNotFoundError,
)

logger = logging.getLogger(__name__)


def stock_status(units: int, min_level: int) -> str:
    """critical when empty and below minimum, low when below minimum, otherwise ok."""
    if units < min_level:
        return "critical" if units == 0 else "low"
    return "ok"


def _to_response(item: dict) -> InventoryItemResponse:
    return InventoryItemResponse(
        **item,
        stock_status=stock_status(item["units"], item["min_level"])
    )


class InventoryService:
    """Inventory listing, stats and updates."""

    def __init__(
        self,
        inventory_repository: InventoryRepository,
        blood_bank_repository: BloodBankRepository,
        low_stock_service: LowStockService
    ):
        self._repo = inventory_repository
        self._banks = blood_bank_repository
        self._low_stock = low_stock_service

    def list_items(self) -> List[InventoryItemResponse]:
        """All inventory items, most recently updated first."""
        return [_to_response(item) for item in self._repo.get_all()]

    def get_stats(self) -> InventoryStatsResponse:
        items = self._repo.get_all()
        return InventoryStatsResponse(
            total_units=sum(item["units"] for item in items),
            low_stock_count=sum(1 for item in items if item["units"] < item["min_level"]),
            areas=len({item["area"] for item in items})
        )

    def upsert(
        self,
        blood_bank: str,
        blood_group: str,
        units: int,
        min_level: int
    ) -> Tuple[InventoryItemResponse, bool]:
        """
        Create or update the stock of one blood group at one blood bank.

        When the new level is below the minimum, matching donors are alerted
        right away.

        Returns:
            Tuple of (stored item, True if a new item was created).

        Raises:
            BloodBankNotFoundError: If no blood bank has this name.
            InvalidBloodGroupError: If the blood group is unknown.
        """
        bank = self._banks.get_by_name(blood_bank)
        if bank is None:
            raise BloodBankNotFoundError(name=blood_bank)

        group = normalize_blood_group(blood_group)
        if not is_valid_blood_group(group):
            raise InvalidBloodGroupError(blood_group=blood_group)

        item, created = self._repo.upsert(
            blood_bank=bank["name"],
            area=bank["area"],
            blood_group=group,
            units=units,
            min_level=min_level
        )
        logger.info(
            "Inventory updated",
            extra={
                "blood_bank": item["blood_bank"],
                "blood_group": item["blood_group"],
                "units": item["units"],
                "created": created,
            }
        )

        if item["units"] < item["min_level"]:
            self._low_stock.send_low_stock_alert(item)

        return _to_response(item), created

    def delete(self, item_id: int) -> None:
        """
        Raises:
            InventoryItemNotFoundError: If the id does not exist.
        """
        if not self._repo.delete_by_id(item_id):
            raise InventoryItemNotFoundError(item_id=item_id)
        logger.info("Inventory item deleted", extra={"item_id": item_id})
