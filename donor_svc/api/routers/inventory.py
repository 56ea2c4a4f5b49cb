"""
Inventory router - blood stock per blood bank and blood group.

Reads are public; updates, deletes and the on-demand low-stock check
require a hospital token.

Architecture:
    HTTP Request → Router (this file) → InventoryService → InventoryRepository → Database
                                      → LowStockService (below-minimum alerts, sweep)
"""
import logging
from typing import List

from fastapi import APIRouter, Depends

from schemas import (
    InventoryItemResponse,
    InventoryStatsResponse,
    InventoryUpdateResponse,
    InventoryUpsert,
    LowStockCheckResponse,
    MessageResponse,
)
from services import InventoryService, LowStockService
from core.auth import get_current_hospital
from core.dependencies import get_inventory_service, get_low_stock_service
from core.middleware import get_metrics_collector

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/v1/inventory",
    tags=["Inventory"],
)


@router.get(
    "",
    response_model=List[InventoryItemResponse],
    summary="List inventory",
    description="All inventory items, most recently updated first, with computed stock status."
)
async def list_inventory(
    inventory_service: InventoryService = Depends(get_inventory_service)
):
    return inventory_service.list_items()


@router.get(
    "/stats",
    response_model=InventoryStatsResponse,
    summary="Inventory stats"
)
async def inventory_stats(
    inventory_service: InventoryService = Depends(get_inventory_service)
):
    return inventory_service.get_stats()


@router.post(
    "",
    response_model=InventoryUpdateResponse,
    status_code=201,
    summary="Create or update an inventory item",
    description="Set the units and minimum level for a blood group at a blood bank. "
                "Matching donors are alerted right away when units fall below the minimum.",
    dependencies=[Depends(get_current_hospital)],
)
def upsert_inventory(
    update: InventoryUpsert,
    inventory_service: InventoryService = Depends(get_inventory_service)
):
    item, created = inventory_service.upsert(
        blood_bank=update.blood_bank,
        blood_group=update.blood_group,
        units=update.units,
        min_level=update.min_level
    )
    return InventoryUpdateResponse(
        message="Inventory updated successfully",
        created=created,
        item=item
    )


@router.delete(
    "/{item_id}",
    response_model=MessageResponse,
    summary="Delete an inventory item",
    dependencies=[Depends(get_current_hospital)],
)
async def delete_inventory_item(
    item_id: int,
    inventory_service: InventoryService = Depends(get_inventory_service)
):
    inventory_service.delete(item_id)
    return MessageResponse(message="Inventory item deleted successfully")


@router.post(
    "/low-stock-check",
    response_model=LowStockCheckResponse,
    summary="Run the low-stock check now",
    description="Run the same sweep the hourly scheduler runs and return its summary.",
    dependencies=[Depends(get_current_hospital)],
)
def run_low_stock_check(
    low_stock_service: LowStockService = Depends(get_low_stock_service)
):
    summary = low_stock_service.check_low_stock()
    get_metrics_collector().record_sweep(summary.messages_sent, summary.messages_failed)
    return LowStockCheckResponse(**summary.to_dict())
