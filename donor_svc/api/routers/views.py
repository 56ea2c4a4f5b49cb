"""
Views router - HTML pages.

/map renders the blood bank map with the inventory table below it.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.responses import HTMLResponse

from services import BloodBankService, InventoryService, MapService
from core.dependencies import get_blood_bank_service, get_inventory_service, get_map_service

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Views"])


@router.get(
    "/map",
    response_class=HTMLResponse,
    summary="Blood bank map",
    description="Interactive OpenStreetMap view of blood banks with inventory levels. "
                "Accepts the same area/search filters as GET /api/v1/blood-banks."
)
async def blood_bank_map(
    area: Optional[str] = Query(None, description="Exact area, or 'All'"),
    search: Optional[str] = Query(None, max_length=100),
    blood_bank_service: BloodBankService = Depends(get_blood_bank_service),
    inventory_service: InventoryService = Depends(get_inventory_service),
    map_service: MapService = Depends(get_map_service)
):
    banks = blood_bank_service.list_blood_banks(area=area, search=search)
    bank_names = {bank.name for bank in banks}
    items = [item for item in inventory_service.list_items() if item.blood_bank in bank_names]

    return HTMLResponse(content=map_service.render(banks, items))
