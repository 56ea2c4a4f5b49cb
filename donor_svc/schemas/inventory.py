"""
Pydantic schemas for blood inventory.
"""
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

StockStatus = Literal["ok", "low", "critical"]


class InventoryUpsert(BaseModel):
    """Create or update the stock of one blood group at one blood bank."""
    model_config = ConfigDict(
        str_strip_whitespace=True,
        json_schema_extra={
            "example": {
                "blood_bank": "Ruby Hall Clinic Blood Bank",
                "blood_group": "B+",
                "units": 8,
                "min_level": 10
            }
        },
    )

    blood_bank: str = Field(..., min_length=1, max_length=200, description="Name of an existing blood bank")
    blood_group: str = Field(..., min_length=1, max_length=3)
    units: int = Field(..., ge=0, description="Units currently in stock")
    min_level: int = Field(..., ge=0, description="Minimum units before the item counts as low stock")


class InventoryItemResponse(BaseModel):
    id: int
    blood_bank: str
    area: str
    blood_group: str
    units: int
    min_level: int
    updated_at: str
    stock_status: StockStatus = Field(..., description="critical when empty and below minimum, low when below minimum")


class InventoryUpdateResponse(BaseModel):
    message: str = Field(..., examples=["Inventory updated successfully"])
    created: bool = Field(..., description="False when an existing item was updated")
    item: InventoryItemResponse


class InventoryStatsResponse(BaseModel):
    total_units: int
    low_stock_count: int
    areas: int = Field(..., description="Number of distinct areas holding inventory")


class LowStockCheckResponse(BaseModel):
    """Summary of one low-stock sweep."""
    items_checked: int
    items_alerted: int
    messages_sent: int
    messages_failed: int
