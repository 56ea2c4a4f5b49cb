"""
Pydantic schemas for blood banks.
"""
from pydantic import BaseModel, ConfigDict, Field


class BloodBankCreate(BaseModel):
    """Schema for adding a blood bank. Names must be unique."""
    model_config = ConfigDict(
        str_strip_whitespace=True,
        json_schema_extra={
            "example": {
                "name": "Ruby Hall Clinic Blood Bank",
                "address": "40, Sassoon Road, Pune, Maharashtra 411001",
                "phone": "+91-20-26122101",
                "lat": 18.5204,
                "lng": 73.8567,
                "area": "Shivajinagar"
            }
        },
    )

    name: str = Field(..., min_length=1, max_length=200)
    address: str = Field(..., min_length=1, max_length=500)
    phone: str = Field(..., min_length=1, max_length=30)
    lat: float = Field(..., ge=-90, le=90)
    lng: float = Field(..., ge=-180, le=180)
    area: str = Field(..., min_length=1, max_length=100)


class BloodBankResponse(BaseModel):
    id: int
    name: str
    address: str
    phone: str
    lat: float
    lng: float
    area: str
