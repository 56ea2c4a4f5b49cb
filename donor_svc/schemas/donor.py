"""
Pydantic schemas for donor-related API operations.
"""
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class DonorCreate(BaseModel):
    """Schema for registering a new donor.

    Phone numbers must be unique across all donors and match the configured
    pattern (Indian mobile numbers by default).
    """
    model_config = ConfigDict(
        str_strip_whitespace=True,
        json_schema_extra={
            "example": {
                "name": "Asha Patil",
                "area": "Kothrud",
                "phone": "+919322659210",
                "blood_group": "O+"
            }
        },
    )

    name: str = Field(..., min_length=1, max_length=200, description="Donor full name")
    area: str = Field(..., min_length=1, max_length=100, description="Area the donor lives in")
    phone: str = Field(..., min_length=1, max_length=20, description="Phone number in +91XXXXXXXXXX form")
    blood_group: str = Field(..., min_length=1, max_length=3, description="ABO/Rh blood group, e.g. 'A+'")


class DonorResponse(BaseModel):
    """A registered donor as returned by the directory."""
    model_config = ConfigDict(from_attributes=True)

    id: int = Field(..., description="Unique donor identifier", examples=[1])
    name: str = Field(..., examples=["Asha Patil"])
    area: str = Field(..., examples=["Kothrud"])
    phone: str = Field(..., examples=["+919322659210"])
    masked_phone: str = Field(..., description="Phone number safe for public display", examples=["+91******9210"])
    blood_group: str = Field(..., examples=["O+"])
    created_at: str = Field(..., description="ISO 8601 UTC registration time", examples=["2025-01-01T10:00:00Z"])


class DonorRegistrationResponse(BaseModel):
    message: str = Field(..., examples=["Donor registered successfully"])
    donor: DonorResponse


class DonorStatsResponse(BaseModel):
    """Summary numbers shown above the donor directory."""
    total_donors: int = Field(..., examples=[42])
    total_areas: int = Field(..., description="Number of distinct areas", examples=[3])
    most_common_blood_group: Optional[str] = Field(None, description="None when there are no donors", examples=["O+"])


class MessageResponse(BaseModel):
    """Plain acknowledgement."""
    message: str
