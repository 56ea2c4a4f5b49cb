"""
Pydantic schemas for emergency alert broadcasts.
"""
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class AlertRequest(BaseModel):
    """Emergency blood request sent to matching donors.

    - area "All" targets every area
    - blood_group "Any" targets every blood group
    - hospital_name defaults to the name of the logged-in hospital
    """
    model_config = ConfigDict(
        str_strip_whitespace=True,
        json_schema_extra={
            "example": {
                "area": "Kothrud",
                "blood_group": "O-",
                "additional_info": "Contact ward 4 reception."
            }
        },
    )

    hospital_name: Optional[str] = Field(None, max_length=200)
    area: str = Field(..., min_length=1, max_length=100)
    blood_group: str = Field(..., min_length=1, max_length=3)
    additional_info: Optional[str] = Field(None, max_length=500)


class AlertResponse(BaseModel):
    """Outcome of a broadcast."""
    message: str = Field(..., examples=["Alert sent to 12 donor(s). 1 failed."])
    successful_sends: int
    failed_sends: int
    removed_donors: int = Field(0, description="Donors deleted because the provider rejected their number")
