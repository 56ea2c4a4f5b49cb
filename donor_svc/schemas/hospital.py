"""
Pydantic schemas for hospital login and account management.
"""
from pydantic import BaseModel, ConfigDict, Field


class LoginRequest(BaseModel):
    """Hospital credentials.

    Empty values are accepted by the schema and rejected by the service with
    400, so a half-filled login form gets a readable message instead of a 422.
    """
    username: str = Field(default="", max_length=100)
    password: str = Field(default="", max_length=72)


class LoginResponse(BaseModel):
    message: str = Field(..., examples=["Login successful"])
    token: str = Field(..., description="Bearer token for protected endpoints")
    token_type: str = Field(default="bearer")
    expires_in: int = Field(..., description="Token lifetime in seconds", examples=[86400])
    hospital_name: str = Field(..., examples=["General Hospital"])


class HospitalCreate(BaseModel):
    """Schema for creating a hospital account. Usernames must be unique."""
    model_config = ConfigDict(
        str_strip_whitespace=True,
        json_schema_extra={
            "example": {
                "username": "sahyadri",
                "password": "change-me-please",
                "name": "Sahyadri Hospital",
                "area": "Kothrud"
            }
        },
    )

    username: str = Field(..., min_length=3, max_length=100)
    password: str = Field(..., min_length=8, max_length=72)
    name: str = Field(..., min_length=1, max_length=200)
    area: str = Field(..., min_length=1, max_length=100)


class HospitalResponse(BaseModel):
    """Hospital account without its password hash."""
    id: int
    username: str
    name: str
    area: str
    created_at: str
