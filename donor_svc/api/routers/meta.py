"""
Meta router - reference data for forms and filters.

Exposes the blood group registry (core/blood_groups.yaml) and the areas
currently known to the service, so clients never hardcode either list.

No authentication required for read-only metadata access.
"""
import logging
from typing import List

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from repositories import BloodBankRepository, DonorRepository
from core.blood_groups import ALL, ANY_BLOOD_GROUP, get_compatible_donors, list_blood_groups
from core.dependencies import get_blood_bank_repository, get_donor_repository

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/v1/meta",
    tags=["Metadata"],
    # No authentication - these are public read-only endpoints
)


# =============================================================================
# RESPONSE MODELS
# =============================================================================

class BloodGroupResponse(BaseModel):
    name: str
    color: str
    can_donate_to: List[str]
    can_receive_from: List[str]


class BloodGroupsListResponse(BaseModel):
    blood_groups: List[BloodGroupResponse]
    any_value: str  # wildcard accepted by alerts
    all_value: str  # wildcard accepted by directory filters


class AreasResponse(BaseModel):
    areas: List[str]


# =============================================================================
# ENDPOINTS
# =============================================================================

@router.get(
    "/blood-groups",
    response_model=BloodGroupsListResponse,
    summary="List blood groups",
    description="The eight ABO/Rh groups with marker colors and donor/recipient compatibility."
)
async def list_blood_group_definitions() -> BloodGroupsListResponse:
    return BloodGroupsListResponse(
        blood_groups=[
            BloodGroupResponse(
                name=group.name,
                color=group.color,
                can_donate_to=list(group.can_donate_to),
                can_receive_from=list(get_compatible_donors(group.name)),
            )
            for group in list_blood_groups()
        ],
        any_value=ANY_BLOOD_GROUP,
        all_value=ALL,
    )


@router.get(
    "/areas",
    response_model=AreasResponse,
    summary="List known areas",
    description="Distinct areas across registered donors and blood banks, sorted alphabetically."
)
async def list_areas(
    donor_repo: DonorRepository = Depends(get_donor_repository),
    blood_bank_repo: BloodBankRepository = Depends(get_blood_bank_repository)
) -> AreasResponse:
    areas = set(donor_repo.distinct_areas()) | set(blood_bank_repo.distinct_areas())
    return AreasResponse(areas=sorted(areas))
