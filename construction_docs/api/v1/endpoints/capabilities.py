"""Capabilities of the caller's role, for UIs deciding which controls to show."""

from typing import Annotated

from fastapi import APIRouter, Depends

from construction_docs.api.v1.dependencies import (
    get_capability_policy,
    get_current_user,
)
from construction_docs.application.dtos.user import CurrentUser
from construction_docs.application.services.capability_policy import CapabilityPolicy
from construction_docs.schemas.capability import CapabilitiesResponse

router = APIRouter()


@router.get("/me", response_model=CapabilitiesResponse)
async def get_my_capabilities(
    user: Annotated[CurrentUser, Depends(get_current_user)],
    policy: Annotated[CapabilityPolicy, Depends(get_capability_policy)],
) -> CapabilitiesResponse:
    granted = policy.capabilities_for(user.role)
    return CapabilitiesResponse(
        role=user.role, capabilities=sorted(c.value for c in granted)
    )
