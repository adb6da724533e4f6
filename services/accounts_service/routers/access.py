"""Access check endpoint used by the frontend route guard."""

from fastapi import APIRouter, Depends, Query
from libs.auth.access import Identity, check_resource_access
from libs.common.config import get_settings
from services.accounts_service.routers._helpers import get_caller_identity
from services.accounts_service.schemas import AccessCheckResponse

router = APIRouter(prefix="/access", tags=["access"])


@router.get("/check", response_model=AccessCheckResponse)
async def check(
    resource: str = Query(..., min_length=1, description="Path being opened"),
    identity: Identity = Depends(get_caller_identity),
):
    """
    Report whether the caller may open ``resource``.
    Denied callers get the location the frontend should send them to.
    """
    settings = get_settings()
    decision = check_resource_access(identity, resource)

    redirect_to = None
    if decision.denied:
        redirect_to = (
            settings.ACCESS_DENIED_REDIRECT
            if decision.authenticated
            else settings.LOGIN_REDIRECT
        )

    return AccessCheckResponse(
        resource=resource,
        outcome=decision.outcome.value,
        allowed=decision.allowed,
        required_roles=list(decision.required_roles),
        actual_role=decision.actual_role,
        message=decision.message,
        redirect_to=redirect_to,
    )
