from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, EmailStr, Field

from config import ApplicationConfig
from invite_service.api.error import ClientError, raise_for_error
from invite_service.app.services.unit_of_work import UnitOfWork
from invite_service.app.use_cases.invitations import (
    CreateInvitationResponse,
    CreateInvitationUseCase,
)
from invite_service.depends import get_current_user, get_unit_of_work
from invite_service.libs.result import Error

router = APIRouter(prefix="/tenants", tags=["Tenant"])

CREATE_INVITATION_ERRORS = {
    "INVALID_ROLE": status.HTTP_400_BAD_REQUEST,
    "NOT_A_MEMBER": status.HTTP_403_FORBIDDEN,
    "INSUFFICIENT_ROLE": status.HTTP_403_FORBIDDEN,
    "TENANT_SUSPENDED": status.HTTP_403_FORBIDDEN,
    "TENANT_NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "ALREADY_MEMBER": status.HTTP_409_CONFLICT,
    "INVITE_ALREADY_EXISTS": status.HTTP_409_CONFLICT,
}


class CreateInvitationRequest(BaseModel):
    """
    Create invitation HTTP request payload

    Validates incoming request for inviting a staff member to a tenant.
    """

    email: EmailStr = Field(..., description="Email address to invite")
    role: Optional[str] = Field(None, max_length=50, description="Legacy role name (defaults to staff)")
    role_id: Optional[UUID] = Field(None, description="Structured role defined by the tenant")


@router.post(
    "/{tenant_id}/invitations",
    status_code=status.HTTP_201_CREATED,
    response_model=CreateInvitationResponse,
)
async def create_invitation(
    tenant_id: str,
    request: CreateInvitationRequest,
    current_user: dict = Depends(get_current_user),
    uow: UnitOfWork = Depends(get_unit_of_work),
):
    """
    Create Invitation

    Creates a single-use invitation and returns its redemption URL.
    Only owners and admins of the tenant can invite.

    Raises:
        - 400 Bad Request: INVALID_TENANT_ID, INVALID_ROLE
        - 401 Unauthorized: Invalid or expired JWT
        - 403 Forbidden: NOT_A_MEMBER, INSUFFICIENT_ROLE, TENANT_SUSPENDED
        - 404 Not Found: TENANT_NOT_FOUND
        - 409 Conflict: ALREADY_MEMBER, INVITE_ALREADY_EXISTS
        - 500 Internal Server Error: Server error
    """
    user_id = UUID(current_user["user_id"])

    # Parse tenant ID
    try:
        tenant_uuid = UUID(tenant_id)
    except ValueError:
        raise ClientError(
            Error("INVALID_TENANT_ID", "Invalid tenant ID format"),
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    # Execute use case
    use_case = CreateInvitationUseCase(uow, app_url=ApplicationConfig.APP_URL)
    result = await use_case.execute(
        user_id, tenant_uuid, request.email, request.role, request.role_id
    )

    # Handle errors
    if result.is_err():
        raise_for_error(result.error, CREATE_INVITATION_ERRORS)

    # Return successful response
    return result.value
