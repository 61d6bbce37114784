from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from pydantic import BaseModel, Field

from config import ApplicationConfig
from invite_service.api.error import raise_for_error
from invite_service.app.services.account_store import IAccountStore
from invite_service.app.services.capability_token import ICapabilityTokenSigner
from invite_service.app.services.unit_of_work import UnitOfWork
from invite_service.app.use_cases.invitations import (
    CompleteInvitationResponse,
    CompleteInvitationUseCase,
    HandoverInvitationUseCase,
    HandoverResponse,
)
from invite_service.depends import (
    get_account_store,
    get_capability_signer,
    get_unit_of_work,
)

router = APIRouter(prefix="/invitations", tags=["Invitations"])

HANDOVER_ERRORS = {"INVITE_INVALID": status.HTTP_400_BAD_REQUEST}

COMPLETION_ERRORS = {
    code: status.HTTP_400_BAD_REQUEST
    for code in (
        "VALIDATION_ERROR",
        "INVITE_EXPIRED_OR_INVALID",
        "CREDENTIAL_MISMATCH",
        "PROVISIONING_ERROR",
        "LINK_ERROR",
        "SESSION_ERROR",
    )
}


@router.get(
    "/redeem",
    status_code=status.HTTP_200_OK,
    response_model=HandoverResponse,
)
async def handover_invitation(
    token: Optional[str] = Query(None, description="Raw invitation token from the email link"),
    uow: UnitOfWork = Depends(get_unit_of_work),
    signer: ICapabilityTokenSigner = Depends(get_capability_signer),
):
    """
    Handover - open an invite link

    Burns the invitation and returns a one-hour capability token together
    with the invited email for pre-filling the registration form.

    Raises:
        - 400 Bad Request: INVITE_INVALID (unknown, already used, or raced)
        - 500 Internal Server Error: Server error
    """
    use_case = HandoverInvitationUseCase(uow, signer)
    result = await use_case.execute(token)

    # Handle errors
    if result.is_err():
        raise_for_error(result.error, HANDOVER_ERRORS)

    return result.value


class CompleteInvitationRequest(BaseModel):
    """
    Completion HTTP request payload

    Fields are optional here so that missing values are reported as
    VALIDATION_ERROR by the use case.
    """

    capability_token: Optional[str] = Field(None, description="Token from the handover phase")
    password: Optional[str] = Field(None, description="Account password (min 6 characters)")
    full_name: Optional[str] = Field(None, max_length=255, description="Display name")


@router.post(
    "/redeem",
    status_code=status.HTTP_200_OK,
    response_model=CompleteInvitationResponse,
)
async def complete_invitation(
    request: CompleteInvitationRequest,
    uow: UnitOfWork = Depends(get_unit_of_work),
    signer: ICapabilityTokenSigner = Depends(get_capability_signer),
    account_store: IAccountStore = Depends(get_account_store),
):
    """
    Completion - submit the registration form

    Verifies the capability token, creates or authenticates the account,
    links it to the tenant and returns a session.

    Raises:
        - 400 Bad Request: VALIDATION_ERROR, INVITE_EXPIRED_OR_INVALID,
                           CREDENTIAL_MISMATCH, PROVISIONING_ERROR,
                           LINK_ERROR, SESSION_ERROR
        - 500 Internal Server Error: Server error
    """
    use_case = CompleteInvitationUseCase(
        uow,
        signer,
        account_store,
        min_password_length=ApplicationConfig.MIN_PASSWORD_LENGTH,
    )
    result = await use_case.execute(
        request.capability_token, request.password, request.full_name
    )

    # Handle errors
    if result.is_err():
        raise_for_error(result.error, COMPLETION_ERRORS)

    return result.value
