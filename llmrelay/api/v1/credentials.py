from fastapi import APIRouter, Depends

from llmrelay.dependencies import get_credential_service
from llmrelay.schemas.credentials import CredentialCreate, CredentialResponse, CredentialUpdate
from llmrelay.services.credentials import CredentialService

router = APIRouter()


@router.get("/user-api-providers")
async def list_credentials(
    service: CredentialService = Depends(get_credential_service),
) -> list[CredentialResponse]:
    return [CredentialResponse.from_credential(c) for c in service.list_credentials()]


@router.post("/user-api-providers", status_code=201)
async def create_credential(
    body: CredentialCreate,
    service: CredentialService = Depends(get_credential_service),
) -> CredentialResponse:
    """Store a user's API key for one provider."""
    return CredentialResponse.from_credential(service.create_credential(body))


@router.get("/user-api-providers/user/{user_id}")
async def list_user_credentials(
    user_id: str,
    service: CredentialService = Depends(get_credential_service),
) -> list[CredentialResponse]:
    return [CredentialResponse.from_credential(c) for c in service.list_for_user(user_id)]


@router.get("/user-api-providers/{credential_id}")
async def get_credential(
    credential_id: str,
    service: CredentialService = Depends(get_credential_service),
) -> CredentialResponse:
    return CredentialResponse.from_credential(service.get_credential(credential_id))


@router.put("/user-api-providers/{credential_id}")
async def update_credential(
    credential_id: str,
    body: CredentialUpdate,
    service: CredentialService = Depends(get_credential_service),
) -> CredentialResponse:
    return CredentialResponse.from_credential(service.update_credential(credential_id, body))


@router.delete("/user-api-providers/{credential_id}", status_code=204)
async def delete_credential(
    credential_id: str,
    service: CredentialService = Depends(get_credential_service),
) -> None:
    service.delete_credential(credential_id)
