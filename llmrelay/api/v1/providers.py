from fastapi import APIRouter, Depends

from llmrelay.dependencies import get_provider_catalog
from llmrelay.schemas.providers import ProviderCreate, ProviderTemplate, ProviderUpdate
from llmrelay.services.providers import ProviderCatalog

router = APIRouter()


@router.get("/providers")
async def list_providers(catalog: ProviderCatalog = Depends(get_provider_catalog)) -> list[ProviderTemplate]:
    return catalog.list_providers()


@router.post("/providers", status_code=201)
async def create_provider(
    body: ProviderCreate,
    catalog: ProviderCatalog = Depends(get_provider_catalog),
) -> ProviderTemplate:
    """Register a provider template. Names are unique."""
    return catalog.create_provider(body)


@router.get("/providers/{provider_id}")
async def get_provider(
    provider_id: str,
    catalog: ProviderCatalog = Depends(get_provider_catalog),
) -> ProviderTemplate:
    return catalog.get_provider(provider_id)


@router.put("/providers/{provider_id}")
async def update_provider(
    provider_id: str,
    body: ProviderUpdate,
    catalog: ProviderCatalog = Depends(get_provider_catalog),
) -> ProviderTemplate:
    """Update models, endpoint, body or headers. The name is fixed."""
    return catalog.update_provider(provider_id, body)


@router.delete("/providers/{provider_id}", status_code=204)
async def delete_provider(
    provider_id: str,
    catalog: ProviderCatalog = Depends(get_provider_catalog),
) -> None:
    catalog.delete_provider(provider_id)
