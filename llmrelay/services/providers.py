"""Provider catalog: connection templates for the external LLM providers."""

import uuid

import structlog

from llmrelay.core.exceptions import (
    ConflictError,
    ModelNotSupportedError,
    NotFoundError,
    ProviderNotFoundError,
    ValidationError,
)
from llmrelay.core.store import PROVIDERS, RecordStore
from llmrelay.schemas.providers import ProviderCreate, ProviderTemplate, ProviderUpdate

logger = structlog.get_logger()


class ProviderCatalog:
    def __init__(self, store: RecordStore):
        self._store = store

    def list_providers(self) -> list[ProviderTemplate]:
        return [ProviderTemplate.model_validate(r) for r in self._store.load(PROVIDERS)]

    def get_provider(self, provider_id: str) -> ProviderTemplate:
        for record in self._store.load(PROVIDERS):
            if record.get("id") == provider_id:
                return ProviderTemplate.model_validate(record)
        raise NotFoundError(f"Provider '{provider_id}' not found.")

    def find_by_name(self, name: str) -> ProviderTemplate | None:
        for record in self._store.load(PROVIDERS):
            if record.get("name") == name:
                return ProviderTemplate.model_validate(record)
        return None

    def resolve(self, provider_name: str, model: str) -> ProviderTemplate:
        """Return the template for ``provider_name`` if it lists ``model``.

        Re-reads the catalog on every call so newly registered providers and
        models are visible immediately.
        """
        provider = self.find_by_name(provider_name)
        if provider is None:
            logger.warning("provider_not_found", provider=provider_name, model=model)
            raise ProviderNotFoundError(provider_name)
        if not provider.supports(model):
            logger.warning("model_not_supported", provider=provider_name, model=model)
            raise ModelNotSupportedError(provider_name, model, supported=provider.models)
        return provider

    def create_provider(self, data: ProviderCreate) -> ProviderTemplate:
        provider = ProviderTemplate(id=str(uuid.uuid4()), **data.model_dump())
        with self._store.transaction(PROVIDERS) as records:
            if any(r.get("name") == data.name for r in records):
                raise ConflictError(f"Provider name '{data.name}' already exists.")
            records.append(provider.to_record())
        logger.info("provider_created", provider_id=provider.id, name=provider.name)
        return provider

    def update_provider(self, provider_id: str, data: ProviderUpdate) -> ProviderTemplate:
        with self._store.transaction(PROVIDERS) as records:
            for index, record in enumerate(records):
                if record.get("id") != provider_id:
                    continue
                current = ProviderTemplate.model_validate(record)
                if data.name is not None and data.name != current.name:
                    raise ValidationError("Provider name cannot be modified.")

                changes = data.model_dump(exclude_none=True, exclude={"name"})
                updated = current.model_copy(update=changes)
                records[index] = updated.to_record()
                break
            else:
                raise NotFoundError(f"Provider '{provider_id}' not found.")

        logger.info("provider_updated", provider_id=provider_id, fields=sorted(changes))
        return updated

    def delete_provider(self, provider_id: str) -> None:
        with self._store.transaction(PROVIDERS) as records:
            remaining = [r for r in records if r.get("id") != provider_id]
            if len(remaining) == len(records):
                raise NotFoundError(f"Provider '{provider_id}' not found.")
            records[:] = remaining
        logger.info("provider_deleted", provider_id=provider_id)
