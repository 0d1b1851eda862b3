"""Per-user provider credentials (``user_api_providers`` collection)."""

import uuid

import structlog

from llmrelay.core.exceptions import ConflictError, CredentialNotFoundError, NotFoundError
from llmrelay.core.store import PROVIDERS, USER_API_PROVIDERS, RecordStore
from llmrelay.schemas.credentials import CredentialCreate, CredentialUpdate, UserCredential

logger = structlog.get_logger()


def _same_pair(record: dict, user_id: str, provider_id: str) -> bool:
    return record.get("userId") == user_id and record.get("providerId") == provider_id


class CredentialService:
    def __init__(self, store: RecordStore):
        self._store = store

    def list_credentials(self) -> list[UserCredential]:
        return [UserCredential.model_validate(r) for r in self._store.load(USER_API_PROVIDERS)]

    def list_for_user(self, user_id: str) -> list[UserCredential]:
        credentials = [
            UserCredential.model_validate(r)
            for r in self._store.load(USER_API_PROVIDERS)
            if r.get("userId") == user_id
        ]
        logger.debug("credentials_listed", user_id=user_id, count=len(credentials))
        return credentials

    def get_credential(self, credential_id: str) -> UserCredential:
        for record in self._store.load(USER_API_PROVIDERS):
            if record.get("id") == credential_id:
                return UserCredential.model_validate(record)
        raise NotFoundError(f"User API provider '{credential_id}' not found.")

    def resolve_api_key(self, user_id: str, provider_id: str) -> str:
        """Return the API key ``user_id`` registered for ``provider_id``."""
        for record in self._store.load(USER_API_PROVIDERS):
            if _same_pair(record, user_id, provider_id):
                return UserCredential.model_validate(record).api_key
        logger.warning("credential_not_found", user_id=user_id, provider_id=provider_id)
        raise CredentialNotFoundError(details={"user_id": user_id, "provider_id": provider_id})

    def _ensure_provider_exists(self, provider_id: str) -> None:
        if not any(r.get("id") == provider_id for r in self._store.load(PROVIDERS)):
            raise NotFoundError(f"Provider '{provider_id}' not found.")

    def create_credential(self, data: CredentialCreate) -> UserCredential:
        self._ensure_provider_exists(data.provider_id)
        credential = UserCredential(id=str(uuid.uuid4()), **data.model_dump())
        with self._store.transaction(USER_API_PROVIDERS) as records:
            if any(_same_pair(r, data.user_id, data.provider_id) for r in records):
                logger.warning("credential_conflict", user_id=data.user_id, provider_id=data.provider_id)
                raise ConflictError("ProviderId already exists for this userId.")
            records.append(credential.to_record())
        logger.info("credential_created", credential_id=credential.id, user_id=credential.user_id)
        return credential

    def update_credential(self, credential_id: str, data: CredentialUpdate) -> UserCredential:
        changes = data.model_dump(exclude_none=True)
        if "provider_id" in changes:
            self._ensure_provider_exists(changes["provider_id"])

        with self._store.transaction(USER_API_PROVIDERS) as records:
            for index, record in enumerate(records):
                if record.get("id") != credential_id:
                    continue
                updated = UserCredential.model_validate(record).model_copy(update=changes)
                clash = any(
                    r.get("id") != credential_id and _same_pair(r, updated.user_id, updated.provider_id)
                    for r in records
                )
                if clash:
                    raise ConflictError("ProviderId already exists for this userId.")
                records[index] = updated.to_record()
                break
            else:
                raise NotFoundError(f"User API provider '{credential_id}' not found.")

        logger.info("credential_updated", credential_id=credential_id)
        return updated

    def delete_credential(self, credential_id: str) -> None:
        with self._store.transaction(USER_API_PROVIDERS) as records:
            remaining = [r for r in records if r.get("id") != credential_id]
            if len(remaining) == len(records):
                raise NotFoundError(f"User API provider '{credential_id}' not found.")
            records[:] = remaining
        logger.info("credential_deleted", credential_id=credential_id)
