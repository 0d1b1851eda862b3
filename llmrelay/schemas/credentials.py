from pydantic import Field

from llmrelay.core.security import mask_api_key
from llmrelay.schemas.base import RecordModel

# Keys travel in HTTP headers: printable ASCII, no spaces
API_KEY_PATTERN = r"^[\x21-\x7e]+$"


class UserCredential(RecordModel):
    id: str
    user_id: str
    provider_id: str
    api_key: str


class CredentialCreate(RecordModel):
    user_id: str = Field(min_length=1)
    provider_id: str = Field(min_length=1)
    api_key: str = Field(min_length=1, pattern=API_KEY_PATTERN)


class CredentialUpdate(RecordModel):
    user_id: str | None = Field(default=None, min_length=1)
    provider_id: str | None = Field(default=None, min_length=1)
    api_key: str | None = Field(default=None, min_length=1, pattern=API_KEY_PATTERN)


class CredentialResponse(RecordModel):
    id: str
    user_id: str
    provider_id: str
    api_key: str  # masked

    @classmethod
    def from_credential(cls, credential: UserCredential) -> "CredentialResponse":
        return cls(
            id=credential.id,
            user_id=credential.user_id,
            provider_id=credential.provider_id,
            api_key=mask_api_key(credential.api_key),
        )
