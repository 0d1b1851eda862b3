from typing import Any

from pydantic import Field

from llmrelay.schemas.base import RecordModel


class ProviderTemplate(RecordModel):
    id: str
    name: str
    models: list[str]
    url: str | None = None
    message_url: str | None = None
    request_body: dict[str, Any] = Field(default_factory=dict)
    headers: dict[str, Any] = Field(default_factory=dict)

    @property
    def endpoint(self) -> str | None:
        return self.url or self.message_url

    def supports(self, model: str) -> bool:
        return model in self.models


class ProviderCreate(RecordModel):
    name: str = Field(min_length=1)
    models: list[str] = Field(min_length=1, description="At least one model identifier")
    url: str | None = None
    message_url: str | None = None
    request_body: dict[str, Any] = Field(default_factory=dict)
    headers: dict[str, Any] = Field(default_factory=dict)


class ProviderUpdate(RecordModel):
    name: str | None = Field(default=None, description="Must match the existing name; renaming is not allowed")
    models: list[str] | None = Field(default=None, min_length=1)
    url: str | None = None
    message_url: str | None = None
    request_body: dict[str, Any] | None = None
    headers: dict[str, Any] | None = None
