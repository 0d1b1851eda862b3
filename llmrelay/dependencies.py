import httpx
from fastapi import Depends, Request

from llmrelay.core.store import RecordStore
from llmrelay.services.conversations import ConversationService
from llmrelay.services.credentials import CredentialService
from llmrelay.services.dispatch.dispatcher import Dispatcher
from llmrelay.services.providers import ProviderCatalog
from llmrelay.services.users import UserService


def get_store(request: Request) -> RecordStore:
    """Return the record store stored on app state during lifespan."""
    return request.app.state.store


def get_http_client(request: Request) -> httpx.AsyncClient:
    """Return the shared outbound HTTP client."""
    return request.app.state.http_client


def get_dispatcher(
    store: RecordStore = Depends(get_store),
    http_client: httpx.AsyncClient = Depends(get_http_client),
) -> Dispatcher:
    return Dispatcher(store=store, http_client=http_client)


def get_provider_catalog(store: RecordStore = Depends(get_store)) -> ProviderCatalog:
    return ProviderCatalog(store)


def get_credential_service(store: RecordStore = Depends(get_store)) -> CredentialService:
    return CredentialService(store)


def get_conversation_service(store: RecordStore = Depends(get_store)) -> ConversationService:
    return ConversationService(store)


def get_user_service(store: RecordStore = Depends(get_store)) -> UserService:
    return UserService(store)
