from types import SimpleNamespace

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from llmrelay.config import settings
from llmrelay.core.store import InMemoryStore, JsonFileStore
from llmrelay.schemas.conversations import ConversationCreate
from llmrelay.schemas.credentials import CredentialCreate
from llmrelay.schemas.providers import ProviderCreate
from llmrelay.schemas.users import UserCreate
from llmrelay.services.conversations import ConversationService
from llmrelay.services.credentials import CredentialService
from llmrelay.services.dispatch.dispatcher import Dispatcher
from llmrelay.services.providers import ProviderCatalog
from llmrelay.services.users import UserService
from tests.mocks import fake_providers

FAKE_BASE_URL = "http://fake-llm"
TEST_PASSWORD = "correct-horse-battery"
OPENAI_KEY = "sk-test-openai-0000001234"
ANTHROPIC_KEY = "sk-ant-test-00000005678"


@pytest.fixture(autouse=True)
def fast_bcrypt(monkeypatch):
    """Lowest bcrypt cost so user creation stays fast."""
    monkeypatch.setattr(settings, "relay_bcrypt_rounds", 4)


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def file_store(tmp_path):
    return JsonFileStore(tmp_path / "data")


def openai_template(**overrides) -> ProviderCreate:
    data = {
        "name": "openai",
        "models": ["gpt-4", "gpt-4o", fake_providers.BROKEN_MODEL, fake_providers.MALFORMED_MODEL],
        "url": f"{FAKE_BASE_URL}/v1/chat/completions",
        "request_body": {
            "model": "{{model}}",
            "messages": [{"role": "user", "content": "{{userInput}}"}],
        },
        "headers": {"Content-Type": "application/json", "Authorization": "Bearer {{apiKey}}"},
    }
    data.update(overrides)
    return ProviderCreate(**data)


def anthropic_template(**overrides) -> ProviderCreate:
    data = {
        "name": "anthropic",
        "models": ["claude-3-haiku-20240307", fake_providers.BROKEN_MODEL, fake_providers.MALFORMED_MODEL],
        "message_url": f"{FAKE_BASE_URL}/v1/messages",
        "request_body": {
            "model": "{{model}}",
            "messages": [{"role": "user", "content": "{{userInput}}"}],
        },
        "headers": {"Content-Type": "application/json"},
    }
    data.update(overrides)
    return ProviderCreate(**data)


@pytest.fixture
def relay_world(store):
    """A store with two providers, one user holding keys for both, and one conversation."""
    catalog = ProviderCatalog(store)
    openai = catalog.create_provider(openai_template())
    anthropic = catalog.create_provider(anthropic_template())

    user = UserService(store).create_user(
        UserCreate(username="alice", email="alice@example.com", password=TEST_PASSWORD)
    )
    credentials = CredentialService(store)
    credentials.create_credential(CredentialCreate(user_id=user.id, provider_id=openai.id, api_key=OPENAI_KEY))
    credentials.create_credential(
        CredentialCreate(user_id=user.id, provider_id=anthropic.id, api_key=ANTHROPIC_KEY)
    )

    conversation = ConversationService(store).create_conversation(ConversationCreate(user_id=user.id))
    return SimpleNamespace(
        store=store,
        user_id=user.id,
        conversation_id=conversation.id,
        openai_id=openai.id,
        anthropic_id=anthropic.id,
    )


@pytest_asyncio.fixture
async def fake_provider_client():
    """httpx client whose requests land on the in-process fake provider app."""
    fake_providers.received.clear()
    transport = ASGITransport(app=fake_providers.app)
    async with AsyncClient(transport=transport, base_url=FAKE_BASE_URL) as client:
        yield client
    fake_providers.received.clear()


@pytest.fixture
def dispatcher(relay_world, fake_provider_client):
    return Dispatcher(store=relay_world.store, http_client=fake_provider_client)


@pytest_asyncio.fixture
async def app_client(relay_world, fake_provider_client):
    """Client for the relay app, wired to the seeded store and the fake providers."""
    from llmrelay.main import app

    app.state.store = relay_world.store
    app.state.http_client = fake_provider_client

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
