"""Built-in provider templates seeded into an empty catalog."""

import structlog

from llmrelay.core.store import RecordStore
from llmrelay.schemas.providers import ProviderCreate
from llmrelay.services.providers import ProviderCatalog

logger = structlog.get_logger()

DEFAULT_PROVIDERS: list[ProviderCreate] = [
    ProviderCreate(
        name="openai",
        models=["gpt-4o", "gpt-4o-mini", "gpt-4-turbo", "gpt-4", "gpt-3.5-turbo"],
        url="https://api.openai.com/v1/chat/completions",
        request_body={
            "model": "{{model}}",
            "messages": [{"role": "user", "content": "{{userInput}}"}],
        },
        headers={
            "Content-Type": "application/json",
            "Authorization": "Bearer {{apiKey}}",
        },
    ),
    ProviderCreate(
        name="anthropic",
        models=[
            "claude-3-5-sonnet-20240620",
            "claude-3-opus-20240229",
            "claude-3-sonnet-20240229",
            "claude-3-haiku-20240307",
        ],
        message_url="https://api.anthropic.com/v1/messages",
        request_body={
            "model": "{{model}}",
            "max_tokens": 1000,
            "messages": [{"role": "user", "content": "{{userInput}}"}],
        },
        headers={
            "Content-Type": "application/json",
            "x-api-key": "{{apiKey}}",
            "anthropic-version": "2023-06-01",
        },
    ),
]


def seed_default_providers(store: RecordStore) -> list[str]:
    """Register every default provider whose name is not yet in the catalog.

    Returns the names that were added.
    """
    catalog = ProviderCatalog(store)
    added = []
    for template in DEFAULT_PROVIDERS:
        if catalog.find_by_name(template.name) is not None:
            continue
        catalog.create_provider(template)
        added.append(template.name)
    if added:
        logger.info("default_providers_seeded", providers=added)
    return added
