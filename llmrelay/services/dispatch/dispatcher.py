from typing import Any

import httpx
import structlog

from llmrelay.core.exceptions import (
    ProviderCallFailedError,
    ProviderResponseMalformedError,
    RelayError,
)
from llmrelay.core.security import mask_api_key
from llmrelay.core.store import RecordStore
from llmrelay.services.conversations import ConversationService
from llmrelay.services.credentials import CredentialService
from llmrelay.services.dispatch.shaping import OutboundRequest, build_request, normalize_response
from llmrelay.services.providers import ProviderCatalog

logger = structlog.get_logger()

SECRET_HEADERS = frozenset({"authorization", "x-api-key", "api-key"})
UPSTREAM_BODY_LIMIT = 500


def _redact_headers(headers: dict[str, str]) -> dict[str, str]:
    return {k: mask_api_key(v) if k.lower() in SECRET_HEADERS else v for k, v in headers.items()}


def _upstream_message(response: httpx.Response) -> str | None:
    """Best-effort error text from a failed provider response."""
    try:
        data = response.json()
    except ValueError:
        return response.text[:UPSTREAM_BODY_LIMIT] or None

    if isinstance(data, dict):
        error = data.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if isinstance(error, str):
            return error
        if data.get("message"):
            return str(data["message"])
    return response.text[:UPSTREAM_BODY_LIMIT] or None


class Dispatcher:
    """Sends one chat turn to a provider and records the exchange.

    Lookups happen before the network call, so an unknown provider or model,
    a missing credential or a missing conversation never reaches the
    provider. The user and assistant messages are appended only after a
    reply has been normalized. If the assistant append fails, the user
    message stays.
    """

    def __init__(self, store: RecordStore, http_client: httpx.AsyncClient):
        self._catalog = ProviderCatalog(store)
        self._credentials = CredentialService(store)
        self._conversations = ConversationService(store)
        self._client = http_client

    async def dispatch(
        self,
        conversation_id: str,
        user_input: str,
        provider_name: str,
        model: str,
        user_id: str,
    ) -> str:
        log = logger.bind(
            conversation_id=conversation_id,
            provider=provider_name,
            model=model,
            user_id=user_id,
        )
        log.info("dispatch_started")
        try:
            reply = await self._dispatch(conversation_id, user_input, provider_name, model, user_id)
        except RelayError as e:
            log.warning("dispatch_failed", code=e.code, error=e.message)
            raise
        log.info("dispatch_completed", reply_chars=len(reply))
        return reply

    async def _dispatch(
        self,
        conversation_id: str,
        user_input: str,
        provider_name: str,
        model: str,
        user_id: str,
    ) -> str:
        self._conversations.get_conversation(conversation_id)

        provider = self._catalog.resolve(provider_name, model)
        api_key = self._credentials.resolve_api_key(user_id, provider.id)
        outbound = build_request(provider, model, user_input, api_key)

        body = await self._send(provider.name, outbound)
        reply = normalize_response(provider.name, body)

        self._conversations.add_message(conversation_id, user_input, "user", provider=provider.name, model=model)
        self._conversations.add_message(conversation_id, reply, "assistant", provider=provider.name, model=model)
        return reply

    async def _send(self, provider_name: str, outbound: OutboundRequest) -> Any:
        """Single POST to the provider; no retry."""
        logger.info(
            "provider_request_sent",
            provider=provider_name,
            url=outbound.url,
            headers=_redact_headers(outbound.headers),
        )
        try:
            response = await self._client.post(outbound.url, json=outbound.body, headers=outbound.headers)
        except httpx.TimeoutException:
            raise ProviderCallFailedError(f"{provider_name} request timed out.")
        except httpx.TransportError as e:
            raise ProviderCallFailedError(f"Cannot reach {provider_name} at {outbound.url}: {e}")

        logger.info("provider_response_received", provider=provider_name, status=response.status_code)

        if not response.is_success:
            upstream_message = _upstream_message(response)
            message = f"{provider_name} API returned {response.status_code}"
            if upstream_message:
                message = f"{message}: {upstream_message}"
            raise ProviderCallFailedError(
                message,
                upstream_status=response.status_code,
                upstream_message=upstream_message,
            )

        try:
            return response.json()
        except ValueError:
            raise ProviderResponseMalformedError(
                f"Response from '{provider_name}' is not valid JSON.",
                details={"provider": provider_name},
            )
