"""Request building and response normalization for provider templates.

A provider template holds ``{{token}}`` placeholders in its request body and
headers. ``build_request`` fills them from ``{model, userInput, apiKey}`` and
hands the result to the shaper registered for the provider, which applies the
provider's wire conventions. ``normalize_response`` uses the same shaper to
pull the reply text out of the provider's response body.
"""

import copy
import re
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from llmrelay.core.exceptions import ProviderResponseMalformedError, ProviderTemplateError
from llmrelay.schemas.providers import ProviderTemplate

TOKEN_PATTERN = re.compile(r"\{\{\s*(\w+)\s*\}\}")

ANTHROPIC_VERSION = "2023-06-01"
ANTHROPIC_DEFAULT_MAX_TOKENS = 1000


@dataclass
class OutboundRequest:
    url: str
    headers: dict[str, str]
    body: dict[str, Any]


def render_template(template: Any, values: dict[str, Any]) -> Any:
    """Substitute ``{{token}}`` placeholders throughout a JSON-like structure.

    A string that is exactly one placeholder becomes the value itself; tokens
    embedded in longer strings are replaced with ``str(value)``. Any token
    without a value (missing or None) raises ProviderTemplateError.
    """
    missing: set[str] = set()

    def _lookup(key: str, original: str) -> Any:
        value = values.get(key)
        if value is None:
            missing.add(key)
            return original
        return value

    def _render(node: Any) -> Any:
        if isinstance(node, dict):
            return {key: _render(value) for key, value in node.items()}
        if isinstance(node, list):
            return [_render(item) for item in node]
        if isinstance(node, str):
            whole = TOKEN_PATTERN.fullmatch(node.strip())
            if whole:
                return _lookup(whole.group(1), node)
            return TOKEN_PATTERN.sub(lambda m: str(_lookup(m.group(1), m.group(0))), node)
        return node

    rendered = _render(template)
    if missing:
        raise ProviderTemplateError(
            f"Template placeholders have no value: {', '.join(sorted(missing))}.",
            details={"missing_tokens": sorted(missing)},
        )
    return rendered


def _find_header(headers: dict[str, str], name: str) -> str | None:
    for key in headers:
        if key.lower() == name.lower():
            return key
    return None


def _ensure_json_content_type(headers: dict[str, str]) -> None:
    if _find_header(headers, "content-type") is None:
        headers["Content-Type"] = "application/json"


def _check_header_values(provider_name: str, headers: dict[str, str]) -> None:
    """HTTP header values must be printable ASCII."""
    bad = sorted(
        name for name, value in headers.items() if not all(c == "\t" or " " <= c <= "~" for c in value)
    )
    if bad:
        raise ProviderTemplateError(
            f"Headers for '{provider_name}' contain characters that cannot be sent: {', '.join(bad)}.",
            details={"provider": provider_name, "headers": bad},
        )


# ── Provider shapers ────────────────────────────────────────────────────────


def _shape_chat_completions(request: OutboundRequest, api_key: str) -> None:
    """OpenAI style: string message content, bearer Authorization header."""
    _ensure_json_content_type(request.headers)
    if _find_header(request.headers, "authorization") is None:
        request.headers["Authorization"] = f"Bearer {api_key}"


def _shape_content_blocks(request: OutboundRequest, api_key: str) -> None:
    """Anthropic style: typed content blocks, ``x-api-key`` header."""
    _ensure_json_content_type(request.headers)
    for name in list(request.headers):
        if name.lower() in ("authorization", "x-api-key"):
            del request.headers[name]
    request.headers["x-api-key"] = api_key
    if _find_header(request.headers, "anthropic-version") is None:
        request.headers["anthropic-version"] = ANTHROPIC_VERSION

    request.body.setdefault("max_tokens", ANTHROPIC_DEFAULT_MAX_TOKENS)
    messages = request.body.get("messages")
    if isinstance(messages, list):
        for message in messages:
            if isinstance(message, dict) and isinstance(message.get("content"), str):
                message["content"] = [{"type": "text", "text": message["content"]}]


def _extract_choice_content(body: Any) -> Any:
    return body["choices"][0]["message"]["content"]


def _extract_first_block_text(body: Any) -> Any:
    return body["content"][0]["text"]


@dataclass(frozen=True)
class Shaper:
    shape: Callable[[OutboundRequest, str], None]
    extract_reply: Callable[[Any], Any]


SHAPERS: dict[str, Shaper] = {
    "openai": Shaper(shape=_shape_chat_completions, extract_reply=_extract_choice_content),
    "anthropic": Shaper(shape=_shape_content_blocks, extract_reply=_extract_first_block_text),
}


def get_shaper(provider_name: str) -> Shaper:
    shaper = SHAPERS.get(provider_name)
    if shaper is None:
        raise ProviderResponseMalformedError(
            f"No response shape is known for provider '{provider_name}'.",
            details={"provider": provider_name, "supported_providers": sorted(SHAPERS)},
        )
    return shaper


def build_request(template: ProviderTemplate, model: str, user_input: str, api_key: str) -> OutboundRequest:
    shaper = get_shaper(template.name)
    if not template.endpoint:
        raise ProviderTemplateError(
            f"Provider '{template.name}' has no url or messageUrl.",
            details={"provider": template.name},
        )

    values = {"model": model, "userInput": user_input, "apiKey": api_key}
    body = render_template(copy.deepcopy(template.request_body), values)
    headers = render_template(copy.deepcopy(template.headers), values)

    request = OutboundRequest(
        url=template.endpoint,
        headers={str(key): str(value) for key, value in headers.items()},
        body=body,
    )
    shaper.shape(request, api_key)
    _check_header_values(template.name, request.headers)
    return request


def normalize_response(provider_name: str, body: Any) -> str:
    shaper = get_shaper(provider_name)
    try:
        reply = shaper.extract_reply(body)
    except (KeyError, IndexError, TypeError):
        raise ProviderResponseMalformedError(
            f"Response from '{provider_name}' is missing the reply text.",
            details={"provider": provider_name},
        )
    if not isinstance(reply, str):
        raise ProviderResponseMalformedError(
            f"Reply text from '{provider_name}' is not a string.",
            details={"provider": provider_name},
        )
    return reply
