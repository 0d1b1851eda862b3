from llmrelay.core.exceptions import (
    ConversationNotFoundError,
    CredentialNotFoundError,
    ModelNotSupportedError,
    ProviderCallFailedError,
    ProviderNotFoundError,
    ProviderResponseMalformedError,
    ProviderTemplateError,
    RelayError,
    StoreIOError,
)


def test_relay_error_to_dict():
    err = RelayError(code="test_error", message="Something broke", status=500)
    d = err.to_dict()
    assert d["error"]["code"] == "test_error"
    assert d["error"]["message"] == "Something broke"
    assert d["error"]["status"] == 500
    assert "details" not in d["error"]


def test_relay_error_with_details():
    err = RelayError(code="x", message="y", status=400, details={"hint": "try again"})
    assert err.to_dict()["error"]["details"]["hint"] == "try again"


def test_dispatch_error_codes():
    cases = [
        (ProviderNotFoundError("openai"), "provider_not_found", 404),
        (ModelNotSupportedError("openai", "gpt-9"), "model_not_supported", 400),
        (CredentialNotFoundError(), "credential_not_found", 404),
        (ConversationNotFoundError("c1"), "conversation_not_found", 404),
        (ProviderTemplateError("bad"), "provider_template_invalid", 500),
        (ProviderCallFailedError("down"), "provider_call_failed", 502),
        (ProviderResponseMalformedError(), "provider_response_malformed", 502),
        (StoreIOError(), "store_io_error", 500),
    ]
    for err, code, status in cases:
        assert (err.code, err.status) == (code, status)


def test_provider_call_failed_carries_upstream():
    err = ProviderCallFailedError("openai API returned 429", upstream_status=429, upstream_message="Rate limited")
    assert err.upstream_status == 429
    assert err.to_dict()["error"]["details"] == {"upstream_status": 429, "upstream_message": "Rate limited"}
