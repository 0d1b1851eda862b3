from llmrelay.core.security import hash_password, mask_api_key, verify_password


def test_hash_and_verify():
    hashed = hash_password("a-long-enough-password", rounds=4)
    assert hashed != "a-long-enough-password"
    assert verify_password("a-long-enough-password", hashed)
    assert not verify_password("wrong", hashed)


def test_verify_against_non_bcrypt_value():
    assert not verify_password("anything", "plaintext-not-a-hash")


def test_mask_api_key():
    assert mask_api_key("sk-abcdefghijkl1234") == "********1234"
    assert mask_api_key("short") == "*****"
    assert mask_api_key("") == ""
    assert mask_api_key(None) == ""
