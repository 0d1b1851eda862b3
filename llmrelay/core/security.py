import bcrypt

from llmrelay.config import settings

KEY_VISIBLE_CHARS = 4


def hash_password(password: str, rounds: int | None = None) -> str:
    """bcrypt hash of a plaintext password."""
    salt = bcrypt.gensalt(rounds=rounds or settings.relay_bcrypt_rounds)
    return bcrypt.hashpw(password.encode(), salt).decode()


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode(), password_hash.encode())
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


def mask_api_key(key: str | None) -> str:
    """Return a display-safe form of a provider API key (last 4 chars only)."""
    if not key:
        return ""
    if len(key) <= KEY_VISIBLE_CHARS * 2:
        return "*" * len(key)
    return f"{'*' * 8}{key[-KEY_VISIBLE_CHARS:]}"
