from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Storage
    relay_data_dir: str = "data"

    # Logging
    relay_log_level: str = "info"

    # CORS
    relay_cors_origins: str = "http://localhost:3000"

    # Seed the default provider templates on first boot
    relay_seed_providers: bool = True

    # Outbound provider HTTP timeouts (seconds)
    relay_http_connect_timeout: float = 5.0
    relay_http_read_timeout: float = 120.0

    # Password hashing
    relay_bcrypt_rounds: int = 10

    model_config = {"env_prefix": "", "case_sensitive": False, "env_file": ".env", "env_file_encoding": "utf-8"}


settings = Settings()
