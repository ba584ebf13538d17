"""Application configuration."""

from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    app_name: str = "Babel Fish"
    debug: bool = False
    log_level: str = "INFO"

    # Server
    frontend_port: int = 5173

    # CORS - dynamically built based on frontend_port
    cors_origins: list[str] = []

    # LLM endpoint (any OpenAI-compatible chat completion server)
    llm_provider: str = "lmstudio"
    llm_model: str = "openai/gpt-oss-20b"
    llm_api_key: Optional[str] = "lm-studio"
    llm_base_url: Optional[str] = "http://localhost:1234/v1"
    llm_request_timeout: float = 60.0

    # Single-message translation
    translation_max_retries: int = 2
    auto_translate_max_retries: int = 5  # Translation-only path for incoming customer messages
    translation_retry_delay: float = 0.5  # seconds

    # Batch translation
    batch_max_rounds: int = 2
    batch_round_delay: float = 0.5  # seconds
    rate_limit_cooldown: int = 60  # seconds before a rate-limited batch may be retried

    # Authentication (optional - for network-exposed deployments)
    # Set API_AUTH_TOKEN to require a token on every /api/v1 endpoint
    api_auth_token: Optional[str] = None

    # Languages
    agent_language: str = "en"
    default_customer_language: str = "zh"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
    )

    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        # Build CORS origins based on frontend port
        if not self.cors_origins:
            self.cors_origins = [
                f"http://localhost:{self.frontend_port}",
                f"http://127.0.0.1:{self.frontend_port}",
            ]


settings = Settings()
