from pydantic_settings import BaseSettings
from typing import List, Optional


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # API Keys - a provider is enabled only when its key is present
    OPENAI_API_KEY: Optional[str] = ""
    ANTHROPIC_API_KEY: Optional[str] = ""
    GOOGLE_GENERATIVE_AI_API_KEY: Optional[str] = ""
    GEMINI_API_KEY: Optional[str] = ""  # Accepted as a fallback for Google
    PERPLEXITY_API_KEY: Optional[str] = ""

    # Application Settings
    APP_NAME: str = "LLM Brand Visibility Service"
    APP_VERSION: str = "1.0.0"
    DEBUG: bool = False
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: List[str] = ["*"]

    # Model Settings
    CHATGPT_MODEL: str = "gpt-4o-mini"
    CLAUDE_MODEL: str = "claude-3-haiku-20240307"
    GEMINI_MODEL: str = "gemini-1.5-flash"
    PERPLEXITY_MODEL: str = "llama-3.1-sonar-small-128k-online"
    PERPLEXITY_BASE_URL: str = "https://api.perplexity.ai"

    # Restrict the provider registry (empty = every provider with a key)
    # Options: "openai", "anthropic", "google", "perplexity"
    ENABLED_PROVIDERS: List[str] = []

    # Generation Settings (applied uniformly across providers)
    MAX_OUTPUT_TOKENS: int = 1000
    PROVIDER_TIMEOUT: float = 60.0
    TEMPERATURE: float = 0.7

    # Analysis Settings
    PROMPTS_PER_PROVIDER: int = 3  # Bounds cost/latency per request
    MAX_COMPETITORS: int = 10

    # Rate Limiting
    RATE_LIMIT_MAX_REQUESTS: int = 5
    RATE_LIMIT_WINDOW_MINUTES: int = 60
    RATE_LIMIT_BACKEND: str = "memory"  # Options: "memory", "redis"

    # Redis Settings
    REDIS_HOST: str = "localhost"
    REDIS_PORT: int = 6379
    REDIS_DB: int = 0
    REDIS_MAX_CONNECTIONS: int = 10

    class Config:
        env_file = ".env"
        case_sensitive = True

    @property
    def google_api_key(self) -> str:
        """Google key, preferring the AI SDK variable name over GEMINI_API_KEY."""
        return self.GOOGLE_GENERATIVE_AI_API_KEY or self.GEMINI_API_KEY or ""


settings = Settings()
