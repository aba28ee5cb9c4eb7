"""Application configuration using Pydantic Settings."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Application
    app_name: str = "searchwise"
    debug: bool = False
    log_level: str = "INFO"

    # Search provider (SerpAPI)
    serp_api_key: str = ""
    serp_api_url: str = "https://serpapi.com/search.json"
    serp_engine: str = "google"
    serp_location: str = "United States"
    search_timeout_seconds: float = 30.0

    # LLM Configuration
    llm_provider: str = "openai"  # Options: "openai", "gemini"

    # OpenAI Configuration
    openai_api_key: str = ""
    openai_model: str = "gpt-4o-mini"

    # Gemini Configuration (comma-separated keys are rotated on rate limits)
    gemini_api_key: str = ""
    gemini_model: str = "gemini-2.0-flash"

    # Sub-query planner
    planner_max_attempts: int = 5
    planner_retry_delay_seconds: float = 1.0
    planner_requery_on_retry: bool = False

    # Answer orchestrator
    history_window: int = 3
    agent_results_per_subquery: int = 2
    single_shot_results: int = 3
    agent_gateway_transport: str = "http"  # Options: "http", "local"
    gateway_timeout_seconds: float = 120.0
    default_forwarded_proto: str = "http"
    default_host: str = "localhost:3000"

    @property
    def gemini_api_keys(self) -> list[str]:
        """Parse comma-separated Gemini keys into list."""
        if not self.gemini_api_key:
            return []
        return [k.strip() for k in self.gemini_api_key.split(",") if k.strip()]


settings = Settings()