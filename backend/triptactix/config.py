"""
TripTactix Backend Configuration
Environment variables and settings management
"""

from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Server
    debug: bool = False
    host: str = "0.0.0.0"
    port: int = 3001
    log_level: str = "INFO"

    # Database
    database_url: str = "sqlite:///./triptactix.db"

    # CORS
    cors_origins: str = "http://localhost:5173,http://localhost:3000"

    # LLM Configuration (OpenAI-compatible API)
    llm_api_key: Optional[str] = None
    llm_base_url: Optional[str] = None  # None -> api.openai.com
    llm_model: str = "gpt-3.5-turbo"
    llm_temperature: float = 0.7

    # Collaborators used by the onboarding flow.
    # When unset, profiles/trips/advice are produced in-process.
    collaborator_base_url: Optional[str] = None
    collaborator_timeout_seconds: float = 60.0

    # Onboarding pacing
    onboarding_step_delay_seconds: float = 0.5
    onboarding_typing_delay_seconds: float = 1.5
    onboarding_redirect_delay_seconds: float = 2.0
    onboarding_session_ttl_hours: int = 24

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins string into list."""
        return [origin.strip() for origin in self.cors_origins.split(",")]

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
