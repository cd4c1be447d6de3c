"""
Application configuration using Pydantic settings.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict

from typing import Literal, Optional


class Settings(BaseSettings):
    """Application settings."""

    # App
    app_name: str = "Subbase"
    log_level: str = "INFO"
    default_currency: str = "PLN"

    # Database
    database_url: str = "sqlite:///./data/db.sqlite"

    # AI Provider
    ai_provider: str = "openrouter"  # openrouter, ollama, openai, anthropic
    ai_model: str = "openai/gpt-4o-mini"
    ai_base_url: Optional[str] = None  # For Ollama: http://localhost:11434

    # API Keys (optional based on provider)
    openrouter_api_key: Optional[str] = None
    openai_api_key: Optional[str] = None
    anthropic_api_key: Optional[str] = None

    # AI request policy
    ai_timeout_seconds: float = 30.0
    ai_max_attempts: int = 3
    ai_retry_base_delay: float = 1.0  # seconds, multiplied by the attempt number
    ai_temperature: float = 0.7
    ai_max_tokens: int = 1000
    ai_insights_mode: Literal["structured", "unstructured"] = "structured"
    ai_response_language: str = "Polish"

    # Server
    frontend_url: str = "http://localhost:4321"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False
    )


# Global settings instance
settings = Settings()
