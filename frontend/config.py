"""
Client Configuration
Environment-based settings for the gateway URL and the query cache
"""

from typing import Optional
from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ClientSettings(BaseSettings):
    """Settings of the client core"""

    server_url: str = Field(
        "http://localhost:3000",
        validation_alias=AliasChoices("VITE_SERVER_URL", "SERVER_URL", "server_url")
    )
    request_timeout: float = 30.0

    # Query cache
    stale_time: float = 5 * 60
    query_retry: int = 1

    # Creation workflow
    text_search_limit: int = 50
    text_picker_page_size: int = 100

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )

    @field_validator("server_url")
    @classmethod
    def validate_server_url(cls, v):
        return v.strip().rstrip("/")

    @field_validator("query_retry")
    @classmethod
    def validate_query_retry(cls, v):
        if v < 0:
            raise ValueError("query_retry cannot be negative")
        return v


_client_settings: Optional[ClientSettings] = None


def get_client_settings() -> ClientSettings:
    """Get client settings instance"""
    global _client_settings
    if _client_settings is None:
        _client_settings = ClientSettings()
    return _client_settings
