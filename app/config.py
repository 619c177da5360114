"""
Gateway Configuration
Environment-based settings for the upstream OpenPecha API and the HTTP service
"""

from typing import List
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
import logging

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    # Service info
    service_name: str = "pecha-gateway"
    service_version: str = "1.0.0"
    environment: str = "development"
    port: int = 3000

    # Upstream OpenPecha API
    openpecha_endpoint: str = "http://localhost:8000"

    # Upstream HTTP client
    upstream_connect_timeout: float = 5.0
    upstream_read_timeout: float = 30.0
    upstream_write_timeout: float = 10.0
    upstream_pool_timeout: float = 10.0
    upstream_max_connections: int = 100
    upstream_max_keepalive: int = 20

    # List defaults
    default_text_limit: int = 30
    default_person_limit: int = 10

    # Logging
    log_level: str = "INFO"
    log_format: str = "default"

    # CORS
    cors_allowed_origins: str = "*"

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )

    @field_validator("openpecha_endpoint")
    @classmethod
    def validate_openpecha_endpoint(cls, v):
        v = v.strip().rstrip("/")
        if not v.startswith(("http://", "https://")):
            raise ValueError("OPENPECHA_ENDPOINT must be an http(s) URL")
        return v

    @field_validator("port")
    @classmethod
    def validate_port(cls, v):
        if not 1 <= v <= 65535:
            raise ValueError("PORT must be between 1 and 65535")
        return v

    @property
    def cors_origin_list(self) -> List[str]:
        return [o.strip() for o in self.cors_allowed_origins.split(",") if o.strip()]

    def log_config(self):
        """Log configuration"""
        logger.info(f"Upstream OpenPecha API: {self.openpecha_endpoint}")
        logger.info(
            f"Upstream timeouts: connect={self.upstream_connect_timeout}s, "
            f"read={self.upstream_read_timeout}s, pool={self.upstream_pool_timeout}s"
        )
        logger.info(f"CORS origins: {', '.join(self.cors_origin_list)}")
        logger.info(f"Environment: {self.environment}, port: {self.port}")


settings = Settings()
