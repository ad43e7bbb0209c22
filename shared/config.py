"""
Shared configuration management for the 254Carbon Token Service.
"""

from typing import List, Optional, Union

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class BaseConfig(BaseSettings):
    """Base configuration class with common settings."""

    model_config = SettingsConfigDict(
        env_prefix="TOKENS_",
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )

    # Environment
    env: str = Field(default="local")
    log_level: str = Field(default="info")


class TokenServiceConfig(BaseConfig):
    """Token issuing/verification settings."""

    service_name: str
    port: int
    host: str = "0.0.0.0"

    # Signing
    signing_secret: Optional[SecretStr] = Field(default=None)
    signing_algorithm: str = Field(default="HS256")
    allowed_algorithms: List[str] = Field(default_factory=lambda: ["HS256"])
    expires_in: Union[int, str] = Field(default="15m")

    # Claims policy
    issuer: Optional[str] = Field(default=None)
    audience: Optional[str] = Field(default=None)
    clock_tolerance: int = Field(default=0, ge=0)


def get_config(service_name: str, port: int) -> TokenServiceConfig:
    """Get configuration for a specific service."""
    return TokenServiceConfig(service_name=service_name, port=port)
