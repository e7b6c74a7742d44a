"""
Configuration management for globalnode
"""

from typing import Literal

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Settings loaded from environment variables."""

    # Codec
    codec: str = "base64"  # 'base64', 'relay', 'fernet', 'uri'
    delimiter: str = ":"
    uri_app: str = "globalnode"

    # Encryption (fernet codec only). The first key encrypts, all keys decrypt.
    encryption_keys: list[str] = []
    token_ttl: int | None = None  # seconds

    # Registry
    duplicate_policy: Literal["error", "replace"] = "error"
    lookup_timeout: float | None = None  # seconds, applied when the caller sets none

    # Logging
    debug: bool = False
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        env_prefix = "GLOBALNODE_"
        case_sensitive = False


# Global settings instance
settings = Settings()
