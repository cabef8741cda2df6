from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import model_validator
from typing import Optional


class Settings(BaseSettings):
    """
    Main configuration for the LTI trust service.
    Uses Pydantic-Settings for environment variable parsing from .env.
    """
    APP_NAME: str = "LTI Trust"
    VERSION: str = "0.1.0"
    DEBUG: bool = False
    ENVIRONMENT: str = "development"  # local, development, staging, production
    TESTING: bool = False

    # Key material
    KEY_SOURCE: str = "key_vault"  # Options: key_vault, static
    TOOL_KEY_IDENTIFIER: Optional[str] = None  # https://<vault>.vault.azure.net/keys/<name>/<version>
    PLATFORM_KEY_IDENTIFIER: Optional[str] = None
    STATIC_KEY_PEM_PATHS: dict[str, str] = {}  # identifier -> PEM file, KEY_SOURCE=static only

    # Key Vault transport retries (owned by the adapter, not the exporter)
    KEY_VAULT_RETRY_ATTEMPTS: int = 3

    # Security
    CORS_ORIGINS: list[str] = []

    @model_validator(mode='after')
    def validate_key_config(self) -> 'Settings':
        """Ensure the key source is usable outside of tests."""
        if self.TESTING:
            return self

        if self.KEY_SOURCE not in ("key_vault", "static"):
            raise ValueError(f"KEY_SOURCE must be 'key_vault' or 'static'. Current: {self.KEY_SOURCE}")

        if self.is_production and self.KEY_SOURCE == "key_vault":
            if not self.TOOL_KEY_IDENTIFIER:
                raise ValueError("TOOL_KEY_IDENTIFIER is required in production.")
            if not self.TOOL_KEY_IDENTIFIER.startswith("https://"):
                raise ValueError("TOOL_KEY_IDENTIFIER must be an https:// Key Vault key URL in production.")

        if self.is_production and self.KEY_SOURCE == "static":
            import structlog
            structlog.get_logger().warning(
                "static_key_source_in_production",
                msg="KEY_SOURCE=static reads keys from local PEM files"
            )

        return self

    model_config = SettingsConfigDict(
        env_file=".env",
        env_ignore_empty=True
    )

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"


@lru_cache
def get_settings():
    """Returns a singleton instance of the application settings."""
    return Settings()
