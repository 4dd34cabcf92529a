"""Application configuration"""

import logging

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings"""

    model_config = SettingsConfigDict(
        env_prefix="OIDC_PROVIDER__",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Environment
    environment: str = "development"
    port: int = 8004

    # Root URL of the CI server; subject of tokens issued outside a build
    # and base of the root issuer (<root_url>oidc)
    root_url: str = "http://localhost:8004/"

    # Persisted credentials
    credentials_path: str = "/app/data/credentials.json"

    # Encryption at rest
    secret_key: str = "dev-secret-key-change-me"
    legacy_secret_keys: list[str] = []
    kdf_salt: str = "b2lkYy1wcm92aWRlci1kZXYtc2FsdC0wMDAwMDAwMA=="

    # Logging
    log_level: str = "DEBUG"

    # Version
    version: str = "0.1.0"

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Only accept standard logging level names"""
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        level = v.upper()
        if level not in allowed:
            raise ValueError(f"log_level must be one of {sorted(allowed)}")
        return level

    @property
    def root_issuer_url(self) -> str:
        """URL of the root issuer"""
        root = self.root_url if self.root_url.endswith("/") else self.root_url + "/"
        return root + "oidc"

    @property
    def is_production(self) -> bool:
        """Check if running in production"""
        return self.environment.lower() == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development"""
        return self.environment.lower() == "development"


# Create settings instance
settings = Settings()

# Configure logging
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)

logger = logging.getLogger("oidc-provider")
