"""
Configuration management for the FatSecret proxy.
Loads environment variables using Pydantic Settings.
"""

from typing import List, Union
from pydantic import model_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    APP_NAME: str = "FatSecret API Proxy Server"
    APP_VERSION: str = "1.0.0"
    LOG_LEVEL: str = "INFO"

    # Listening address
    HOST: str = "0.0.0.0"
    PORT: int = 3000

    # CORS Configuration
    CORS_ORIGINS: Union[str, List[str]] = ["*"]

    # FatSecret OAuth 2.0 credentials (client-credentials grant)
    FATSECRET_CLIENT_ID: str = ""
    FATSECRET_CLIENT_SECRET: str = ""
    FATSECRET_TOKEN_URL: str = "https://oauth.fatsecret.com/connect/token"
    FATSECRET_TOKEN_SCOPE: str = "premier image-recognition"

    # FatSecret image recognition endpoint
    FATSECRET_RECOGNITION_URL: str = "https://platform.fatsecret.com/rest/image-recognition/v2"

    # Token lifecycle (seconds)
    TOKEN_EXPIRY_MARGIN: int = 60
    DEFAULT_TOKEN_LIFETIME: int = 86400  # used when the server omits expires_in

    # Upstream call / upload limits
    UPSTREAM_TIMEOUT: float = 30.0
    MAX_UPLOAD_BYTES: int = 10 * 1024 * 1024  # 10MB

    # Recognition defaults
    DEFAULT_REGION: str = "US"
    DEFAULT_LANGUAGE: str = "en"

    @model_validator(mode="before")
    @classmethod
    def parse_cors_origins(cls, values):
        """Parse CORS_ORIGINS from comma-separated string to list."""
        if isinstance(values.get("CORS_ORIGINS"), str):
            values["CORS_ORIGINS"] = [
                origin.strip() for origin in values["CORS_ORIGINS"].split(",")
                if origin.strip()
            ]
        return values

    @property
    def has_credentials(self) -> bool:
        return bool(self.FATSECRET_CLIENT_ID and self.FATSECRET_CLIENT_SECRET)

    class Config:
        env_file = ".env"
        case_sensitive = True


# Global settings instance
settings = Settings()
