from __future__ import annotations

from functools import lru_cache

from pydantic import SecretStr, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    database_url: str
    log_level: str = "INFO"
    environment: str = "dev"
    # Associated activations: one push token bound to several activations
    multi_activation_registration_enabled: bool = False
    # PowerAuth activation service
    powerauth_service_url: str = "http://localhost:8080/powerauth-java-server/rest"
    powerauth_client_token: str | None = None
    powerauth_client_secret: SecretStr | None = None
    powerauth_accept_invalid_ssl_certificate: bool = False
    powerauth_timeout_seconds: float = 10.0

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    @field_validator("database_url")
    @classmethod
    def ensure_asyncpg_scheme(cls, value: str) -> str:
        if value.startswith("postgres://"):
            return value.replace("postgres://", "postgresql+asyncpg://", 1)
        if value.startswith("postgresql://") and "+" not in value.split("://", 1)[0]:
            return value.replace("postgresql://", "postgresql+asyncpg://", 1)
        return value

    @field_validator("powerauth_service_url")
    @classmethod
    def strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    def get_powerauth_credentials(self) -> tuple[str, str] | None:
        """Basic auth pair for the activation service, when both parts are configured."""
        if self.powerauth_client_token and self.powerauth_client_secret:
            return (
                self.powerauth_client_token,
                self.powerauth_client_secret.get_secret_value(),
            )
        return None


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
