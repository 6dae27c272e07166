"""Client configuration."""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ..constants import DEFAULT_STORAGE_PATH, RESERVED_SCOPES, Prompt
from ..utils.errors import ConfigurationError


def with_reserved_scopes(scopes: list[str] | None = None) -> list[str]:
    """Prepend the reserved scopes and drop duplicates, keeping order."""
    return list(dict.fromkeys([*RESERVED_SCOPES, *(scopes or [])]))


class LogtoConfig(BaseModel):
    """Immutable client configuration."""

    model_config = ConfigDict(frozen=True)

    endpoint: str = Field(..., description="Logto server URL, e.g. https://logto.dev")
    app_id: str = Field(..., description="Application (client) ID")
    app_secret: str | None = Field(
        default=None, description="Secret of a confidential client, sent as HTTP Basic auth"
    )
    scopes: list[str] = Field(default_factory=with_reserved_scopes)
    resources: list[str] = Field(default_factory=list)
    prompt: str | list[str] = Prompt.CONSENT.value
    using_persist_storage: bool = False

    @field_validator("endpoint")
    @classmethod
    def strip_endpoint(cls, v: str) -> str:
        return v.rstrip("/")

    @field_validator("scopes", mode="before")
    @classmethod
    def normalize_scopes(cls, v: list[str] | None) -> list[str]:
        return with_reserved_scopes(v)

    @field_validator("prompt", mode="before")
    @classmethod
    def default_prompt(cls, v: str | list[str] | None) -> str | list[str]:
        return v or Prompt.CONSENT.value


class LogtoSettings(BaseSettings):
    """Client settings loaded from ``LOGTO_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="LOGTO_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    endpoint: str | None = Field(default=None, description="Logto server URL")
    app_id: str | None = Field(default=None, description="Application (client) ID")
    app_secret: str | None = Field(default=None, description="Client secret (confidential apps)")
    scopes: list[str] = Field(default_factory=list, description="Additional scopes to request")
    resources: list[str] = Field(default_factory=list, description="API resource indicators")
    prompt: str = Field(default=Prompt.CONSENT.value, description="Authorization prompt")

    # Storage
    using_persist_storage: bool = Field(
        default=False, description="Persist tokens to a file instead of memory"
    )
    storage_path: Path = Field(
        default=DEFAULT_STORAGE_PATH,
        description="File used when persistent storage is enabled",
    )
    storage_encryption_key: str | None = Field(
        default=None, description="Fernet key for encrypting the storage file"
    )

    # Transport
    request_timeout: float = Field(default=10.0, description="HTTP timeout in seconds")

    # Logging
    log_level: str = Field(default="INFO", description="Logging level")

    def to_config(self) -> LogtoConfig:
        """Build a ``LogtoConfig`` from these settings.

        Raises:
            ConfigurationError: If endpoint or app id is missing
        """
        if not self.endpoint:
            raise ConfigurationError("LOGTO_ENDPOINT not found in environment")
        if not self.app_id:
            raise ConfigurationError("LOGTO_APP_ID not found in environment")

        return LogtoConfig(
            endpoint=self.endpoint,
            app_id=self.app_id,
            app_secret=self.app_secret,
            scopes=self.scopes,
            resources=self.resources,
            prompt=self.prompt,
            using_persist_storage=self.using_persist_storage,
        )
