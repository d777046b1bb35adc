"""KalturaBridge Configuration Settings."""

from __future__ import annotations

import os
from enum import StrEnum
from functools import cached_property, lru_cache
from pathlib import Path
from urllib.parse import urlparse

from pydantic import BaseModel, Field, SecretStr, field_validator, model_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    YamlConfigSettingsSource,
)

from kalturabridge import log
from kalturabridge.exceptions import ProfileConfigError

__all__ = [
    "KalturaBridgeConfig",
    "KalturaConnectionConfig",
    "LogLevel",
    "MetadataConfig",
    "PublishingConfig",
    "find_yaml_config_file",
    "get_config",
]


def get_data_path() -> Path:
    """Resolve the data directory from ``KB_DATA_PATH`` (default ``./data``)."""
    return Path(os.getenv("KB_DATA_PATH", "./data")).resolve()


def find_yaml_config_file() -> Path:
    """Find the YAML configuration file in the data path.

    Returns:
        Path: The path to an existing YAML configuration file or the default location.
    """
    data_path = get_data_path()

    for ext in ("yaml", "yml"):
        yaml_file = data_path / f"config.{ext}"
        if yaml_file.exists():
            log.debug(f"Using YAML config file: {yaml_file}")
            return yaml_file
    return data_path / "config.yaml"


class LogLevel(StrEnum):
    """Enumeration of available logging levels.

    Note: SUCCESS is a custom level used by this application.
    """

    DEBUG = "DEBUG"
    INFO = "INFO"
    SUCCESS = "SUCCESS"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"

    @classmethod
    def _missing_(cls, value: object) -> LogLevel | None:
        if isinstance(value, str):
            for member in cls:
                if member.value == value.upper():
                    return member
        return None


class KalturaConnectionConfig(BaseModel):
    """Credentials and endpoint of the Kaltura partner account."""

    partner_id: int = Field(description="Kaltura partner identifier")
    admin_secret: SecretStr = Field(description="Partner administrator secret")
    user_id: str = Field(default="", description="User the session is started for")
    service_url: str = Field(
        default="https://www.kaltura.com", description="Kaltura API service URL"
    )
    session_expiry: int = Field(
        default=86400, gt=0, description="Session (KS) lifetime in seconds"
    )
    privileges: str | None = Field(
        default=None, description="Optional KS privileges string"
    )
    request_timeout: int = Field(
        default=120, gt=0, description="Timeout for a single API request in seconds"
    )

    @field_validator("service_url")
    @classmethod
    def validate_service_url(cls, value: str) -> str:
        """Require an absolute HTTP(S) service URL without a trailing slash."""
        parsed = urlparse(value)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ProfileConfigError(
                f"service_url must be an HTTP(S) URL, got '{value}'"
            )
        return value.rstrip("/")

    @field_validator("admin_secret")
    @classmethod
    def validate_admin_secret(cls, value: SecretStr) -> SecretStr:
        """Reject an empty administrator secret."""
        if not value.get_secret_value().strip():
            raise ProfileConfigError("admin_secret must not be empty")
        return value


class MetadataConfig(BaseModel):
    """Custom metadata profile settings."""

    profile_id: int = Field(description="Custom metadata profile identifier")
    escape_values: bool = Field(
        default=True,
        description="XML-escape metadata values; disable for verbatim interpolation",
    )
    strict_schema: bool = Field(
        default=False,
        description="Raise on an unparseable profile XSD instead of writing no fields",
    )


class PublishingConfig(BaseModel):
    """Categories and defaults used when publishing and updating entries."""

    video_channel: str = Field(
        default="", description="Value written to the VideoChannel metadata field"
    )
    published_category_id: str = Field(
        default="", description="Category id marking an entry as published"
    )
    published_category_name: str = Field(
        default="Publicadas",
        description="Name fragment identifying the published category",
    )
    default_access_control_id: int | None = Field(
        default=None, description="Access control profile used when none is given"
    )
    category_filter_id: str = Field(
        default="", description="Full-id prefix of the channel category tree"
    )
    first_channel_name: str = Field(
        default="Últimos", description="Channel name always listed first"
    )
    download_url_template: str = Field(
        default="http://k.uecdn.es/p/{partner_id}/raw/entry_id/{entry_id}/file_name/name",
        description="Raw download URL, formatted with partner_id and entry_id",
    )


class KalturaBridgeConfig(BaseSettings):
    """KalturaBridge application settings.

    Configuration is sourced from keyword arguments, then ``KB_`` prefixed
    environment variables (``KB_KALTURA__PARTNER_ID``), then the YAML file in
    the data path.
    """

    kaltura: KalturaConnectionConfig = Field(description="Kaltura connection")
    metadata: MetadataConfig = Field(description="Custom metadata profile")
    publishing: PublishingConfig = Field(
        default_factory=PublishingConfig, description="Publishing defaults"
    )
    log_level: LogLevel = Field(
        default=LogLevel.INFO, description="Logging level for the application"
    )

    @cached_property
    def data_path(self) -> Path:
        """Get the data path for KalturaBridge."""
        return get_data_path()

    @model_validator(mode="after")
    def validate_publishing(self) -> KalturaBridgeConfig:
        """Warn about publishing settings that silently disable features."""
        if not self.publishing.published_category_id:
            log.warning(
                "publishing.published_category_id is not set; published entries "
                "will not be assigned a published category"
            )
        return self

    def __str__(self) -> str:
        return (
            f"KalturaBridge Config: partner {self.kaltura.partner_id} at "
            f"{self.kaltura.service_url}, metadata profile "
            f"{self.metadata.profile_id}, LOG_LEVEL: {self.log_level}"
        )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Customize the order of configuration sources."""
        return (
            init_settings,
            env_settings,
            YamlConfigSettingsSource(settings_cls, yaml_file=find_yaml_config_file()),
        )

    model_config = SettingsConfigDict(
        env_prefix="KB_", env_nested_delimiter="__", extra="ignore"
    )


@lru_cache(maxsize=1)
def get_config() -> KalturaBridgeConfig:
    """Get the singleton instance of KalturaBridgeConfig."""
    return KalturaBridgeConfig()
