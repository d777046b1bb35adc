"""Tests for settings configuration utilities."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from kalturabridge.config.settings import (
    KalturaBridgeConfig,
    KalturaConnectionConfig,
    LogLevel,
    find_yaml_config_file,
)


def test_find_yaml_config_file_prefers_data_path(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    """Test that find_yaml_config_file looks in KB_DATA_PATH."""
    monkeypatch.setenv("KB_DATA_PATH", str(tmp_path))
    config_file = tmp_path / "config.yml"
    config_file.write_text("log_level: DEBUG", encoding="utf-8")

    assert find_yaml_config_file() == config_file.resolve()


def test_find_yaml_config_file_defaults_to_config_yaml(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("KB_DATA_PATH", str(tmp_path))

    assert find_yaml_config_file() == tmp_path.resolve() / "config.yaml"


def test_config_loads_yaml_file(config: KalturaBridgeConfig) -> None:
    """Test that the test config.yaml is loaded with defaults filled in."""
    assert config.kaltura.partner_id == 109
    assert config.kaltura.admin_secret.get_secret_value() == "admin-secret"
    assert config.kaltura.service_url == "https://kaltura.example.com"
    assert config.metadata.profile_id == 42
    assert config.metadata.escape_values is True
    assert config.metadata.strict_schema is False
    assert config.publishing.published_category_id == "500"
    assert config.publishing.first_channel_name == "Últimos"
    assert config.log_level == LogLevel.INFO


def test_config_secret_is_not_printed(config: KalturaBridgeConfig) -> None:
    assert "admin-secret" not in str(config)
    assert "admin-secret" not in repr(config)


def test_environment_overrides_yaml(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("KB_LOG_LEVEL", "debug")
    monkeypatch.setenv("KB_METADATA__STRICT_SCHEMA", "true")

    config = KalturaBridgeConfig()

    assert config.log_level == LogLevel.DEBUG
    assert config.metadata.strict_schema is True
    assert config.metadata.profile_id == 42


def test_init_arguments_take_precedence() -> None:
    config = KalturaBridgeConfig(
        kaltura=KalturaConnectionConfig(partner_id=1, admin_secret="s"),
        metadata={"profile_id": 9},
    )

    assert config.kaltura.partner_id == 1
    assert config.kaltura.service_url == "https://www.kaltura.com"
    assert config.metadata.profile_id == 9


@pytest.mark.parametrize("url", ["ftp://kaltura.example.com", "kaltura.example.com"])
def test_service_url_must_be_http(url: str) -> None:
    with pytest.raises(ValidationError):
        KalturaConnectionConfig(partner_id=1, admin_secret="s", service_url=url)


def test_missing_credentials_fail_validation(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("KB_DATA_PATH", str(tmp_path))

    with pytest.raises(ValidationError):
        KalturaBridgeConfig()


def test_empty_admin_secret_is_rejected() -> None:
    with pytest.raises(ValidationError, match="admin_secret must not be empty"):
        KalturaConnectionConfig(partner_id=1, admin_secret="  ")
