"""Shared pytest configuration and fixtures for the test suite."""

import atexit
import os
import shutil
import tempfile
from pathlib import Path

import pytest
import yaml

_TEST_DATA_DIR = Path(tempfile.mkdtemp(prefix="kb-tests-"))
os.environ["KB_DATA_PATH"] = str(_TEST_DATA_DIR)
_TEST_CONFIG_FILE = _TEST_DATA_DIR / "config.yaml"

_TEST_CONFIG_FILE.write_text(
    yaml.safe_dump(
        {
            "kaltura": {
                "partner_id": 109,
                "admin_secret": "admin-secret",
                "user_id": "bridge@example.com",
                "service_url": "https://kaltura.example.com/",
            },
            "metadata": {"profile_id": 42},
            "publishing": {
                "video_channel": "Video",
                "published_category_id": "500",
                "default_access_control_id": 7,
                "category_filter_id": "100",
            },
        },
        sort_keys=False,
        allow_unicode=True,
    ),
    encoding="utf-8",
)

from kalturabridge.config import settings as settings_module  # noqa: E402
from kalturabridge.config.settings import KalturaBridgeConfig  # noqa: E402
from kalturabridge.core.manager import KalturaManager  # noqa: E402
from kalturabridge.core.session import KalturaSession  # noqa: E402
from tests.core.fakes import FakeKalturaClient  # noqa: E402

settings_module.get_config.cache_clear()


@pytest.fixture
def config() -> KalturaBridgeConfig:
    """Configuration loaded from the test config.yaml."""
    settings_module.get_config.cache_clear()
    yield settings_module.get_config()
    settings_module.get_config.cache_clear()


@pytest.fixture
def fake_client() -> FakeKalturaClient:
    """A fresh fake Kaltura client with the default metadata profile."""
    return FakeKalturaClient()


@pytest.fixture
def session(
    config: KalturaBridgeConfig, fake_client: FakeKalturaClient
) -> KalturaSession:
    """A session that hands out the fake client."""
    return KalturaSession(config.kaltura, client_factory=fake_client.factory())


@pytest.fixture
def manager(config: KalturaBridgeConfig, session: KalturaSession) -> KalturaManager:
    """A manager wired to the fake client."""
    return KalturaManager(config, session=session)


@atexit.register
def _cleanup_test_data_dir() -> None:
    """Remove the temporary test data directory after the test session."""
    shutil.rmtree(_TEST_DATA_DIR, ignore_errors=True)
