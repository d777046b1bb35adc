"""Tests for the thumbnail client."""

from pathlib import Path

import pytest
from KalturaClient.exceptions import KalturaClientException, KalturaException

from kalturabridge.core.manager import KalturaManager
from kalturabridge.exceptions import ImageStorageError, ThumbnailError
from kalturabridge.models.thumbnail import has_default_tag
from tests.core.fakes import FakeKalturaClient, thumb_asset


@pytest.fixture
def thumbnails(fake_client: FakeKalturaClient) -> FakeKalturaClient:
    fake_client.thumbAsset.assets = [
        thumb_asset("thumb-1", "0_a", tags=""),
        thumb_asset("thumb-2", "0_a", tags="landscape, default_thumb"),
        thumb_asset("thumb-3", "0_b", tags="default_thumb"),
    ]
    return fake_client


@pytest.mark.parametrize(
    ("tags", "expected"),
    [
        ("default_thumb", True),
        ("a,default_thumb,b", True),
        ("not_default_thumb", False),
        ("", False),
        (None, False),
        (NotImplemented, False),
    ],
)
def test_has_default_tag(tags, expected: bool) -> None:
    assert has_default_tag(tags) is expected


def test_get_video_thumbnail_list(
    manager: KalturaManager, thumbnails: FakeKalturaClient
) -> None:
    result = manager.get_video_thumbnail_list("0_a")

    assert [(t.id, t.default) for t in result] == [
        ("thumb-1", False),
        ("thumb-2", True),
    ]
    second = result[1]
    assert second.tags == ["landscape", "default_thumb"]
    assert second.url == "https://cdn.example/thumbnail/thumb-2.jpg"
    assert second.width == 640
    assert second.description is None


def test_get_video_thumbnail_list_requires_thumbnails(
    manager: KalturaManager, thumbnails: FakeKalturaClient
) -> None:
    with pytest.raises(ThumbnailError):
        manager.get_video_thumbnail_list("0_empty")


def test_get_default_thumbnail(
    manager: KalturaManager, thumbnails: FakeKalturaClient
) -> None:
    thumbnail = manager.get_default_thumbnail("0_a")

    assert thumbnail is not None
    assert thumbnail.id == "thumb-2"
    assert thumbnail.default is True


def test_get_default_thumbnail_none_tagged(
    manager: KalturaManager, fake_client: FakeKalturaClient
) -> None:
    fake_client.thumbAsset.assets = [thumb_asset("thumb-1", "0_a")]

    assert manager.get_default_thumbnail("0_a") is None


def test_listing_failure_raises_thumbnail_error(
    manager: KalturaManager, fake_client: FakeKalturaClient
) -> None:
    fake_client.failures.set("thumbAsset.list", RuntimeError("boom"))

    with pytest.raises(ThumbnailError):
        manager.get_default_thumbnail("0_a")


def test_session_failure_raises_image_storage_error(
    manager: KalturaManager, fake_client: FakeKalturaClient
) -> None:
    fake_client.failures.set("session.start", RuntimeError("bad secret"))

    with pytest.raises(ImageStorageError):
        manager.thumbnails.get_thumbnail_url("thumb-1")


def test_add_thumbnail_to_resource(
    manager: KalturaManager, fake_client: FakeKalturaClient, tmp_path: Path
) -> None:
    image = tmp_path / "thumb.jpg"
    image.write_bytes(b"\xff\xd8\xff")

    thumbnail = manager.thumbnails.add_thumbnail_to_resource(image, "0_a")

    assert fake_client.thumbAsset.calls == [
        ("addFromImage", ("0_a", b"\xff\xd8\xff"))
    ]
    assert thumbnail.id == "thumb-new"
    assert thumbnail.default is False
    assert thumbnail.url == "https://cdn.example/thumbnail/thumb-new.jpg"


@pytest.mark.parametrize(
    ("operation", "call"),
    [
        ("set_default_thumbnail", "thumbAsset.setAsDefault"),
        ("remove_thumbnail", "thumbAsset.delete"),
    ],
)
@pytest.mark.parametrize(
    ("exc", "expected"),
    [
        (KalturaException("Asset not found", "THUMB_ASSET_ID_NOT_FOUND"), ThumbnailError),
        (KalturaClientException("Connection refused", -1), ImageStorageError),
    ],
)
def test_thumbnail_mutations_map_sdk_errors(
    manager: KalturaManager,
    fake_client: FakeKalturaClient,
    operation: str,
    call: str,
    exc: Exception,
    expected: type[Exception],
) -> None:
    fake_client.failures.set(call, exc)

    with pytest.raises(expected):
        getattr(manager.thumbnails, operation)("thumb-1")


def test_set_default_and_remove_thumbnail(
    manager: KalturaManager, fake_client: FakeKalturaClient
) -> None:
    manager.thumbnails.set_default_thumbnail("thumb-1")
    manager.thumbnails.remove_thumbnail("thumb-2")

    assert fake_client.thumbAsset.calls == [
        ("setAsDefault", "thumb-1"),
        ("delete", "thumb-2"),
    ]
