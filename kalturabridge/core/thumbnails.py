"""Thumbnail Client Module."""

from pathlib import Path
from typing import Any

from KalturaClient.exceptions import KalturaClientException, KalturaException
from KalturaClient.Plugins.Core import KalturaAssetFilter

from kalturabridge import log
from kalturabridge.core.session import KalturaSession
from kalturabridge.exceptions import (
    ImageStorageError,
    SessionInitError,
    ThumbnailError,
)
from kalturabridge.models.thumbnail import Thumbnail, has_default_tag
from kalturabridge.utils.kaltura import defined

__all__ = ["ThumbnailClient"]


class ThumbnailClient:
    """Manages the thumbnail assets of media entries.

    Session and transport failures surface as ``ImageStorageError``; errors
    reported by the Kaltura API surface as ``ThumbnailError``.
    """

    def __init__(self, session: KalturaSession) -> None:
        self.session = session

    def _client(self) -> Any:
        try:
            return self.session.open()
        except SessionInitError as e:
            raise ImageStorageError("Could not connect to the image storage") from e

    def _list_assets(self, entry_id: str) -> Any:
        client = self._client()
        try:
            asset_filter = KalturaAssetFilter()
            asset_filter.entryIdEqual = entry_id
            return client.thumbAsset.list(asset_filter)
        except Exception as e:
            log.error(f"_list_assets - {e}")
            raise ThumbnailError("Error retrieving thumbnail list.") from e

    def get_thumbnail_url(self, thumbnail_id: str) -> str:
        """Get the public URL of a thumbnail asset.

        Raises:
            ImageStorageError: If no session could be started.
            ThumbnailError: If the URL could not be retrieved.
        """
        client = self._client()
        try:
            return client.thumbAsset.getUrl(thumbnail_id)
        except Exception as e:
            log.error(f"get_thumbnail_url - {e}")
            raise ThumbnailError("Error retrieving the kaltura thumbnail URL.") from e

    def get_video_thumbnail_list(self, entry_id: str) -> list[Thumbnail]:
        """List all thumbnails of an entry.

        Raises:
            ThumbnailError: If the entry has no thumbnails or listing failed.
        """
        result = self._list_assets(entry_id)
        assets = list(defined(result.objects, []))
        if not defined(result.totalCount, len(assets)) or not assets:
            log.error(
                f"get_video_thumbnail_list - There are no thumbnails in the video "
                f"$$'{entry_id}'$$"
            )
            raise ThumbnailError("Error retrieving thumbnail list.")

        return [
            Thumbnail.from_asset(
                asset,
                url=self.get_thumbnail_url(asset.id),
                default=has_default_tag(asset.tags),
            )
            for asset in assets
        ]

    def get_default_thumbnail(self, entry_id: str) -> Thumbnail | None:
        """Get the thumbnail tagged as default, if any.

        When several assets carry the default tag the last one listed wins.
        """
        result = self._list_assets(entry_id)
        defaults = [
            asset
            for asset in defined(result.objects, [])
            if has_default_tag(asset.tags)
        ]
        if not defaults:
            return None

        asset = defaults[-1]
        return Thumbnail.from_asset(
            asset, url=self.get_thumbnail_url(asset.id), default=True
        )

    def set_default_thumbnail(self, thumbnail_id: str) -> None:
        """Make a thumbnail the default of its entry.

        Raises:
            ImageStorageError: If the storage could not be reached.
            ThumbnailError: If the API rejected the change.
        """
        client = self._client()
        try:
            client.thumbAsset.setAsDefault(thumbnail_id)
        except KalturaClientException as e:
            log.error(f"set_default_thumbnail - {e}")
            raise ImageStorageError("Could not connect to the image storage") from e
        except KalturaException as e:
            log.error(f"set_default_thumbnail - {e}")
            raise ThumbnailError(
                f"Error setting the thumbnail '{thumbnail_id}' as default."
            ) from e

    def add_thumbnail_to_resource(self, path: str | Path, entry_id: str) -> Thumbnail:
        """Upload an image file as a new thumbnail of an entry.

        Raises:
            ImageStorageError: If the storage could not be reached.
            ThumbnailError: If the API rejected the upload.
        """
        client = self._client()
        try:
            with open(path, "rb") as image:
                asset = client.thumbAsset.addFromImage(entry_id, image)
        except KalturaClientException as e:
            log.error(f"add_thumbnail_to_resource - {e}")
            raise ImageStorageError("Could not connect to the image storage") from e
        except (KalturaException, OSError) as e:
            log.error(f"add_thumbnail_to_resource - {e}")
            raise ThumbnailError("Error uploading a thumbnail.") from e

        log.debug(f"Added thumbnail $$'{asset.id}'$$ to entry $$'{entry_id}'$$")
        return Thumbnail.from_asset(
            asset, url=self.get_thumbnail_url(asset.id), default=False
        )

    def remove_thumbnail(self, thumbnail_id: str) -> None:
        """Delete a thumbnail asset.

        Raises:
            ImageStorageError: If the storage could not be reached.
            ThumbnailError: If the API rejected the deletion.
        """
        client = self._client()
        try:
            client.thumbAsset.delete(thumbnail_id)
        except KalturaClientException as e:
            log.error(f"remove_thumbnail - {e}")
            raise ImageStorageError("Could not connect to the image storage") from e
        except KalturaException as e:
            log.error(f"remove_thumbnail - {e}")
            raise ThumbnailError(
                f"Error removing the thumbnail with id '{thumbnail_id}'."
            ) from e
