"""Kaltura Manager Module."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from KalturaClient.Plugins.Core import KalturaMediaEntry

from kalturabridge.config.settings import KalturaBridgeConfig
from kalturabridge.core.channels import ChannelClient
from kalturabridge.core.media import MediaClient
from kalturabridge.core.metadata import MetadataSchemaSync
from kalturabridge.core.session import KalturaSession
from kalturabridge.core.thumbnails import ThumbnailClient
from kalturabridge.models.entry import EntryUpdate, PublishedVideo, VideoData
from kalturabridge.models.thumbnail import Thumbnail

__all__ = ["KalturaManager"]


class KalturaManager:
    """Video and image storage backed by a Kaltura partner account.

    Wires one ``KalturaSession`` into the metadata, media, channel and
    thumbnail clients and exposes their operations in one place.

    Attributes:
        config: Application configuration.
        session: The shared Kaltura session.
        metadata: Custom metadata client.
        channels: Channel listing client.
        media: Media entry client.
        thumbnails: Thumbnail asset client.
    """

    def __init__(
        self, config: KalturaBridgeConfig, session: KalturaSession | None = None
    ) -> None:
        self.config = config
        self.session = session or KalturaSession(config.kaltura)

        self.metadata = MetadataSchemaSync(self.session, config.metadata)
        self.channels = ChannelClient(self.session, config.publishing)
        self.media = MediaClient(
            self.session, config.publishing, self.metadata, self.channels
        )
        self.thumbnails = ThumbnailClient(self.session)

    def close(self) -> None:
        """Drop the Kaltura session."""
        self.session.close()

    def __enter__(self) -> KalturaManager:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()

    def publish(self, path: str | Path) -> PublishedVideo:
        return self.media.publish(path)

    def upload_file(self, entry: KalturaMediaEntry, path: str | Path) -> Any:
        return self.media.upload_file(entry, path)

    def publish_on_platform(self, entry_id: str) -> None:
        self.media.publish_on_platform(entry_id)

    def update(self, entry_id: str, fields: EntryUpdate) -> bool:
        return self.media.update(entry_id, fields)

    def retrieve(self, entry_id: str) -> VideoData | None:
        return self.media.retrieve(entry_id)

    def remove(self, entry_id: str) -> bool:
        return self.media.remove(entry_id)

    def is_video_ready(self, entry_id: str) -> bool:
        return self.media.is_video_ready(entry_id)

    def get_download_url(self, entry_id: str) -> str:
        return self.media.get_download_url(entry_id)

    def get_metadata(self, entry_id: str) -> dict[str, str]:
        return self.metadata.get_metadata(entry_id)

    def get_provider_list(self) -> list[str]:
        return self.metadata.get_provider_list()

    def get_channels(self) -> dict[int, str]:
        return self.channels.get_channels()

    def get_thumbnail_url(self, thumbnail_id: str) -> str:
        return self.thumbnails.get_thumbnail_url(thumbnail_id)

    def get_video_thumbnail_list(self, entry_id: str) -> list[Thumbnail]:
        return self.thumbnails.get_video_thumbnail_list(entry_id)

    def get_default_thumbnail(self, entry_id: str) -> Thumbnail | None:
        return self.thumbnails.get_default_thumbnail(entry_id)

    def set_default_thumbnail(self, thumbnail_id: str) -> None:
        self.thumbnails.set_default_thumbnail(thumbnail_id)

    def add_thumbnail_to_resource(self, path: str | Path, entry_id: str) -> Thumbnail:
        return self.thumbnails.add_thumbnail_to_resource(path, entry_id)

    def remove_thumbnail(self, thumbnail_id: str) -> None:
        self.thumbnails.remove_thumbnail(thumbnail_id)
