"""Media Client Module."""

from pathlib import Path
from typing import Any

from KalturaClient.exceptions import KalturaClientException, KalturaException
from KalturaClient.Plugins.Core import (
    KalturaEntryStatus,
    KalturaMediaEntry,
    KalturaMediaType,
)

from kalturabridge import log
from kalturabridge.config.settings import PublishingConfig
from kalturabridge.core.channels import ChannelClient
from kalturabridge.core.metadata import MetadataSchemaSync
from kalturabridge.core.session import KalturaSession
from kalturabridge.exceptions import (
    MediaRetrieveError,
    MediaUpdateError,
    RemoveFileError,
    SetPublishError,
    UploadFileError,
    VideoStatusError,
    VideoStorageConnectionError,
)
from kalturabridge.models.entry import EntryUpdate, PublishedVideo, VideoData
from kalturabridge.utils.kaltura import defined, enum_value, join_ids, split_ids

__all__ = ["MediaClient"]

ERROR_STATUSES = frozenset(
    {
        str(KalturaEntryStatus.ERROR_CONVERTING),
        str(KalturaEntryStatus.ERROR_IMPORTING),
    }
)

# Only these values of the free-text Advertising field mean true
TRUTHY_FLAGS = frozenset({"1", "true"})


class MediaClient:
    """Uploads, publishes, updates and reads Kaltura media entries.

    Attributes:
        session: Session shared with the other service clients.
        config: Publishing categories and defaults.
        metadata: Custom metadata access for the entries.
        channels: Category lookups used to resolve an entry's channel.
    """

    def __init__(
        self,
        session: KalturaSession,
        config: PublishingConfig,
        metadata: MetadataSchemaSync,
        channels: ChannelClient,
    ) -> None:
        self.session = session
        self.config = config
        self.metadata = metadata
        self.channels = channels

    def create_entry(self) -> KalturaMediaEntry:
        """Create an empty media entry; only the fields set on it are sent."""
        return KalturaMediaEntry()

    def upload_file(self, entry: KalturaMediaEntry, path: str | Path) -> Any:
        """Upload a file and create an entry from it.

        Args:
            entry (KalturaMediaEntry): Fields of the entry to create.
            path (str | Path): File to upload.

        Returns:
            KalturaMediaEntry: The created entry.

        Raises:
            SessionInitError: If no session could be started.
            UploadFileError: If the upload or the entry creation failed.
        """
        client = self.session.open()

        try:
            token = client.uploadToken.add()
            with open(path, "rb") as media_file:
                upload_token = client.uploadToken.upload(token.id, media_file)
            created = client.media.addFromUploadedFile(entry, upload_token.id)
        except Exception as e:
            log.error(f"upload_file - {e}")
            raise UploadFileError(f"Could not upload '{path}'") from e

        log.debug(f"Uploaded $$'{path}'$$ as entry $$'{created.id}'$$")
        return created

    def remove(self, entry_id: str) -> bool:
        """Delete an entry.

        Raises:
            SessionInitError: If no session could be started.
            RemoveFileError: If the entry could not be deleted.
        """
        client = self.session.open()

        try:
            client.baseEntry.delete(entry_id)
        except Exception as e:
            log.error(f"remove - {e}")
            raise RemoveFileError(f"Could not remove entry '{entry_id}'") from e

        log.debug(f"Removed entry $$'{entry_id}'$$")
        return True

    def publish_on_platform(self, entry_id: str) -> None:
        """Add the published category to an entry's categories.

        Raises:
            SessionInitError: If no session could be started.
            SetPublishError: If the entry could not be read or updated.
        """
        client = self.session.open()

        try:
            video = client.media.get(entry_id)
            categories = split_ids(video.categoriesIds)
            if self.config.published_category_id not in categories:
                categories.append(self.config.published_category_id)

            entry = self.create_entry()
            entry.categoriesIds = join_ids(categories)
            client.media.update(entry_id, entry)
        except Exception as e:
            log.error(f"publish_on_platform - {e}")
            raise SetPublishError(f"Could not publish entry '{entry_id}'") from e

    def publish(self, path: str | Path) -> PublishedVideo:
        """Upload a video file and publish the resulting entry.

        Returns:
            PublishedVideo: Identifier, title and description of the entry.
        """
        entry = self.create_entry()
        entry.name = " "
        entry.mediaType = KalturaMediaType.VIDEO

        created = self.upload_file(entry, path)
        self.publish_on_platform(created.id)

        log.success(f"Published $$'{path}'$$ as entry $$'{created.id}'$$")
        return PublishedVideo(
            id=created.id,
            title=defined(created.name),
            description=defined(created.description),
        )

    def update(self, entry_id: str, fields: EntryUpdate) -> bool:
        """Update an entry and replace its custom metadata.

        Args:
            entry_id (str): Entry to update.
            fields (EntryUpdate): The values to change.

        Returns:
            bool: True once both the entry and its metadata are stored.

        Raises:
            SessionInitError: If no session could be started.
            MediaUpdateError: If the entry could not be updated.
            MetadataAccessError: If the metadata could not be replaced.
        """
        client = self.session.open()
        entry = self.create_entry()

        if fields.title:
            entry.name = fields.title
        if fields.description:
            entry.description = fields.description
        if fields.start_date:
            entry.startDate = fields.start_date
        if fields.end_date:
            entry.endDate = fields.end_date

        access_control = fields.access_control or self.config.default_access_control_id
        if access_control is not None:
            entry.accessControlId = access_control

        if fields.channel:
            entry.categoriesIds = join_ids(
                [self.config.published_category_id, fields.channel]
            )

        try:
            client.media.update(entry_id, entry)
        except Exception as e:
            log.error(f"update - {e}")
            raise MediaUpdateError(f"Could not update entry '{entry_id}'") from e

        self.metadata.update_metadata(
            client,
            fields.metadata_fields(video_channel=self.config.video_channel),
            entry_id,
        )
        return True

    def retrieve(self, entry_id: str) -> VideoData | None:
        """Read an entry with its channel and custom metadata.

        Returns:
            VideoData | None: The entry data, None if the API returned nothing.

        Raises:
            MediaRetrieveError: If the entry or its categories could not be read.
            MetadataAccessError: If the metadata could not be read.
        """
        try:
            client = self.session.open()
            entry = client.media.get(entry_id)
        except Exception as e:
            log.error(f"retrieve - {e}")
            raise MediaRetrieveError(f"Could not retrieve entry '{entry_id}'") from e

        if not entry:
            return None

        video = VideoData(
            id=entry.id,
            title=defined(entry.name),
            description=defined(entry.description),
            start_date=defined(entry.startDate),
            end_date=defined(entry.endDate),
            access_control=defined(entry.accessControlId),
        )

        # The channel is the category that is not the published marker
        try:
            for name in split_ids(entry.categories):
                if self.config.published_category_name in name:
                    continue
                matches = self.channels.get_category_by_name(name, client)
                if matches:
                    video.channel = matches[0].id
                    break
        except Exception as e:
            log.error(f"retrieve - {e}")
            raise MediaRetrieveError(
                f"Could not resolve the channel of entry '{entry_id}'"
            ) from e

        metadata = self.metadata.get_metadata(entry_id, client)
        if "Provider" in metadata:
            video.provider = metadata["Provider"]
        if "Advertising" in metadata:
            video.advertising = metadata["Advertising"] in TRUTHY_FLAGS

        return video

    def get_download_url(self, entry_id: str) -> str:
        """Get the URL to download the source file of an entry.

        Raises:
            MediaRetrieveError: If the entry does not exist or could not be read.
        """
        try:
            video = self.retrieve(entry_id)
        except MediaRetrieveError:
            raise
        except Exception as e:
            log.error(f"get_download_url - {e}")
            raise MediaRetrieveError(f"Could not retrieve entry '{entry_id}'") from e

        if video is None:
            raise MediaRetrieveError(f"Entry '{entry_id}' not found")

        return self.config.download_url_template.format(
            partner_id=self.session.config.partner_id, entry_id=entry_id
        )

    def is_video_ready(self, entry_id: str) -> bool:
        """Check whether an entry has finished transcoding.

        Raises:
            SessionInitError: If no session could be started.
            MediaRetrieveError: If the API rejected the request.
            VideoStorageConnectionError: If the API could not be reached.
            VideoStatusError: If the entry is in an error state.
        """
        client = self.session.open()

        try:
            entry = client.media.get(entry_id)
        except KalturaClientException as e:
            log.error(f"is_video_ready - {e}")
            raise VideoStorageConnectionError(
                "Could not connect to the video storage"
            ) from e
        except KalturaException as e:
            log.error(f"is_video_ready - {e}")
            raise MediaRetrieveError(f"Could not retrieve entry '{entry_id}'") from e

        status = str(enum_value(entry.status))
        if status in ERROR_STATUSES:
            raise VideoStatusError(f"The entryId {entry_id} has errors")

        return status == str(KalturaEntryStatus.READY)
