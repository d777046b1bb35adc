"""Media entry models."""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

__all__ = ["EntryUpdate", "PublishedVideo", "VideoData"]


class KalturaBridgeModel(BaseModel):
    """Base model using the camelCase names of the Kaltura API."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class EntryUpdate(KalturaBridgeModel):
    """Fields to change on a media entry, each independently optional.

    Attributes:
        title: New entry name.
        description: New entry description.
        start_date: Scheduling window start (unix timestamp).
        end_date: Scheduling window end (unix timestamp).
        access_control: Access control profile id; the configured default is
            used when omitted.
        channel: Channel category id. Replaces the entry categories with the
            published category plus this channel.
        provider: Value of the ``Provider`` custom metadata field.
        advertising: Value of the ``Advertising`` custom metadata field.
        metadata: Any other custom metadata fields, keyed by their XSD name.
    """

    title: str | None = None
    description: str | None = None
    start_date: int | None = None
    end_date: int | None = None
    access_control: int | None = None
    channel: str | None = None
    provider: str | None = None
    advertising: bool | None = None
    metadata: dict[str, str] = Field(default_factory=dict)

    def metadata_fields(self, video_channel: str | None = None) -> dict[str, str]:
        """Build the candidate custom metadata fields for this update.

        Every set value is offered under its Kaltura field name; the metadata
        profile schema decides which of them are actually written.

        Args:
            video_channel (str | None): Label written to ``VideoChannel`` when
                the update assigns a channel.

        Returns:
            dict[str, str]: Field name to string value.
        """
        fields = {
            "title": self.title,
            "description": self.description,
            "startDate": self.start_date,
            "endDate": self.end_date,
            "accessControl": self.access_control,
            "Channel": self.channel,
            "Provider": self.provider,
        }
        result = {key: str(value) for key, value in fields.items() if value}

        if self.advertising is not None:
            result["Advertising"] = "true" if self.advertising else "false"
        if self.channel and video_channel:
            result["VideoChannel"] = video_channel

        result.update(self.metadata)
        return result


class VideoData(KalturaBridgeModel):
    """Media entry data as returned by ``retrieve``."""

    id: str
    title: str | None = None
    description: str | None = None
    start_date: int | None = None
    end_date: int | None = None
    access_control: int | None = None
    channel: int | None = None
    provider: str | None = None
    advertising: bool | None = None


class PublishedVideo(KalturaBridgeModel):
    """Summary of a newly uploaded and published video entry."""

    id: str
    title: str | None = None
    description: str | None = None
