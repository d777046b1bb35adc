"""KalturaBridge exception classes."""


class KalturaBridgeError(Exception):
    """Base class for all KalturaBridge exceptions."""

    # Default HTTP status for API responses
    status_code: int = 500


# Configuration errors
class ConfigError(KalturaBridgeError):
    """Base class for configuration-related errors."""

    status_code = 500


class ProfileConfigError(ConfigError, ValueError):
    """Invalid or incomplete Kaltura connection configuration."""

    status_code = 400


# Session errors
class SessionInitError(KalturaBridgeError):
    """An authenticated Kaltura session could not be established."""

    status_code = 502


# Metadata errors
class MetadataError(KalturaBridgeError):
    """Base class for custom metadata failures."""

    status_code = 500


class MetadataAccessError(MetadataError):
    """Reading or writing a metadata profile or record failed."""

    status_code = 502


class SchemaParseError(MetadataError, ValueError):
    """A metadata profile XSD could not be parsed (strict schema mode only)."""

    status_code = 502


class ProviderListNotFoundError(MetadataError):
    """The provider enumeration could not be read from the metadata profile."""

    status_code = 502


# Remote call errors
class RemoteCallError(KalturaBridgeError):
    """Base class for failed pass-through calls to the Kaltura API."""

    status_code = 502


class MediaUpdateError(RemoteCallError):
    """Updating a media entry failed."""


class MediaRetrieveError(RemoteCallError):
    """Retrieving a media entry failed."""


class SetPublishError(RemoteCallError):
    """Adding the published category to an entry failed."""


class UploadFileError(RemoteCallError):
    """Uploading a file or creating its entry failed."""


class RemoveFileError(RemoteCallError):
    """Deleting a media entry failed."""


class ListCategoryError(RemoteCallError):
    """Listing categories failed."""


class ThumbnailError(RemoteCallError):
    """A thumbnail asset operation was rejected by the Kaltura API."""


# Storage errors
class StorageError(KalturaBridgeError):
    """Base class for errors reaching the video/image storage system."""

    status_code = 503


class ImageStorageError(StorageError):
    """The image storage system could not be reached."""


class VideoStorageConnectionError(StorageError, ConnectionError):
    """The video storage system could not be reached."""


class VideoStatusError(StorageError):
    """A media entry is in an error state."""

    status_code = 409
