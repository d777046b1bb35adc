from .channels import ChannelClient
from .manager import KalturaManager
from .media import MediaClient
from .metadata import MetadataSchemaSync
from .session import KalturaSession
from .thumbnails import ThumbnailClient

__all__ = [
    "ChannelClient",
    "KalturaManager",
    "KalturaSession",
    "MediaClient",
    "MetadataSchemaSync",
    "ThumbnailClient",
]
