from .entry import EntryUpdate, PublishedVideo, VideoData
from .thumbnail import Thumbnail

__all__ = ["EntryUpdate", "PublishedVideo", "Thumbnail", "VideoData"]
