"""Thumbnail asset model."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field

from kalturabridge.utils.kaltura import defined

__all__ = ["DEFAULT_THUMB_TAG", "Thumbnail", "has_default_tag"]

# Kaltura tags the default thumbnail of an entry with this tag
DEFAULT_THUMB_TAG = "default_thumb"


def has_default_tag(tags: Any) -> bool:
    """Check a comma-separated Kaltura tag string for the default thumbnail tag."""
    tags = defined(tags)
    if not isinstance(tags, str):
        return False
    return DEFAULT_THUMB_TAG in (tag.strip() for tag in tags.split(","))


class Thumbnail(BaseModel):
    """A thumbnail asset of a media entry."""

    id: str
    description: str | None = None
    width: int | None = None
    height: int | None = None
    size: int | None = None
    tags: list[str] = Field(default_factory=list)
    created_at: int | None = None
    updated_at: int | None = None
    url: str | None = None
    default: bool = False

    @classmethod
    def from_asset(cls, asset: Any, url: str | None, default: bool) -> Thumbnail:
        """Build a thumbnail from a Kaltura ``KalturaThumbAsset``.

        Args:
            asset (Any): The thumb asset returned by the Kaltura API.
            url (str | None): Public URL of the asset.
            default (bool): Whether the asset is the entry's default thumbnail.

        Returns:
            Thumbnail: The converted thumbnail.
        """
        tags = defined(getattr(asset, "tags", None), "")
        return cls(
            id=asset.id,
            description=defined(getattr(asset, "description", None)),
            width=defined(getattr(asset, "width", None)),
            height=defined(getattr(asset, "height", None)),
            size=defined(getattr(asset, "size", None)),
            tags=[tag.strip() for tag in tags.split(",") if tag.strip()],
            created_at=defined(getattr(asset, "createdAt", None)),
            updated_at=defined(getattr(asset, "updatedAt", None)),
            url=url,
            default=default,
        )
