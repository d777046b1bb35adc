"""Helpers for values returned by the Kaltura Python SDK."""

from typing import Any

__all__ = ["defined", "enum_value", "join_ids", "split_ids"]


def defined(value: Any, default: Any = None) -> Any:
    """Return ``default`` for fields the SDK left unset.

    The SDK initializes every object attribute to ``NotImplemented`` and only
    overwrites the ones present in the API response.
    """
    if value is NotImplemented or value is None:
        return default
    return value


def enum_value(value: Any) -> Any:
    """Unwrap a ``KalturaEnum`` instance to its raw value."""
    value = defined(value)
    getter = getattr(value, "getValue", None)
    return getter() if callable(getter) else value


def split_ids(value: Any) -> list[str]:
    """Split a comma-separated id list such as ``categoriesIds``."""
    value = defined(value)
    if not value:
        return []
    return [part.strip() for part in str(value).split(",") if part.strip()]


def join_ids(ids: list[str]) -> str:
    """Join ids into the comma-separated form the API expects."""
    return ",".join(str(id_) for id_ in ids if str(id_))
