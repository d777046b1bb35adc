"""Channel Client Module."""

from typing import Any

from KalturaClient.Plugins.Core import KalturaCategoryFilter

from kalturabridge import log
from kalturabridge.config.settings import PublishingConfig
from kalturabridge.core.session import KalturaSession
from kalturabridge.exceptions import ListCategoryError
from kalturabridge.utils.kaltura import defined

__all__ = ["ChannelClient"]


class ChannelClient:
    """Lists the channel categories entries can be published to.

    Channels are the leaf categories below ``category_filter_id``. A category
    that has subcategories in the listing is a grouping, not a channel.
    """

    def __init__(self, session: KalturaSession, config: PublishingConfig) -> None:
        self.session = session
        self.config = config

    def get_category_by_name(self, name: str, client: Any | None = None) -> list[Any]:
        """Find categories by their full name.

        Args:
            name (str): Full category name, e.g. ``"Videos>Deportes"``.
            client (KalturaClient | None): Client to use, a session is opened
                when omitted.

        Returns:
            list[KalturaCategory]: The matching categories.
        """
        if client is None:
            client = self.session.open()

        category_filter = KalturaCategoryFilter()
        category_filter.fullNameEqual = name
        result = client.category.list(category_filter, None)
        return list(defined(result.objects, []))

    def get_channels(self) -> dict[int, str]:
        """List channels as an id to name mapping.

        The configured first channel is listed first, the others follow sorted
        by name.

        Raises:
            SessionInitError: If no session could be started.
            ListCategoryError: If the categories could not be listed.
        """
        client = self.session.open()

        category_filter = KalturaCategoryFilter()
        category_filter.fullIdsStartsWith = self.config.category_filter_id

        try:
            result = client.category.list(category_filter, None)
        except Exception as e:
            log.error(f"get_channels - {e}")
            raise ListCategoryError("Error Processing Request") from e

        categories = list(defined(result.objects, []))
        listed_ids = {category.id for category in categories}
        parent_ids = {
            category.parentId
            for category in categories
            if category.parentId in listed_ids
        }

        first: dict[int, str] = {}
        channels: dict[int, str] = {}
        for category in categories:
            if not category.parentId or category.id in parent_ids:
                continue
            if category.name == self.config.first_channel_name:
                first[category.id] = category.name
            else:
                channels[category.id] = category.name

        ordered = sorted(channels.items(), key=lambda item: item[1])
        log.debug(f"Found {len(first) + len(ordered)} channel(s)")
        return {**first, **dict(ordered)}
