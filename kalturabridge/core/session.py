"""Kaltura Session Module."""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import Any

from KalturaClient import KalturaClient, KalturaConfiguration
from KalturaClient.Plugins.Core import KalturaSessionType

from kalturabridge import log
from kalturabridge.config.settings import KalturaConnectionConfig
from kalturabridge.exceptions import SessionInitError

__all__ = ["KalturaSession"]

# Renew the KS this many seconds before the server would expire it
EXPIRY_MARGIN = 60


def build_client(config: KalturaConnectionConfig) -> KalturaClient:
    """Create an unauthenticated SDK client for the configured service URL."""
    kaltura_config = KalturaConfiguration()
    kaltura_config.serviceUrl = config.service_url
    kaltura_config.requestTimeout = config.request_timeout
    return KalturaClient(kaltura_config)


class KalturaSession:
    """An explicit, lazily started administrator session with the Kaltura API.

    ``open()`` returns the authenticated SDK client, starting a new KS the
    first time and again once the previous one is about to expire. The
    session can be shared by several service clients and used as a context
    manager::

        with KalturaSession(config.kaltura) as client:
            client.media.get(entry_id)

    Attributes:
        config: Connection settings of the partner account.
        client_factory: Builds an unauthenticated SDK client from the settings.
        clock: Monotonic time source in seconds.
    """

    def __init__(
        self,
        config: KalturaConnectionConfig,
        client_factory: Callable[[KalturaConnectionConfig], Any] | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.config = config
        self.client_factory = client_factory or build_client
        self.clock = clock

        self._client: Any | None = None
        self._expires_at: float | None = None

    @property
    def has_session(self) -> bool:
        """Whether a started, unexpired session is held."""
        return self._client is not None and not self.is_expired

    @property
    def expires_at(self) -> float | None:
        """Clock time after which the session is renewed, or None if closed."""
        return self._expires_at

    @property
    def is_expired(self) -> bool:
        """Whether the held session (if any) has reached its renewal time."""
        return self._expires_at is not None and self.clock() >= self._expires_at

    def open(self) -> Any:
        """Return an authenticated client, starting a session if needed.

        Returns:
            KalturaClient: Client with the session KS set.

        Raises:
            SessionInitError: If the session could not be started.
        """
        if self.has_session:
            return self._client

        if self._client is not None:
            log.debug("Kaltura session expired, starting a new one")
            self.close()

        try:
            client = self.client_factory(self.config)
            ks = client.session.start(
                self.config.admin_secret.get_secret_value(),
                self.config.user_id,
                KalturaSessionType.ADMIN,
                self.config.partner_id,
                self.config.session_expiry,
                self.config.privileges,
            )
            client.setKs(ks)
        except Exception as e:
            log.error(f"open - {e}")
            raise SessionInitError(
                f"Could not start a Kaltura session for partner "
                f"{self.config.partner_id}"
            ) from e

        self._client = client
        self._expires_at = self.clock() + max(
            self.config.session_expiry - EXPIRY_MARGIN, 0
        )
        log.debug(
            f"Started Kaltura session $${{partner_id: {self.config.partner_id}, "
            f"service_url: {self.config.service_url}}}$$"
        )
        return client

    def close(self) -> None:
        """Forget the held client; the next ``open()`` starts a new session."""
        self._client = None
        self._expires_at = None

    def __enter__(self) -> Any:
        return self.open()

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()
