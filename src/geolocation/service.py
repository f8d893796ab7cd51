"""Location service: authorization requests and location retrieval from a provider."""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod

from tenacity import (
    AsyncRetrying,
    retry_if_result,
    stop_after_attempt,
    wait_exponential,
)

from geolocation.errors import RequestCancelledError
from geolocation.location import Location
from geolocation.models import (
    AuthorizationLevel,
    AuthorizationStatus,
    ServiceConfig,
    StaticProviderConfig,
)

logger = logging.getLogger(__name__)


class LocationProvider(ABC):
    """Host location API used by :class:`LocationService`."""

    @abstractmethod
    def authorization_status(self) -> AuthorizationStatus:
        """Current authorization status."""

    @abstractmethod
    def request_authorization(self, level: AuthorizationLevel) -> None:
        """Ask the host for authorization, or for a one-off location when on demand."""

    @abstractmethod
    def current_coordinates(self) -> tuple[float, float] | None:
        """Latitude and longitude of the last known location, if any."""


class StaticLocationProvider(LocationProvider):
    """
    Provider answering from fixed values.

    The status reads as NOT_DETERMINED for the first ``pending_polls`` checks, to
    stand in for a user who has not yet answered the authorization prompt.
    """

    def __init__(
        self,
        status: AuthorizationStatus = AuthorizationStatus.AUTHORIZED_WHEN_IN_USE,
        coordinates: tuple[float, float] | None = None,
        pending_polls: int = 0,
    ) -> None:
        self.status = status
        self.coordinates = coordinates
        self.pending_polls = pending_polls
        self.requests: list[AuthorizationLevel] = []

    @classmethod
    def from_config(cls, config: StaticProviderConfig) -> StaticLocationProvider:
        return cls(
            status=config.status,
            coordinates=config.coordinates,
            pending_polls=config.pending_polls,
        )

    def authorization_status(self) -> AuthorizationStatus:
        if self.pending_polls > 0:
            self.pending_polls -= 1
            return AuthorizationStatus.NOT_DETERMINED
        return self.status

    def request_authorization(self, level: AuthorizationLevel) -> None:
        self.requests.append(level)

    def current_coordinates(self) -> tuple[float, float] | None:
        if self.status is AuthorizationStatus.DENIED:
            return None
        return self.coordinates


class LocationService:
    """Request locations from a :class:`LocationProvider`."""

    def __init__(
        self, provider: LocationProvider, config: ServiceConfig | None = None
    ) -> None:
        self.provider = provider
        self.config = config if config is not None else ServiceConfig()

    def check_authorization(self, level: AuthorizationLevel) -> None:
        """
        Request authorization at the given level from the provider.

        :param level: The authorization level to request.
        """
        if (
            level is AuthorizationLevel.WHEN_IN_USE
            and not self.config.usage_description
        ):
            logger.warning(
                "A usage description explaining how the location is used must be "
                "configured before requesting when-in-use authorization."
            )
        self.provider.request_authorization(level)

    def request(self, level: AuthorizationLevel | None = None) -> Location:
        """
        Request the current location.

        :param level: Authorization level, defaults to the configured level.
        :returns: The location, ``Location.denied`` if authorization was denied,
                  or ``Location.unknown`` if no location is available.
        """
        level = level if level is not None else self.config.default_level
        self.check_authorization(level)

        coordinates = self.provider.current_coordinates()
        if coordinates is None:
            if self.provider.authorization_status() is AuthorizationStatus.DENIED:
                return Location.denied
            return Location.unknown

        latitude, longitude = coordinates
        location = Location.checked(latitude, longitude)
        logger.info("Resolved location %s", location)
        return location

    async def request_async(
        self,
        level: AuthorizationLevel | None = None,
        cancel: asyncio.Event | None = None,
    ) -> Location:
        """
        Request the current location, waiting for a pending authorization decision.

        While the status is NOT_DETERMINED, every authorization request is followed by
        a wait with exponential backoff and a recheck of the status, at most
        ``max_attempts`` times. Setting ``cancel`` interrupts a wait immediately.

        :param level: Authorization level, defaults to the configured level.
        :param cancel: Event that aborts the wait when set.
        :raises RequestCancelledError: If ``cancel`` is set while waiting.
        :returns: The location, see :meth:`request`.
        """
        level = level if level is not None else self.config.default_level

        status = self.provider.authorization_status()
        if status is AuthorizationStatus.DENIED:
            return Location.denied

        if status is AuthorizationStatus.NOT_DETERMINED:
            self.check_authorization(level)
            await _backoff_sleep(
                min(
                    self.config.poll_interval_seconds,
                    self.config.max_poll_interval_seconds,
                ),
                cancel,
            )
            status = await self._await_decision(level, cancel)
            logger.debug("Authorization status after polling: %s", status.name)

        return self.request(level)

    async def _await_decision(
        self, level: AuthorizationLevel, cancel: asyncio.Event | None
    ) -> AuthorizationStatus:
        retrying = AsyncRetrying(
            stop=stop_after_attempt(self.config.max_attempts),
            wait=wait_exponential(
                multiplier=self.config.poll_interval_seconds,
                max=self.config.max_poll_interval_seconds,
            ),
            retry=retry_if_result(
                lambda status: status is AuthorizationStatus.NOT_DETERMINED
            ),
            retry_error_callback=lambda retry_state: retry_state.outcome.result(),
            sleep=lambda seconds: _backoff_sleep(seconds, cancel),
        )
        return await retrying(self._poll_status, level, cancel)

    async def _poll_status(
        self, level: AuthorizationLevel, cancel: asyncio.Event | None
    ) -> AuthorizationStatus:
        if cancel is not None and cancel.is_set():
            raise RequestCancelledError("Location request was cancelled.")

        status = self.provider.authorization_status()
        logger.debug("Authorization status: %s", status.name)
        if status is AuthorizationStatus.NOT_DETERMINED:
            self.check_authorization(level)
        return status


async def _backoff_sleep(seconds: float, cancel: asyncio.Event | None) -> None:
    """
    Wait between authorization status checks.

    :param seconds: Time to wait.
    :param cancel: Event that ends the wait early when set.
    :raises RequestCancelledError: If ``cancel`` is or becomes set.
    """
    if cancel is None:
        await asyncio.sleep(seconds)
        return

    if not cancel.is_set():
        try:
            await asyncio.wait_for(cancel.wait(), seconds)
        except asyncio.TimeoutError:
            return
    raise RequestCancelledError("Location request was cancelled.")
