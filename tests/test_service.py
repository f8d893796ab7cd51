import asyncio
import logging
import time

import pytest

from geolocation import Location
from geolocation.errors import RequestCancelledError
from geolocation.models import AuthorizationLevel, AuthorizationStatus, ServiceConfig
from geolocation.service import LocationService, StaticLocationProvider, _backoff_sleep


def test_request(service, provider):
    location = service.request(AuthorizationLevel.WHEN_IN_USE)

    assert location == Location(52.0, 5.0)
    assert provider.requests == [AuthorizationLevel.WHEN_IN_USE]


def test_request_default_level(provider):
    service = LocationService(provider, ServiceConfig(default_level="ALWAYS"))
    service.request()

    assert provider.requests == [AuthorizationLevel.ALWAYS]


def test_request_denied(fast_config):
    provider = StaticLocationProvider(
        status=AuthorizationStatus.DENIED, coordinates=(52.0, 5.0)
    )
    assert LocationService(provider, fast_config).request() == Location.denied


def test_request_no_coordinates(fast_config):
    provider = StaticLocationProvider(status=AuthorizationStatus.AUTHORIZED_ALWAYS)
    assert LocationService(provider, fast_config).request() == Location.unknown


def test_request_out_of_range_coordinates(fast_config):
    provider = StaticLocationProvider(
        status=AuthorizationStatus.AUTHORIZED_ALWAYS, coordinates=(95.0, 5.0)
    )
    assert LocationService(provider, fast_config).request() == Location.unknown


def test_when_in_use_without_usage_description_warns(provider, caplog):
    service = LocationService(provider, ServiceConfig())

    with caplog.at_level(logging.WARNING, logger="geolocation.service"):
        service.check_authorization(AuthorizationLevel.WHEN_IN_USE)

    assert "usage description" in caplog.text
    assert provider.requests == [AuthorizationLevel.WHEN_IN_USE]


def test_when_in_use_with_usage_description(service, caplog):
    with caplog.at_level(logging.WARNING, logger="geolocation.service"):
        service.check_authorization(AuthorizationLevel.WHEN_IN_USE)

    assert caplog.text == ""


def test_request_async_authorized(service):
    location = asyncio.run(service.request_async())
    assert location == Location(52.0, 5.0)


def test_request_async_denied(fast_config):
    provider = StaticLocationProvider(status=AuthorizationStatus.DENIED)
    service = LocationService(provider, fast_config)

    assert asyncio.run(service.request_async()) == Location.denied
    assert provider.requests == []


def test_request_async_waits_for_decision(fast_config):
    provider = StaticLocationProvider(
        status=AuthorizationStatus.AUTHORIZED_ALWAYS,
        coordinates=(-33.8688, 151.2093),
        pending_polls=3,
    )
    service = LocationService(provider, fast_config)

    location = asyncio.run(service.request_async(AuthorizationLevel.ALWAYS))

    assert location == Location(-33.8688, 151.2093)
    assert provider.pending_polls == 0
    # one request per undetermined status check, one when resolving
    assert provider.requests == [AuthorizationLevel.ALWAYS] * 4


def test_request_async_waits_after_every_request(fast_config, monkeypatch):
    events = []

    class RecordingProvider(StaticLocationProvider):
        def authorization_status(self):
            status = super().authorization_status()
            events.append(status.name)
            return status

        def request_authorization(self, level):
            events.append("request")
            super().request_authorization(level)

    async def record_sleep(seconds, cancel):
        events.append("sleep")

    monkeypatch.setattr("geolocation.service._backoff_sleep", record_sleep)
    provider = RecordingProvider(
        status=AuthorizationStatus.AUTHORIZED_ALWAYS,
        coordinates=(1.0, 2.0),
        pending_polls=2,
    )

    location = asyncio.run(LocationService(provider, fast_config).request_async())

    assert location == Location(1.0, 2.0)
    assert events == [
        "NOT_DETERMINED",
        "request",
        "sleep",
        "NOT_DETERMINED",
        "request",
        "sleep",
        "AUTHORIZED_ALWAYS",
        "request",
    ]


def test_request_async_decision_denied(fast_config):
    provider = StaticLocationProvider(
        status=AuthorizationStatus.DENIED, coordinates=(1.0, 1.0), pending_polls=2
    )
    service = LocationService(provider, fast_config)

    assert asyncio.run(service.request_async()) == Location.denied


def test_request_async_gives_up(fast_config):
    provider = StaticLocationProvider(
        status=AuthorizationStatus.AUTHORIZED_ALWAYS, pending_polls=100
    )
    service = LocationService(provider, fast_config)

    assert asyncio.run(service.request_async()) == Location.unknown
    # initial check, max_attempts polls and the final check in request
    assert provider.pending_polls == 100 - 1 - fast_config.max_attempts - 1


def test_request_async_cancelled(fast_config):
    provider = StaticLocationProvider(
        status=AuthorizationStatus.AUTHORIZED_ALWAYS,
        coordinates=(1.0, 1.0),
        pending_polls=2,
    )
    service = LocationService(provider, fast_config)

    async def cancelled_request():
        cancel = asyncio.Event()
        cancel.set()
        return await service.request_async(cancel=cancel)

    with pytest.raises(RequestCancelledError):
        asyncio.run(cancelled_request())


def test_request_async_cancelled_while_waiting():
    config = ServiceConfig(
        poll_interval_seconds=2.0, max_poll_interval_seconds=2.0, max_attempts=5
    )
    provider = StaticLocationProvider(
        status=AuthorizationStatus.AUTHORIZED_ALWAYS, pending_polls=100
    )
    service = LocationService(provider, config)

    async def cancel_during_backoff():
        cancel = asyncio.Event()
        task = asyncio.create_task(service.request_async(cancel=cancel))
        await asyncio.sleep(0.1)
        cancel.set()
        cancelled_at = time.monotonic()
        with pytest.raises(RequestCancelledError):
            await task
        return time.monotonic() - cancelled_at

    latency = asyncio.run(cancel_during_backoff())
    assert latency < 1.0
    assert provider.requests == [AuthorizationLevel.ON_DEMAND]


def test_backoff_sleep_without_cancel():
    asyncio.run(_backoff_sleep(0.0, None))


def test_backoff_sleep_times_out():
    async def sleep_without_cancel():
        await _backoff_sleep(0.01, asyncio.Event())

    asyncio.run(sleep_without_cancel())
