"""Test configuration that is ran for every test."""

import pytest

from geolocation.models import AuthorizationStatus, ServiceConfig
from geolocation.service import LocationService, StaticLocationProvider


@pytest.fixture
def tmp_file(tmp_path):
    file = tmp_path / "test.yaml"
    file.touch()
    return file


@pytest.fixture
def fast_config():
    """Service config that polls without waiting."""
    return ServiceConfig(
        poll_interval_seconds=0.0,
        max_poll_interval_seconds=0.0,
        max_attempts=5,
        usage_description="Test usage.",
    )


@pytest.fixture
def provider():
    return StaticLocationProvider(
        status=AuthorizationStatus.AUTHORIZED_WHEN_IN_USE, coordinates=(52.0, 5.0)
    )


@pytest.fixture
def service(provider, fast_config):
    return LocationService(provider, fast_config)
