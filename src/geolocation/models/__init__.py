"""Pydantic models used for structured location data and to configure the location service."""

from .location_data import LocationData
from .service_config import (
    AuthorizationLevel,
    AuthorizationStatus,
    ServiceConfig,
    StaticProviderConfig,
)

__all__ = [  # noqa: RUF022
    "LocationData",
    "AuthorizationLevel",
    "AuthorizationStatus",
    "StaticProviderConfig",
    "ServiceConfig",
]
