"""ServiceConfig and supporting classes."""

from __future__ import annotations

from enum import Enum
from pathlib import Path

import pydantic
import yaml
from typing_extensions import Self

from geolocation.errors import ConfigError


class AuthorizationStatus(Enum):
    """Authorization states reported by a location provider."""

    NOT_DETERMINED = 0
    RESTRICTED = 1
    DENIED = 2
    AUTHORIZED_ALWAYS = 3
    AUTHORIZED_WHEN_IN_USE = 4


class AuthorizationLevel(Enum):
    """Levels of location authorization that can be requested."""

    ON_DEMAND = -1
    ALWAYS = 3
    WHEN_IN_USE = 4

    @property
    def status(self) -> AuthorizationStatus | None:
        """The authorization status granted by this level, if it maps to one."""
        try:
            return AuthorizationStatus(self.value)
        except ValueError:
            return None


def _enum_by_name(enum: type[Enum], value):
    if isinstance(value, str):
        try:
            return enum[value.upper()]
        except KeyError:
            raise ValueError(
                f"'{value}' is not one of {', '.join(member.name for member in enum)}"
            ) from None
    return value


class StaticProviderConfig(pydantic.BaseModel):
    """Configuration for a static location provider."""

    status: AuthorizationStatus = AuthorizationStatus.AUTHORIZED_WHEN_IN_USE
    latitude: float | None = None
    longitude: float | None = None
    pending_polls: int = pydantic.Field(default=0, ge=0)
    """
    Number of status checks answered with NOT_DETERMINED before the status settles.
    """

    model_config = pydantic.ConfigDict(extra="forbid")

    @pydantic.field_validator("status", mode="before")
    def _validate_status(cls, value: str | AuthorizationStatus) -> AuthorizationStatus:
        return _enum_by_name(AuthorizationStatus, value)

    @pydantic.field_serializer("status")
    def _serialize_status(self, value: AuthorizationStatus, _info):
        return value.name

    @pydantic.model_validator(mode="after")
    def _check_coordinates_pair(self) -> Self:
        if sum([self.latitude is None, self.longitude is None]) == 1:
            raise ValueError("Both latitude and longitude must be provided.")
        return self

    @property
    def coordinates(self) -> tuple[float, float] | None:
        if self.latitude is None:
            return None
        return self.latitude, self.longitude


class ServiceConfig(pydantic.BaseModel):
    """Configuration of the location service."""

    default_level: AuthorizationLevel = AuthorizationLevel.ON_DEMAND
    """
    Authorization level requested when none is given.
    """

    poll_interval_seconds: float = pydantic.Field(default=0.5, ge=0.0)
    """
    Initial wait between authorization status checks, doubled after every check.
    """

    max_poll_interval_seconds: float = pydantic.Field(default=8.0, ge=0.0)

    max_attempts: int = pydantic.Field(default=10, ge=1)
    """
    Number of authorization status checks before giving up on a pending decision.
    """

    usage_description: str | None = None
    """
    Explanation shown to the user when asking for when-in-use authorization.
    """

    static_provider: StaticProviderConfig | None = None
    """
    Static provider configuration.

    If None, the `locate` command cannot be used.
    """

    model_config = pydantic.ConfigDict(extra="forbid")

    @pydantic.field_validator("default_level", mode="before")
    def _validate_default_level(
        cls, value: str | AuthorizationLevel
    ) -> AuthorizationLevel:
        return _enum_by_name(AuthorizationLevel, value)

    @pydantic.field_serializer("default_level")
    def _serialize_default_level(self, value: AuthorizationLevel, _info):
        return value.name

    def to_yaml(self, file_path: str | Path) -> None:
        """
        Write config to yaml file.

        :param file_path: Path to the file to write to.
        """
        with open(file_path, "w") as file:
            yaml.safe_dump(self.model_dump(by_alias=True), file)

    @classmethod
    def from_yaml(cls, file_path: str | Path) -> ServiceConfig:
        """
        Load config from yaml file.

        :param file_path: Path to the file to load from.
        :raises ConfigError: If the file does not hold a mapping.
        :returns: The config.
        """
        with open(file_path) as file:
            data = yaml.safe_load(file)

        if not isinstance(data, dict):
            raise ConfigError("Config file is of an invalid format.")

        return ServiceConfig(**data)
