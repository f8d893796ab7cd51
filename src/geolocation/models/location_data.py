"""LocationData class."""

from __future__ import annotations

import pydantic

from geolocation.errors import InvalidCoordinatesError
from geolocation.location import Location, check_coordinates


class LocationData(pydantic.BaseModel):
    """Structured data of a location: the two coordinates under keys ``x`` and ``y``."""

    x: float = pydantic.Field(strict=True)
    y: float = pydantic.Field(strict=True)

    model_config = pydantic.ConfigDict(extra="forbid", frozen=True)

    @classmethod
    def from_location(cls, location: Location) -> LocationData:
        return cls(x=location.x, y=location.y)

    def to_location(self) -> Location:
        """
        Convert to a location.

        :raises InvalidCoordinatesError: If the coordinates are out of range.
        :returns: The location.
        """
        if not check_coordinates(self.x, self.y):
            raise InvalidCoordinatesError(self.x, self.y)
        return Location.unchecked(self.x, self.y)
