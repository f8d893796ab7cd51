"""Location class. See class description."""

from __future__ import annotations

import math
import numbers
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, ClassVar

import yaml

from geolocation.errors import LocationDataError, LocationParseError

LATITUDE_RANGE = (-90.0, 90.0)
LONGITUDE_RANGE = (-180.0, 180.0)


class LocationKind(Enum):
    """The state a location value represents."""

    COORDINATES = "coordinates"
    UNKNOWN = "unknown"
    DENIED = "denied"
    INVALID = "invalid"


def check_coordinates(x: float, y: float) -> bool:
    """
    Check that a coordinate pair lies within the valid latitude and longitude ranges.

    :param x: Latitude.
    :param y: Longitude.
    :returns: Whether both coordinates are in range and neither is NaN.
    """
    return (
        x >= LATITUDE_RANGE[0]
        and x <= LATITUDE_RANGE[1]
        and y >= LONGITUDE_RANGE[0]
        and y <= LONGITUDE_RANGE[1]
        and not math.isnan(x)
        and not math.isnan(y)
    )


def _kind_of(x: float, y: float) -> LocationKind:
    if x == math.inf and y == math.inf:
        return LocationKind.UNKNOWN
    if x == -math.inf and y == -math.inf:
        return LocationKind.INVALID
    if math.isnan(x) and math.isnan(y):
        return LocationKind.DENIED
    return LocationKind.COORDINATES


def _parse_coordinate(text: str) -> float | None:
    value = text.strip(" \t")
    # float() also accepts surrounding newlines and digit separators
    if not value or value != value.strip() or "_" in value:
        return None
    try:
        return float(value)
    except ValueError:
        return None


def _is_close(lhs: float, rhs: float, precision: float) -> bool:
    if lhs == rhs:
        return True
    return (lhs - rhs if lhs > rhs else rhs - lhs) < precision


@dataclass(frozen=True)
class Degrees:
    """Degrees north and west of a location."""

    # TODO: convert to degrees, minutes and seconds
    north: float
    west: float

    def __str__(self) -> str:
        return f"{self.north}° N {self.west}° W"


@dataclass(frozen=True, eq=False, repr=False)
class Location:
    """
    A location expressed as coordinates ``x`` (latitude) and ``y`` (longitude).

    Besides real coordinates a location can be one of three sentinel values:
    ``Location.unknown`` (+inf, +inf), ``Location.denied`` (NaN, NaN) and
    ``Location.invalid`` (-inf, -inf). Sentinels of the same kind are always
    equal to each other.

    Calling ``Location(x, y)`` asserts that the coordinates are valid. Use
    :meth:`checked` to fall back to ``Location.unknown`` instead, or
    :meth:`unchecked` to skip validation.
    """

    x: float
    y: float

    unknown: ClassVar[Location]
    denied: ClassVar[Location]
    invalid: ClassVar[Location]

    def __post_init__(self) -> None:
        self._assign(self.x, self.y)
        assert check_coordinates(self.x, self.y), (
            f"Invalid coordinates for location: {self.x}, {self.y}"
        )

    def _assign(self, x: float, y: float) -> None:
        for value in (x, y):
            if not isinstance(value, numbers.Real):
                raise TypeError(
                    f"Coordinates must be real numbers, not {type(value).__name__}"
                )
        object.__setattr__(self, "x", float(x))
        object.__setattr__(self, "y", float(y))

    @classmethod
    def coordinates(cls, x: float, y: float) -> Location:
        """Create a location from valid coordinates, asserting they are in range."""
        return cls(x, y)

    @classmethod
    def checked(cls, x: float, y: float) -> Location:
        """
        Create a location, returning ``Location.unknown`` if the coordinates are invalid.

        :param x: Latitude.
        :param y: Longitude.
        :returns: The location, or ``Location.unknown``.
        """
        if not check_coordinates(x, y):
            return cls.unknown
        return cls.unchecked(x, y)

    @classmethod
    def unchecked(cls, x: float, y: float) -> Location:
        """
        Create a location without validating the coordinates.

        The result may be out of range, which is reported by :attr:`is_invalid`.

        :param x: Latitude.
        :param y: Longitude.
        :returns: The location.
        """
        location = cls.__new__(cls)
        location._assign(x, y)
        return location

    @property
    def latitude(self) -> float:
        return self.x

    @property
    def longitude(self) -> float:
        return self.y

    @property
    def lat(self) -> float:
        """
        Shorthand for latitude variable.

        :returns: Latitude variable.
        """
        return self.x

    @property
    def lon(self) -> float:
        """
        Shorthand for longitude variable.

        :returns: Longitude variable.
        """
        return self.y

    @property
    def is_valid(self) -> bool:
        """Whether the coordinates are in range and not NaN."""
        return check_coordinates(self.x, self.y)

    @property
    def is_invalid(self) -> bool:
        """Whether either coordinate is out of range or NaN."""
        return (
            self.x < LATITUDE_RANGE[0]
            or self.x > LATITUDE_RANGE[1]
            or self.y < LONGITUDE_RANGE[0]
            or self.y > LONGITUDE_RANGE[1]
            or math.isnan(self.x)
            or math.isnan(self.y)
        )

    @property
    def kind(self) -> LocationKind:
        """The state this location represents, derived from its coordinates."""
        return _kind_of(self.x, self.y)

    @property
    def is_sentinel(self) -> bool:
        """Whether this is ``unknown``, ``denied`` or ``invalid``."""
        return self.kind is not LocationKind.COORDINATES

    @property
    def degrees(self) -> Degrees:
        return Degrees(north=self.x, west=-self.y)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Location):
            return NotImplemented
        if self.is_sentinel and self.kind is other.kind:
            return True
        return self.x == other.x and self.y == other.y

    def __hash__(self) -> int:
        if self.is_sentinel:
            return hash(self.kind)
        return hash((self.x, self.y))

    def is_approximately_equal(self, other: Location, precision: float) -> bool:
        """
        Check whether both coordinates of two locations differ by less than ``precision``.

        Sentinel locations are never approximately equal to anything.

        :param other: The location to compare with.
        :param precision: Maximum (exclusive) difference per coordinate, must be positive.
        :returns: Whether the locations are approximately equal.
        """
        assert precision > 0, "precision must be greater than zero"

        if self.is_sentinel or other.is_sentinel:
            return False

        return _is_close(self.x, other.x, precision) and _is_close(
            self.y, other.y, precision
        )

    def matches(self, other: Location, precision: float | None = None) -> bool:
        """
        Near-match two locations.

        Sentinels only match the same sentinel. Other locations are compared with
        :meth:`is_approximately_equal`, by default with the smallest positive float
        as precision.

        :param other: The location to compare with.
        :param precision: Optional precision, must be positive.
        :returns: Whether the locations match.
        """
        if self.is_sentinel or other.is_sentinel:
            return self == other
        if precision is None:
            precision = math.ulp(0.0)
        return self.is_approximately_equal(other, precision)

    @property
    def description(self) -> str:
        if self.is_sentinel:
            return self.kind.value
        return f"{self.x}, {self.y}"

    def __str__(self) -> str:
        return self.description

    def __repr__(self) -> str:
        if self.is_sentinel:
            return f"{type(self).__name__}.{self.kind.value}"
        return f"{type(self).__name__}(x={self.x!r}, y={self.y!r})"

    @classmethod
    def parse(cls, text: str) -> Location | None:
        """
        Parse a location from ``"<x>, <y>"`` text.

        Exactly one comma is allowed. The values are not range checked, so an
        out-of-range location can be parsed and inspected with :attr:`is_invalid`.

        :param text: The text to parse.
        :returns: The location, or None if the text is not two comma separated numbers.
        """
        fields = text.split(",")
        if len(fields) != 2:
            return None

        x = _parse_coordinate(fields[0])
        y = _parse_coordinate(fields[1])
        if x is None or y is None:
            return None
        return cls.unchecked(x, y)

    @classmethod
    def from_string(cls, text: str) -> Location:
        """
        Parse a location from text, raising on failure.

        :param text: The text to parse.
        :raises LocationParseError: If the text cannot be parsed.
        :returns: The location.
        """
        location = cls.parse(text)
        if location is None:
            raise LocationParseError(text)
        return location

    def to_dict(self) -> dict[str, float]:
        """Structured data for this location, sentinel values included."""
        return {"x": self.x, "y": self.y}

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Location:
        """
        Decode a location from structured data with keys ``x`` and ``y``.

        Out-of-range coordinates are rejected rather than converted to a sentinel.

        :param data: Mapping with the two numeric coordinates.
        :raises LocationDataError: If data is not a mapping.
        :raises pydantic.ValidationError: If the mapping does not hold two numbers.
        :raises InvalidCoordinatesError: If the coordinates are out of range.
        :returns: The location.
        """
        from geolocation.models import LocationData

        if not isinstance(data, Mapping):
            raise LocationDataError("Location data must be a mapping with keys x and y.")
        return LocationData.model_validate(dict(data)).to_location()

    def to_yaml(self, file_path: str | Path) -> None:
        """
        Write location to yaml file.

        :param file_path: Path to the file to write to.
        """
        with open(file_path, "w") as file:
            yaml.safe_dump(self.to_dict(), file)

    @classmethod
    def from_yaml(cls, file_path: str | Path) -> Location:
        """
        Load location from yaml file.

        :param file_path: Path to the file to load from.
        :returns: The location.
        """
        with open(file_path) as file:
            data = yaml.safe_load(file)
        return cls.from_dict(data)


Location.unknown = Location.unchecked(math.inf, math.inf)
Location.denied = Location.unchecked(math.nan, math.nan)
Location.invalid = Location.unchecked(-math.inf, -math.inf)
