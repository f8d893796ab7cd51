"""A geographic location value type with sentinel states, and a location service to request it from a host location API."""

from importlib.metadata import version as _version

from .location import Degrees, Location, LocationKind, check_coordinates

try:
    __version__ = _version("geolocation")
except Exception:
    # Local copy or not installed with setuptools
    __version__ = "unknown"

__all__ = [
    "Degrees",
    "Location",
    "LocationKind",
    "__version__",
    "check_coordinates",
]
