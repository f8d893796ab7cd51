class LocationDataError(ValueError):
    """Exception raised for structured location data of an invalid format."""

    pass


class InvalidCoordinatesError(LocationDataError):
    """Exception raised when decoded coordinates are out of range."""

    def __init__(self, x: float, y: float) -> None:
        self.x = x
        self.y = y
        super().__init__(f"Invalid coordinates for location: {x!r}, {y!r}")


class LocationParseError(ValueError):
    """Exception raised when text cannot be parsed into a location."""

    def __init__(self, text: str) -> None:
        self.text = text
        super().__init__(f"Cannot parse location from {text!r}")


class ConfigError(RuntimeError):
    """An error in the config."""

    pass


class RequestCancelledError(RuntimeError):
    """Error raised when a location request is cancelled while polling."""

    pass
