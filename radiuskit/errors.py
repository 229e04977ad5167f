"""Exception types shared across the package."""


class RadiusError(Exception):
    """Base class for RADIUS protocol errors."""


class NoAttributeError(RadiusError, LookupError):
    """Raised when an attribute was expected but not found."""

    def __init__(self, message: str = "radius: attribute not found") -> None:
        super().__init__(message)


class NonAuthenticResponseError(RadiusError):
    """Raised when a client expected a valid response but did not receive one."""

    def __init__(self, message: str = "radius: non-authentic response") -> None:
        super().__init__(message)