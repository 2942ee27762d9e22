"""Error types raised by gallery services."""


class GalleryError(Exception):
    """Base class for gallery-sync errors."""


class SessionExpiredError(GalleryError):
    """The backend's Synology session expired and the user must reconnect."""

    def __init__(self, message: str = "Session expired") -> None:
        super().__init__(message)


class SecondFactorRequiredError(GalleryError):
    """Synology rejected the login until a one-time code is supplied."""

    def __init__(self, message: str = "One-time code required") -> None:
        super().__init__(message)


class PickerTimeoutError(GalleryError):
    """The picker session was not completed within the allowed number of polls."""
