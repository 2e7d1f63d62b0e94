"""Error taxonomy shared by the API, services and dashboard client."""


class DashboardError(Exception):
    """Base error carrying a user-facing message and an HTTP status."""

    status_code = 500

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code


class ValidationError(DashboardError):
    """A required field is missing or invalid."""

    status_code = 400


class AuthError(DashboardError):
    """Credentials did not match."""

    status_code = 401


class BackendError(DashboardError):
    """The document store failed; the message is generic."""

    status_code = 500


class DocumentNotFoundError(Exception):
    """Raised by repositories when an update targets a missing document."""


class ImageProcessingError(Exception):
    """Client-side image ingestion failure."""


class FileTooLargeError(ImageProcessingError):
    """Source file exceeds the configured size limit."""

    def __init__(self, size: int, limit: int) -> None:
        super().__init__(f"Image is {size} bytes, limit is {limit} bytes")
        self.size = size
        self.limit = limit


class ImageDecodeError(ImageProcessingError):
    """Source bytes are not a decodable raster image."""


class ApiRequestError(Exception):
    """The admin API answered with an error envelope."""

    def __init__(self, message: str, status_code: int) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class NetworkError(Exception):
    """The admin API could not be reached."""
