"""Custom exceptions for Miniflux Reader."""


class MinifluxError(Exception):
    """Base exception for Miniflux Reader."""


class AuthenticationError(MinifluxError):
    """Miniflux rejected the API key."""


class APIError(MinifluxError):
    """Miniflux API returned an error or could not be reached.

    Attributes:
        status_code: HTTP status code from the API response, if any.
    """

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class NotFoundError(MinifluxError):
    """Requested resource was not found.

    Attributes:
        resource: Kind of resource ("entry", "feed", ...).
        resource_id: The ID that was not found.
    """

    def __init__(self, resource: str, resource_id: int | str | None = None) -> None:
        message = f"{resource.capitalize()} not found"
        if resource_id is not None:
            message += f": {resource_id}"
        super().__init__(message)
        self.resource = resource
        self.resource_id = resource_id


class ConfigurationError(MinifluxError):
    """Invalid or missing configuration."""
