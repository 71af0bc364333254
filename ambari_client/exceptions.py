"""Custom exceptions for the Ambari client."""


class AmbariClientError(Exception):
    """Base exception for all Ambari client errors."""

    def __init__(self, message: str, details: str = None):
        """Initialize the exception.

        Args:
            message: Main error message
            details: Additional details or suggestions
        """
        self.message = message
        self.details = details
        super().__init__(self.format_message())

    def format_message(self) -> str:
        """Format the complete error message.

        Returns:
            Formatted error message with details
        """
        if self.details:
            return f"{self.message}\n\nDetails: {self.details}"
        return self.message


class RemoteError(AmbariClientError):
    """Exception raised when the management API answers with a non-2xx status."""

    def __init__(
        self,
        message: str,
        details: str = None,
        method: str | None = None,
        url: str | None = None,
        status_code: int | None = None,
    ):
        self.method = method
        self.url = url
        self.status_code = status_code
        super().__init__(message, details)


class NotFoundError(RemoteError):
    """Exception raised when the requested resource does not exist."""

    pass


class ProvisioningError(RemoteError):
    """Exception raised when a multi-step provisioning sequence fails part way.

    Steps that already succeeded are not rolled back; ``created_components``
    lists what was left behind on the server.
    """

    def __init__(
        self,
        message: str,
        details: str = None,
        created_components: list[str] | None = None,
        cause: AmbariClientError | None = None,
    ):
        self.created_components = list(created_components or [])
        self.cause = cause
        super().__init__(
            message,
            details,
            method=getattr(cause, "method", None),
            url=getattr(cause, "url", None),
            status_code=getattr(cause, "status_code", None),
        )


class TransportError(AmbariClientError):
    """Exception raised when the management API cannot be reached."""

    pass


class ValidationError(AmbariClientError):
    """Exception raised for validation errors."""

    pass


class ConfigurationError(AmbariClientError):
    """Exception raised for configuration errors."""

    pass
