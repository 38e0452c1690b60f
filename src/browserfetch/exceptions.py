"""
Custom exceptions for the browserfetch application.

This module defines domain-specific exceptions that let callers tell a feed
that could not be loaded apart from a browser build that simply does not exist
for the requested platform or channel.
"""


class BrowserFetchError(Exception):
    """
    Base exception for all browserfetch errors.

    All custom exceptions in browserfetch inherit from this class
    to allow for easy catching of all application-specific errors.
    """

    def __init__(self, message: str, details: str | None = None) -> None:
        """
        Initialize the exception.

        Args:
            message: The primary error message.
            details: Optional additional context about the error.
        """
        self.message = message
        self.details = details
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} - {self.details}"
        return self.message


# =============================================================================
# Configuration Errors
# =============================================================================


class ConfigurationError(BrowserFetchError):
    """
    Exception raised when configuration is invalid or missing.

    This includes:
    - Configuration file parsing errors
    - Invalid configuration values
    """

    pass


class ConfigFileError(ConfigurationError):
    """Exception raised when configuration file cannot be read or parsed."""

    pass


class ConfigValidationError(ConfigurationError):
    """
    Exception raised when configuration validation fails.

    Attributes:
        field: The configuration key that failed validation.
        value: The offending value.
    """

    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: str | None = None,
        details: str | None = None,
    ) -> None:
        super().__init__(message, details)
        self.field = field
        self.value = value


# =============================================================================
# Feed Errors
# =============================================================================


class FetchError(BrowserFetchError):
    """
    Exception raised when an upstream feed cannot be retrieved.

    This includes:
    - Connection failures and timeouts
    - Non-2xx HTTP responses

    Attributes:
        url: The URL that was being fetched.
        status_code: The HTTP status code, when a response was received.
    """

    def __init__(
        self,
        message: str,
        url: str | None = None,
        status_code: int | None = None,
        details: str | None = None,
    ) -> None:
        """
        Initialize the fetch exception.

        Args:
            message: The primary error message.
            url: The URL that was being fetched.
            status_code: The HTTP status code.
            details: Optional additional context.
        """
        super().__init__(message, details)
        self.url = url
        self.status_code = status_code


class ParseError(BrowserFetchError):
    """
    Exception raised when a feed payload does not have the expected shape.

    Attributes:
        url: The URL the payload came from, when known.
    """

    def __init__(
        self,
        message: str,
        url: str | None = None,
        details: str | None = None,
    ) -> None:
        super().__init__(message, details)
        self.url = url


# =============================================================================
# Validation Errors
# =============================================================================


class ValidationError(BrowserFetchError):
    """
    Exception raised when validation fails.

    Attributes:
        field: The name of the field that failed validation.
        value: The value that failed validation.
    """

    def __init__(
        self,
        message: str,
        field: str | None = None,
        value: str | None = None,
        details: str | None = None,
    ) -> None:
        """
        Initialize the validation exception.

        Args:
            message: The primary error message.
            field: The name of the field that failed validation.
            value: The value that failed validation.
            details: Optional additional context.
        """
        super().__init__(message, details)
        self.field = field
        self.value = value


class UnsupportedPlatformError(ValidationError):
    """Exception raised when a vendor ships no build for the requested platform."""

    def __init__(self, vendor: str, platform: str, details: str | None = None) -> None:
        super().__init__(
            f"{vendor} is not available for platform '{platform}'",
            field="platform",
            value=platform,
            details=details,
        )
        self.vendor = vendor
        self.platform = platform


class UnsupportedChannelError(ValidationError):
    """Exception raised when a channel does not belong to the vendor's channel set."""

    def __init__(self, vendor: str, channel: str) -> None:
        super().__init__(
            f"{vendor} has no '{channel}' channel",
            field="channel",
            value=channel,
        )
        self.vendor = vendor
        self.channel = channel


class VersionError(ValidationError):
    """Exception raised when version parsing or comparison fails."""

    pass
