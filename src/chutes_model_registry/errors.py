"""Error types for the Chutes model registry.

The cache and registry never raise for lookups; they return ``None``. Errors
come from the fetch layer and from configuration handling.
"""

from enum import Enum
from typing import Optional


class ModelRegistryError(Exception):
    """Base class for all registry-related errors.

    This is the parent class for all package-specific exceptions.
    """

    pass


class ConfigurationError(ModelRegistryError):
    """Base class for configuration-related errors.

    This is raised for errors related to configuration loading, parsing,
    or validation.
    """

    def __init__(self, message: str, path: Optional[str] = None) -> None:
        """Initialize configuration error.

        Args:
            message: Error message
            path: Optional path to the configuration file that caused the error
        """
        super().__init__(message)
        self.message = message
        self.path = path


class InvalidConfigError(ConfigurationError):
    """Raised when a configuration value fails validation.

    Examples:
        >>> try:
        ...     validate_config({"refreshInterval": 10})
        ... except InvalidConfigError as e:
        ...     print(f"Bad value for {e.field}: {e}")
    """

    def __init__(self, message: str, field: str, path: Optional[str] = None) -> None:
        """Initialize invalid config error.

        Args:
            message: Error message
            field: Name of the offending configuration field
            path: Optional path to the configuration file
        """
        super().__init__(message, path)
        self.field = field


class FetchErrorKind(str, Enum):
    """Classification of a failed model fetch."""

    AUTH = "auth_error"
    RATE_LIMIT = "rate_limit"
    SERVER = "server_error"
    NETWORK = "network_error"
    INVALID_RESPONSE = "invalid_response"
    HTTP = "http_error"


_RETRYABLE_KINDS = frozenset({FetchErrorKind.RATE_LIMIT, FetchErrorKind.SERVER, FetchErrorKind.NETWORK})


class ModelFetchError(ModelRegistryError):
    """Raised when the model list cannot be fetched from the API.

    A single error type carries the failure class in ``kind`` so callers can
    branch without inspecting exception subclasses.

    Examples:
        >>> try:
        ...     fetcher.fetch_models()
        ... except ModelFetchError as e:
        ...     if e.kind is FetchErrorKind.AUTH:
        ...         print("Configure CHUTES_API_TOKEN")
    """

    def __init__(
        self,
        message: str,
        kind: FetchErrorKind,
        status_code: Optional[int] = None,
        url: Optional[str] = None,
        cause: Optional[BaseException] = None,
    ) -> None:
        """Initialize fetch error.

        Args:
            message: Error message
            kind: Failure classification
            status_code: HTTP status code, when the server answered
            url: URL that was being accessed
            cause: Underlying exception for network failures
        """
        super().__init__(message)
        self.message = message
        self.kind = kind
        self.status_code = status_code
        self.url = url
        self.cause = cause

    @property
    def retryable(self) -> bool:
        """Whether this class of failure is retried by the fetcher."""
        return self.kind in _RETRYABLE_KINDS

    def __str__(self) -> str:
        """Return string representation of the error.

        Returns:
            Error message
        """
        return self.message
