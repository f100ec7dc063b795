"""Exceptions raised by API clients, configuration and providers."""


class TeraverseError(Exception):
    """Base exception for controller errors."""

    def __init__(self, message: str = "An error occurred") -> None:
        self.message = message
        super().__init__(self.message)


class APIError(TeraverseError):
    """The game API rejected a call or could not be reached."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        endpoint: str | None = None,
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)

    @property
    def is_retryable(self) -> bool:
        """Rate limiting and server-side errors are worth another attempt."""
        if self.status_code is None:
            return True
        return self.status_code == 429 or self.status_code >= 500


class APITimeoutError(APIError):
    """A call exceeded its per-call timeout."""

    def __init__(self, endpoint: str, timeout: float) -> None:
        self.timeout = timeout
        super().__init__(f"{endpoint} timed out after {timeout:.1f}s", endpoint=endpoint)


class ConfigurationError(TeraverseError):
    """Invalid or missing configuration."""

    def __init__(self, message: str, config_key: str | None = None) -> None:
        self.config_key = config_key
        super().__init__(message)


class ProviderError(TeraverseError):
    """A decision provider could not be created."""
