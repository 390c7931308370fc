"""
Custom Exceptions.

Application-specific exception classes for consistent error handling.

ArgumentError aborts before any network call. TransportError, ProtocolError
and ConfigurationError still produce a well-formed UNKNOWN plugin result.
"""


class ApplicationError(Exception):
    """Base exception for all application errors."""

    def __init__(self, message: str, code: str = "SYS_INTERNAL_ERROR") -> None:
        self.message = message
        self.code = code
        super().__init__(self.message)


class ArgumentError(ApplicationError):
    """Raised when the command line cannot be classified."""

    def __init__(self, message: str = "Invalid arguments", token: str | None = None) -> None:
        self.token = token
        super().__init__(message, code="ARG_INVALID")


class TransportError(ApplicationError):
    """Raised when the daemon cannot be reached or answers with a non-2xx status."""

    def __init__(self, message: str = "Transport error", status_code: int | None = None) -> None:
        self.status_code = status_code
        super().__init__(message, code="NET_TRANSPORT_ERROR")


class ProtocolError(ApplicationError):
    """Raised when the daemon response violates the check result contract."""

    def __init__(self, message: str = "Protocol error") -> None:
        super().__init__(message, code="NET_PROTOCOL_ERROR")


class ConfigurationError(ApplicationError):
    """Raised when the built-in settings cannot be loaded."""

    def __init__(self, message: str = "Configuration error") -> None:
        super().__init__(message, code="SYS_CONFIGURATION_ERROR")
