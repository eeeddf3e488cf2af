"""Exception hierarchy shared by the mapper, config loader, tunnel and transport."""

from __future__ import annotations

from typing import Optional


class EscliError(Exception):
    """Base class for every error raised by escli."""


class MappingError(EscliError):
    """A parsed command could not be turned into a request."""


class MissingArgument(MappingError):
    """A field required by the active family/operation pair was not supplied."""

    def __init__(self, field_name: str, context: str) -> None:
        self.field_name = field_name
        self.context = context
        super().__init__(f"{field_name} is required for {context}")


class OperationNotImplemented(MappingError):
    """The operation is recognized but intentionally unsupported."""

    def __init__(self, operation: str) -> None:
        self.operation = operation
        super().__init__(f"{operation} is not implemented")


class UnsupportedOperation(MappingError):
    """The operation or HTTP verb is not valid for the command family."""

    def __init__(self, method: str, family: str) -> None:
        self.method = method
        self.family = family
        super().__init__(f"operation '{method}' is not supported for {family} commands")


class ConfigError(EscliError):
    """Configuration directory missing, unreadable, or incomplete."""


class TunnelError(EscliError):
    """The SSH forward could not be established."""


class TransportError(EscliError):
    """The HTTP request failed or returned something other than JSON."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        self.status_code = status_code
        super().__init__(message)


__all__ = [
    "EscliError",
    "MappingError",
    "MissingArgument",
    "OperationNotImplemented",
    "UnsupportedOperation",
    "ConfigError",
    "TunnelError",
    "TransportError",
]
