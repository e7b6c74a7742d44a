"""
Error taxonomy for global ID encoding and node resolution.
"""

from typing import Any


class NodeError(Exception):
    """Base class for all global ID and node resolution errors."""

    pass


class ResolutionError(NodeError):
    """Raised when a global ID cannot be resolved to an object."""

    def __init__(
        self,
        message: str,
        token: str | None = None,
        type_name: str | None = None,
        local_id: str | None = None,
    ):
        super().__init__(message)
        self.token = token
        self.type_name = type_name
        self.local_id = local_id

    def log_fields(self) -> dict[str, Any]:
        """Structured fields for log events, omitting unset values."""
        fields = {
            "token": self.token,
            "type_name": self.type_name,
            "local_id": self.local_id,
        }
        return {key: value for key, value in fields.items() if value is not None}


class MalformedIdError(ResolutionError):
    """Raised when a token cannot be decoded into a (type_name, local_id) pair."""

    pass


class UnknownTypeError(ResolutionError):
    """Raised when a decoded type name has no registered lookup."""

    pass


class ObjectNotFoundError(ResolutionError):
    """Raised when a registered lookup returns nothing for a local id."""

    pass


class Cancelled(ResolutionError):
    """Raised when a lookup is cancelled or exceeds its timeout."""

    pass


class RegistrationError(NodeError):
    """Raised when a type cannot be registered."""

    def __init__(self, message: str, type_name: str | None = None):
        super().__init__(message)
        self.type_name = type_name


class DuplicateTypeError(RegistrationError):
    """Raised when a type name is registered twice."""

    pass


class RegistrySealedError(RegistrationError):
    """Raised when registering a type after the registry has been sealed."""

    pass


class UnresolvedTypeError(NodeError):
    """Raised when the type name of a domain object cannot be determined."""

    def __init__(self, message: str, obj: Any = None):
        super().__init__(message)
        self.obj = obj
