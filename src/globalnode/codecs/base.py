"""
Base codec interface for converting (type_name, local_id) pairs to opaque global IDs.
"""

from abc import ABC, abstractmethod
from typing import Any, NamedTuple

from ..errors import MalformedIdError


class ParsedGlobalId(NamedTuple):
    """A decoded global ID."""

    type_name: str
    local_id: str


def normalize_local_id(local_id: Any) -> str:
    """Stringify a local id (ints and UUIDs are common), rejecting empty values."""
    if local_id is None:
        raise ValueError("local_id must not be None")
    if isinstance(local_id, bytes):
        raise ValueError("local_id must be a string, not bytes")
    value = str(local_id)
    if not value:
        raise ValueError("local_id must not be empty")
    # Decoding rejects control and other non-printable characters
    if not value.isprintable():
        raise ValueError(f"local_id {value!r} contains non-printable characters")
    return value


class GlobalIdCodec(ABC):
    """
    Abstract base class for global ID codecs.

    Every implementation satisfies decode(encode(t, i)) == (t, str(i)). Codecs
    are pure and hold no mutable state, so one instance may be shared across
    threads and requests.
    """

    name: str
    # Randomized codecs produce a different token for the same pair on every call
    randomized: bool = False

    @abstractmethod
    def encode(self, type_name: str, local_id: Any) -> str:
        """
        Encode a type name and local id into an opaque token.

        Args:
            type_name: Registered type name
            local_id: Identifier of the object within its type; stringified

        Returns:
            Transport-safe token

        Raises:
            ValueError: If either part is empty or the type name is not encodable
        """
        pass

    @abstractmethod
    def decode(self, token: str) -> ParsedGlobalId:
        """
        Decode a token back into its type name and local id.

        Raises:
            MalformedIdError: If the token cannot be parsed into a valid pair
        """
        pass

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(name='{self.name}')>"


class DelimitedCodec(GlobalIdCodec):
    """
    Codec that joins the pair with a delimiter and reversibly transforms the result.

    Subclasses implement the transform in both directions; delimiter handling
    and validation live here.
    """

    def __init__(self, delimiter: str = ":"):
        if not delimiter or not delimiter.isprintable():
            raise ValueError("delimiter must be a non-empty printable string")
        self.delimiter = delimiter

    @abstractmethod
    def transform(self, payload: str) -> str:
        """Turn the joined payload into a token."""
        pass

    @abstractmethod
    def reverse(self, token: str) -> str:
        """Turn a token back into the joined payload.

        Raises:
            MalformedIdError: If the token is not a valid output of transform()
        """
        pass

    def join(self, type_name: str, local_id: Any) -> str:
        if not isinstance(type_name, str) or not type_name:
            raise ValueError("type_name must be a non-empty string")
        if not type_name.isprintable():
            raise ValueError(f"type_name {type_name!r} contains non-printable characters")
        # split() cuts at the first delimiter, so it must not start inside the type name.
        # With a multi-character delimiter this also rejects e.g. "Post:" before "::".
        if (type_name + self.delimiter).find(self.delimiter) != len(type_name):
            raise ValueError(
                f"type_name {type_name!r} must not contain the delimiter {self.delimiter!r}"
            )
        return f"{type_name}{self.delimiter}{normalize_local_id(local_id)}"

    def split(self, payload: str, token: str) -> ParsedGlobalId:
        type_name, sep, local_id = payload.partition(self.delimiter)
        if not sep:
            raise MalformedIdError("Global ID is missing its type separator", token=token)
        if not type_name or not local_id:
            raise MalformedIdError("Global ID has an empty type name or local id", token=token)
        if not payload.isprintable():
            raise MalformedIdError("Global ID contains non-printable characters", token=token)
        return ParsedGlobalId(type_name, local_id)

    def encode(self, type_name: str, local_id: Any) -> str:
        return self.transform(self.join(type_name, local_id))

    def decode(self, token: str) -> ParsedGlobalId:
        if not isinstance(token, str) or not token:
            raise MalformedIdError("Global ID must be a non-empty string", token=None)
        return self.split(self.reverse(token), token)
