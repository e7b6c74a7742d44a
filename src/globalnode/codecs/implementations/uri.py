"""
URI codec producing readable gid:// identifiers.
"""

import re
from typing import Any
from urllib.parse import quote, unquote, urlsplit

from ...errors import MalformedIdError
from ..base import GlobalIdCodec, ParsedGlobalId, normalize_local_id

# GraphQL type name grammar
_TYPE_NAME = re.compile(r"^[_A-Za-z][_0-9A-Za-z]*$")


class UriCodec(GlobalIdCodec):
    """
    Encodes a pair as ``gid://<app>/<TypeName>/<local_id>``.

    The local id is percent-encoded so it may contain any character. Tokens
    minted by a different app are rejected on decode.
    """

    name = "uri"
    scheme = "gid"

    def __init__(self, app: str = "globalnode"):
        if not app or not re.fullmatch(r"[A-Za-z0-9][A-Za-z0-9.-]*", app):
            raise ValueError(f"Invalid app name for gid URIs: {app!r}")
        self.app = app

    def encode(self, type_name: str, local_id: Any) -> str:
        if not isinstance(type_name, str) or not _TYPE_NAME.fullmatch(type_name):
            raise ValueError(f"type_name {type_name!r} is not a valid GraphQL type name")
        encoded_id = quote(normalize_local_id(local_id), safe="")
        return f"{self.scheme}://{self.app}/{type_name}/{encoded_id}"

    def decode(self, token: str) -> ParsedGlobalId:
        if not isinstance(token, str) or not token:
            raise MalformedIdError("Global ID must be a non-empty string", token=None)
        if not token.isprintable() or " " in token:
            raise MalformedIdError("Global ID contains invalid characters", token=token)

        try:
            parts = urlsplit(token)
        except ValueError as e:
            raise MalformedIdError("Global ID is not a valid URI", token=token) from e

        if parts.scheme != self.scheme:
            raise MalformedIdError(f"Global ID must use the {self.scheme}:// scheme", token=token)
        if parts.netloc != self.app:
            raise MalformedIdError("Global ID belongs to a different app", token=token)
        if parts.query or parts.fragment:
            raise MalformedIdError("Global ID must not carry a query or fragment", token=token)

        segments = parts.path.split("/")
        # A valid path is "/TypeName/local_id", which splits into ["", type, id]
        if len(segments) != 3 or segments[0]:
            raise MalformedIdError("Global ID path must be /TypeName/local_id", token=token)

        type_name, encoded_id = segments[1], segments[2]
        if not _TYPE_NAME.fullmatch(type_name):
            raise MalformedIdError("Global ID has an invalid type name", token=token)

        try:
            local_id = unquote(encoded_id, errors="strict")
        except UnicodeDecodeError as e:
            raise MalformedIdError("Global ID local id is not valid UTF-8", token=token) from e
        if not local_id:
            raise MalformedIdError("Global ID has an empty local id", token=token)
        if not local_id.isprintable():
            raise MalformedIdError("Global ID contains non-printable characters", token=token)

        return ParsedGlobalId(type_name, local_id)
