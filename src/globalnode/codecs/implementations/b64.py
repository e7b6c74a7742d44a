"""
Base64 codec, the default obfuscating encoding for global IDs.
"""

import base64
import binascii
import re

from ...errors import MalformedIdError
from ..base import DelimitedCodec

_URLSAFE_ALPHABET = re.compile(r"^[A-Za-z0-9_-]+={0,2}$")
_STANDARD_ALPHABET = re.compile(r"^[A-Za-z0-9+/]+={0,2}$")


class Base64Codec(DelimitedCodec):
    """
    Joins "TypeName:local_id" and encodes it as Base64.

    The default is URL-safe Base64 with padding stripped, which needs no
    escaping in URLs or headers. ``Base64Codec(urlsafe=False, padded=True)``
    produces the classic Relay encoding, e.g. ``UG9zdDox`` for ``Post:1``.

    This is obfuscation only: anyone can decode the token.
    """

    name = "base64"

    def __init__(self, delimiter: str = ":", urlsafe: bool = True, padded: bool = False):
        super().__init__(delimiter)
        self.urlsafe = urlsafe
        self.padded = padded
        self._alphabet = _URLSAFE_ALPHABET if urlsafe else _STANDARD_ALPHABET

    def transform(self, payload: str) -> str:
        raw = payload.encode("utf-8")
        encoded = base64.urlsafe_b64encode(raw) if self.urlsafe else base64.b64encode(raw)
        token = encoded.decode("ascii")
        return token if self.padded else token.rstrip("=")

    def reverse(self, token: str) -> str:
        if not self._alphabet.fullmatch(token):
            raise MalformedIdError("Global ID contains invalid characters", token=token)

        stripped = token.rstrip("=")
        padded = stripped + "=" * (-len(stripped) % 4)
        try:
            altchars = b"-_" if self.urlsafe else None
            raw = base64.b64decode(padded, altchars=altchars, validate=True)
            payload = raw.decode("utf-8")
        except (binascii.Error, UnicodeDecodeError) as e:
            raise MalformedIdError("Global ID is not valid Base64 text", token=token) from e

        # Reject tokens that only decode thanks to ignored trailing bits
        if self.transform(payload).rstrip("=") != stripped:
            raise MalformedIdError("Global ID is not canonically encoded", token=token)

        return payload
