"""
Fernet codec: authenticated encryption of global IDs.
"""

from collections.abc import Sequence

from cryptography.fernet import Fernet, InvalidToken, MultiFernet

from ...errors import MalformedIdError
from ...logging import get_logger
from ..base import DelimitedCodec

logger = get_logger(__name__)


class FernetCodec(DelimitedCodec):
    """
    Encrypts "TypeName:local_id" with Fernet (AES-128-CBC + HMAC-SHA256).

    Tokens are URL-safe Base64 and cannot be read or forged without the key.
    Each call uses a fresh IV, so the same pair encodes to a different token
    every time; decoding is still exact.

    Several keys may be given for rotation: the first key encrypts, any key
    decrypts. With ``ttl`` set, tokens older than ``ttl`` seconds are rejected.
    """

    name = "fernet"
    randomized = True

    def __init__(
        self,
        keys: Sequence[str | bytes],
        delimiter: str = ":",
        ttl: int | None = None,
    ):
        super().__init__(delimiter)
        if not keys:
            raise ValueError("FernetCodec requires at least one key")
        try:
            self._fernet = MultiFernet([Fernet(key) for key in keys])
        except (ValueError, TypeError) as e:
            raise ValueError(f"Invalid Fernet key: {e}") from e
        self.ttl = ttl
        logger.debug("Fernet codec initialized", key_count=len(keys), ttl=ttl)

    @staticmethod
    def generate_key() -> str:
        """Generate a new random Fernet key."""
        return Fernet.generate_key().decode("ascii")

    def transform(self, payload: str) -> str:
        return self._fernet.encrypt(payload.encode("utf-8")).decode("ascii")

    def reverse(self, token: str) -> str:
        try:
            raw = self._fernet.decrypt(token.encode("utf-8"), ttl=self.ttl)
            return raw.decode("utf-8")
        except InvalidToken as e:
            raise MalformedIdError(
                "Global ID failed decryption (tampered, expired or wrong key)", token=token
            ) from e
        except UnicodeError as e:
            raise MalformedIdError("Global ID is not valid text", token=token) from e

    def rotate(self, token: str) -> str:
        """Re-encrypt a token under the primary key."""
        try:
            return self._fernet.rotate(token.encode("utf-8")).decode("ascii")
        except InvalidToken as e:
            raise MalformedIdError("Global ID failed decryption", token=token) from e
