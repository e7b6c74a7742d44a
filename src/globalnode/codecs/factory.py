"""Factory for creating global ID codecs based on configuration."""

from typing import Any

from ..logging import get_logger
from .base import GlobalIdCodec
from .implementations.b64 import Base64Codec
from .implementations.fernet import FernetCodec
from .implementations.uri import UriCodec

logger = get_logger(__name__)

CODEC_NAMES = ("base64", "relay", "fernet", "uri")

_default_codec: GlobalIdCodec | None = None


def create_codec(name: str | None = None, **options: Any) -> GlobalIdCodec:
    """Create a codec instance.

    Args:
        name: One of 'base64', 'relay', 'fernet' or 'uri'. Defaults to settings.codec.
        **options: Overrides for the codec's constructor arguments

    Returns:
        Configured codec

    Raises:
        ValueError: If the codec name is unknown or required configuration is missing
    """
    from ..config import settings

    name = (name or settings.codec).lower()
    delimiter = options.pop("delimiter", settings.delimiter)

    if name == "base64":
        codec: GlobalIdCodec = Base64Codec(delimiter=delimiter, **options)

    elif name == "relay":
        # Classic Relay encoding: standard alphabet, padded
        codec = Base64Codec(delimiter=delimiter, urlsafe=False, padded=True)

    elif name == "fernet":
        keys = options.pop("keys", None) or settings.encryption_keys
        if not keys:
            raise ValueError(
                "Fernet codec requires an encryption key. "
                "Set GLOBALNODE_ENCRYPTION_KEYS or pass keys=[...]."
            )
        ttl = options.pop("ttl", settings.token_ttl)
        codec = FernetCodec(keys=keys, delimiter=delimiter, ttl=ttl, **options)

    elif name == "uri":
        app = options.pop("app", settings.uri_app)
        codec = UriCodec(app=app, **options)

    else:
        raise ValueError(f"Unknown codec: {name}. Expected one of: {', '.join(CODEC_NAMES)}")

    logger.debug("Created global ID codec", codec=codec.name)
    return codec


def get_default_codec() -> GlobalIdCodec:
    """Get the process-wide codec built from settings on first access."""
    global _default_codec

    if _default_codec is None:
        _default_codec = create_codec()
        logger.info("Loaded default global ID codec", codec=_default_codec.name)

    return _default_codec


def reset_default_codec() -> None:
    """Forget the cached default codec (used when settings change, e.g. in tests)."""
    global _default_codec
    _default_codec = None
