"""
Global ID codecs.
"""

from .base import DelimitedCodec, GlobalIdCodec, ParsedGlobalId
from .factory import create_codec, get_default_codec, reset_default_codec
from .implementations.b64 import Base64Codec
from .implementations.fernet import FernetCodec
from .implementations.uri import UriCodec

__all__ = [
    "GlobalIdCodec",
    "DelimitedCodec",
    "ParsedGlobalId",
    "Base64Codec",
    "FernetCodec",
    "UriCodec",
    "create_codec",
    "get_default_codec",
    "reset_default_codec",
]
