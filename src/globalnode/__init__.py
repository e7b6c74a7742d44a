"""
globalnode
Global object identification (Relay Node) for GraphQL servers
"""

__version__ = "0.1.0"

from .codecs import (
    Base64Codec,
    FernetCodec,
    GlobalIdCodec,
    ParsedGlobalId,
    UriCodec,
    create_codec,
)
from .config import settings
from .context import ResolveContext
from .errors import (
    Cancelled,
    DuplicateTypeError,
    MalformedIdError,
    NodeError,
    ObjectNotFoundError,
    RegistrationError,
    RegistrySealedError,
    ResolutionError,
    UnknownTypeError,
    UnresolvedTypeError,
)
from .registry import NodeRegistry, NodeResolverEntry

__all__ = [
    "__version__",
    "settings",
    "GlobalIdCodec",
    "ParsedGlobalId",
    "Base64Codec",
    "FernetCodec",
    "UriCodec",
    "create_codec",
    "NodeRegistry",
    "NodeResolverEntry",
    "ResolveContext",
    "NodeError",
    "ResolutionError",
    "MalformedIdError",
    "UnknownTypeError",
    "ObjectNotFoundError",
    "Cancelled",
    "RegistrationError",
    "DuplicateTypeError",
    "RegistrySealedError",
    "UnresolvedTypeError",
]
