"""
Strawberry integration for global object identification.
"""

from .context import build_context, get_loaders, get_registry, get_resolve_context
from .queries.root import NodeQuery
from .resolvers.node import resolve_node, resolve_nodes
from .schema import create_graphql_router, validate_node_types
from .types.node import Node

__all__ = [
    "Node",
    "NodeQuery",
    "build_context",
    "get_registry",
    "get_loaders",
    "get_resolve_context",
    "resolve_node",
    "resolve_nodes",
    "create_graphql_router",
    "validate_node_types",
]
