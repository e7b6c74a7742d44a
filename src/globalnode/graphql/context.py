"""
GraphQL context helpers: where the registry and per-request loaders live.
"""

import asyncio
from typing import Any

import strawberry

from ..context import ResolveContext
from ..loaders import NodeLoaders
from ..registry import NodeRegistry

REGISTRY_KEY = "node_registry"
LOADERS_KEY = "node_loaders"
TIMEOUT_KEY = "lookup_timeout"
CANCEL_EVENT_KEY = "cancel_event"


def build_context(
    registry: NodeRegistry,
    lookup_timeout: float | None = None,
    cancel_event: asyncio.Event | None = None,
    **extra: Any,
) -> dict[str, Any]:
    """Build a GraphQL context dict carrying the registry and fresh loaders."""
    return {
        REGISTRY_KEY: registry,
        LOADERS_KEY: registry.create_loaders(),
        TIMEOUT_KEY: lookup_timeout,
        CANCEL_EVENT_KEY: cancel_event,
        **extra,
    }


def get_registry(info: strawberry.Info) -> NodeRegistry:
    registry = info.context.get(REGISTRY_KEY)
    if registry is None:
        raise RuntimeError("Node registry not found in GraphQL context")
    return registry


def get_loaders(info: strawberry.Info) -> NodeLoaders | None:
    return info.context.get(LOADERS_KEY)


def get_resolve_context(info: strawberry.Info) -> ResolveContext:
    """Translate the request's timeout and cancel event into a ResolveContext."""
    return ResolveContext(
        timeout=info.context.get(TIMEOUT_KEY),
        cancel_event=info.context.get(CANCEL_EVENT_KEY),
        info=info,
    )
