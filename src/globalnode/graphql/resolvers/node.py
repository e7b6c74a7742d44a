from __future__ import annotations

from typing import TYPE_CHECKING, Any

import strawberry

from ...errors import ResolutionError
from ..context import get_loaders, get_registry, get_resolve_context

if TYPE_CHECKING:
    from ..types.node import Node


async def resolve_node(info: strawberry.Info, id: strawberry.ID) -> Node | None:
    """
    Resolve a single node by global ID.

    Any ResolutionError surfaces to the client as null so that malformed,
    unknown and missing IDs are indistinguishable from outside.
    """
    registry = get_registry(info)
    try:
        return await registry.resolve(
            str(id), get_resolve_context(info), loaders=get_loaders(info)
        )
    except ResolutionError:
        # Already logged by the registry
        return None


async def resolve_nodes(info: strawberry.Info, ids: list[strawberry.ID]) -> list[Node | None]:
    """Resolve nodes by global ID, keeping input order with null for failures."""
    registry = get_registry(info)
    results = await registry.resolve_many(
        [str(id) for id in ids], get_resolve_context(info), loaders=get_loaders(info)
    )

    nodes: list[Any] = []
    for result in results:
        if isinstance(result, ResolutionError):
            nodes.append(None)
        elif isinstance(result, Exception):
            # Not a resolution outcome; let the GraphQL layer report it
            raise result
        else:
            nodes.append(result)
    return nodes
