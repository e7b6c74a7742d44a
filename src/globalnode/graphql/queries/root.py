"""
Node root query fields
"""

import strawberry

from ..types.node import Node


@strawberry.type
class NodeQuery:
    """Root query fields for refetching objects by global ID.

    Subclass it to add the fields to an application's Query type.
    """

    @strawberry.field(description="Fetch an object by its global ID.")
    async def node(self, info: strawberry.Info, id: strawberry.ID) -> Node | None:
        from ..resolvers.node import resolve_node

        return await resolve_node(info, id)

    @strawberry.field(description="Fetch objects by global ID, in order; null for unresolved IDs.")
    async def nodes(self, info: strawberry.Info, ids: list[strawberry.ID]) -> list[Node | None]:
        from ..resolvers.node import resolve_nodes

        return await resolve_nodes(info, ids)
