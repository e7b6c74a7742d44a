"""
Node interface GraphQL type definition
"""

import strawberry


@strawberry.interface(description="An object with a globally unique ID.")
class Node:
    """Node interface for GraphQL API.

    Implementing types keep their local id in a ``strawberry.Private`` field and
    register with the node registry under their GraphQL type name; ``id`` is
    derived from that registration.
    """

    @strawberry.field(description="Globally unique ID of the object.")
    def id(self, info: strawberry.Info) -> strawberry.ID:
        from ..context import get_registry

        return strawberry.ID(get_registry(info).global_id(self))
