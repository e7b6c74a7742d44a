"""
Schema integration: startup validation and the FastAPI router
"""

from typing import Any

import strawberry
from fastapi import Request
from graphql import GraphQLObjectType
from strawberry.fastapi import GraphQLRouter

from ..errors import RegistrationError
from ..logging import get_logger, set_request_context
from ..registry import NodeRegistry
from .context import build_context

logger = get_logger(__name__)

NODE_INTERFACE = "Node"


def validate_node_types(schema: strawberry.Schema, registry: NodeRegistry) -> None:
    """Check that every schema type implementing Node is registered.

    Runs at startup so a missing registration fails fast instead of
    producing unresolvable IDs at runtime.

    Raises:
        RegistrationError: If any Node type has no registry entry
    """
    graphql_schema = schema._schema

    missing = sorted(
        name
        for name, graphql_type in graphql_schema.type_map.items()
        if isinstance(graphql_type, GraphQLObjectType)
        and any(interface.name == NODE_INTERFACE for interface in graphql_type.interfaces)
        and name not in registry
    )
    if missing:
        logger.error("Node types missing from registry", type_names=missing)
        raise RegistrationError(f"Node types not registered: {', '.join(missing)}")

    logger.info("Node types validated", count=len(registry))


def create_graphql_router(
    schema: strawberry.Schema,
    registry: NodeRegistry,
    path: str = "/graphql",
    lookup_timeout: float | None = None,
    graphiql: bool = True,
) -> GraphQLRouter[dict[str, Any], None]:
    """Create a GraphQL router for FastAPI.

    Validates the schema's Node types against the registry and seals the
    registry; no types can be registered once requests are being served.
    """
    validate_node_types(schema, registry)
    registry.seal()

    async def get_context(request: Request) -> dict[str, Any]:
        """Get the context for GraphQL resolvers."""
        request_id = set_request_context(request.headers.get("x-request-id"))
        return build_context(
            registry,
            lookup_timeout=lookup_timeout,
            request=request,
            request_id=request_id,
        )

    return GraphQLRouter(
        schema,
        path=path,
        graphql_ide="graphiql" if graphiql else None,
        context_getter=get_context,
    )
