"""
Read-only usergraph schema and its FastAPI router
"""

from typing import Any

import strawberry
from graphql import GraphQLSchema, introspection_from_schema
from graphql import validate_schema as validate_type_system
from strawberry.fastapi import GraphQLRouter

from ..config import settings
from ..logging import get_logger
from .context import build_context
from .queries.root import Query

logger = get_logger(__name__)

ROOT_FIELDS = frozenset(
    {
        "memberTypes",
        "memberType",
        "posts",
        "post",
        "users",
        "user",
        "userSubscribedTo",
        "subscribedToUser",
        "profiles",
        "profile",
    }
)

schema = strawberry.Schema(query=Query)


class SchemaError(Exception):
    """The built schema is not the read-only surface clients depend on."""


def schema_problems(graphql_schema: GraphQLSchema) -> list[str]:
    problems = [error.message for error in validate_type_system(graphql_schema)]
    if problems:
        return problems

    if graphql_schema.mutation_type or graphql_schema.subscription_type:
        problems.append("schema must not define mutations or subscriptions")

    exposed = set(graphql_schema.query_type.fields) if graphql_schema.query_type else set()
    if missing := ROOT_FIELDS - exposed:
        problems.append(f"missing root fields: {', '.join(sorted(missing))}")
    if extra := exposed - ROOT_FIELDS:
        problems.append(f"unexpected root fields: {', '.join(sorted(extra))}")

    if "UUID" not in graphql_schema.type_map:
        problems.append("UUID scalar is not registered")

    return problems


def validate_schema() -> None:
    """Refuse to start with a schema that is invalid or drifted from the query surface."""
    graphql_schema = schema._schema
    problems = schema_problems(graphql_schema)
    if problems:
        logger.error("GraphQL schema rejected", problems=problems)
        raise SchemaError("; ".join(problems))

    # Raises if any type cannot be introspected
    introspection_from_schema(graphql_schema)
    logger.info("GraphQL schema validated", root_fields=len(ROOT_FIELDS))


def create_graphql_router(path: str = "/") -> GraphQLRouter[dict[str, Any], None]:
    return GraphQLRouter(
        schema,
        path=path,
        graphql_ide="graphiql" if settings.graphiql else None,
        context_getter=build_context,
    )
