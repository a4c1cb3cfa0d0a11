"""
Request-scoped context handed to every resolver
"""

from dataclasses import dataclass
from typing import Any

from fastapi import Request

from ..config import settings
from ..logging import get_request_id


@dataclass(frozen=True)
class RouteConfig:
    """Immutable snapshot of the configuration a request was served with.

    Resolvers read it from ``info.context["config"]``. Nothing consumes it
    yet; it is the hook for cross-cutting concerns such as tracing.
    """

    path: str
    method: str
    request_id: str | None
    environment: str
    graphiql: bool


async def build_context(request: Request) -> dict[str, Any]:
    """Build the GraphQL context for one HTTP request."""
    return {
        "request": request,
        "config": RouteConfig(
            path=request.url.path,
            method=request.method,
            request_id=get_request_id(),
            environment=settings.environment,
            graphiql=settings.graphiql,
        ),
    }
