"""
Request logging for the GraphQL endpoint
"""

import json
import re
import time
from typing import Any

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from .logging import clear_request_context, get_logger, set_request_context

logger = get_logger(__name__)

GRAPHQL_PATH = "/"
REQUEST_ID_HEADER = "X-Request-ID"
REDACTED = "[REDACTED]"

# Query parameter names containing any of these never have their value logged
SECRET_MARKERS = ("password", "secret", "token", "key", "auth", "cookie", "session", "credential")
# GraphQL payload carried in GET query parameters
GRAPHQL_PARAMS = frozenset({"query", "variables", "extensions"})

_NAMED_OPERATION = re.compile(r"\b(?:query|mutation|subscription)\s+([_A-Za-z]\w*)")


def sanitize_query_params(params: dict[str, Any], graphql: bool = False) -> dict[str, Any]:
    """Copy of ``params`` with secrets (and, for GraphQL requests, payloads) redacted."""

    def hidden(name: str) -> bool:
        lowered = name.lower()
        if graphql and lowered in GRAPHQL_PARAMS:
            return True
        return any(marker in lowered for marker in SECRET_MARKERS)

    return {name: REDACTED if hidden(name) else value for name, value in params.items()}


def operation_name_from_document(op: Any, query: Any) -> str | None:
    """Name to log a GraphQL request under.

    ``operationName`` wins, then the first named operation in the document.
    Introspection and anonymous documents get fixed labels.
    """
    if isinstance(op, str) and op:
        return op
    if not isinstance(query, str) or not query:
        return None
    if "__schema" in query or "IntrospectionQuery" in query:
        return "__introspection"

    match = _NAMED_OPERATION.search(query)
    return match.group(1) if match else "unnamed_operation"


async def graphql_operation_name(request: Request) -> str | None:
    if request.url.path != GRAPHQL_PATH:
        return None

    if request.method == "GET":
        params = request.query_params
        return operation_name_from_document(params.get("operationName"), params.get("query"))

    if request.method != "POST":
        return None

    # Starlette caches the body, so the GraphQL view can still read it
    try:
        payload = json.loads(await request.body() or b"null")
    except (json.JSONDecodeError, UnicodeDecodeError):
        return None
    if not isinstance(payload, dict):
        return None
    return operation_name_from_document(payload.get("operationName"), payload.get("query"))


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Tag each request with an id, log it, and echo the id in ``X-Request-ID``."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = set_request_context(operation=await graphql_operation_name(request))
        started = time.perf_counter()

        params = None
        if request.query_params:
            params = sanitize_query_params(
                dict(request.query_params), graphql=request.url.path == GRAPHQL_PATH
            )
        logger.info(
            "Request started",
            method=request.method,
            path=request.url.path,
            query_params=params,
            client=request.client.host if request.client else None,
        )

        try:
            response = await call_next(request)
        except Exception:
            logger.exception("Request failed", method=request.method, path=request.url.path)
            raise
        else:
            logger.info(
                "Request completed",
                method=request.method,
                path=request.url.path,
                status_code=response.status_code,
                duration_ms=round((time.perf_counter() - started) * 1000, 1),
            )
            response.headers[REQUEST_ID_HEADER] = request_id
            return response
        finally:
            clear_request_context()
