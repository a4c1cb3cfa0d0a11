"""
structlog setup and per-request log context

Request-scoped values (request id, GraphQL operation name) are bound with
``structlog.contextvars`` so every log line emitted while a request is being
served carries them, including lines from resolvers running in other tasks.
"""

import base64
import logging
import secrets
import sys
import time

import structlog

REQUEST_ID_KEY = "request_id"
OPERATION_KEY = "graphql_operation"


def configure_logging(debug: bool = False) -> None:
    """Route structlog through stdlib logging on stdout.

    Debug mode renders colored console lines; otherwise each event is one
    JSON object.
    """
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        stream=sys.stdout,
        format="%(message)s",
        force=True,
    )

    renderer = (
        structlog.dev.ConsoleRenderer(colors=True)
        if debug
        else structlog.processors.JSONRenderer()
    )
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def generate_request_id() -> str:
    """14 urlsafe characters: microsecond clock followed by two random bytes."""
    raw = (time.time_ns() // 1000).to_bytes(8, "big") + secrets.token_bytes(2)
    return base64.urlsafe_b64encode(raw).decode("ascii").rstrip("=")


def set_request_context(request_id: str | None = None, operation: str | None = None) -> str:
    """Bind the request id (generated when absent) and operation name; returns the id."""
    request_id = request_id or generate_request_id()
    values = {REQUEST_ID_KEY: request_id}
    if operation is not None:
        values[OPERATION_KEY] = operation
    structlog.contextvars.bind_contextvars(**values)
    return request_id


def clear_request_context() -> None:
    structlog.contextvars.clear_contextvars()


def get_request_id() -> str | None:
    return structlog.contextvars.get_contextvars().get(REQUEST_ID_KEY)
