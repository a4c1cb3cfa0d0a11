"""
Tests for request-scoped logging context
"""

import structlog

from usergraph.logging import (
    clear_request_context,
    generate_request_id,
    get_request_id,
    set_request_context,
)


def test_generate_request_id_is_compact_and_unique():
    ids = {generate_request_id() for _ in range(50)}

    assert len(ids) == 50
    assert all(len(request_id) == 14 for request_id in ids)


def test_set_and_clear_request_context():
    request_id = set_request_context(operation="GetUsers")

    assert get_request_id() == request_id
    event = structlog.contextvars.merge_contextvars(None, "info", {"event": "hello"})
    assert event == {"event": "hello", "request_id": request_id, "graphql_operation": "GetUsers"}

    clear_request_context()

    assert get_request_id() is None
    assert structlog.contextvars.merge_contextvars(None, "info", {"event": "hello"}) == {
        "event": "hello"
    }


def test_explicit_request_id_is_kept():
    try:
        assert set_request_context(request_id="fixed-id") == "fixed-id"
        assert get_request_id() == "fixed-id"
    finally:
        clear_request_context()
