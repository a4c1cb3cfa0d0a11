"""
HTTP tests for the FastAPI application and its GraphQL endpoint
"""

from unittest.mock import AsyncMock, patch

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from usergraph import __version__
from usergraph.api.app import create_app
from usergraph.dbmodels import MemberTypes


@pytest.fixture
def app():
    return create_app()


@pytest_asyncio.fixture
async def client(app):
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest.mark.asyncio
async def test_health(client):
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "version": __version__}


@pytest.mark.asyncio
async def test_member_types_round_trip(client, mock_session_factory):
    rows = [
        MemberTypes(id="BASIC", discount=0, posts_limit_per_month=20),
        MemberTypes(id="BUSINESS", discount=0, posts_limit_per_month=100),
    ]

    with patch("usergraph.graphql.resolvers.member_type.get_async_session") as factory:
        mock_session_factory(factory, rows=rows)

        response = await client.post("/", json={"query": "{ memberTypes { id discount } }"})

    assert response.status_code == 200
    assert response.json() == {
        "data": {
            "memberTypes": [
                {"id": "BASIC", "discount": 0},
                {"id": "BUSINESS", "discount": 0},
            ]
        }
    }


@pytest.mark.asyncio
async def test_variables_are_passed_through(client, mock_session_factory):
    row = MemberTypes(id="BASIC", discount=2.3, posts_limit_per_month=20)

    with patch("usergraph.graphql.resolvers.member_type.get_async_session") as factory:
        mock_session_factory(factory, one=row)

        response = await client.post(
            "/",
            json={
                "query": "query ($id: MemberTypeId!) { memberType(id: $id) { id discount } }",
                "variables": {"id": "BASIC"},
            },
        )

    assert response.status_code == 200
    assert response.json() == {"data": {"memberType": {"id": "BASIC", "discount": 2.3}}}


@pytest.mark.asyncio
async def test_syntax_error_is_reported_in_body(client):
    response = await client.post("/", json={"query": "{ memberTypes { id "})

    assert response.status_code == 200
    body = response.json()
    assert body["data"] is None
    assert body["errors"]
    assert "Syntax Error" in body["errors"][0]["message"]


@pytest.mark.asyncio
async def test_resolver_failure_is_scoped_to_field(client, mock_session_factory):
    with patch("usergraph.graphql.resolvers.profile.get_async_session") as factory:
        session = mock_session_factory(factory)
        session.execute.side_effect = RuntimeError("boom")

        response = await client.post("/", json={"query": "{ profiles { id } }"})

    assert response.status_code == 200
    body = response.json()
    assert body["data"] == {"profiles": None}
    assert body["errors"][0]["path"] == ["profiles"]
    assert body["errors"][0]["message"] == "boom"


@pytest.mark.asyncio
async def test_missing_query_is_rejected(client):
    response = await client.post("/", json={"variables": {}})

    assert response.status_code == 400


@pytest.mark.asyncio
async def test_request_id_header(client):
    response = await client.get("/health")

    assert len(response.headers["X-Request-ID"]) == 14


def _report(valid: bool) -> dict:
    return {
        "overall_valid": valid,
        "database": {"valid": valid, "errors": [], "warnings": []},
        "member_types": {"missing": [], "unknown": []},
        "graphql": {"warnings": []},
    }


@pytest.mark.asyncio
async def test_lifespan_refuses_invalid_production_start(app, monkeypatch):
    from usergraph.api import app as app_module
    from usergraph.validation import ValidationError

    monkeypatch.setattr(app_module.settings, "environment", "production")
    with (
        patch.object(app_module, "init_database"),
        patch.object(app_module, "dispose_database", AsyncMock()) as dispose,
        patch.object(
            app_module, "validate_startup_configuration", AsyncMock(return_value=_report(False))
        ),
    ):
        with pytest.raises(ValidationError):
            async with app_module.lifespan(app):
                pass

    dispose.assert_awaited_once()


@pytest.mark.asyncio
async def test_lifespan_starts_when_valid(app):
    from usergraph.api import app as app_module

    with (
        patch.object(app_module, "init_database") as init,
        patch.object(app_module, "dispose_database", AsyncMock()) as dispose,
        patch.object(
            app_module, "validate_startup_configuration", AsyncMock(return_value=_report(True))
        ),
    ):
        async with app_module.lifespan(app):
            init.assert_called_once_with()
            dispose.assert_not_awaited()

    dispose.assert_awaited_once()
