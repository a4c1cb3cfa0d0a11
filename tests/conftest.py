"""
Shared pytest fixtures and configuration for all tests.
"""

import os
import shutil
import sys
from collections.abc import Generator
from pathlib import Path
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest
import pytest_asyncio
import strawberry
from sqlalchemy.ext.asyncio import AsyncSession

# Add src directory to path so imports work without an editable install
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from alembic import command
from alembic.config import Config

PROJECT_ROOT = Path(__file__).parent.parent


def _postgres_available() -> bool:
    return bool(shutil.which("pg_ctl") or shutil.which("pg_config"))


def _dsn_from_connection(postgresql: Any) -> str:
    info = postgresql.info
    return (
        f"postgresql://{info.user}:{getattr(info, 'password', '') or ''}"
        f"@{info.host}:{info.port}/{info.dbname}"
    )


def _alembic_config() -> Config:
    cfg = Config(str(PROJECT_ROOT / "alembic.ini"))
    cfg.set_main_option("script_location", str(PROJECT_ROOT / "alembic"))
    return cfg


@pytest.fixture(scope="function")
def test_database(postgresql: Any) -> Generator[tuple[str, str], None, None]:
    """Return the DSN for the running pytest-postgresql database."""
    yield _dsn_from_connection(postgresql), postgresql.info.dbname


@pytest.fixture(scope="function")
def alembic_migrate(test_database: tuple[str, str]) -> Generator[None, None, None]:
    """Run Alembic upgrade to head against the pytest-postgresql instance."""
    dsn, _ = test_database

    os.environ["USERGRAPH_DATABASE_URL"] = dsn
    cfg = _alembic_config()
    command.upgrade(cfg, "head")
    yield
    command.downgrade(cfg, "base")


@pytest.fixture(scope="function")
def reset_shared_db_connections(test_database: tuple[str, str]) -> Generator[None, None, None]:
    """Reset and configure shared database connections for the test database."""
    from usergraph.database.connection import init_database, reset_database

    dsn, _ = test_database

    reset_database()
    init_database(dsn, force_reinit=True)

    yield

    reset_database()


@pytest_asyncio.fixture(scope="function")
async def db_session(alembic_migrate: None, reset_shared_db_connections: None) -> Any:
    """Provide an async SQLAlchemy session from the shared pool for testing."""
    _ = alembic_migrate, reset_shared_db_connections

    from usergraph.database.connection import get_async_session

    async with get_async_session() as session:
        yield session


@pytest.fixture
def mock_info():
    """Create a mock GraphQL info object with request context."""
    info = MagicMock(spec=strawberry.Info)
    info.context = {"request": MagicMock(), "config": MagicMock()}
    return info


@pytest.fixture
def mock_session_factory():
    """Build a patched ``get_async_session`` return value.

    Usage::

        with patch("usergraph.graphql.resolvers.post.get_async_session") as factory:
            session = mock_session_factory(factory, rows=[...])
    """

    def configure(patched: MagicMock, rows: list[Any] | None = None, one: Any = None):
        session = AsyncMock(spec=AsyncSession)
        patched.return_value.__aenter__.return_value = session

        result = MagicMock()
        result.scalars.return_value.all.return_value = rows or []
        result.scalar_one_or_none.return_value = one
        session.execute.return_value = result
        return session

    return configure


@pytest.fixture(autouse=True)
def reset_environment() -> Generator[None, None, None]:
    """Reset environment variables for each test."""
    original_env = os.environ.copy()
    yield
    os.environ.clear()
    os.environ.update(original_env)


# Test markers
def pytest_configure(config: Any) -> None:
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "requires_db: mark test as requiring a PostgreSQL server"
    )
    config.addinivalue_line("markers", "integration: mark test as integration test")
    config.addinivalue_line("markers", "unit: mark test as unit test")


def pytest_collection_modifyitems(config: Any, items: list[Any]) -> None:
    """Skip database tests when no PostgreSQL binaries are installed."""
    if _postgres_available():
        return

    skip_db = pytest.mark.skip(reason="PostgreSQL server binaries (pg_ctl) not available")
    for item in items:
        if "requires_db" in item.keywords:
            item.add_marker(skip_db)
