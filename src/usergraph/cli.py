"""
``usergraph`` command: run the API and seed its database
"""

import asyncio
from uuid import UUID

import click
import uvicorn
from sqlalchemy.exc import SQLAlchemyError

from usergraph import __version__
from usergraph.config import settings
from usergraph.logging import configure_logging, get_logger

logger = get_logger(__name__)

LOG_LEVELS = ["debug", "info", "warning", "error"]


@click.group()
@click.version_option(version=__version__, prog_name="usergraph")
def cli() -> None:
    """Serve and seed the usergraph GraphQL API."""


@cli.command()
@click.option("--host", default=settings.api_host, show_default=True, help="Interface to bind")
@click.option("--port", default=settings.api_port, show_default=True, type=int)
@click.option(
    "--reload/--no-reload",
    default=settings.api_reload,
    show_default=True,
    help="Restart when source files change",
)
@click.option(
    "--log-level",
    default=settings.log_level.lower(),
    show_default=True,
    type=click.Choice(LOG_LEVELS),
)
def serve(host: str, port: int, reload: bool, log_level: str) -> None:
    """Run the API with uvicorn."""
    configure_logging(debug=log_level == "debug")
    logger.info("Starting usergraph API", host=host, port=port, reload=reload)

    uvicorn.run(
        "usergraph.api.app:create_app",
        factory=True,
        host=host,
        port=port,
        reload=reload,
        log_level=log_level,
    )


async def _seed(sample_data: bool, users: int) -> tuple[list[str], list[UUID]]:
    from usergraph.database.connection import dispose_database, get_async_session
    from usergraph.database.seed_data import ensure_member_types, seed_sample_data

    try:
        async with get_async_session() as db:
            created = await ensure_member_types(db)
            user_ids = await seed_sample_data(db, users=users) if sample_data else []
    finally:
        await dispose_database()
    return created, user_ids


@cli.command()
@click.option(
    "--sample-data",
    is_flag=True,
    help="Also create demo users with profiles, posts and subscriptions",
)
@click.option("--users", default=3, show_default=True, type=click.IntRange(min=1))
def seed(sample_data: bool, users: int) -> None:
    """Create the member tiers and, optionally, demo data."""
    configure_logging()

    try:
        created, user_ids = asyncio.run(_seed(sample_data, users))
    except (SQLAlchemyError, OSError) as e:
        raise click.ClickException(f"Seeding failed: {e}") from e

    click.echo(f"Member types created: {', '.join(created) or 'none, all present'}")
    for user_id in user_ids:
        click.echo(f"Sample user: {user_id}")


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
