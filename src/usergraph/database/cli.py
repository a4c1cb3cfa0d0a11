"""
``usergraph-migrate``: Alembic commands for the usergraph schema
"""

from pathlib import Path

import click
from alembic import command
from alembic.config import Config
from alembic.util import CommandError
from sqlalchemy.exc import SQLAlchemyError

from usergraph import __version__
from usergraph.logging import configure_logging, get_logger

logger = get_logger(__name__)

# src/usergraph/database/cli.py -> project root holding alembic.ini
PROJECT_ROOT = Path(__file__).resolve().parents[3]


def get_alembic_config() -> Config:
    ini = PROJECT_ROOT / "alembic.ini"
    if not ini.is_file():
        raise click.ClickException(f"alembic.ini not found at {ini}")

    config = Config(str(ini))
    config.set_main_option("script_location", str(PROJECT_ROOT / "alembic"))
    return config


def _run(name: str, *args: object, **kwargs: object) -> None:
    """Call ``alembic.command.<name>`` with the project config."""
    logger.info("Running migration command", command=name, args=args, options=kwargs)
    try:
        getattr(command, name)(get_alembic_config(), *args, **kwargs)
    except (CommandError, SQLAlchemyError, OSError) as e:
        logger.error("Migration command failed", command=name, error=str(e))
        raise click.ClickException(str(e)) from e


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Log at debug level")
@click.version_option(version=__version__, prog_name="usergraph-migrate")
def main(verbose: bool) -> None:
    """Create, inspect and apply migrations for the usergraph tables."""
    configure_logging(debug=verbose)


@main.command()
@click.argument("revision", default="head")
@click.option("--sql", is_flag=True, help="Print the SQL instead of running it")
def upgrade(revision: str, sql: bool) -> None:
    """Apply migrations up to REVISION."""
    _run("upgrade", revision, sql=sql)


@main.command()
@click.argument("revision", default="-1")
@click.option("--sql", is_flag=True, help="Print the SQL instead of running it")
def downgrade(revision: str, sql: bool) -> None:
    """Revert migrations down to REVISION (one step by default)."""
    _run("downgrade", revision, sql=sql)


@main.command()
@click.option("-m", "--message", required=True)
@click.option("--autogenerate/--empty", default=True, show_default=True)
def revision(message: str, autogenerate: bool) -> None:
    """Write a new migration script, diffing the models against the database."""
    _run("revision", message=message, autogenerate=autogenerate)


@main.command()
def current() -> None:
    """Show the revision the database is at."""
    _run("current", verbose=True)


@main.command()
def history() -> None:
    """List migration scripts."""
    _run("history", verbose=True)


if __name__ == "__main__":
    main()
