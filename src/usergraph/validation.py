"""
Startup checks for the usergraph service

Before serving, the API confirms the database answers and that the
``member_types`` reference rows line up with the ``MemberTypeId`` enum the
schema exposes. Each check returns a section dict with ``valid``,
``warnings`` and ``errors`` lists.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError

from .config import is_production, settings
from .database.connection import check_database_connection, get_async_session
from .dbmodels import MemberTypes
from .enums import MemberTypeId
from .logging import get_logger

logger = get_logger(__name__)

KNOWN_TIERS = frozenset(tier.value for tier in MemberTypeId)


class ValidationError(Exception):
    """Startup validation failed in an environment where that is fatal."""


def _section(**extra: Any) -> dict[str, Any]:
    return {"valid": True, "warnings": [], "errors": [], **extra}


async def validate_database_connection() -> dict[str, Any]:
    results = _section()

    error = await check_database_connection()
    if error is not None:
        results["valid"] = False
        results["errors"].append(error)

    return results


async def validate_member_types() -> dict[str, Any]:
    """
    Compare stored member tiers against ``MemberTypeId``.

    A missing tier is a warning: ``memberType`` returns null for it. A stored
    tier the enum does not know is an error, because ``memberTypes`` and any
    ``users``/``profiles`` query that reaches it fail as a whole.
    """
    results = _section(missing=[], unknown=[])

    try:
        async with get_async_session() as db:
            stored = set((await db.execute(select(MemberTypes.id))).scalars().all())
    except (SQLAlchemyError, OSError) as e:
        results["valid"] = False
        results["errors"].append(f"Failed to read member types: {e}")
        return results

    results["missing"] = sorted(KNOWN_TIERS - stored)
    results["unknown"] = sorted(stored - KNOWN_TIERS)

    if results["missing"]:
        results["warnings"].append(
            f"Member types missing from database: {', '.join(results['missing'])}"
        )
    if results["unknown"]:
        results["valid"] = False
        results["errors"].append(
            f"Member types not known to the schema: {', '.join(results['unknown'])}; "
            "memberTypes, users and profiles queries returning them will fail"
        )

    return results


def validate_graphql_configuration() -> dict[str, Any]:
    results = _section()
    if settings.graphiql and is_production():
        results["warnings"].append("GraphiQL IDE is enabled in a production environment")
    return results


async def validate_startup_configuration() -> dict[str, Any]:
    """Run every check; member tiers are only inspected when the database answers."""
    database = await validate_database_connection()
    if database["valid"]:
        member_types = await validate_member_types()
    else:
        member_types = _section(missing=[], unknown=[])
        member_types["valid"] = False
        member_types["errors"].append("Skipped due to database connection failure")

    sections = {
        "database": database,
        "member_types": member_types,
        "graphql": validate_graphql_configuration(),
    }
    report: dict[str, Any] = {
        "overall_valid": all(section["valid"] for section in sections.values()),
        **sections,
        "environment": {"environment": settings.environment, "debug": settings.debug},
    }

    errors = [e for section in sections.values() for e in section["errors"]]
    warnings = [w for section in sections.values() for w in section["warnings"]]
    if errors:
        logger.error("Startup validation failed", errors=errors)
    if warnings:
        logger.warning("Startup validation warnings", warnings=warnings)
    if not errors and not warnings:
        logger.info("Startup validation passed")

    return report


def get_startup_recommendations(validation_results: dict[str, Any]) -> list[str]:
    if not validation_results["database"]["valid"]:
        return ["Database connection failed - check that PostgreSQL is running and accessible"]

    recommendations = []
    member_types = validation_results["member_types"]
    if member_types.get("missing"):
        recommendations.append("Run 'usergraph seed' to create the missing member types")
    if member_types.get("unknown"):
        recommendations.append(
            "Remove or rename member_types rows that are not BASIC or BUSINESS"
        )
    if validation_results["graphql"]["warnings"]:
        recommendations.append("Set USERGRAPH_GRAPHIQL=false for production deployments")

    return recommendations
