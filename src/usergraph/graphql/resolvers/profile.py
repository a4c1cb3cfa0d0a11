from __future__ import annotations

import strawberry
from sqlalchemy import select

from ...database.connection import get_async_session
from ...dbmodels import Profiles
from ...logging import get_logger
from ..scalars import parse_identifier
from ..types.profile import Profile

logger = get_logger(__name__)


async def resolve_profiles(info: strawberry.Info) -> list[Profile]:
    """Resolve every profile, without member types attached."""
    async with get_async_session() as session:
        result = await session.execute(select(Profiles))
        rows = result.scalars().all()

        logger.debug("Fetched profiles", count=len(rows))
        return [Profile.from_model(row) for row in rows]


async def resolve_profile_by_id(info: strawberry.Info, id: str | None) -> Profile | None:
    """Resolve a profile by its ID."""
    key = parse_identifier(id)
    if key is None:
        return None

    async with get_async_session() as session:
        result = await session.execute(select(Profiles).where(Profiles.id == key))
        row = result.scalar_one_or_none()

        if row is None:
            logger.debug("Profile not found", profile_id=str(key))
            return None

        return Profile.from_model(row)
