from __future__ import annotations

import strawberry
from sqlalchemy import select

from ...database.connection import get_async_session
from ...dbmodels import MemberTypes
from ...enums import MemberTypeId
from ...logging import get_logger
from ..types.member_type import MemberType

logger = get_logger(__name__)


async def resolve_member_types(info: strawberry.Info) -> list[MemberType]:
    """Resolve every member tier."""
    async with get_async_session() as session:
        result = await session.execute(select(MemberTypes))
        rows = result.scalars().all()

        logger.debug("Fetched member types", count=len(rows))
        return [MemberType.from_model(row) for row in rows]


async def resolve_member_type_by_id(
    info: strawberry.Info, id: MemberTypeId
) -> MemberType | None:
    """Resolve a member tier by its identifier."""
    async with get_async_session() as session:
        stmt = select(MemberTypes).where(MemberTypes.id == MemberTypeId(id).value)
        result = await session.execute(stmt)
        row = result.scalar_one_or_none()

        if row is None:
            logger.debug("Member type not found", member_type_id=MemberTypeId(id).value)
            return None

        return MemberType.from_model(row)
