from __future__ import annotations

import strawberry
from sqlalchemy import select

from ...database.connection import get_async_session
from ...dbmodels import Posts
from ...logging import get_logger
from ..scalars import parse_identifier
from ..types.post import Post

logger = get_logger(__name__)


async def resolve_posts(info: strawberry.Info) -> list[Post]:
    """Resolve every post."""
    async with get_async_session() as session:
        result = await session.execute(select(Posts))
        rows = result.scalars().all()

        logger.debug("Fetched posts", count=len(rows))
        return [Post.from_model(row) for row in rows]


async def resolve_post_by_id(info: strawberry.Info, id: str | None) -> Post | None:
    """Resolve a post by its ID."""
    key = parse_identifier(id)
    if key is None:
        return None

    async with get_async_session() as session:
        result = await session.execute(select(Posts).where(Posts.id == key))
        row = result.scalar_one_or_none()

        if row is None:
            logger.debug("Post not found", post_id=str(key))
            return None

        return Post.from_model(row)
