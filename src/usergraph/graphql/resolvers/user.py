from __future__ import annotations

import strawberry
from sqlalchemy import select
from sqlalchemy.orm import selectinload

from ...database.connection import get_async_session
from ...dbmodels import Profiles, SubscribersOnAuthors, Users
from ...logging import get_logger
from ..scalars import parse_identifier
from ..types.user import User

logger = get_logger(__name__)


def _profile_with_member_type():
    return selectinload(Users.profile).selectinload(Profiles.member_type)


async def resolve_users(info: strawberry.Info) -> list[User]:
    """
    Resolve every user with profile, member type and posts attached.

    Subscriptions are not loaded here, so they resolve to null.
    """
    async with get_async_session() as session:
        stmt = select(Users).options(
            _profile_with_member_type(),
            selectinload(Users.posts),
        )
        result = await session.execute(stmt)
        rows = result.scalars().all()

        logger.debug("Fetched users", count=len(rows))
        return [User.from_model(row) for row in rows]


async def resolve_user_by_id(info: strawberry.Info, id: str | None) -> User | None:
    """
    Resolve a user by ID with profile, member type, posts and both
    subscription directions attached.
    """
    key = parse_identifier(id)
    if key is None:
        return None

    async with get_async_session() as session:
        stmt = (
            select(Users)
            .where(Users.id == key)
            .options(
                _profile_with_member_type(),
                selectinload(Users.posts),
                selectinload(Users.user_subscribed_to),
                selectinload(Users.subscribed_to_user),
            )
        )
        result = await session.execute(stmt)
        row = result.scalar_one_or_none()

        if row is None:
            logger.debug("User not found", user_id=str(key))
            return None

        return User.from_model(row)


async def resolve_user_subscribed_to(info: strawberry.Info, id: str | None) -> list[User]:
    """Resolve the authors that user ``id`` subscribes to."""
    key = parse_identifier(id)
    if key is None:
        return []

    async with get_async_session() as session:
        author_ids = select(SubscribersOnAuthors.author_id).where(
            SubscribersOnAuthors.subscriber_id == key
        )
        result = await session.execute(select(Users).where(Users.id.in_(author_ids)))
        rows = result.scalars().all()

        logger.debug("Fetched subscribed-to authors", user_id=str(key), count=len(rows))
        return [User.from_model(row) for row in rows]


async def resolve_subscribed_to_user(info: strawberry.Info, id: str | None) -> list[User]:
    """Resolve the users subscribed to author ``id``."""
    key = parse_identifier(id)
    if key is None:
        return []

    async with get_async_session() as session:
        subscriber_ids = select(SubscribersOnAuthors.subscriber_id).where(
            SubscribersOnAuthors.author_id == key
        )
        result = await session.execute(select(Users).where(Users.id.in_(subscriber_ids)))
        rows = result.scalars().all()

        logger.debug("Fetched subscribers", user_id=str(key), count=len(rows))
        return [User.from_model(row) for row in rows]
