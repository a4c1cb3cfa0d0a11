"""
Reusable seed data functions for database initialization.

Member types are reference data that every deployment needs; the sample
users, profiles, posts and subscriptions exist for local development and
for trying queries out in GraphiQL.
"""

from __future__ import annotations

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from ..dbmodels import MemberTypes, Posts, Profiles, SubscribersOnAuthors, Users
from ..enums import MemberTypeId
from ..logging import get_logger

logger = get_logger(__name__)

# (discount, posts_limit_per_month) per tier
MEMBER_TYPE_DEFAULTS: dict[MemberTypeId, tuple[float, int]] = {
    MemberTypeId.BASIC: (2.3, 20),
    MemberTypeId.BUSINESS: (5.1, 100),
}


async def ensure_member_types(db: AsyncSession) -> list[str]:
    """
    Ensure every member tier exists in the database.

    Existing rows are left untouched so operators can tune discounts
    and limits without the seed overwriting them.

    Returns:
        IDs of the member types that were created by this call
    """
    result = await db.execute(select(MemberTypes.id))
    existing = set(result.scalars().all())

    created: list[str] = []
    for member_type_id, (discount, posts_limit) in MEMBER_TYPE_DEFAULTS.items():
        if member_type_id.value in existing:
            logger.debug("Member type already exists", member_type_id=member_type_id.value)
            continue

        db.add(
            MemberTypes(
                id=member_type_id.value,
                discount=discount,
                posts_limit_per_month=posts_limit,
            )
        )
        created.append(member_type_id.value)

    if created:
        await db.flush()
        logger.info("Created member types", member_type_ids=created)

    return created


async def seed_sample_data(db: AsyncSession, *, users: int = 3) -> list[UUID]:
    """
    Create demo users, each with a profile and a couple of posts.

    Every user subscribes to the next one in the list, so both
    subscription directions have data to show.

    Args:
        db: Database session
        users: Number of users to create

    Returns:
        IDs of the created users, in creation order
    """
    await ensure_member_types(db)

    tiers = list(MemberTypeId)
    created: list[Users] = []

    for index in range(users):
        user = Users(name=f"Sample User {index + 1}", balance=float(100 * (index + 1)))
        user.profile = Profiles(
            is_male=index % 2 == 0,
            year_of_birth=1980 + index,
            member_type_id=tiers[index % len(tiers)].value,
        )
        user.posts = [
            Posts(title=f"Post {n + 1} by {user.name}", content=f"Sample content #{n + 1}")
            for n in range(2)
        ]
        db.add(user)
        created.append(user)

    # Users need their primary keys before edges can reference them
    await db.flush()

    for subscriber, author in zip(created, created[1:]):
        db.add(SubscribersOnAuthors(subscriber_id=subscriber.id, author_id=author.id))

    await db.flush()

    user_ids = [user.id for user in created]
    logger.info("Seeded sample data", user_count=len(user_ids))
    return user_ids
