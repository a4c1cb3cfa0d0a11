"""
User GraphQL type definitions
"""

import strawberry

from ...dbmodels import Users
from ..preload import preloaded
from ..scalars import UUID
from .post import Post
from .profile import Profile


@strawberry.type
class User:
    """User type for GraphQL API.

    Relation fields return what the root query eagerly loaded and null for
    relations it did not include; they never issue queries of their own.
    """

    id: UUID
    name: str
    balance: float
    loaded_profile: strawberry.Private[Profile | None] = None
    loaded_posts: strawberry.Private[list[Post] | None] = None
    loaded_subscribed_to: strawberry.Private[list["User"] | None] = None
    loaded_subscribers: strawberry.Private[list["User"] | None] = None

    @strawberry.field
    def profile(self, id: UUID | None = None) -> Profile | None:
        """Profile of this user."""
        return self.loaded_profile

    @strawberry.field
    def posts(self) -> list[Post] | None:
        """Posts authored by this user."""
        return self.loaded_posts

    @strawberry.field
    def user_subscribed_to(self, id: UUID | None = None) -> list["User"] | None:
        """Authors this user subscribes to."""
        return self.loaded_subscribed_to

    @strawberry.field
    def subscribed_to_user(self, id: UUID | None = None) -> list["User"] | None:
        """Users subscribed to this user."""
        return self.loaded_subscribers

    @classmethod
    def from_model(cls, row: Users, include_relations: bool = True) -> "User":
        if not include_relations:
            return cls(id=row.id, name=row.name, balance=row.balance)

        profile = preloaded(row, "profile")
        posts = preloaded(row, "posts")
        subscribed_to = preloaded(row, "user_subscribed_to")
        subscribers = preloaded(row, "subscribed_to_user")

        return cls(
            id=row.id,
            name=row.name,
            balance=row.balance,
            loaded_profile=Profile.from_model(profile) if profile is not None else None,
            loaded_posts=[Post.from_model(p) for p in posts] if posts is not None else None,
            loaded_subscribed_to=_scalar_users(subscribed_to),
            loaded_subscribers=_scalar_users(subscribers),
        )


def _scalar_users(rows: list[Users] | None) -> list[User] | None:
    # Users reached through a subscription edge carry no relations of their own
    if rows is None:
        return None
    return [User.from_model(row, include_relations=False) for row in rows]
