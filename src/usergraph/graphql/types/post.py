"""
Post GraphQL type definitions
"""

import strawberry

from ...dbmodels import Posts
from ..scalars import UUID


@strawberry.type
class Post:
    """Post type for GraphQL API."""

    id: UUID
    title: str
    content: str
    author_id: UUID

    @classmethod
    def from_model(cls, row: Posts) -> "Post":
        return cls(id=row.id, title=row.title, content=row.content, author_id=row.author_id)
