"""
Profile GraphQL type definitions
"""

import strawberry

from ...dbmodels import Profiles
from ...enums import MemberTypeId
from ..preload import preloaded
from ..scalars import UUID
from .member_type import MemberType


@strawberry.type
class Profile:
    """Profile type for GraphQL API."""

    id: UUID
    is_male: bool
    year_of_birth: int
    user_id: UUID
    member_type_id: MemberTypeId
    loaded_member_type: strawberry.Private[MemberType | None] = None

    @strawberry.field
    def member_type(self, member_type_id: UUID | None = None) -> MemberType | None:
        """Member tier of this profile, present when the query included it."""
        return self.loaded_member_type

    @classmethod
    def from_model(cls, row: Profiles) -> "Profile":
        member_type = preloaded(row, "member_type")
        return cls(
            id=row.id,
            is_male=row.is_male,
            year_of_birth=row.year_of_birth,
            user_id=row.user_id,
            member_type_id=MemberTypeId(row.member_type_id),
            loaded_member_type=MemberType.from_model(member_type) if member_type else None,
        )
