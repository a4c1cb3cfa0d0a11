"""
MemberType GraphQL type definitions
"""

import strawberry

from ...dbmodels import MemberTypes
from ...enums import MemberTypeId

# Register the shared tier enumeration with the schema
strawberry.enum(MemberTypeId, description="Membership tier identifier.")


@strawberry.type
class MemberType:
    """Membership tier with its discount and monthly post allowance."""

    id: MemberTypeId
    discount: float
    posts_limit_per_month: int

    @classmethod
    def from_model(cls, row: MemberTypes) -> "MemberType":
        return cls(
            id=MemberTypeId(row.id),
            discount=row.discount,
            posts_limit_per_month=row.posts_limit_per_month,
        )
