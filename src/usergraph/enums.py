"""
Shared enumerations used by both the ORM models and the GraphQL schema
"""

from enum import Enum


class MemberTypeId(str, Enum):
    """Membership tier identifiers.

    The member_types table is keyed by these values and the GraphQL
    ``MemberTypeId`` enum is generated from this class, so both sides
    always agree on the set of tiers.
    """

    BASIC = "BASIC"
    BUSINESS = "BUSINESS"
