"""
Identifier scalar shared by every GraphQL type
"""

import uuid
from typing import NewType

import strawberry

UUID = strawberry.scalar(
    NewType("UUID", str),
    name="UUID",
    description="Row identifier. Strings that are not a valid UUID match no row.",
    serialize=str,
    parse_value=str,
)


def parse_identifier(value: object) -> uuid.UUID | None:
    """Turn a client-supplied identifier into a key, or None when it cannot match a row."""
    if value is None:
        return None
    try:
        return uuid.UUID(str(value))
    except ValueError:
        return None
