"""
Helpers for reading eagerly loaded relationships off ORM rows
"""

from typing import Any

from sqlalchemy import inspect


def preloaded(obj: Any, attr_name: str) -> Any:
    """
    Return a relationship's value if the query loaded it, otherwise None.

    Nested GraphQL fields only expose data that the root statement fetched
    with ``selectinload``; touching an unloaded relationship on an async
    session would trigger implicit IO, so it is reported as absent instead.
    """
    if attr_name in inspect(obj).unloaded:
        return None
    return getattr(obj, attr_name)
