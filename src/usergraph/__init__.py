"""
usergraph
Read-only GraphQL gateway over users, profiles, posts and member types
"""

__version__ = "0.1.0"

from .config import settings

__all__ = ["settings", "__version__"]
