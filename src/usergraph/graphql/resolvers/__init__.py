"""Resolver package for the GraphQL schema.

Each module maps root query fields of one entity to a single SQLAlchemy
statement and converts the resulting rows into GraphQL types.
"""
