"""
Durable link storage.
Implements Strategy Pattern so the services never depend on SQLAlchemy directly.
"""

from .strategies import LinkStore, SQLAlchemyLinkStore

__all__ = [
    "LinkStore",
    "SQLAlchemyLinkStore",
]
