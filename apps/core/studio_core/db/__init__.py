"""Async SQLAlchemy engine, session factory and ORM models."""

from studio_core.db.engine import close_engine, create_tables, get_engine, get_session_factory
from studio_core.db.models import Base, UserRow

__all__ = [
    "Base",
    "UserRow",
    "close_engine",
    "create_tables",
    "get_engine",
    "get_session_factory",
]
