"""Database package: engine, session factory and declarative base."""
from database.base import Base, engine, async_session_maker, close_db

__all__ = [
    "Base",
    "engine",
    "async_session_maker",
    "close_db",
]
