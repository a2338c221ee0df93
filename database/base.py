"""Database base configuration and session management."""
import pytz
from sqlalchemy import BigInteger, DateTime, Integer
from sqlalchemy.types import TypeDecorator
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import NullPool

from core.config import settings


# SQLite only autoincrements INTEGER primary keys
BigIntegerType = BigInteger().with_variant(Integer, "sqlite")


class UTCDateTime(TypeDecorator):
    """Timezone-aware timestamp, always handed to the database as UTC.

    Postgres keeps ``timestamptz`` instants; SQLite drops the offset, so values
    are normalised to UTC on write and tagged as UTC again on read.
    """

    impl = DateTime
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            raise ValueError(f"Naive datetime {value!r} has no time zone")
        return value.astimezone(pytz.utc)

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        if value.tzinfo is None:
            return pytz.utc.localize(value)
        return value.astimezone(pytz.utc)


class Base(DeclarativeBase):
    """Base class for all database models."""
    pass


def _engine_options() -> dict:
    if settings.database_url.startswith("sqlite"):
        return {"echo": settings.debug}
    if settings.debug:
        return {"echo": True, "poolclass": NullPool}
    return {
        "echo": False,
        "pool_size": settings.database_pool_size,
        "max_overflow": settings.database_max_overflow,
    }


# Create async engine
engine = create_async_engine(settings.database_url, **_engine_options())

# Create async session factory
async_session_maker = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


async def close_db():
    """Close database connections."""
    await engine.dispose()
