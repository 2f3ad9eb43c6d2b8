"""SQLAlchemy model for the durable key-value medium. Run migrations to create the table."""
from datetime import datetime

from sqlalchemy import DateTime, String, Text
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from medisocial.config import settings


class Base(DeclarativeBase):
    pass


class KeyValueEntry(Base):
    """One serialized blob per logical key (history, last post, RTS history)."""

    __tablename__ = "kv_store"

    key: Mapped[str] = mapped_column(String(128), primary_key=True)
    value: Mapped[str] = mapped_column(Text, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=datetime.utcnow, onupdate=datetime.utcnow)


# Async engine and session factory
_engine: AsyncEngine | None = None
_session_factory: async_sessionmaker[AsyncSession] | None = None


def init_db(database_url: str | None = None) -> async_sessionmaker[AsyncSession]:
    """Create async engine and session factory. Call once at app startup."""
    global _engine, _session_factory
    if _session_factory is not None:
        return _session_factory
    url = (database_url or settings.database_url or "").strip()
    if not url:
        raise ValueError("DATABASE_URL is not set. Add it to .env, e.g. sqlite+aiosqlite:///./medisocial.db")
    _engine = create_async_engine(
        url,
        echo=settings.log_level.upper() == "DEBUG",
    )
    _session_factory = async_sessionmaker(_engine, class_=AsyncSession, expire_on_commit=False)
    return _session_factory


async def create_tables() -> None:
    """Create all tables. Use for dev; prefer Alembic for production."""
    init_db()
    async with _engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def dispose_db() -> None:
    global _engine, _session_factory
    if _engine is not None:
        await _engine.dispose()
    _engine = None
    _session_factory = None
