"""Database engine and session factory for direct SQL access."""
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from .models import Base


def create_db_engine(database_url: str) -> Engine:
    """Create the engine for ``database_url``.

    In-memory SQLite shares one connection across threads so every session
    sees the same database.
    """
    if database_url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(database_url, **kwargs)

    # Conservative pool settings for Supabase Session mode (max ~15-20 connections)
    return create_engine(
        database_url,
        pool_pre_ping=True,          # Verify connections before using
        pool_size=3,
        max_overflow=7,
        pool_recycle=3600,
        pool_timeout=30,
    )


def create_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine, expire_on_commit=False)


def create_schema(engine: Engine) -> None:
    """Create any missing tables. Used for SQLite development databases."""
    Base.metadata.create_all(bind=engine)
