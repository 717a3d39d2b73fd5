"""
Database configuration and session management
"""
import time
from typing import Iterator
from fastapi import Request
from sqlalchemy import create_engine, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

# Base class for models
Base = declarative_base()


def normalize_database_url(url: str) -> str:
    # Hosted PostgreSQL providers hand out postgres:// URLs
    if url and url.startswith("postgres://"):
        return url.replace("postgres://", "postgresql://", 1)
    return url


def create_db_engine(database_url: str) -> Engine:
    """Create the SQLAlchemy engine for the configured database URL."""
    url = normalize_database_url(database_url)
    if url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}}
        if url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        return create_engine(url, **kwargs)
    return create_engine(url, pool_pre_ping=True)


def create_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


def init_db(engine: Engine) -> None:
    """Create tables for every registered model."""
    from fashion_api import models  # noqa: F401  registers the mappers

    Base.metadata.create_all(bind=engine)


def ping_database(engine: Engine) -> float:
    """Run a trivial query; returns the round trip in milliseconds.

    Raises:
        SQLAlchemyError: if the database cannot be reached
    """
    started = time.perf_counter()
    with engine.connect() as conn:
        conn.execute(text("SELECT 1"))
    return round((time.perf_counter() - started) * 1000, 2)


def get_db(request: Request) -> Iterator[Session]:
    """Dependency to get database session"""
    db = request.app.state.context.session_factory()
    try:
        yield db
    finally:
        db.close()
