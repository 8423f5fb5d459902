"""
SQLAlchemy database models for Aria Labels.
"""

from datetime import datetime, timezone
from typing import Optional
from pathlib import Path

from sqlalchemy import (
    create_engine,
    Integer,
    String,
    Text,
    DateTime,
    Boolean,
    Index,
)
from sqlalchemy.orm import (
    DeclarativeBase,
    sessionmaker,
    Session,
    Mapped,
    mapped_column,
)
from sqlalchemy.engine import Engine

from ..utils import constants


def utcnow() -> datetime:
    """Current UTC time as a naive datetime, the way SQLite stores it."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


class Base(DeclarativeBase):
    """Base class for all models."""
    pass


class Transient(Base):
    """A cached value that expires after a fixed time."""

    __tablename__ = "transients"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    key: Mapped[str] = mapped_column(String(191), nullable=False)
    value: Mapped[str] = mapped_column(Text, nullable=False)  # JSON
    expires_at: Mapped[Optional[datetime]] = mapped_column(DateTime, nullable=True)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)

    __table_args__ = (
        Index("ix_transients_key", "key", unique=True),
    )

    def __repr__(self) -> str:
        return f"<Transient(key='{self.key}', expires_at={self.expires_at})>"


class PluginState(Base):
    """Whether an installed plugin is active."""

    __tablename__ = "plugin_states"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    plugin_file: Mapped[str] = mapped_column(String(255), nullable=False)
    active: Mapped[bool] = mapped_column(Boolean, default=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime, default=utcnow, onupdate=utcnow)

    __table_args__ = (
        Index("ix_plugin_states_file", "plugin_file", unique=True),
    )

    def __repr__(self) -> str:
        return f"<PluginState(plugin_file='{self.plugin_file}', active={self.active})>"


# Global engine and session factory
_engine: Optional[Engine] = None
_engine_path: Optional[Path] = None
_SessionFactory: Optional[sessionmaker] = None


def get_engine(database_path: Optional[Path] = None) -> Engine:
    """
    Get or create the database engine.

    Asking for a different database path than the current engine's
    replaces the engine.

    Args:
        database_path: Optional custom database path

    Returns:
        SQLAlchemy Engine instance
    """
    global _engine, _engine_path, _SessionFactory

    if database_path is not None and _engine is not None and database_path != _engine_path:
        _engine.dispose()
        _engine = None
        _SessionFactory = None

    if _engine is None:
        if database_path is None:
            constants.ensure_directories()
        db_path = database_path or constants.DATABASE_FILE
        _engine = create_engine(
            f"sqlite:///{db_path}",
            echo=False,
        )
        _engine_path = db_path

    return _engine


def get_session() -> Session:
    """
    Get a new database session.

    Returns:
        SQLAlchemy Session instance
    """
    global _SessionFactory

    if _SessionFactory is None:
        engine = get_engine()
        _SessionFactory = sessionmaker(bind=engine, expire_on_commit=False)

    return _SessionFactory()


def init_db(database_path: Optional[Path] = None) -> None:
    """
    Initialize the database, creating all tables.

    Args:
        database_path: Optional custom database path
    """
    engine = get_engine(database_path)
    Base.metadata.create_all(engine)
