from __future__ import annotations

import json
from datetime import UTC, datetime
from typing import Any

from sqlalchemy import DateTime, String, Text, create_engine, make_url, select
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, sessionmaker
from sqlalchemy.pool import StaticPool

from feefo_schema.core.metrics import CACHE_HITS, CACHE_MISSES
from feefo_schema.repositories.base import AbstractCacheStore


class Base(DeclarativeBase):
    pass


class CacheEntryORM(Base):
    __tablename__ = "cache_entries"

    key: Mapped[str] = mapped_column(String, primary_key=True)
    # JSON text, so numbers, strings and lists keep their type across reads
    value: Mapped[str] = mapped_column(Text, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)


class SQLiteCacheStore(AbstractCacheStore):
    """
    SQLAlchemy-backed cache store. Reads and writes are single-key and synchronous;
    callers on the event loop hand them to a worker thread.
    """

    def __init__(self, database_url: str) -> None:
        if make_url(database_url).database in (None, "", ":memory:"):
            # One shared connection, or each thread would see its own empty database
            self.engine = create_engine(
                database_url,
                poolclass=StaticPool,
                connect_args={"check_same_thread": False},
            )
        else:
            self.engine = create_engine(database_url)
        self.session_maker = sessionmaker(self.engine, expire_on_commit=False)

    def initialize(self) -> None:
        Base.metadata.create_all(self.engine)

    def get(self, key: str) -> Any | None:
        with self.session_maker() as session:
            orm_entry = session.execute(
                select(CacheEntryORM).where(CacheEntryORM.key == key)
            ).scalar_one_or_none()
            if orm_entry is None:
                CACHE_MISSES.inc()
                return None
            CACHE_HITS.inc()
            return json.loads(orm_entry.value)

    def set(self, key: str, value: Any) -> None:
        with self.session_maker() as session, session.begin():
            orm_entry = session.get(CacheEntryORM, key)
            now = datetime.now(UTC)
            if orm_entry:
                orm_entry.value = json.dumps(value)
                orm_entry.updated_at = now
            else:
                session.add(CacheEntryORM(key=key, value=json.dumps(value), updated_at=now))

    def dispose(self) -> None:
        self.engine.dispose()
