from __future__ import annotations

from datetime import datetime, timezone
from typing import Dict, Optional

from redis import Redis
from redis.exceptions import RedisError
from sqlalchemy import Column, DateTime, String, Text, create_engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

Base = declarative_base()


class StorageUnavailableError(RuntimeError):
    """Raised by a key-value store when its backend cannot be reached."""


class KeyValueModel(Base):
    __tablename__ = "kv_entries"
    key = Column(String, primary_key=True)
    value = Column(Text)
    updated_at = Column(DateTime)


class KeyValueStore:
    """
    Abstract durable key-value port used to save and restore study progress.
    Values are opaque strings; serialization belongs to the caller. All
    methods are synchronous.
    """

    def get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set(self, key: str, value: str) -> None:
        raise NotImplementedError


class InMemoryKeyValueStore(KeyValueStore):
    """
    Simple in-memory store for local runs and tests.
    """

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self.entries: Dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self.entries.get(key)

    def set(self, key: str, value: str) -> None:
        self.entries[key] = value


class SqlAlchemyKeyValueStore(KeyValueStore):
    """
    SQL-backed store using SQLAlchemy. Works with SQLite/Postgres URLs.
    """

    def __init__(self, database_url: str):
        self.engine = create_engine(database_url, future=True)
        Base.metadata.create_all(self.engine)
        self.SessionLocal = sessionmaker(bind=self.engine, expire_on_commit=False, future=True)

    def _session(self) -> Session:
        return self.SessionLocal()

    def get(self, key: str) -> Optional[str]:
        try:
            with self._session() as session:
                model = session.get(KeyValueModel, key)
                return model.value if model else None
        except SQLAlchemyError as exc:
            raise StorageUnavailableError(f"Could not read key {key!r}") from exc

    def set(self, key: str, value: str) -> None:
        try:
            with self._session() as session:
                session.merge(KeyValueModel(key=key, value=value, updated_at=datetime.now(timezone.utc)))
                session.commit()
        except SQLAlchemyError as exc:
            raise StorageUnavailableError(f"Could not write key {key!r}") from exc


class RedisKeyValueStore(KeyValueStore):
    """
    Redis-backed store. Accepts either a URL or an already-built client so
    callers (and tests) can share a connection.
    """

    def __init__(self, redis_url: str = "redis://localhost:6379/0", client: Optional[Redis] = None):
        self.redis = client if client is not None else Redis.from_url(redis_url, decode_responses=True)

    def get(self, key: str) -> Optional[str]:
        try:
            value = self.redis.get(key)
            if isinstance(value, bytes):
                value = value.decode("utf-8")
        except (RedisError, UnicodeDecodeError) as exc:
            raise StorageUnavailableError(f"Could not read key {key!r}") from exc
        return value

    def set(self, key: str, value: str) -> None:
        try:
            self.redis.set(key, value)
        except RedisError as exc:
            raise StorageUnavailableError(f"Could not write key {key!r}") from exc
