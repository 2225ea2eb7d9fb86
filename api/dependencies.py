from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path

from flashdeck.study import (
    STORAGE_KEY,
    InMemoryKeyValueStore,
    KeyValueStore,
    LocalDocumentStorage,
    ProgressStore,
    RedisKeyValueStore,
    SqlAlchemyKeyValueStore,
    StoragePaths,
    StudyDeck,
    StudySession,
    build_deck,
)


@lru_cache(maxsize=1)
def get_storage() -> LocalDocumentStorage:
    root = Path(os.getenv("STUDY_DATA_ROOT", "./data"))
    return LocalDocumentStorage(StoragePaths(root))


@lru_cache(maxsize=1)
def get_deck() -> StudyDeck:
    name = os.getenv("STUDY_DOCUMENT", "questions.md")
    try:
        raw = get_storage().read_document(name)
    except FileNotFoundError as exc:
        raise RuntimeError(f"Cannot start a study session: {exc}") from exc
    return build_deck(raw)


@lru_cache(maxsize=1)
def get_kv_store() -> KeyValueStore:
    backend = os.getenv("PROGRESS_BACKEND", "sqlalchemy").strip().lower()
    if backend == "sqlalchemy":
        db_url = os.getenv("DATABASE_URL", "sqlite+pysqlite:///./data/flashdeck.db")
        return SqlAlchemyKeyValueStore(db_url)
    if backend == "redis":
        return RedisKeyValueStore(os.getenv("REDIS_URL", "redis://localhost:6379/0"))
    if backend == "memory":
        return InMemoryKeyValueStore()
    raise ValueError(f"Unknown PROGRESS_BACKEND: {backend}")


@lru_cache(maxsize=1)
def get_progress_store() -> ProgressStore:
    return ProgressStore(get_kv_store(), storage_key=os.getenv("PROGRESS_STORAGE_KEY", STORAGE_KEY))


@lru_cache(maxsize=1)
def get_session() -> StudySession:
    return StudySession(get_deck(), get_progress_store())
