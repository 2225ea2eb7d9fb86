"""
Study subsystem exports.
"""

from .engine import DocumentParser, MarkdownDocumentParser, build_deck, classify_line, next_state
from .indexing import SearchIndex, SubstringSearchIndex, search
from .models import (
    ClassifiedLine,
    LineKind,
    ParserState,
    Question,
    QuestionKey,
    SearchResult,
    Section,
    SectionProgress,
    StudyDeck,
    StudyProgress,
)
from .progress import STORAGE_KEY, ProgressStore, encode_progress
from .repository import (
    InMemoryKeyValueStore,
    KeyValueStore,
    RedisKeyValueStore,
    SqlAlchemyKeyValueStore,
    StorageUnavailableError,
)
from .session import StudySession
from .storage import LocalDocumentStorage, StoragePaths

__all__ = [
    "ClassifiedLine",
    "DocumentParser",
    "InMemoryKeyValueStore",
    "KeyValueStore",
    "LineKind",
    "LocalDocumentStorage",
    "MarkdownDocumentParser",
    "ParserState",
    "ProgressStore",
    "Question",
    "QuestionKey",
    "RedisKeyValueStore",
    "STORAGE_KEY",
    "SearchIndex",
    "SearchResult",
    "Section",
    "SectionProgress",
    "SqlAlchemyKeyValueStore",
    "StorageUnavailableError",
    "StoragePaths",
    "StudyDeck",
    "StudyProgress",
    "StudySession",
    "SubstringSearchIndex",
    "build_deck",
    "classify_line",
    "encode_progress",
    "next_state",
    "search",
]
