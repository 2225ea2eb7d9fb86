from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_DOCUMENT_NAME = "questions.md"


@dataclass
class StoragePaths:
    root: Path

    def document_path(self, name: str = DEFAULT_DOCUMENT_NAME) -> Path:
        return self.root / name

    def database_path(self) -> Path:
        return self.root / "flashdeck.db"


class LocalDocumentStorage:
    """
    Reads and writes question documents under a data root.
    """

    def __init__(self, storage_paths: StoragePaths):
        self.paths = storage_paths

    def document_exists(self, name: str = DEFAULT_DOCUMENT_NAME) -> bool:
        return self.paths.document_path(name).exists()

    def read_document(self, name: str = DEFAULT_DOCUMENT_NAME) -> str:
        path = self.paths.document_path(name)
        if not path.exists():
            raise FileNotFoundError(f"Question document not found: {path}")
        text = path.read_text(encoding="utf-8")
        logger.debug("Read %s characters from %s", len(text), path)
        return text

    def write_document(self, name: str, text: str) -> Path:
        target = self.paths.document_path(name)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(text, encoding="utf-8")
        return target
