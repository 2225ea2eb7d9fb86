from __future__ import annotations

import logging
import threading
from typing import List, Optional, Tuple

from .indexing import SearchIndex, SubstringSearchIndex
from .models import Question, SearchResult, Section, SectionProgress, StudyDeck, StudyProgress
from .progress import ProgressStore, QuestionRef

logger = logging.getLogger(__name__)


class StudySession:
    """
    Holds the (section index, question index) cursor over a parsed deck and
    mediates navigation and search-driven jumps. Progress is replaced
    wholesale on every change and persisted through the ProgressStore.

    The persisted cursor is positional. If the document changed since it was
    saved, the restored cursor is clamped into the current deck.
    """

    def __init__(
        self,
        deck: StudyDeck,
        store: ProgressStore,
        progress: Optional[StudyProgress] = None,
        search_index: Optional[SearchIndex] = None,
    ):
        self.deck = deck
        # Shared across request threads by the API; every read-modify-write holds it.
        self._lock = threading.RLock()
        self.store = store
        self.search_index = search_index or SubstringSearchIndex()
        self.progress = progress if progress is not None else store.load()
        self.section_index, self.question_index = self._restore_cursor(
            self.progress.last_visited_section, self.progress.last_visited_question
        )

    @property
    def cursor(self) -> Tuple[int, int]:
        return (self.section_index, self.question_index)

    @property
    def current_section(self) -> Optional[Section]:
        if self.deck.is_empty:
            return None
        return self.deck.sections[self.section_index]

    @property
    def current_question(self) -> Optional[Question]:
        section = self.current_section
        if section is None or not section.questions:
            return None
        return section.questions[self.question_index]

    def next(self) -> bool:
        with self._lock:
            section = self.current_section
            if section is None or self.question_index >= len(section.questions) - 1:
                return False
            self._move(self.section_index, self.question_index + 1)
            return True

    def prev(self) -> bool:
        with self._lock:
            if self.current_section is None or self.question_index <= 0:
                return False
            self._move(self.section_index, self.question_index - 1)
            return True

    def select_section(self, section_index: int) -> bool:
        if not 0 <= section_index < len(self.deck.sections):
            return False
        with self._lock:
            self._move(section_index, 0)
        return True

    def jump_to(self, section_id: int, question_id: QuestionRef) -> bool:
        """Move to a question picked from search results. Unknown ids are a no-op."""
        section_index = self.deck.section_index(section_id)
        if section_index is None:
            return False
        question_index = self.deck.question_index(section_index, str(question_id))
        if question_index is None:
            return False
        with self._lock:
            self._move(section_index, question_index)
        return True

    def search(self, query: str, limit: Optional[int] = None) -> List[SearchResult]:
        return self.search_index.search(self.deck.sections, query, limit=limit)

    def toggle_current_reviewed(self) -> bool:
        with self._lock:
            question = self.current_question
            if question is None:
                return False
            self.toggle_reviewed(question.id)
            return True

    def is_current_reviewed(self) -> bool:
        question = self.current_question
        return question is not None and self.store.is_reviewed(self.progress, question.id)

    def toggle_reviewed(self, question_id: QuestionRef) -> StudyProgress:
        with self._lock:
            self.progress = self.store.toggle_reviewed(self.progress, question_id)
            return self.progress

    def is_reviewed(self, question_id: QuestionRef) -> bool:
        return self.store.is_reviewed(self.progress, question_id)

    def section_progress(self, section_id: int) -> SectionProgress:
        return self.store.section_progress(self.progress, self.deck.sections, section_id)

    def deck_progress(self) -> SectionProgress:
        return self.store.deck_progress(self.progress, self.deck.sections)

    def reset_progress(self) -> StudyProgress:
        # Cursor stays where it is; only the stored state is cleared.
        with self._lock:
            self.progress = self.store.reset()
            return self.progress

    def _move(self, section_index: int, question_index: int) -> None:
        self.section_index = section_index
        self.question_index = question_index
        self.progress = self.store.set_last_visited(self.progress, section_index, question_index)
        logger.info("Cursor moved to section %s question %s", section_index, question_index)

    def _restore_cursor(self, section_index: int, question_index: int) -> Tuple[int, int]:
        sections = self.deck.sections
        if not sections:
            return (0, 0)
        clamped_section = min(max(section_index, 0), len(sections) - 1)
        last_question = max(len(sections[clamped_section].questions) - 1, 0)
        clamped_question = min(max(question_index, 0), last_question)
        if (clamped_section, clamped_question) != (section_index, question_index):
            logger.warning(
                "Stored cursor (%s, %s) is outside the document, restoring (%s, %s)",
                section_index,
                question_index,
                clamped_section,
                clamped_question,
            )
        return (clamped_section, clamped_question)
