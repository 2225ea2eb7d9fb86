"""Study progress state machine persisted through a key-value port."""

from __future__ import annotations

import json
import logging
from dataclasses import replace
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional, Sequence, Tuple, Union

from .models import QuestionKey, Section, SectionProgress, StudyProgress, utcnow
from .repository import KeyValueStore, StorageUnavailableError

logger = logging.getLogger(__name__)

STORAGE_KEY = "study-progress"

QuestionRef = Union[str, QuestionKey]


class ProgressStore:
    """
    Owns loading, mutating and persisting StudyProgress.

    Every mutation returns a new StudyProgress and immediately overwrites the
    whole stored object under a single key (last write wins). Writes are best
    effort: if the port is unavailable the in-memory value stays authoritative.
    """

    def __init__(
        self,
        port: KeyValueStore,
        storage_key: str = STORAGE_KEY,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.port = port
        self.storage_key = storage_key
        self.clock = clock

    def default_progress(self) -> StudyProgress:
        return StudyProgress(last_updated=self.clock())

    def load(self) -> StudyProgress:
        """
        Read progress from the port. Missing, unreadable or malformed data
        yields the default progress; errors never reach the caller.
        """
        try:
            raw = self.port.get(self.storage_key)
        except (StorageUnavailableError, UnicodeError) as exc:
            logger.warning("Progress storage unavailable, using defaults: %s", exc)
            return self.default_progress()
        if raw is None:
            return self.default_progress()
        try:
            return self._decode(json.loads(raw))
        except (ValueError, TypeError, KeyError, RecursionError) as exc:
            logger.warning("Discarding unreadable stored progress under %r: %s", self.storage_key, exc)
            return self.default_progress()

    def toggle_reviewed(self, progress: StudyProgress, question_id: QuestionRef) -> StudyProgress:
        qid = str(question_id)
        updated = replace(
            progress,
            reviewed_questions=progress.reviewed_questions ^ {qid},
            last_updated=self.clock(),
        )
        self._persist(updated)
        return updated

    @staticmethod
    def is_reviewed(progress: StudyProgress, question_id: QuestionRef) -> bool:
        return str(question_id) in progress.reviewed_questions

    @staticmethod
    def section_progress(progress: StudyProgress, sections: Sequence[Section], section_id: int) -> SectionProgress:
        section = next((s for s in sections if s.id == section_id), None)
        if section is None:
            return SectionProgress(reviewed=0, total=0)
        reviewed = sum(1 for q in section.questions if q.id in progress.reviewed_questions)
        return SectionProgress(reviewed=reviewed, total=len(section.questions))

    @staticmethod
    def deck_progress(progress: StudyProgress, sections: Sequence[Section]) -> SectionProgress:
        """Reviewed count across the whole deck; ids no longer in the document are ignored."""
        total = 0
        reviewed = 0
        for section in sections:
            total += len(section.questions)
            reviewed += sum(1 for q in section.questions if q.id in progress.reviewed_questions)
        return SectionProgress(reviewed=reviewed, total=total)

    @staticmethod
    def total_reviewed(progress: StudyProgress) -> int:
        return len(progress.reviewed_questions)

    def set_last_visited(self, progress: StudyProgress, section_index: int, question_index: int) -> StudyProgress:
        # No bounds check against the document; restoring is the session's concern.
        updated = replace(
            progress,
            last_visited_section=section_index,
            last_visited_question=question_index,
            last_updated=self.clock(),
        )
        self._persist(updated)
        return updated

    def reset(self) -> StudyProgress:
        fresh = self.default_progress()
        self._persist(fresh)
        return fresh

    def _persist(self, progress: StudyProgress) -> None:
        payload = json.dumps(encode_progress(progress))
        try:
            self.port.set(self.storage_key, payload)
        except StorageUnavailableError as exc:
            logger.warning("Skipping progress write under %r: %s", self.storage_key, exc)

    def _decode(self, data: Any) -> StudyProgress:
        if not isinstance(data, dict):
            raise TypeError(f"expected an object, got {type(data).__name__}")
        reviewed = data["reviewedQuestions"]
        if not isinstance(reviewed, list) or not all(isinstance(item, str) for item in reviewed):
            raise TypeError("reviewedQuestions must be a list of strings")
        section_index = _require_int(data, "lastVisitedSection")
        question_index = _require_int(data, "lastVisitedQuestion")
        last_updated = _parse_timestamp(data.get("lastUpdated")) or self.clock()
        return StudyProgress(
            reviewed_questions=frozenset(reviewed),
            last_visited_section=section_index,
            last_visited_question=question_index,
            last_updated=last_updated,
        )


def encode_progress(progress: StudyProgress) -> Dict[str, Any]:
    """Persisted/wire shape of a StudyProgress value."""
    return {
        "reviewedQuestions": sorted(progress.reviewed_questions, key=_reviewed_sort_key),
        "lastVisitedSection": progress.last_visited_section,
        "lastVisitedQuestion": progress.last_visited_question,
        "lastUpdated": progress.last_updated.isoformat(),
    }


def _require_int(data: Dict[str, Any], field_name: str) -> int:
    value = data[field_name]
    # bool is an int subclass, but true/false is not a valid index.
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{field_name} must be an integer")
    return value


def _parse_timestamp(value: Any) -> Optional[datetime]:
    if not isinstance(value, str):
        return None
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def _reviewed_sort_key(question_id: str) -> Tuple[int, Tuple[int, int], str]:
    key = QuestionKey.parse(question_id)
    if key is None:
        return (1, (0, 0), question_id)
    return (0, (key.section_id, key.ordinal), question_id)
