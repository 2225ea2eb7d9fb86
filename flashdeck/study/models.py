from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import FrozenSet, List, Optional, Tuple

_QUESTION_ID_RE = re.compile(r"([0-9]+)-([0-9]+)")


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class LineKind(str, Enum):
    SECTION_HEADING = "section_heading"
    QUESTION_HEADING = "question_heading"
    RULE = "rule"
    BODY = "body"


class ParserState(str, Enum):
    OUTSIDE = "outside"
    IN_SECTION = "in_section"
    IN_QUESTION = "in_question"


@dataclass(frozen=True)
class ClassifiedLine:
    kind: LineKind
    text: str
    section_id: Optional[int] = None
    title: Optional[str] = None


@dataclass(frozen=True, order=True)
class QuestionKey:
    """
    Structured question identity. The string form "<section_id>-<ordinal>" is
    only produced or consumed at the persistence/search/HTTP boundaries.
    """

    section_id: int
    ordinal: int

    def __str__(self) -> str:
        return f"{self.section_id}-{self.ordinal}"

    @classmethod
    def parse(cls, text: str) -> Optional["QuestionKey"]:
        match = _QUESTION_ID_RE.fullmatch(str(text))
        if not match:
            return None
        try:
            return cls(section_id=int(match.group(1)), ordinal=int(match.group(2)))
        except ValueError:
            return None


@dataclass(frozen=True)
class Question:
    key: QuestionKey
    section_id: int
    question: str
    answer_markdown: str

    @property
    def id(self) -> str:
        return str(self.key)


@dataclass(frozen=True)
class Section:
    id: int
    title: str
    questions: Tuple[Question, ...] = ()


@dataclass(frozen=True)
class SearchResult:
    question: Question
    section_title: str

    @property
    def id(self) -> str:
        return self.question.id

    @property
    def section_id(self) -> int:
        return self.question.section_id


@dataclass(frozen=True)
class SectionProgress:
    reviewed: int
    total: int

    @property
    def fraction(self) -> float:
        return self.reviewed / self.total if self.total > 0 else 0.0

    @property
    def is_complete(self) -> bool:
        return self.total > 0 and self.reviewed == self.total


@dataclass(frozen=True)
class StudyProgress:
    reviewed_questions: FrozenSet[str] = frozenset()
    last_visited_section: int = 0
    last_visited_question: int = 0
    last_updated: datetime = field(default_factory=utcnow)


@dataclass(frozen=True)
class StudyDeck:
    """
    Read-only parsed model handed to the presentation layer. Built once per
    process and shared without synchronization since nothing mutates it.
    """

    sections: Tuple[Section, ...]

    @property
    def all_questions(self) -> List[Question]:
        return [q for section in self.sections for q in section.questions]

    @property
    def total_questions(self) -> int:
        return sum(len(section.questions) for section in self.sections)

    @property
    def is_empty(self) -> bool:
        return not self.sections

    def section_index(self, section_id: int) -> Optional[int]:
        for idx, section in enumerate(self.sections):
            if section.id == section_id:
                return idx
        return None

    def question_index(self, section_index: int, question_id: str) -> Optional[int]:
        if not 0 <= section_index < len(self.sections):
            return None
        for idx, question in enumerate(self.sections[section_index].questions):
            if question.id == str(question_id):
                return idx
        return None

    def find_question(self, question_id: str) -> Optional[Tuple[Section, Question]]:
        key = QuestionKey.parse(question_id)
        if key is None:
            return None
        for section in self.sections:
            if section.id != key.section_id:
                continue
            for question in section.questions:
                if question.key == key:
                    return section, question
        return None
