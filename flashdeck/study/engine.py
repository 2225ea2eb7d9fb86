from __future__ import annotations

import logging
import re
from typing import List, Optional

from .models import (
    ClassifiedLine,
    LineKind,
    ParserState,
    Question,
    QuestionKey,
    Section,
    StudyDeck,
)

logger = logging.getLogger(__name__)

SECTION_HEADING_RE = re.compile(r"^## ([0-9]+)\. (.+)$")
QUESTION_HEADING_RE = re.compile(r"^### Q: (.+)$")
RULE_RE = re.compile(r"^---\s*$")


def classify_line(line: str) -> ClassifiedLine:
    """
    Tag a single line with its kind. Classification is context free; whether a
    question heading is honoured depends on the parser state (see next_state).
    """
    section_match = SECTION_HEADING_RE.match(line)
    if section_match:
        try:
            section_id = int(section_match.group(1))
        except ValueError:
            # Past the interpreter's int conversion limit; treat as a malformed heading.
            return ClassifiedLine(kind=LineKind.BODY, text=line)
        return ClassifiedLine(
            kind=LineKind.SECTION_HEADING,
            text=line,
            section_id=section_id,
            title=section_match.group(2),
        )
    question_match = QUESTION_HEADING_RE.match(line)
    if question_match:
        return ClassifiedLine(kind=LineKind.QUESTION_HEADING, text=line, title=question_match.group(1))
    if RULE_RE.match(line):
        return ClassifiedLine(kind=LineKind.RULE, text=line)
    return ClassifiedLine(kind=LineKind.BODY, text=line)


def next_state(state: ParserState, kind: LineKind) -> ParserState:
    if kind is LineKind.SECTION_HEADING:
        return ParserState.IN_SECTION
    if kind is LineKind.QUESTION_HEADING and state is not ParserState.OUTSIDE:
        return ParserState.IN_QUESTION
    return state


class DocumentParser:
    """
    Abstract document parser. Implementations must be pure: the same raw text
    always yields structurally identical sections, and malformed input only
    ever degrades to fewer sections or questions.
    """

    parser_version: str = "abstract"

    def parse(self, raw: str) -> List[Section]:
        raise NotImplementedError


class _Accumulator:
    def __init__(self) -> None:
        self.sections: List[Section] = []
        self.section_id: Optional[int] = None
        self.section_title = ""
        self.questions: List[Question] = []
        self.question_key: Optional[QuestionKey] = None
        self.question_text = ""
        self.body: List[str] = []

    def open_section(self, section_id: int, title: str) -> None:
        self.flush_question()
        self.flush_section()
        self.section_id = section_id
        self.section_title = title
        self.questions = []

    def open_question(self, text: str) -> None:
        self.flush_question()
        self.question_key = QuestionKey(section_id=self.section_id, ordinal=len(self.questions) + 1)
        self.question_text = text
        self.body = []

    def append_body(self, line: str) -> None:
        self.body.append(line)

    def flush_question(self) -> None:
        if self.question_key is None:
            return
        self.questions.append(
            Question(
                key=self.question_key,
                section_id=self.question_key.section_id,
                question=self.question_text,
                answer_markdown="\n".join(self.body).strip(),
            )
        )
        self.question_key = None
        self.question_text = ""
        self.body = []

    def flush_section(self) -> None:
        if self.section_id is None:
            return
        self.sections.append(Section(id=self.section_id, title=self.section_title, questions=tuple(self.questions)))
        self.section_id = None
        self.section_title = ""
        self.questions = []

    def finish(self) -> List[Section]:
        self.flush_question()
        self.flush_section()
        return self.sections


class MarkdownDocumentParser(DocumentParser):
    """
    Line-oriented scanner for the interview document format:

        ## <digits>. <section title>
        ### Q: <question text>
        <answer body lines>

    Text before the first section heading and prose between a section heading
    and its first question is dropped. Horizontal rules are kept only inside
    an answer body.
    """

    def __init__(self, parser_version: str = "markdown-v1"):
        self.parser_version = parser_version

    def parse(self, raw: str) -> List[Section]:
        acc = _Accumulator()
        state = ParserState.OUTSIDE
        for raw_line in (raw or "").split("\n"):
            line = classify_line(raw_line.rstrip("\r"))
            following = next_state(state, line.kind)

            if line.kind is LineKind.SECTION_HEADING:
                acc.open_section(line.section_id, line.title)
            elif line.kind is LineKind.QUESTION_HEADING and state is not ParserState.OUTSIDE:
                acc.open_question(line.title)
            elif line.kind is LineKind.RULE and state is not ParserState.IN_QUESTION:
                pass
            elif state is ParserState.IN_QUESTION:
                acc.append_body(line.text)

            state = following

        sections = acc.finish()
        logger.debug(
            "Parsed %s sections with %s questions (%s)",
            len(sections),
            sum(len(s.questions) for s in sections),
            self.parser_version,
        )
        return sections


def build_deck(raw: str, parser: Optional[DocumentParser] = None) -> StudyDeck:
    parser = parser or MarkdownDocumentParser()
    return StudyDeck(sections=tuple(parser.parse(raw)))
