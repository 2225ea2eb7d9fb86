from __future__ import annotations

from typing import List, Optional, Protocol, Sequence

from .models import SearchResult, Section


class SearchIndex(Protocol):
    def search(self, sections: Sequence[Section], query: str, limit: Optional[int] = None) -> List[SearchResult]:
        ...


class SubstringSearchIndex:
    """
    Case-insensitive substring lookup over question and answer text.

    No scoring: results come back in document order (section order, then
    question order). Section titles are attached per call and never cached.
    """

    def search(self, sections: Sequence[Section], query: str, limit: Optional[int] = None) -> List[SearchResult]:
        if not query or not query.strip():
            return []
        if limit is not None and limit <= 0:
            return []
        needle = query.lower()
        hits: List[SearchResult] = []
        for section in sections:
            for question in section.questions:
                if needle in question.question.lower() or needle in question.answer_markdown.lower():
                    hits.append(SearchResult(question=question, section_title=section.title))
                    if limit is not None and len(hits) >= limit:
                        return hits
        return hits


def search(sections: Sequence[Section], query: str, limit: Optional[int] = None) -> List[SearchResult]:
    return SubstringSearchIndex().search(sections, query, limit=limit)
