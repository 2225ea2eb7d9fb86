from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException

from flashdeck.study import StudySession

from api.dependencies import get_session
from api.views import question_view, search_result_view, section_summary

router = APIRouter(tags=["sections"])


@router.get("/sections")
def list_sections(session: StudySession = Depends(get_session)):
    return [section_summary(session, idx, section) for idx, section in enumerate(session.deck.sections)]


@router.get("/sections/{section_id}")
def get_section(section_id: int, session: StudySession = Depends(get_session)):
    index = session.deck.section_index(section_id)
    if index is None:
        raise HTTPException(status_code=404, detail=f"Section not found: {section_id}")
    section = session.deck.sections[index]
    return {
        **section_summary(session, index, section),
        "questions": [question_view(session, q) for q in section.questions],
    }


@router.get("/questions/{question_id}")
def get_question(question_id: str, session: StudySession = Depends(get_session)):
    found = session.deck.find_question(question_id)
    if not found:
        raise HTTPException(status_code=404, detail=f"Question not found: {question_id}")
    section, question = found
    return question_view(session, question, section_title=section.title)


@router.get("/search")
def search_questions(query: str = "", limit: Optional[int] = None, session: StudySession = Depends(get_session)):
    results = session.search(query, limit=limit)
    return {"query": query, "results": [search_result_view(session, r) for r in results]}
