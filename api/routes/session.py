from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from flashdeck.study import StudySession

from api.dependencies import get_session
from api.views import session_view

router = APIRouter(prefix="/session", tags=["session"])


def _require_cards(session: StudySession) -> None:
    if session.deck.is_empty:
        raise HTTPException(status_code=409, detail="The question document has no sections")


@router.get("")
def get_session_state(session: StudySession = Depends(get_session)):
    _require_cards(session)
    return session_view(session)


@router.post("/next")
def next_question(session: StudySession = Depends(get_session)):
    _require_cards(session)
    moved = session.next()
    return {"moved": moved, **session_view(session)}


@router.post("/prev")
def prev_question(session: StudySession = Depends(get_session)):
    _require_cards(session)
    moved = session.prev()
    return {"moved": moved, **session_view(session)}


@router.post("/jump")
def jump_to_question(section_id: int, question_id: str, session: StudySession = Depends(get_session)):
    _require_cards(session)
    moved = session.jump_to(section_id, question_id)
    return {"moved": moved, **session_view(session)}


@router.post("/sections/{section_index}")
def select_section(section_index: int, session: StudySession = Depends(get_session)):
    _require_cards(session)
    moved = session.select_section(section_index)
    return {"moved": moved, **session_view(session)}
