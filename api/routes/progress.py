from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException

from flashdeck.study import StudySession

from api.dependencies import get_session
from api.views import progress_view

router = APIRouter(prefix="/progress", tags=["progress"])


@router.get("")
def get_progress(session: StudySession = Depends(get_session)):
    return progress_view(session)


@router.post("/reviewed/{question_id}")
def toggle_reviewed(question_id: str, session: StudySession = Depends(get_session)):
    if session.deck.find_question(question_id) is None:
        raise HTTPException(status_code=404, detail=f"Question not found: {question_id}")
    session.toggle_reviewed(question_id)
    return {"question_id": question_id, "reviewed": session.is_reviewed(question_id), **progress_view(session)}


@router.post("/reset")
def reset_progress(session: StudySession = Depends(get_session)):
    session.reset_progress()
    return progress_view(session)
