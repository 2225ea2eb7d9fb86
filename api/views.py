from __future__ import annotations

from typing import Optional

from flashdeck.study import Question, SearchResult, Section, StudySession, encode_progress


def question_view(session: StudySession, question: Question, section_title: Optional[str] = None) -> dict:
    payload = {
        "id": question.id,
        "section_id": question.section_id,
        "question": question.question,
        "answer_markdown": question.answer_markdown,
        "reviewed": session.is_reviewed(question.id),
    }
    if section_title is not None:
        payload["section_title"] = section_title
    return payload


def section_summary(session: StudySession, index: int, section: Section) -> dict:
    progress = session.section_progress(section.id)
    return {
        "index": index,
        "id": section.id,
        "title": section.title,
        "question_count": len(section.questions),
        "reviewed": progress.reviewed,
        "total": progress.total,
        "complete": progress.is_complete,
    }


def search_result_view(session: StudySession, result: SearchResult) -> dict:
    return question_view(session, result.question, section_title=result.section_title)


def progress_view(session: StudySession) -> dict:
    overall = session.deck_progress()
    return {
        **encode_progress(session.progress),
        "total_reviewed": session.store.total_reviewed(session.progress),
        "total_questions": session.deck.total_questions,
        "reviewed_in_deck": overall.reviewed,
        "fraction": overall.fraction,
    }


def session_view(session: StudySession) -> dict:
    section = session.current_section
    question = session.current_question
    return {
        "section_index": session.section_index,
        "question_index": session.question_index,
        "section": section_summary(session, session.section_index, section) if section else None,
        "question": question_view(session, question, section_title=section.title) if question else None,
        "total_in_section": len(section.questions) if section else 0,
    }
