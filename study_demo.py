"""
Example: load a question document, restore progress from SQLite and drive a
study session from the command line.

Usage:
    python3 study_demo.py --document ./data/questions.md --search "hydration"
    python3 study_demo.py --document ./data/questions.md --toggle 1-2 --next
"""

import argparse
import logging
from pathlib import Path

from flashdeck.study import (
    LocalDocumentStorage,
    ProgressStore,
    SqlAlchemyKeyValueStore,
    StoragePaths,
    StudySession,
    build_deck,
)


def setup_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        force=True,
    )


def print_summary(session: StudySession) -> None:
    overall = session.deck_progress()
    print(f"{len(session.deck.sections)} sections, {overall.reviewed}/{overall.total} questions reviewed")
    for section in session.deck.sections:
        progress = session.section_progress(section.id)
        marker = "x" if progress.is_complete else " "
        print(f"  [{marker}] {section.id:>3}. {section.title} ({progress.reviewed}/{progress.total})")


def print_current(session: StudySession) -> None:
    section = session.current_section
    question = session.current_question
    if section is None or question is None:
        print("No question at the current position.")
        return
    status = "reviewed" if session.is_current_reviewed() else "not reviewed"
    print(
        f"\n{section.title} - question {session.question_index + 1} of {len(section.questions)} "
        f"[{question.id}, {status}]"
    )
    print(f"Q: {question.question}\n")
    print(question.answer_markdown)


def main():
    parser = argparse.ArgumentParser()
    parser.add_argument("--document", required=True, type=Path, help="Path to the question document")
    parser.add_argument("--db", default=Path("./data/flashdeck.db"), type=Path, help="SQLite progress DB path")
    parser.add_argument("--search", default=None, help="Substring to search for")
    parser.add_argument("--toggle", default=None, help="Question id to toggle as reviewed, e.g. 1-2")
    parser.add_argument("--next", action="store_true", help="Advance to the next question in the section")
    parser.add_argument("--prev", action="store_true", help="Go back to the previous question in the section")
    parser.add_argument("--reset", action="store_true", help="Clear all stored progress")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args()

    setup_logging(args.verbose)

    storage = LocalDocumentStorage(StoragePaths(args.document.parent))
    deck = build_deck(storage.read_document(args.document.name))
    if deck.is_empty:
        print(f"No sections found in {args.document}")
        return

    args.db.parent.mkdir(parents=True, exist_ok=True)
    store = ProgressStore(SqlAlchemyKeyValueStore(f"sqlite+pysqlite:///{args.db}"))
    session = StudySession(deck, store)

    if args.reset:
        session.reset_progress()
    if args.toggle:
        session.toggle_reviewed(args.toggle)
    if args.next:
        session.next()
    if args.prev:
        session.prev()

    print_summary(session)

    if args.search is not None:
        results = session.search(args.search)
        print(f"\n{len(results)} result(s) for {args.search!r}:")
        for result in results:
            print(f"  {result.id:>6}  [{result.section_title}] {result.question.question}")

    print_current(session)


if __name__ == "__main__":
    main()
