import json
import threading
import time

from flashdeck.study import (
    STORAGE_KEY,
    InMemoryKeyValueStore,
    ProgressStore,
    StudyProgress,
    StudySession,
    build_deck,
)


def stored(kv_store):
    return json.loads(kv_store.get(STORAGE_KEY))


def test_cursor_starts_from_stored_progress(deck, clock):
    payload = {"reviewedQuestions": [], "lastVisitedSection": 0, "lastVisitedQuestion": 1}
    kv_store = InMemoryKeyValueStore({STORAGE_KEY: json.dumps(payload)})
    session = StudySession(deck, ProgressStore(kv_store, clock=clock))
    assert session.cursor == (0, 1)
    assert session.current_question.id == "1-2"


def test_next_and_prev_clamp_inside_section(deck, store, kv_store):
    session = StudySession(deck, store)
    assert session.cursor == (0, 0)

    assert not session.prev()
    assert session.next()
    assert session.cursor == (0, 1)
    assert stored(kv_store)["lastVisitedQuestion"] == 1

    # No cross-section advance.
    assert not session.next()
    assert session.cursor == (0, 1)

    assert session.prev()
    assert session.cursor == (0, 0)
    assert stored(kv_store)["lastVisitedQuestion"] == 0


def test_jump_to_resolves_ids_to_indices(deck, store, kv_store):
    session = StudySession(deck, store)
    assert session.jump_to(4, "4-1")
    assert session.cursor == (3, 0)
    data = stored(kv_store)
    assert (data["lastVisitedSection"], data["lastVisitedQuestion"]) == (3, 0)


def test_jump_to_unknown_ids_is_noop(deck, store, kv_store):
    session = StudySession(deck, store)
    session.next()
    assert not session.jump_to(99, "99-1")
    assert not session.jump_to(1, "1-9")
    assert not session.jump_to(1, "2-1")
    assert session.cursor == (0, 1)


def test_search_then_jump(deck, store):
    session = StudySession(deck, store)
    hit = session.search("dynamic")[0]
    assert session.jump_to(hit.section_id, hit.id)
    assert session.current_question.question == "What is a dynamic segment?"
    assert session.current_section.title == "Routing"


def test_select_section(deck, store):
    session = StudySession(deck, store)
    session.next()
    assert session.select_section(1)
    assert session.cursor == (1, 0)
    assert not session.select_section(10)
    assert not session.select_section(-1)
    assert session.cursor == (1, 0)


def test_empty_section_has_no_current_question(deck, store):
    session = StudySession(deck, store)
    session.select_section(2)
    assert session.current_section.title == "Empty Topic"
    assert session.current_question is None
    assert not session.next()
    assert not session.prev()
    assert not session.toggle_current_reviewed()
    assert not session.is_current_reviewed()


def test_toggle_current_reviewed_updates_progress(deck, store, kv_store):
    session = StudySession(deck, store)
    assert session.toggle_current_reviewed()
    assert session.is_current_reviewed()
    assert session.section_progress(1).reviewed == 1
    assert session.deck_progress().reviewed == 1
    assert stored(kv_store)["reviewedQuestions"] == ["1-1"]

    session.toggle_current_reviewed()
    assert not session.is_current_reviewed()


def test_reset_progress_keeps_cursor(deck, store, kv_store):
    session = StudySession(deck, store)
    session.select_section(1)
    session.toggle_reviewed("2-1")
    session.reset_progress()
    assert session.progress.reviewed_questions == frozenset()
    assert session.cursor == (1, 0)
    assert stored(kv_store)["lastVisitedSection"] == 0


def test_out_of_range_cursor_is_clamped_on_restore(deck, store):
    session = StudySession(deck, store, progress=StudyProgress(last_visited_section=12, last_visited_question=5))
    assert session.cursor == (3, 0)
    assert session.current_question.id == "4-1"

    session = StudySession(deck, store, progress=StudyProgress(last_visited_section=0, last_visited_question=9))
    assert session.cursor == (0, 1)


def test_restore_does_not_rewrite_stored_cursor(deck, clock):
    payload = {"reviewedQuestions": [], "lastVisitedSection": 12, "lastVisitedQuestion": 5}
    kv_store = InMemoryKeyValueStore({STORAGE_KEY: json.dumps(payload)})
    StudySession(deck, ProgressStore(kv_store, clock=clock))
    assert stored(kv_store)["lastVisitedSection"] == 12


def test_empty_deck_session(store):
    session = StudySession(build_deck("no headings here"), store)
    assert session.cursor == (0, 0)
    assert session.current_section is None
    assert session.current_question is None
    assert not session.next()
    assert not session.prev()
    assert not session.select_section(0)
    assert not session.jump_to(1, "1-1")
    assert session.search("anything") == []


class SlowStore(InMemoryKeyValueStore):
    """Widens the read-modify-write window so interleaved toggles would drop updates."""

    def set(self, key, value):
        time.sleep(0.005)
        super().set(key, value)


def test_concurrent_toggles_are_not_lost(clock):
    ids = [f"{section}-{ordinal}" for section in range(1, 5) for ordinal in range(1, 6)]
    kv_store = SlowStore()
    session = StudySession(build_deck(""), ProgressStore(kv_store, clock=clock))
    barrier = threading.Barrier(len(ids))

    def worker(question_id):
        barrier.wait()
        session.toggle_reviewed(question_id)

    threads = [threading.Thread(target=worker, args=(qid,)) for qid in ids]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert session.progress.reviewed_questions == frozenset(ids)
    assert set(stored(kv_store)["reviewedQuestions"]) == set(ids)
