from flashdeck.study import SubstringSearchIndex, build_deck, search


def test_empty_and_blank_queries_return_nothing(deck):
    assert search(deck.sections, "") == []
    assert search(deck.sections, "   ") == []
    assert search(deck.sections, "\t\n") == []


def test_search_is_case_insensitive(deck):
    results = search(deck.sections, "ssr")
    assert [r.id for r in results] == ["1-1"]
    assert results[0].question.question == "What is SSR?"


def test_search_matches_answer_text_and_attaches_section_title(deck):
    results = search(deck.sections, "CACHE OPTION")
    assert len(results) == 1
    assert results[0].id == "2-1"
    assert results[0].section_id == 2
    assert results[0].section_title == "Data Fetching"


def test_results_keep_document_order(deck):
    results = search(deck.sections, "what is")
    assert [r.id for r in results] == ["1-1", "1-2", "4-1"]


def test_end_to_end_search_returns_second_question():
    deck = build_deck("## 1. Basics\n### Q: What is X?\nX is Y.\n### Q: What is Z?\nZ is W.\n")
    results = search(deck.sections, "z is")
    assert [r.id for r in results] == ["1-2"]
    assert results[0].section_title == "Basics"


def test_query_whitespace_is_significant(deck):
    # Only blank queries are rejected; surrounding spaces are part of the needle.
    assert [r.id for r in search(deck.sections, " ssr")] == ["1-1"]
    assert search(deck.sections, "ssr ") == []


def test_no_matches(deck):
    assert search(deck.sections, "kubernetes") == []


def test_limit_truncates_after_ordering(deck):
    index = SubstringSearchIndex()
    assert [r.id for r in index.search(deck.sections, "what is", limit=2)] == ["1-1", "1-2"]
    assert index.search(deck.sections, "what is", limit=0) == []
