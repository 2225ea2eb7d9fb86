from datetime import datetime, timedelta, timezone

import pytest

from flashdeck.study import InMemoryKeyValueStore, ProgressStore, build_deck

SAMPLE_DOCUMENT = """# Senior Interview Questions

Intro prose that belongs to no question.

---

## 1. Rendering

### Q: What is SSR?
Server-side rendering produces HTML on the server.

It improves first paint.

### Q: What is hydration?
Attaching event handlers to server HTML.

---

## 2. Data Fetching

Some prose about the section.

### Q: How do you cache fetches?
Use the cache option.
---
Dividers inside answers are kept.

## 3. Empty Topic

---

## 4. Routing
### Q: What is a dynamic segment?
A path part in brackets, like [slug].
"""


class FakeClock:
    def __init__(self, start=None):
        self.now = start or datetime(2024, 1, 1, tzinfo=timezone.utc)

    def __call__(self):
        self.now = self.now + timedelta(seconds=1)
        return self.now


@pytest.fixture
def sample_document():
    return SAMPLE_DOCUMENT


@pytest.fixture
def deck():
    return build_deck(SAMPLE_DOCUMENT)


@pytest.fixture
def kv_store():
    return InMemoryKeyValueStore()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def store(kv_store, clock):
    return ProgressStore(kv_store, clock=clock)
