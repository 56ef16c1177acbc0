"""
Shared test fixtures for the term extraction & indexing test suite.
"""
from typing import List, Optional, Sequence, Tuple

import pytest

from termindex.models.document import Document
from termindex.models.token import Token


def make_tokens(
    words: Sequence[str],
    tags: Optional[Sequence[Tuple[str, str]]] = None,
) -> List[Token]:
    """Tokens for *words* joined by single spaces, optionally (pos, ner) tagged."""
    tokens: List[Token] = []
    offset = 0
    for i, word in enumerate(words):
        pos, ner = tags[i] if tags is not None else (None, None)
        tokens.append(Token(word, offset, offset + len(word), pos=pos, ner=ner))
        offset += len(word) + 1
    return tokens


def make_document(docid: str, words: Sequence[str], tags=None) -> Document:
    return Document(docid=docid, text=" ".join(words), tokens=make_tokens(words, tags))


# ==========================================================================
# Plain documents
# ==========================================================================

@pytest.fixture
def cat_document():
    return make_document("cat", ["the", "cat", "sat"])


@pytest.fixture
def empty_document():
    return Document(docid="empty", text="", tokens=[])


@pytest.fixture
def repeated_document():
    return make_document("rep", ["Data", "data", "DATA", "science"])


# ==========================================================================
# Annotated documents
# ==========================================================================

@pytest.fixture
def fox_document():
    return make_document(
        "fox",
        ["quick", "brown", "fox"],
        [("JJ", "O"), ("JJ", "O"), ("NN", "O")],
    )


@pytest.fixture
def new_york_document():
    return make_document(
        "nyc",
        ["New", "York"],
        [("VB", "LOCATION"), ("VB", "LOCATION")],
    )


@pytest.fixture
def news_document():
    words = ["Barack", "Obama", "visited", "the", "new", "research", "lab", "in", "Chicago", "."]
    tags = [
        ("NNP", "PERSON"), ("NNP", "PERSON"), ("VBD", "O"), ("DT", "O"),
        ("JJ", "O"), ("NN", "O"), ("NN", "O"), ("IN", "O"),
        ("NNP", "LOCATION"), (".", "O"),
    ]
    return make_document("news", words, tags)


# ==========================================================================
# Redis stub
# ==========================================================================

class InMemoryRedis:
    """Minimal in-memory Redis stub (no server required)."""

    def __init__(self):
        self.store: dict = {}

    def set(self, key: str, value: str, **kwargs) -> None:  # noqa: ARG002
        self.store[key] = value

    def get(self, key: str):
        return self.store.get(key)

    def exists(self, *keys: str) -> int:
        return sum(1 for k in keys if k in self.store)

    def delete(self, *keys: str) -> int:
        deleted = 0
        for k in keys:
            if k in self.store:
                del self.store[k]
                deleted += 1
        return deleted


@pytest.fixture
def redis_stub():
    return InMemoryRedis()
