"""
Linguistic filters consulted by the n-gram extraction policy.

- Stopword filter: closed list, case-insensitive exact match
- Base noun phrase filter: two-phase POS automaton (ADJ* NOUN+)
- NER agreement filter: all covered tokens share one accepted entity category

Tag checks work on tag prefixes so that Penn Treebank tags (NN, NNS, JJR, ...)
and simplified single-character tagsets (N, ^, A) are both understood.
"""
import enum
from typing import Optional, Sequence

from termindex.config.constants import (
    ACCEPTED_NER_TAGS,
    ADJ_SHORT_TAGS,
    ADJ_TAG_PREFIX,
    NOUN_SHORT_TAGS,
    NOUN_TAG_PREFIX,
    STOPWORDS,
)
from termindex.models.token import Token


class AnnotationRequiredError(ValueError):
    """Raised when POS/NER filtering is requested on unannotated tokens."""

    def __init__(self, missing: int, total: int) -> None:
        self.missing = missing
        self.total = total
        super().__init__(
            f"POS/NER filtering requires POS and NER tags on every token "
            f"({missing} of {total} tokens are missing one)"
        )


def is_stopword(word: str) -> bool:
    return word.lower() in STOPWORDS


def is_nominal(tag: Optional[str]) -> bool:
    if tag is None:
        return False
    return tag.startswith(NOUN_TAG_PREFIX) or tag in NOUN_SHORT_TAGS


def is_adjective(tag: Optional[str]) -> bool:
    if tag is None:
        return False
    return tag.startswith(ADJ_TAG_PREFIX) or tag in ADJ_SHORT_TAGS


# =============================================================================
# Base noun phrase automaton
# =============================================================================

class NPPhase(enum.Enum):
    ADJ_PHASE = "adj"
    NOUN_PHASE = "noun"


def is_base_np_pattern(tags: Sequence[Optional[str]]) -> bool:
    """
    Accept tag sequences of the form ADJ* NOUN+.

    Starts in ADJ_PHASE. An adjective keeps ADJ_PHASE, a nominal moves to
    NOUN_PHASE; in NOUN_PHASE only nominals are accepted. Any other tag
    rejects the whole sequence.
    """
    if not tags or not is_nominal(tags[-1]):
        return False

    phase = NPPhase.ADJ_PHASE
    for tag in tags:
        if phase is NPPhase.ADJ_PHASE and is_adjective(tag):
            continue
        if is_nominal(tag):
            phase = NPPhase.NOUN_PHASE
            continue
        return False
    return True


def is_good_ner(tags: Sequence[Optional[str]]) -> bool:
    """All tags equal, present, and an accepted entity category."""
    distinct = set(tags)
    if len(distinct) != 1:
        return False
    (tag,) = distinct
    return tag is not None and tag in ACCEPTED_NER_TAGS


def passes_posner_filter(tokens: Sequence[Token]) -> bool:
    """NER agreement OR base noun phrase pattern over *tokens*."""
    return (
        is_good_ner([t.ner for t in tokens])
        or is_base_np_pattern([t.pos for t in tokens])
    )


def require_annotations(tokens: Sequence[Token]) -> None:
    """Raise AnnotationRequiredError unless every token has POS and NER tags."""
    missing = sum(1 for t in tokens if not t.is_annotated)
    if missing:
        raise AnnotationRequiredError(missing, len(tokens))
