"""
Extraction policies — token sequence → ordered term instances.

Two variants share one capability, ``extract(tokens, stats=None)``:

    UnigramExtractor   one instance per token, no filtering
    NgramExtractor     all spans up to ``order`` tokens, with optional
                       stopword and POS/NER filters

Each variant is a frozen dataclass holding its configuration as plain data.
Policies are pure: the same tokens always produce the same instances.
"""
import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Union

from termindex.config import settings
from termindex.config.constants import POLICY_NAMES
from termindex.extraction.filters import (
    is_stopword,
    passes_posner_filter,
    require_annotations,
)
from termindex.models.term_instance import TermInstance
from termindex.models.token import Token

logger = logging.getLogger(__name__)


@dataclass
class ExtractionStats:
    """Candidate bookkeeping for one or more extraction passes."""

    candidates_by_order: Counter = field(default_factory=Counter)
    rejected_stopword: int = 0
    rejected_posner: int = 0
    emitted: int = 0

    def candidates(self, order: int) -> int:
        return self.candidates_by_order.get(order, 0)

    @property
    def total_candidates(self) -> int:
        return sum(self.candidates_by_order.values())

    def to_dict(self) -> Dict[str, object]:
        return {
            "candidates_by_order": dict(sorted(self.candidates_by_order.items())),
            "rejected_stopword": self.rejected_stopword,
            "rejected_posner": self.rejected_posner,
            "emitted": self.emitted,
        }


@dataclass(frozen=True)
class UnigramExtractor:
    """Every token is a term."""

    def extract(
        self,
        tokens: Sequence[Token],
        stats: Optional[ExtractionStats] = None,
    ) -> List[TermInstance]:
        instances = [TermInstance(tok.text.lower(), (i,)) for i, tok in enumerate(tokens)]
        if stats is not None:
            stats.candidates_by_order[1] += len(instances)
            stats.emitted += len(instances)
        return instances


@dataclass(frozen=True)
class NgramExtractor:
    """
    All contiguous spans of 1..order tokens that pass the enabled filters.

    Filters run in a fixed order and short-circuit:
        1. stopword: first or last token is a stopword → reject
        2. POS/NER: accept on NER agreement OR base noun phrase pattern

    Spans that would run past the last token are never produced.
    """

    order: int = 1
    posner_filter: bool = False
    stopword_filter: bool = False

    def __post_init__(self) -> None:
        if self.order < 1:
            raise ValueError(f"n-gram order must be >= 1, got {self.order}")

    def extract(
        self,
        tokens: Sequence[Token],
        stats: Optional[ExtractionStats] = None,
    ) -> List[TermInstance]:
        """
        Extract filtered n-grams in (start index, length) order.

        Args:
            tokens: The document's tokens, in order.
            stats: Optional collector for candidate and rejection counts.

        Returns:
            Term instances; all unigrams at a start index come before the
            bigrams starting there, and so on.

        Raises:
            AnnotationRequiredError: If posner_filter is on and any token
                lacks a POS or NER tag.
        """
        if self.posner_filter:
            require_annotations(tokens)

        n = len(tokens)
        instances: List[TermInstance] = []

        for i in range(n):
            for k in range(1, self.order + 1):
                last = i + k - 1
                if last >= n:
                    continue
                if stats is not None:
                    stats.candidates_by_order[k] += 1

                span = tokens[i : last + 1]

                if self.stopword_filter and (
                    is_stopword(span[0].text) or is_stopword(span[-1].text)
                ):
                    if stats is not None:
                        stats.rejected_stopword += 1
                    continue

                if self.posner_filter and not passes_posner_filter(span):
                    if stats is not None:
                        stats.rejected_posner += 1
                    continue

                instances.append(TermInstance.from_range([t.text for t in span], i))

        if stats is not None:
            stats.emitted += len(instances)
        return instances


ExtractionPolicy = Union[UnigramExtractor, NgramExtractor]


def policy_from_settings(
    name: Optional[str] = None,
    order: Optional[int] = None,
    stopword_filter: Optional[bool] = None,
    posner_filter: Optional[bool] = None,
) -> ExtractionPolicy:
    """
    Build a policy from environment settings, with per-argument overrides.

    Raises:
        ValueError: On an unknown policy name or an invalid order.
    """
    name = (name or settings.TERMINDEX_POLICY).lower()
    if name not in POLICY_NAMES:
        raise ValueError(f"Unknown extraction policy '{name}' (expected one of {POLICY_NAMES})")

    if name == "unigram":
        policy: ExtractionPolicy = UnigramExtractor()
    else:
        policy = NgramExtractor(
            order=settings.TERMINDEX_NGRAM_ORDER if order is None else order,
            posner_filter=settings.TERMINDEX_POSNER_FILTER if posner_filter is None else posner_filter,
            stopword_filter=settings.TERMINDEX_STOPWORD_FILTER if stopword_filter is None else stopword_filter,
        )
    logger.info("Extraction policy: %r", policy)
    return policy
