"""
TermVector — per-document term frequency counts.
"""
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Tuple

import numpy as np


@dataclass
class TermVector:
    """Mapping from term to occurrence count, plus the running total."""

    counts: Dict[str, int] = field(default_factory=dict)
    total_count: int = 0

    def increment(self, term: str, amount: int = 1) -> None:
        if amount < 0:
            raise ValueError(f"TermVector counts never decrease (got {amount} for '{term}')")
        if term not in self.counts:
            self.counts[term] = 0
        self.counts[term] += amount
        self.total_count += amount

    def value(self, term: str) -> int:
        """Count for *term*; 0 if unseen. Never creates an entry."""
        return self.counts.get(term, 0)

    def __contains__(self, term: object) -> bool:
        return term in self.counts

    def __len__(self) -> int:
        return len(self.counts)

    def items(self) -> Iterable[Tuple[str, int]]:
        return self.counts.items()

    def most_common(self, n: int | None = None) -> List[Tuple[str, int]]:
        """Terms by descending count, ties broken alphabetically."""
        ranked = sorted(self.counts.items(), key=lambda kv: (-kv[1], kv[0]))
        return ranked if n is None else ranked[:n]

    def to_array(self, vocabulary: List[str]) -> np.ndarray:
        """Dense count vector aligned to *vocabulary* (unseen terms are 0)."""
        return np.array([self.value(term) for term in vocabulary], dtype=np.int64)

    def to_dict(self) -> dict:
        return {
            "counts": dict(self.counts),
            "total_count": self.total_count,
        }

    def __repr__(self) -> str:
        return f"TermVector(terms={len(self.counts)}, total={self.total_count})"
