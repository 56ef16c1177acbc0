"""
TermInstance — one occurrence of a term at a contiguous token range.
"""
from dataclasses import dataclass
from typing import Sequence, Tuple

from termindex.config.constants import TERM_JOINER


@dataclass(frozen=True)
class TermInstance:
    """A term name plus the token indices it covers in its document."""

    term_name: str
    token_indices: Tuple[int, ...]

    def __post_init__(self) -> None:
        inds = tuple(self.token_indices)
        if not inds:
            raise ValueError(f"TermInstance '{self.term_name}' covers no tokens")
        if inds != tuple(range(inds[0], inds[0] + len(inds))):
            raise ValueError(
                f"TermInstance '{self.term_name}' indices must be contiguous and increasing: {inds}"
            )
        object.__setattr__(self, "token_indices", inds)

    @classmethod
    def from_range(cls, texts: Sequence[str], start: int) -> "TermInstance":
        """Build an instance covering ``start .. start+len(texts)-1``."""
        name = TERM_JOINER.join(t.lower() for t in texts)
        return cls(name, tuple(range(start, start + len(texts))))

    @property
    def first_index(self) -> int:
        return self.token_indices[0]

    @property
    def last_index(self) -> int:
        return self.token_indices[-1]

    @property
    def order(self) -> int:
        return len(self.token_indices)

    def to_dict(self) -> dict:
        return {
            "term_name": self.term_name,
            "token_indices": list(self.token_indices),
        }

    def __repr__(self) -> str:
        return f"TermInstance('{self.term_name}', {list(self.token_indices)})"
