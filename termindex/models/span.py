"""
Span — half-open character interval [start, end).
"""
from dataclasses import dataclass


@dataclass(frozen=True)
class Span:
    """An immutable [start, end) character interval."""

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise ValueError(f"Invalid span: start {self.start} > end {self.end}")

    @property
    def length(self) -> int:
        return self.end - self.start

    def contains(self, other: "Span") -> bool:
        """Is *other* a subset of (or equal to) this span?"""
        return other.start >= self.start and other.end <= self.end

    def intersects(self, other: "Span") -> bool:
        """Check if two spans share at least one character position."""
        return (
            (self.start <= other.start < self.end)
            or (other.start <= self.start < other.end)
        )

    def slice(self, text: str) -> str:
        return text[self.start : self.end]

    def __repr__(self) -> str:
        return f"Span[{self.start},{self.end})"
