"""
Token — a unit of text with character offsets and optional annotations.

Tokens are produced by a tokenizer/annotator outside the engine. POS and NER
tags stay None unless a preprocessing step attached them.
"""
from dataclasses import dataclass, replace
from typing import Optional

from termindex.models.span import Span


@dataclass(frozen=True)
class Token:
    """A single token in a document."""

    text: str
    start_char: int
    end_char: int
    pos: Optional[str] = None
    ner: Optional[str] = None

    def __post_init__(self) -> None:
        if self.start_char > self.end_char:
            raise ValueError(
                f"Invalid offsets for token '{self.text}': {self.start_char}-{self.end_char}"
            )

    @property
    def span(self) -> Span:
        return Span(self.start_char, self.end_char)

    @property
    def is_annotated(self) -> bool:
        return self.pos is not None and self.ner is not None

    def with_annotations(self, pos: Optional[str], ner: Optional[str]) -> "Token":
        return replace(self, pos=pos, ner=ner)

    def __repr__(self) -> str:
        tags = ""
        if self.pos is not None or self.ner is not None:
            tags = f", {self.pos}/{self.ner}"
        return f"Token('{self.text}', [{self.start_char},{self.end_char}]{tags})"
