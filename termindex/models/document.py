"""
Document — tokens plus the analysis structures built by the indexer.

The analysis fields are owned by the document and fully rebuilt on every
analysis pass (see termindex.indexing.indexer.analyze_document).
Readers go through the lookup methods, which never create index entries.
"""
from dataclasses import dataclass, field
from typing import Dict, List, Sequence

from termindex.models.term_instance import TermInstance
from termindex.models.term_vector import TermVector
from termindex.models.token import Token

PositionIndex = Dict[int, List[TermInstance]]


@dataclass
class Document:
    """A tokenized document and its term analysis."""

    docid: str
    text: str = ""
    tokens: List[Token] = field(default_factory=list)

    # Analysis results (populated by the indexer)
    term_vec: TermVector = field(default_factory=TermVector)
    term_instances: List[TermInstance] = field(default_factory=list)
    index_by_start_token: PositionIndex = field(default_factory=dict)
    index_by_all_tokens: PositionIndex = field(default_factory=dict)
    index_by_start_char: PositionIndex = field(default_factory=dict)
    index_by_end_char: PositionIndex = field(default_factory=dict)
    is_analyzed: bool = False

    def has_pos(self) -> bool:
        """True only if there are tokens and every one carries a POS tag."""
        return bool(self.tokens) and all(t.pos is not None for t in self.tokens)

    def has_ner(self) -> bool:
        """True only if there are tokens and every one carries a NER tag."""
        return bool(self.tokens) and all(t.ner is not None for t in self.tokens)

    def reset_analysis(self) -> None:
        self.term_vec = TermVector()
        self.term_instances = []
        self.index_by_start_token = {}
        self.index_by_all_tokens = {}
        self.index_by_start_char = {}
        self.index_by_end_char = {}
        self.is_analyzed = False

    # ------------------------------------------------------------------
    # Read-only lookups
    # ------------------------------------------------------------------

    def instances_starting_at_token(self, token_index: int) -> Sequence[TermInstance]:
        return tuple(self.index_by_start_token.get(token_index, ()))

    def instances_covering_token(self, token_index: int) -> Sequence[TermInstance]:
        return tuple(self.index_by_all_tokens.get(token_index, ()))

    def instances_starting_at_char(self, char_offset: int) -> Sequence[TermInstance]:
        return tuple(self.index_by_start_char.get(char_offset, ()))

    def instances_ending_at_char(self, char_offset: int) -> Sequence[TermInstance]:
        return tuple(self.index_by_end_char.get(char_offset, ()))

    def instance_text(self, instance: TermInstance) -> str:
        """Surface text of *instance* as it appears in ``self.text``."""
        start = self.tokens[instance.first_index].start_char
        end = self.tokens[instance.last_index].end_char
        return self.text[start:end]

    def __repr__(self) -> str:
        return (
            f"Document('{self.docid}', tokens={len(self.tokens)}, "
            f"instances={len(self.term_instances)})"
        )
