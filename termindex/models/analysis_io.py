"""
Typed Pydantic models for exported analysis payloads.

Consumers of the analysis store (viewers, the corpus aggregator) parse
payloads through these models instead of indexing into plain dicts.
"""
from __future__ import annotations

from typing import Dict, List

from pydantic import BaseModel, Field, field_validator, model_validator


class TermInstanceRecord(BaseModel):
    """A serialized TermInstance."""

    term_name: str
    token_indices: List[int] = Field(..., min_length=1)

    @field_validator("token_indices")
    @classmethod
    def validate_contiguous(cls, v: List[int]) -> List[int]:
        if v != list(range(v[0], v[0] + len(v))):
            raise ValueError("token_indices must be a contiguous increasing range")
        return v


class TermVectorRecord(BaseModel):
    """A serialized TermVector."""

    counts: Dict[str, int] = Field(default_factory=dict)
    total_count: int = Field(0, ge=0)

    @model_validator(mode="after")
    def check_total(self) -> "TermVectorRecord":
        if any(c < 0 for c in self.counts.values()):
            raise ValueError("term counts must be non-negative")
        if sum(self.counts.values()) != self.total_count:
            raise ValueError(
                f"total_count {self.total_count} does not match summed counts "
                f"{sum(self.counts.values())}"
            )
        return self


class DocumentAnalysisRecord(BaseModel):
    """
    Full exported analysis for one document.

    Index buckets hold ordinals into ``term_instances``; keys are stringified
    token or character offsets (JSON object keys are always strings).
    """

    schema_version: str
    docid: str
    num_tokens: int = Field(..., ge=0)
    term_vector: TermVectorRecord
    term_instances: List[TermInstanceRecord]
    index_by_start_token: Dict[int, List[int]]
    index_by_all_tokens: Dict[int, List[int]]
    index_by_start_char: Dict[int, List[int]]
    index_by_end_char: Dict[int, List[int]]

    def instances_at(self, index: Dict[int, List[int]], key: int) -> List[TermInstanceRecord]:
        """Resolve an index bucket to instance records; empty for unknown keys."""
        return [self.term_instances[i] for i in index.get(key, [])]
