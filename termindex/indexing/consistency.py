"""
Index consistency checks for analyzed documents.

Verifies that the term vector and the four position indexes are exactly the
views of ``term_instances`` that analyze_document() is supposed to build.
Problems are collected into a ValidationResult instead of being raised.
"""
import logging
from collections import Counter
from typing import Callable, Dict, Iterable, List, Tuple

from termindex.models.document import Document, PositionIndex
from termindex.models.term_instance import TermInstance
from termindex.models.validation import ValidationResult

logger = logging.getLogger(__name__)


def _expected_keys(doc: Document, ti: TermInstance) -> Dict[str, Iterable[int]]:
    return {
        "index_by_start_token": [ti.first_index],
        "index_by_all_tokens": ti.token_indices,
        "index_by_start_char": [doc.tokens[ti.first_index].start_char],
        "index_by_end_char": [doc.tokens[ti.last_index].end_char],
    }


def _index_entries(index: PositionIndex) -> Counter:
    """Multiset of (key, id(instance)) pairs held by *index*."""
    entries: Counter = Counter()
    for key, bucket in index.items():
        if not bucket:
            entries[(key, None)] += 1
        for ti in bucket:
            entries[(key, id(ti))] += 1
    return entries


def verify_index_consistency(doc: Document) -> ValidationResult:
    """
    Check the analysis invariants of *doc*.

    - every instance covers valid token indices
    - the term vector counts equal the term_instances name counts
    - each index holds exactly the expected (key, instance) entries, and
      no empty buckets

    Returns:
        ValidationResult; valid is False if any check failed.
    """
    result = ValidationResult()

    if not doc.is_analyzed:
        result.add_error(f"Document '{doc.docid}' has not been analyzed")
        return result

    n = len(doc.tokens)
    for pos, ti in enumerate(doc.term_instances):
        if ti.last_index >= n:
            result.add_error(
                f"term_instances[{pos}] '{ti.term_name}' covers token {ti.last_index} "
                f"but the document has {n} tokens"
            )
    if not result.valid:
        return result

    name_counts = Counter(ti.term_name for ti in doc.term_instances)
    if dict(name_counts) != doc.term_vec.counts:
        result.add_error("term_vec counts do not match term_instances")
    if doc.term_vec.total_count != len(doc.term_instances):
        result.add_error(
            f"term_vec total_count {doc.term_vec.total_count} != "
            f"{len(doc.term_instances)} term instances"
        )

    indexes: List[Tuple[str, Callable[[Document], PositionIndex]]] = [
        ("index_by_start_token", lambda d: d.index_by_start_token),
        ("index_by_all_tokens", lambda d: d.index_by_all_tokens),
        ("index_by_start_char", lambda d: d.index_by_start_char),
        ("index_by_end_char", lambda d: d.index_by_end_char),
    ]
    expected: Dict[str, Counter] = {name: Counter() for name, _ in indexes}
    for ti in doc.term_instances:
        for name, keys in _expected_keys(doc, ti).items():
            for key in keys:
                expected[name][(key, id(ti))] += 1

    for name, getter in indexes:
        actual = _index_entries(getter(doc))
        if actual != expected[name]:
            missing = sum((expected[name] - actual).values())
            extra = sum((actual - expected[name]).values())
            result.add_error(f"{name}: {missing} missing and {extra} unexpected entries")

    if not result.valid:
        logger.warning("Index consistency failed for %s: %s", doc.docid, result.errors)
    return result
