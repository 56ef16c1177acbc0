"""
Document Indexer — builds the term vector and the four position indexes.

For every term instance, in extraction order:
    1. increment the term vector
    2. append to term_instances
    3. bucket by first token index
    4. bucket by every covered token index
    5. bucket by the first token's start char
    6. bucket by the last token's end char

All structures are discarded and rebuilt on each pass; there is no
incremental update. Corpus runs analyze one document at a time and only
check for cancellation between documents.
"""
import logging
import time
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, TypeVar

import numpy as np

from termindex import metrics
from termindex.extraction.policies import ExtractionPolicy, ExtractionStats
from termindex.models.document import Document

logger = logging.getLogger(__name__)

K = TypeVar("K")
V = TypeVar("V")


def _ensure_list(index: Dict[K, List[V]], key: K) -> List[V]:
    """Bucket for *key*, created on first write."""
    bucket = index.get(key)
    if bucket is None:
        bucket = index[key] = []
    return bucket


def analyze_document(policy: ExtractionPolicy, doc: Document) -> Document:
    """
    Rebuild *doc*'s analysis in place. Tokenization must be final.

    Args:
        policy: UnigramExtractor or NgramExtractor.
        doc: Document whose analysis fields are reset and repopulated.

    Returns:
        The same document, for chaining.

    Raises:
        AnnotationRequiredError: If the policy filters on POS/NER and the
            tokens are not fully annotated. The document is left reset.
    """
    doc.reset_analysis()
    stats = ExtractionStats()

    with metrics.timed_analysis():
        instances = policy.extract(doc.tokens, stats)

        for ti in instances:
            doc.term_vec.increment(ti.term_name)
            doc.term_instances.append(ti)

            _ensure_list(doc.index_by_start_token, ti.first_index).append(ti)

            for tok_index in ti.token_indices:
                _ensure_list(doc.index_by_all_tokens, tok_index).append(ti)

            start_char = doc.tokens[ti.first_index].start_char
            _ensure_list(doc.index_by_start_char, start_char).append(ti)

            end_char = doc.tokens[ti.last_index].end_char
            _ensure_list(doc.index_by_end_char, end_char).append(ti)

    doc.is_analyzed = True
    metrics.record_extraction_stats(stats)
    metrics.record_document_analyzed(len(instances))
    logger.debug(
        "Analyzed %s: %d tokens, %d instances, %d distinct terms",
        doc.docid, len(doc.tokens), len(instances), len(doc.term_vec),
    )
    return doc


# ==========================================================================
# Corpus runs
# ==========================================================================

@dataclass
class CorpusAnalysisReport:
    """Summary of one analyze_corpus() run."""

    documents_analyzed: int = 0
    documents_skipped: int = 0
    term_instances: int = 0
    cancelled: bool = False
    elapsed_ms: float = 0.0
    mean_instances_per_document: float = 0.0

    def to_dict(self) -> dict:
        return {
            "documents_analyzed": self.documents_analyzed,
            "documents_skipped": self.documents_skipped,
            "term_instances": self.term_instances,
            "cancelled": self.cancelled,
            "elapsed_ms": self.elapsed_ms,
            "mean_instances_per_document": self.mean_instances_per_document,
        }


def analyze_corpus(
    policy: ExtractionPolicy,
    documents: Iterable[Document],
    cancel_event: Optional[Any] = None,
) -> CorpusAnalysisReport:
    """
    Analyze documents one at a time.

    Args:
        policy: Extraction policy applied to every document.
        documents: Documents with final tokenization.
        cancel_event: Anything with ``is_set()`` (e.g. threading.Event).
            Checked before each document; once set, the remaining documents
            are left untouched.

    Returns:
        CorpusAnalysisReport with counts, timing and the cancellation flag.
    """
    t0 = time.monotonic()
    report = CorpusAnalysisReport()
    per_doc: List[int] = []

    logger.info("Analyzing document texts")
    doc_iter = iter(documents)
    for doc in doc_iter:
        if cancel_event is not None and cancel_event.is_set():
            report.cancelled = True
            report.documents_skipped = 1 + sum(1 for _ in doc_iter)
            metrics.record_cancellation()
            logger.warning(
                "Analysis cancelled after %d documents (%d skipped)",
                report.documents_analyzed, report.documents_skipped,
            )
            break
        analyze_document(policy, doc)
        report.documents_analyzed += 1
        per_doc.append(len(doc.term_instances))

    report.term_instances = int(np.sum(per_doc)) if per_doc else 0
    report.mean_instances_per_document = float(np.mean(per_doc)) if per_doc else 0.0
    report.elapsed_ms = 1000 * (time.monotonic() - t0)
    logger.info(
        "done analyzing doc texts (%.0f ms): %d documents, %d term instances",
        report.elapsed_ms, report.documents_analyzed, report.term_instances,
    )
    return report
