"""
Prometheus Metrics — extraction and indexing observability.

Exposes counters and a histogram for:
- Documents analyzed and term instances emitted
- Candidate spans considered per n-gram length
- Filter rejections per filter
- Corpus runs cancelled between documents
- Analysis store write-barrier blocks
- Per-document analysis latency

Usage
-----
    from termindex.metrics import timed_analysis, record_extraction_stats

    with timed_analysis():
        analyze_document(policy, doc)
"""
from __future__ import annotations

from contextlib import contextmanager
from typing import Generator

from prometheus_client import Counter, Histogram

from termindex.extraction.policies import ExtractionStats


# ---------------------------------------------------------------------------
# Metric definitions
# ---------------------------------------------------------------------------

DOCUMENTS_ANALYZED: Counter = Counter(
    "termindex_documents_analyzed_total",
    "Documents whose analysis structures were rebuilt",
)

TERM_INSTANCES: Counter = Counter(
    "termindex_term_instances_total",
    "Term instances emitted by extraction policies",
)

CANDIDATES: Counter = Counter(
    "termindex_candidates_total",
    "Candidate spans considered, by n-gram length",
    ["order"],
)

FILTER_REJECTIONS: Counter = Counter(
    "termindex_filter_rejections_total",
    "Candidate spans rejected, by filter",
    ["filter"],
)

CANCELLATIONS: Counter = Counter(
    "termindex_corpus_cancellations_total",
    "Corpus analysis runs stopped by a cancellation signal",
)

BARRIER_BLOCKS: Counter = Counter(
    "termindex_publish_barrier_blocks_total",
    "Times the analysis store refused to publish an invalid analysis",
)

ANALYSIS_LATENCY: Histogram = Histogram(
    "termindex_document_analysis_seconds",
    "Time to extract and index one document, in seconds",
    buckets=(0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 5.0),
)


# ---------------------------------------------------------------------------
# Convenience helpers
# ---------------------------------------------------------------------------

def record_extraction_stats(stats: ExtractionStats) -> None:
    """Fold one extraction pass into the candidate and rejection counters."""
    for order, count in stats.candidates_by_order.items():
        CANDIDATES.labels(order=str(order)).inc(count)
    if stats.rejected_stopword:
        FILTER_REJECTIONS.labels(filter="stopword").inc(stats.rejected_stopword)
    if stats.rejected_posner:
        FILTER_REJECTIONS.labels(filter="posner").inc(stats.rejected_posner)


def record_document_analyzed(num_instances: int) -> None:
    DOCUMENTS_ANALYZED.inc()
    TERM_INSTANCES.inc(num_instances)


def record_cancellation() -> None:
    CANCELLATIONS.inc()


def record_barrier_block() -> None:
    BARRIER_BLOCKS.inc()


@contextmanager
def timed_analysis() -> Generator[None, None, None]:
    """Record the latency of the enclosed analysis."""
    with ANALYSIS_LATENCY.time():
        yield
