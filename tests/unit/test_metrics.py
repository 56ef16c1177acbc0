"""
Unit tests for termindex.metrics.

Helpers must be callable in any order and the analysis paths must feed the
counters.
"""
from __future__ import annotations

import pytest
from prometheus_client import REGISTRY

from termindex.extraction.policies import ExtractionStats, NgramExtractor
from termindex.indexing.indexer import analyze_document


def _sample(name: str, labels: dict | None = None) -> float:
    return REGISTRY.get_sample_value(name, labels or {}) or 0.0


class TestMetricHelpers:
    def test_all_public_helpers_present(self):
        from termindex import metrics as m
        for name in (
            "record_extraction_stats",
            "record_document_analyzed",
            "record_cancellation",
            "record_barrier_block",
            "timed_analysis",
            "DOCUMENTS_ANALYZED",
            "TERM_INSTANCES",
            "CANDIDATES",
            "FILTER_REJECTIONS",
            "CANCELLATIONS",
            "BARRIER_BLOCKS",
            "ANALYSIS_LATENCY",
        ):
            assert hasattr(m, name), f"Missing public symbol: {name}"

    def test_record_extraction_stats(self):
        from termindex.metrics import record_extraction_stats
        before = _sample("termindex_filter_rejections_total", {"filter": "stopword"})
        stats = ExtractionStats(rejected_stopword=2)
        stats.candidates_by_order[1] += 3
        record_extraction_stats(stats)
        after = _sample("termindex_filter_rejections_total", {"filter": "stopword"})
        assert after - before == 2

    def test_timed_analysis_does_not_suppress_exceptions(self):
        from termindex.metrics import timed_analysis
        with pytest.raises(ValueError, match="test error"):
            with timed_analysis():
                raise ValueError("test error")


class TestAnalysisFeedsMetrics:
    def test_document_counters(self, cat_document):
        docs_before = _sample("termindex_documents_analyzed_total")
        inst_before = _sample("termindex_term_instances_total")
        bigrams_before = _sample("termindex_candidates_total", {"order": "2"})

        analyze_document(NgramExtractor(order=2), cat_document)

        assert _sample("termindex_documents_analyzed_total") - docs_before == 1
        assert _sample("termindex_term_instances_total") - inst_before == 5
        assert _sample("termindex_candidates_total", {"order": "2"}) - bigrams_before == 2
