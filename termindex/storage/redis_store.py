"""
Redis Analysis Store — publishes per-document analyses behind a write barrier.

Pattern: the raw export of every document is persisted for audit. The
normalized payload (and the document's term vector, which the external
corpus aggregator reads) is only written after the analysis passes schema
validation and the index consistency check.

Key scheme
----------
  run:{run_id}:doc:{docid}:analysis:raw         – raw export
  run:{run_id}:doc:{docid}:analysis:normalized  – validated export
  run:{run_id}:doc:{docid}:analysis:error       – validation failure record
  run:{run_id}:doc:{docid}:termvec              – term vector only

{docid} is percent-encoded (":", "/", spaces and "<>" included).
"""
from __future__ import annotations

import json
import logging
from typing import Any, List, Optional
from urllib.parse import quote

import redis

from termindex import metrics
from termindex.config import settings
from termindex.indexing.consistency import verify_index_consistency
from termindex.indexing.export import export_document_analysis, validate_analysis_payload
from termindex.models.analysis_io import TermVectorRecord
from termindex.models.document import Document
from termindex.models.term_vector import TermVector

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Custom exception
# ---------------------------------------------------------------------------

class AnalysisPublishError(Exception):
    """Raised when an analysis is rejected by the write barrier."""

    def __init__(self, docid: str, errors: List[str]) -> None:
        self.docid = docid
        self.errors = errors
        super().__init__(f"Refusing to publish analysis of '{docid}': {errors}")


# ---------------------------------------------------------------------------
# Keys
# ---------------------------------------------------------------------------

def _safe_id(value: str) -> str:
    """Percent-encode a docid for use in a key; distinct ids stay distinct."""
    return quote(value, safe="")


def _doc_prefix(run_id: str, docid: str) -> str:
    return f"run:{run_id}:doc:{_safe_id(docid)}"


# ---------------------------------------------------------------------------
# Write barrier
# ---------------------------------------------------------------------------

def publish_document_analysis(
    *,
    document: Document,
    redis_client: Any,
    run_id: str,
    ttl: Optional[int] = None,
) -> dict:
    """
    Publish *document*'s analysis to Redis.

    Flow
    ----
    1. Export the analysis → raw payload; persist it (``…:raw``).
    2. Validate: JSON schema, then index consistency on the document.
       * On failure: persist an error record, raise AnalysisPublishError.
    3. Persist the normalized payload and the term vector.

    Args:
        document: An analyzed Document.
        redis_client: A redis.Redis (or compatible) instance.
        run_id: Identifier of the analysis run, for key namespacing.
        ttl: Key expiry in seconds (defaults to settings.ANALYSIS_TTL_SECONDS).

    Returns:
        The normalized payload.

    Raises:
        AnalysisPublishError: If the document is unanalyzed or fails validation.
    """
    if ttl is None:
        ttl = settings.ANALYSIS_TTL_SECONDS

    prefix = _doc_prefix(run_id, document.docid)
    key_raw = f"{prefix}:analysis:raw"
    key_normalized = f"{prefix}:analysis:normalized"
    key_error = f"{prefix}:analysis:error"
    key_termvec = f"{prefix}:termvec"

    if not document.is_analyzed:
        metrics.record_barrier_block()
        raise AnalysisPublishError(document.docid, ["document has not been analyzed"])

    # ------------------------------------------------------------------
    # 1. Export + persist raw (always, even if validation fails later)
    # ------------------------------------------------------------------
    raw_payload = export_document_analysis(document)
    try:
        redis_client.set(key_raw, json.dumps(raw_payload), ex=ttl)
        logger.debug("AnalysisStore[%s] raw payload persisted → %s", document.docid, key_raw)
    except redis.RedisError as exc:
        logger.warning("AnalysisStore[%s] failed to persist raw: %s", document.docid, exc)

    # ------------------------------------------------------------------
    # 2. Validate
    # ------------------------------------------------------------------
    outcome = validate_analysis_payload(raw_payload)
    if outcome.valid:
        outcome.extend(verify_index_consistency(document))

    if not outcome.valid:
        error_payload = {
            "docid": document.docid,
            "run_id": run_id,
            "errors": outcome.errors,
            "warnings": outcome.warnings,
        }
        try:
            redis_client.set(key_error, json.dumps(error_payload), ex=ttl)
        except redis.RedisError as exc:
            logger.warning("AnalysisStore[%s] failed to persist error record: %s", document.docid, exc)
        metrics.record_barrier_block()
        logger.error(
            "AnalysisStore[%s] validation FAILED — not publishing. errors=%s",
            document.docid, outcome.errors,
        )
        raise AnalysisPublishError(document.docid, outcome.errors)

    # ------------------------------------------------------------------
    # 3. Persist normalized + term vector
    # ------------------------------------------------------------------
    redis_client.set(key_normalized, json.dumps(raw_payload), ex=ttl)
    redis_client.set(key_termvec, json.dumps(raw_payload["term_vector"]), ex=ttl)

    logger.info(
        "AnalysisStore[%s] published (instances=%d, warnings=%d)",
        document.docid, len(document.term_instances), len(outcome.warnings),
    )
    return raw_payload


# ---------------------------------------------------------------------------
# Readers
# ---------------------------------------------------------------------------

def get_raw_analysis(redis_client: Any, run_id: str, docid: str) -> Optional[dict]:
    """Retrieve the raw export for a document, or None if not found."""
    data = redis_client.get(f"{_doc_prefix(run_id, docid)}:analysis:raw")
    return json.loads(data) if data else None


def get_published_analysis(redis_client: Any, run_id: str, docid: str) -> Optional[dict]:
    """Retrieve the validated export for a document, or None if not published."""
    data = redis_client.get(f"{_doc_prefix(run_id, docid)}:analysis:normalized")
    return json.loads(data) if data else None


def get_term_vector(redis_client: Any, run_id: str, docid: str) -> Optional[TermVector]:
    """Retrieve a published term vector, or None if not published."""
    data = redis_client.get(f"{_doc_prefix(run_id, docid)}:termvec")
    if not data:
        return None
    record = TermVectorRecord.model_validate_json(data)
    return TermVector(counts=dict(record.counts), total_count=record.total_count)


def build_redis_client(url: Optional[str] = None) -> redis.Redis:
    """
    Build and return a redis.Redis client.

    Falls back to REDIS_URL from settings if *url* is not provided.
    """
    target_url = url or settings.REDIS_URL
    client = redis.Redis.from_url(target_url, decode_responses=True)
    logger.debug("Redis client created for URL: %s", target_url)
    return client


# ---------------------------------------------------------------------------
# Null / no-op client (for runs without a live Redis instance)
# ---------------------------------------------------------------------------

class NullRedisClient:
    """
    Drop-in replacement that discards all writes and returns None on reads.
    """

    def set(self, key: str, value: str, **kwargs: Any) -> None:  # noqa: ARG002
        pass

    def get(self, key: str) -> None:  # noqa: ARG002
        return None

    def exists(self, *keys: str) -> int:
        return 0

    def delete(self, *keys: str) -> int:
        return 0
