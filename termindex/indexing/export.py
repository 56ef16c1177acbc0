"""
Analysis export — JSON-serializable snapshots of a document's analysis.

Index buckets are written as ordinals into the exported term_instances list
and keyed by stringified offsets.
"""
import json
import logging
from typing import Dict, List

from jsonschema import ValidationError, validate

from termindex.config.constants import ANALYSIS_SCHEMA_VERSION
from termindex.config.schemas import DOCUMENT_ANALYSIS_SCHEMA
from termindex.models.analysis_io import DocumentAnalysisRecord
from termindex.models.document import Document, PositionIndex
from termindex.models.validation import ValidationResult

logger = logging.getLogger(__name__)


def _export_index(index: PositionIndex, ordinals: Dict[int, int]) -> Dict[str, List[int]]:
    return {
        str(key): [ordinals[id(ti)] for ti in bucket]
        for key, bucket in sorted(index.items())
    }


def export_document_analysis(doc: Document) -> dict:
    """
    Serialize the analysis of *doc*.

    Raises:
        ValueError: If the document has not been analyzed.
    """
    if not doc.is_analyzed:
        raise ValueError(f"Document '{doc.docid}' has not been analyzed")

    ordinals = {id(ti): pos for pos, ti in enumerate(doc.term_instances)}
    return {
        "schema_version": ANALYSIS_SCHEMA_VERSION,
        "docid": doc.docid,
        "num_tokens": len(doc.tokens),
        "term_vector": doc.term_vec.to_dict(),
        "term_instances": [ti.to_dict() for ti in doc.term_instances],
        "index_by_start_token": _export_index(doc.index_by_start_token, ordinals),
        "index_by_all_tokens": _export_index(doc.index_by_all_tokens, ordinals),
        "index_by_start_char": _export_index(doc.index_by_start_char, ordinals),
        "index_by_end_char": _export_index(doc.index_by_end_char, ordinals),
    }


def validate_analysis_payload(payload: str | dict) -> ValidationResult:
    """
    Validate an exported analysis.

    Stages:
        1. JSON parse (if given a string)
        2. Schema conformance
        3. Index ordinals point into term_instances
    """
    result = ValidationResult()

    if isinstance(payload, dict):
        data = payload
    else:
        try:
            data = json.loads(payload)
        except json.JSONDecodeError as e:
            result.add_error(f"Invalid JSON: {e}")
            return result

    try:
        validate(instance=data, schema=DOCUMENT_ANALYSIS_SCHEMA)
    except ValidationError as e:
        result.add_error(f"Schema validation failed: {e.message}")
        return result

    num_instances = len(data["term_instances"])
    for name in (
        "index_by_start_token",
        "index_by_all_tokens",
        "index_by_start_char",
        "index_by_end_char",
    ):
        bad = [o for bucket in data[name].values() for o in bucket if o >= num_instances]
        if bad:
            result.add_error(f"{name} references unknown term instances: {sorted(set(bad))}")

    if data["term_vector"]["total_count"] != num_instances:
        result.warnings.append(
            f"term_vector total_count {data['term_vector']['total_count']} "
            f"differs from {num_instances} term instances"
        )

    if result.valid:
        result.data = data
    return result


def load_document_analysis(payload: str | dict) -> DocumentAnalysisRecord:
    """Parse an exported analysis into a typed record (pydantic validation)."""
    if isinstance(payload, str):
        return DocumentAnalysisRecord.model_validate_json(payload)
    return DocumentAnalysisRecord.model_validate(payload)
