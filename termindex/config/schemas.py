"""
JSON Schemas for exported document analyses.

DOCUMENT_ANALYSIS_SCHEMA describes what export_document_analysis() produces
and what the analysis store accepts behind its write barrier.

Index buckets hold ordinals into ``term_instances`` rather than copies of the
instances, so every index stays a thin view over one instance list.
"""
from termindex.config.constants import ANALYSIS_SCHEMA_VERSION

# =============================================================================
# Shared fragments
# =============================================================================
_INDEX_SCHEMA: dict = {
    "type": "object",
    "propertyNames": {"pattern": r"^\d+$"},
    "additionalProperties": {
        "type": "array",
        "minItems": 1,
        "items": {"type": "integer", "minimum": 0},
    },
}

TERM_VECTOR_SCHEMA: dict = {
    "type": "object",
    "additionalProperties": False,
    "required": ["counts", "total_count"],
    "properties": {
        "counts": {
            "type": "object",
            "additionalProperties": {"type": "integer", "minimum": 1},
        },
        "total_count": {"type": "integer", "minimum": 0},
    },
}

# =============================================================================
# Document analysis payload
# =============================================================================
DOCUMENT_ANALYSIS_SCHEMA: dict = {
    "type": "object",
    "additionalProperties": False,
    "required": [
        "schema_version",
        "docid",
        "num_tokens",
        "term_vector",
        "term_instances",
        "index_by_start_token",
        "index_by_all_tokens",
        "index_by_start_char",
        "index_by_end_char",
    ],
    "properties": {
        "schema_version": {"type": "string", "const": ANALYSIS_SCHEMA_VERSION},
        "docid": {"type": "string", "minLength": 1},
        "num_tokens": {"type": "integer", "minimum": 0},
        "term_vector": TERM_VECTOR_SCHEMA,
        "term_instances": {
            "type": "array",
            "items": {
                "type": "object",
                "additionalProperties": False,
                "required": ["term_name", "token_indices"],
                "properties": {
                    "term_name": {"type": "string"},
                    "token_indices": {
                        "type": "array",
                        "minItems": 1,
                        "items": {"type": "integer", "minimum": 0},
                    },
                },
            },
        },
        "index_by_start_token": _INDEX_SCHEMA,
        "index_by_all_tokens": _INDEX_SCHEMA,
        "index_by_start_char": _INDEX_SCHEMA,
        "index_by_end_char": _INDEX_SCHEMA,
    },
}
