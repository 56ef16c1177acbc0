"""
Constants used across extraction and indexing.
Closed lists are pinned so that analysis is deterministic.
"""
from typing import Dict, FrozenSet, Tuple

# =============================================================================
# Stopwords - pinned version
# =============================================================================
STOPLIST_VERSION: str = "stopwords-en-basic-1"

STOPWORDS: FrozenSet[str] = frozenset({
    "the", "that", "a", "an",
    "on", "of", "to", "and", "but", "as", "for",
    "from", "in", "with", "by",
    "-", "--", ".", ",", ":", ";",
})

# =============================================================================
# Part-of-speech tag families
# =============================================================================
# Penn Treebank prefixes plus the single-character codes of simplified
# (e.g. Twitter/ARK) tagsets.
NOUN_TAG_PREFIX: str = "NN"
NOUN_SHORT_TAGS: FrozenSet[str] = frozenset({"N", "^"})

ADJ_TAG_PREFIX: str = "JJ"
ADJ_SHORT_TAGS: FrozenSet[str] = frozenset({"A"})

# =============================================================================
# Named-entity categories
# =============================================================================
NON_ENTITY_TAG: str = "O"

ACCEPTED_NER_TAGS: FrozenSet[str] = frozenset({
    "PERSON",
    "ORGANIZATION",
    "LOCATION",
    "MISC",
})

# spaCy (OntoNotes / WikiNER) labels -> accepted categories.
# Anything not listed is treated as a non-entity.
SPACY_NER_MAP: Dict[str, str] = {
    "PERSON": "PERSON",
    "PER": "PERSON",
    "ORG": "ORGANIZATION",
    "GPE": "LOCATION",
    "LOC": "LOCATION",
    "FAC": "LOCATION",
    "NORP": "MISC",
    "MISC": "MISC",
    "EVENT": "MISC",
    "PRODUCT": "MISC",
    "WORK_OF_ART": "MISC",
    "LAW": "MISC",
    "LANGUAGE": "MISC",
}

# =============================================================================
# Term naming
# =============================================================================
TERM_JOINER: str = "_"

POLICY_NAMES: Tuple[str, ...] = ("unigram", "ngram")

# =============================================================================
# Versions
# =============================================================================
ANALYSIS_SCHEMA_VERSION: str = "termindex-analysis-v1"

# Universal Dependencies coarse tags -> simplified-tagset codes understood by
# the noun/adjective checks. Other UD tags pass through unchanged.
UD_POS_MAP: Dict[str, str] = {
    "NOUN": "N",
    "PROPN": "^",
    "ADJ": "A",
}
