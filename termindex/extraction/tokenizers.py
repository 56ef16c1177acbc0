"""
Tokenizer and annotator adapters.

Produces the Token sequences the extraction policies consume:

- whitespace_tokenize: regex split on whitespace, offsets preserved
- SpacyAnnotator: spaCy tokens with fine-grained POS tags and NER
  categories normalized to PERSON / ORGANIZATION / LOCATION / MISC

The spaCy model is owned by the SpacyAnnotator instance that loaded (or was
given) it; nothing is cached at module level.
"""
import logging
import re
from typing import Any, List, Optional, Sequence

from termindex.config import settings
from termindex.config.constants import NON_ENTITY_TAG, SPACY_NER_MAP, UD_POS_MAP
from termindex.models.span import Span
from termindex.models.token import Token

logger = logging.getLogger(__name__)

_WHITESPACE = r"\s+"


# =============================================================================
# Span utilities
# =============================================================================

def split_into_spans(pattern: str, text: str) -> List[Span]:
    """
    Spans between the matches of *pattern*.

    split_into_spans("-", "a-bb-c-") → [0,1) [2,4) [5,6) [7,7)
    """
    spans: List[Span] = []
    cur_start = 0
    for match in re.finditer(pattern, text):
        spans.append(Span(cur_start, match.start()))
        cur_start = match.end()
    spans.append(Span(cur_start, len(text)))
    return spans


def breakpoints_to_spans(start: int, breakpoints: Sequence[int], end: int) -> List[Span]:
    """
    Consecutive spans cut at *breakpoints*.

    breakpoints_to_spans(0, [4, 8], 10) → [0,4) [4,8) [8,10)
    """
    if end < start:
        return []
    if start == end and breakpoints:
        return []
    spans: List[Span] = []
    cur_start = start
    for point in breakpoints:
        spans.append(Span(cur_start, point))
        cur_start = point
    spans.append(Span(cur_start, end))
    return spans


# =============================================================================
# Tokenizers
# =============================================================================

def whitespace_tokenize(text: str) -> List[Token]:
    """Split on whitespace; no POS or NER tags are attached."""
    tokens: List[Token] = []
    for span in split_into_spans(_WHITESPACE, text):
        if span.length == 0:
            continue
        tokens.append(Token(span.slice(text), span.start, span.end))
    return tokens


def normalize_ner_label(label: str) -> str:
    """Map a spaCy entity label to an accepted category, or the non-entity tag."""
    if not label:
        return NON_ENTITY_TAG
    return SPACY_NER_MAP.get(label, NON_ENTITY_TAG)


def normalize_pos_tag(tag: str, coarse: str) -> Optional[str]:
    """
    Fine-grained tag if present, else the coarse UD tag in simplified-tagset
    form (NOUN → N, PROPN → ^, ADJ → A). None when the pipeline has no tagger.
    """
    if tag:
        return tag
    if coarse:
        return UD_POS_MAP.get(coarse, coarse)
    return None


class SpacyAnnotator:
    """
    Tokenizer + POS tagger + NER backed by a spaCy pipeline.

    Either pass a loaded pipeline as *nlp_model* or call load() once before
    annotating. Tags the pipeline cannot produce are left as None (no tagger,
    or no "ner" component), so the POS/NER n-gram filter refuses the output
    instead of running on invented tags.
    """

    def __init__(self, model_name: Optional[str] = None, nlp_model: Any = None) -> None:
        self.model_name = model_name or settings.SPACY_MODEL
        self._nlp = nlp_model

    @property
    def is_loaded(self) -> bool:
        return self._nlp is not None

    def load(self) -> bool:
        """Load the spaCy pipeline. Returns False if the model is not installed."""
        if self._nlp is not None:
            return True

        import spacy  # type: ignore[import-untyped]

        try:
            self._nlp = spacy.load(self.model_name)
        except OSError:
            logger.warning(
                "spaCy model '%s' not found. Install with: python -m spacy download %s",
                self.model_name,
                self.model_name,
            )
            return False
        logger.info("Loaded spaCy model: %s", self.model_name)
        return True

    def close(self) -> None:
        self._nlp = None

    def annotate(self, text: str) -> List[Token]:
        """
        Tokenize and tag *text*.

        Raises:
            RuntimeError: If no model has been loaded or injected.
        """
        if self._nlp is None:
            raise RuntimeError(
                f"SpacyAnnotator('{self.model_name}') has no model; call load() first"
            )

        has_ner = "ner" in self._nlp.pipe_names

        tokens: List[Token] = []
        for tok in self._nlp(text):
            if tok.is_space:
                continue
            tokens.append(
                Token(
                    text=tok.text,
                    start_char=tok.idx,
                    end_char=tok.idx + len(tok.text),
                    pos=normalize_pos_tag(tok.tag_, tok.pos_),
                    ner=normalize_ner_label(tok.ent_type_) if has_ner else None,
                )
            )
        return tokens
