"""
Unit tests for tokenizer and annotator adapters.
Tests: split_into_spans, breakpoints_to_spans, whitespace_tokenize,
       normalize_ner_label, normalize_pos_tag, SpacyAnnotator (with a fake
       pipeline, including untagged and UD-tagged ones).
"""
from dataclasses import dataclass

import pytest

from termindex.extraction.filters import AnnotationRequiredError
from termindex.extraction.policies import NgramExtractor
from termindex.extraction.tokenizers import (
    SpacyAnnotator,
    breakpoints_to_spans,
    normalize_ner_label,
    normalize_pos_tag,
    split_into_spans,
    whitespace_tokenize,
)
from termindex.models.span import Span


class TestSpanUtilities:
    def test_split_into_spans(self):
        assert split_into_spans("-", "a-bb-c-") == [Span(0, 1), Span(2, 4), Span(5, 6), Span(7, 7)]

    def test_split_no_match(self):
        assert split_into_spans("-", "abc") == [Span(0, 3)]

    def test_breakpoints_to_spans(self):
        assert breakpoints_to_spans(0, [4, 8], 10) == [Span(0, 4), Span(4, 8), Span(8, 10)]

    def test_breakpoints_degenerate(self):
        assert breakpoints_to_spans(5, [], 3) == []
        assert breakpoints_to_spans(3, [3], 3) == []
        assert breakpoints_to_spans(3, [], 3) == [Span(3, 3)]


class TestWhitespaceTokenize:
    def test_offsets_preserved(self):
        text = "  The quick\tfox\n"
        tokens = whitespace_tokenize(text)
        assert [t.text for t in tokens] == ["The", "quick", "fox"]
        for tok in tokens:
            assert text[tok.start_char : tok.end_char] == tok.text

    def test_no_annotations(self):
        assert all(not t.is_annotated for t in whitespace_tokenize("a b"))

    def test_empty_and_blank(self):
        assert whitespace_tokenize("") == []
        assert whitespace_tokenize("   \n ") == []


class TestNormalizeNerLabel:
    @pytest.mark.parametrize(
        "label,expected",
        [
            ("PERSON", "PERSON"),
            ("ORG", "ORGANIZATION"),
            ("GPE", "LOCATION"),
            ("LOC", "LOCATION"),
            ("NORP", "MISC"),
            ("DATE", "O"),
            ("", "O"),
        ],
    )
    def test_mapping(self, label, expected):
        assert normalize_ner_label(label) == expected


# ---------------------------------------------------------------------------
# Fake spaCy pipeline
# ---------------------------------------------------------------------------

@dataclass
class _FakeSpacyToken:
    text: str
    idx: int
    tag_: str
    pos_: str = ""
    ent_type_: str = ""
    is_space: bool = False


class _FakeNLP:
    def __init__(self, tokens, pipe_names=("tagger", "ner")):
        self.tokens = tokens
        self.pipe_names = list(pipe_names)
        self.calls = []

    def __call__(self, text):
        self.calls.append(text)
        return list(self.tokens)


class TestSpacyAnnotator:
    def test_annotate_without_model_raises(self):
        annotator = SpacyAnnotator(model_name="xx_missing_model")
        assert not annotator.is_loaded
        with pytest.raises(RuntimeError):
            annotator.annotate("text")

    def test_annotate_with_injected_model(self):
        nlp = _FakeNLP([
            _FakeSpacyToken("Ada", 0, "NNP", ent_type_="PERSON"),
            _FakeSpacyToken("Lovelace", 4, "NNP", ent_type_="PERSON"),
            _FakeSpacyToken(" ", 12, "_SP", is_space=True),
            _FakeSpacyToken("wrote", 14, "VBD"),
            _FakeSpacyToken("code", 20, "", pos_="NOUN"),
        ])
        annotator = SpacyAnnotator(nlp_model=nlp)
        assert annotator.load() is True

        tokens = annotator.annotate("Ada Lovelace  wrote code")
        assert [t.text for t in tokens] == ["Ada", "Lovelace", "wrote", "code"]
        assert [t.ner for t in tokens] == ["PERSON", "PERSON", "O", "O"]
        assert [t.pos for t in tokens] == ["NNP", "NNP", "VBD", "N"]
        assert tokens[1].start_char == 4 and tokens[1].end_char == 12
        assert all(t.is_annotated for t in tokens)
        assert nlp.calls == ["Ada Lovelace  wrote code"]

    def test_close_releases_model(self):
        annotator = SpacyAnnotator(nlp_model=_FakeNLP([]))
        annotator.close()
        assert not annotator.is_loaded

    def test_untagged_pipeline_leaves_tags_missing(self):
        nlp = _FakeNLP(
            [_FakeSpacyToken("red", 0, ""), _FakeSpacyToken("car", 4, "")],
            pipe_names=(),
        )
        tokens = SpacyAnnotator(nlp_model=nlp).annotate("red car")
        assert [t.pos for t in tokens] == [None, None]
        assert [t.ner for t in tokens] == [None, None]

    def test_untagged_pipeline_rejected_by_posner_filter(self):
        nlp = _FakeNLP(
            [_FakeSpacyToken("red", 0, ""), _FakeSpacyToken("car", 4, "")],
            pipe_names=(),
        )
        tokens = SpacyAnnotator(nlp_model=nlp).annotate("red car")
        with pytest.raises(AnnotationRequiredError):
            NgramExtractor(order=2, posner_filter=True).extract(tokens)

    def test_pipeline_without_ner_leaves_ner_missing(self):
        nlp = _FakeNLP([_FakeSpacyToken("car", 0, "NN")], pipe_names=("tagger",))
        tokens = SpacyAnnotator(nlp_model=nlp).annotate("car")
        assert tokens[0].pos == "NN"
        assert tokens[0].ner is None

    def test_ud_tags_usable_by_base_np_filter(self):
        nlp = _FakeNLP([
            _FakeSpacyToken("red", 0, "", pos_="ADJ"),
            _FakeSpacyToken("car", 4, "", pos_="NOUN"),
        ])
        tokens = SpacyAnnotator(nlp_model=nlp).annotate("red car")
        assert [t.pos for t in tokens] == ["A", "N"]

        got = [ti.term_name for ti in NgramExtractor(order=2, posner_filter=True).extract(tokens)]
        assert got == ["red_car", "car"]


class TestNormalizePosTag:
    @pytest.mark.parametrize(
        "tag,coarse,expected",
        [
            ("NNS", "NOUN", "NNS"),
            ("", "NOUN", "N"),
            ("", "PROPN", "^"),
            ("", "ADJ", "A"),
            ("", "VERB", "VERB"),
            ("", "", None),
        ],
    )
    def test_mapping(self, tag, coarse, expected):
        assert normalize_pos_tag(tag, coarse) == expected
