"""
Term extraction & indexing over a set of text files.

Reads:
  - every FILE.txt given on the command line
  - every *.txt inside each DIRECTORY given on the command line

Produces:
  - a top-terms summary on stdout
  - optionally, all exported analyses as one JSON file (--output)
  - optionally, published analyses in Redis (--publish)

Ctrl-C stops the run between documents; documents analyzed so far keep
their complete analysis.
"""
import argparse
import json
import logging
import signal
import sys
import threading
import uuid
from pathlib import Path
from typing import List

from termindex.config import settings
from termindex.extraction.policies import policy_from_settings
from termindex.extraction.tokenizers import SpacyAnnotator, whitespace_tokenize
from termindex.indexing.export import export_document_analysis
from termindex.indexing.indexer import analyze_corpus
from termindex.models.document import Document
from termindex.models.term_vector import TermVector
from termindex.storage.redis_store import build_redis_client, publish_document_analysis

# ---------------------------------------------------------------------------
# Setup logging
# ---------------------------------------------------------------------------
logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s [%(levelname)s] %(name)s — %(message)s",
    stream=sys.stdout,
)
logger = logging.getLogger("run_analysis")


def parse_args(argv: List[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Extract and index terms from text files.")
    parser.add_argument("paths", nargs="+", help=".txt files or directories of .txt files")
    parser.add_argument("--unigram", action="store_true", help="one term per token, no filters")
    parser.add_argument("--order", type=int, default=None, help="maximum n-gram length")
    parser.add_argument("--stopwords", action=argparse.BooleanOptionalAction, default=None,
                        help="enable/disable the stopword filter (default: TERMINDEX_STOPWORD_FILTER)")
    parser.add_argument("--posner", action=argparse.BooleanOptionalAction, default=None,
                        help="enable/disable the POS/NER filter, needs --spacy (default: TERMINDEX_POSNER_FILTER)")
    parser.add_argument("--spacy", action="store_true", help="tokenize and tag with spaCy")
    parser.add_argument("--top", type=int, default=20, help="number of top terms to print")
    parser.add_argument("--output", type=Path, default=None, help="write exported analyses to this JSON file")
    parser.add_argument("--publish", action="store_true", help="publish analyses to Redis (REDIS_URL)")
    return parser.parse_args(argv)


def load_documents(paths: List[str], annotator: SpacyAnnotator | None) -> List[Document]:
    files: List[Path] = []
    for arg in paths:
        p = Path(arg)
        if p.is_dir():
            files.extend(sorted(p.glob("*.txt")))
        elif p.is_file() and p.suffix == ".txt":
            files.append(p)
        else:
            logger.warning("can't handle argument: %s", arg)

    documents: List[Document] = []
    for f in files:
        text = f.read_text(encoding="utf-8")
        tokens = annotator.annotate(text) if annotator is not None else whitespace_tokenize(text)
        documents.append(Document(docid=f.stem, text=text, tokens=tokens))
    logger.info("Loaded %d documents", len(documents))
    return documents


def main(argv: List[str]) -> int:
    args = parse_args(argv)

    annotator = None
    if args.spacy:
        annotator = SpacyAnnotator()
        if not annotator.load():
            return 1

    policy = policy_from_settings(
        name="unigram" if args.unigram else None,
        order=args.order,
        stopword_filter=args.stopwords,
        posner_filter=args.posner,
    )

    documents = load_documents(args.paths, annotator)
    if annotator is not None:
        annotator.close()

    cancel = threading.Event()
    signal.signal(signal.SIGINT, lambda _signum, _frame: cancel.set())

    report = analyze_corpus(policy, documents, cancel_event=cancel)
    analyzed = [d for d in documents if d.is_analyzed]

    # Corpus totals for display only
    corpus_vec = TermVector()
    for doc in analyzed:
        for term, count in doc.term_vec.items():
            corpus_vec.increment(term, count)

    print(f"\n{report.documents_analyzed} documents, {corpus_vec.total_count} term instances, "
          f"{len(corpus_vec)} distinct terms")
    for term, count in corpus_vec.most_common(args.top):
        print(f"{count:8d}  {term}")

    if args.output is not None:
        payload = {
            "report": report.to_dict(),
            "documents": [export_document_analysis(d) for d in analyzed],
        }
        args.output.write_text(json.dumps(payload, ensure_ascii=False, indent=2), encoding="utf-8")
        logger.info("Output written: %s", args.output)

    if args.publish:
        client = build_redis_client()
        run_id = uuid.uuid4().hex
        for doc in analyzed:
            publish_document_analysis(document=doc, redis_client=client, run_id=run_id)
        logger.info("Published %d analyses under run %s", len(analyzed), run_id)

    return 130 if report.cancelled else 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:]))
