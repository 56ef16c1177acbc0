"""
Environment settings loaded from .env file.
"""
import os
from dotenv import load_dotenv

load_dotenv()


# --- Logging ---
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

# --- Extraction policy ---
TERMINDEX_POLICY: str = os.getenv("TERMINDEX_POLICY", "ngram")
TERMINDEX_NGRAM_ORDER: int = int(os.getenv("TERMINDEX_NGRAM_ORDER", "1"))
TERMINDEX_STOPWORD_FILTER: bool = os.getenv("TERMINDEX_STOPWORD_FILTER", "false").lower() == "true"
TERMINDEX_POSNER_FILTER: bool = os.getenv("TERMINDEX_POSNER_FILTER", "false").lower() == "true"

# --- NLP Models ---
SPACY_MODEL: str = os.getenv("SPACY_MODEL", "en_core_web_sm")

# --- Redis ---
REDIS_URL: str = os.getenv("REDIS_URL", "redis://localhost:6379/0")
ANALYSIS_TTL_SECONDS: int = int(os.getenv("ANALYSIS_TTL_SECONDS", "86400"))
