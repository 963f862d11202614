"""Lexical similarity between short texts (requirements, bullets, skills).

Scores are deterministic and lie in [0, 1]:
  1. identical after normalization -> 1.0
  2. synonym-cluster hit -> 0.9 direct, 0.85 through a shared synonym
  3. otherwise max(word Jaccard, edit similarity * 0.7,
     technical-keyword Jaccard * 0.9)

Downstream thresholds (0.70 relevant, 0.50 partial) are tuned to this
blend; swapping in embeddings means re-tuning them.
"""

import logging
import re

from rapidfuzz.distance import Levenshtein

from resume_optimizer.services.keyword_extractor import extract_tech_keywords
from resume_optimizer.services.synonym_expander import get_expander

logger = logging.getLogger(__name__)

DIRECT_SYNONYM_SCORE = 0.9
SHARED_SYNONYM_SCORE = 0.85
EDIT_WEIGHT = 0.7
KEYWORD_WEIGHT = 0.9

_PUNCT_RE = re.compile(r"[^\w\s.\-]")
_SPACE_RE = re.compile(r"\s+")


def normalize(text: str) -> str:
    return _SPACE_RE.sub(" ", _PUNCT_RE.sub(" ", text.lower())).strip()


def jaccard(a: set[str], b: set[str]) -> float:
    if not a or not b:
        return 0.0
    return len(a & b) / len(a | b)


def edit_similarity(a: str, b: str) -> float:
    """1 - Levenshtein distance / longer length."""
    longest = max(len(a), len(b))
    if longest == 0:
        return 1.0
    return 1.0 - Levenshtein.distance(a, b) / longest


def synonym_similarity(a: str, b: str) -> float:
    """Score two normalized terms through the synonym dictionary, 0.0 if unrelated."""
    expander = get_expander()
    syn_a = set(expander.get_synonyms(a))
    if b in syn_a:
        return DIRECT_SYNONYM_SCORE
    syn_b = set(expander.get_synonyms(b))
    if a in syn_b:
        return DIRECT_SYNONYM_SCORE
    if syn_a & syn_b:
        return SHARED_SYNONYM_SCORE
    return 0.0


def keyword_overlap(text1: str, text2: str) -> float | None:
    """Jaccard over technical keywords, or None when either side has none."""
    kw1 = set(extract_tech_keywords(text1))
    kw2 = set(extract_tech_keywords(text2))
    if not kw1 or not kw2:
        return None
    return jaccard(kw1, kw2)


def similarity(text1: str, text2: str) -> float:
    """Lexical similarity in [0, 1]."""
    a, b = normalize(text1), normalize(text2)
    if not a or not b:
        return 0.0
    if a == b:
        return 1.0

    syn = synonym_similarity(a, b)
    if syn > 0:
        return syn

    score = max(jaccard(set(a.split()), set(b.split())), edit_similarity(a, b) * EDIT_WEIGHT)
    overlap = keyword_overlap(text1, text2)
    if overlap is not None:
        score = max(score, overlap * KEYWORD_WEIGHT)
    return round(min(1.0, score), 4)
