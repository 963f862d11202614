"""Technical keyword extraction against the shared term vocabulary.

One vocabulary (``data/vocabulary.yaml``) drives JD keyword inventories,
similarity keyword overlap, bullet keyword density and hallucination
detection, so every stage agrees on what counts as a technical term.
"""

import logging
import re
from collections import Counter

from nltk.stem import PorterStemmer

from resume_optimizer.services import lexicon

logger = logging.getLogger(__name__)

_stemmer = PorterStemmer()

DEFAULT_CATEGORY = "Technical"

# Characters that may not touch either side of a term (keeps "java" out of
# "javascript", "sql" out of "postgresql" and "c" out of "c++").
_LEFT_GUARD = r"(?<![a-z0-9.#+])"
_RIGHT_GUARD = r"(?![a-z0-9+#])"

_vocab_patterns: list[tuple[str, re.Pattern]] | None = None


def _phrase_regex(phrase: str) -> str:
    body = r"\s+".join(re.escape(part) for part in phrase.lower().split())
    return f"{_LEFT_GUARD}{body}{_RIGHT_GUARD}"


def term_pattern(term: str, aliases: list[str] | None = None) -> re.Pattern:
    """Compile a word-guarded, case-insensitive pattern for a term and its aliases."""
    forms = [term] + list(aliases or [])
    return re.compile("|".join(f"(?:{_phrase_regex(f)})" for f in forms), re.IGNORECASE)


def _get_vocab_patterns() -> list[tuple[str, re.Pattern]]:
    global _vocab_patterns
    if _vocab_patterns is None:
        _vocab_patterns = [
            (term, term_pattern(term, meta.get("aliases")))
            for term, meta in lexicon.vocabulary().items()
        ]
        logger.info("Compiled %d vocabulary patterns", len(_vocab_patterns))
    return _vocab_patterns


def find_tech_keywords(text: str) -> list[str]:
    """Every vocabulary hit in reading order, canonical form, duplicates kept."""
    if not text:
        return []
    hits: list[tuple[int, str]] = []
    for term, pattern in _get_vocab_patterns():
        for m in pattern.finditer(text):
            hits.append((m.start(), term))
    hits.sort(key=lambda h: h[0])
    return [term for _, term in hits]


def extract_tech_keywords(text: str) -> list[str]:
    """Distinct vocabulary terms in order of first appearance."""
    return list(dict.fromkeys(find_tech_keywords(text)))


def count_tech_keywords(text: str) -> Counter:
    return Counter(find_tech_keywords(text))


def extract_hard_skills(text: str) -> list[str]:
    vocab = lexicon.vocabulary()
    return [t for t in extract_tech_keywords(text) if vocab[t].get("hard_skill", True)]


def categorize_keyword(term: str) -> str:
    meta = lexicon.vocabulary().get(term.lower())
    return meta["category"] if meta else DEFAULT_CATEGORY


def display_form(term: str) -> str:
    """Casing to use when a canonical term is written into resume text."""
    meta = lexicon.vocabulary().get(term.lower())
    return meta.get("display", term) if meta else term


def is_tech_term(term: str) -> bool:
    return term.lower() in lexicon.vocabulary()


def contains_term(text: str, term: str) -> bool:
    return bool(term_pattern(term).search(text))


def stem(word: str) -> str:
    return _stemmer.stem(word.lower())


def keyword_density(text: str, keywords: list[str]) -> float:
    """Share of words in ``text`` taken up by occurrences of ``keywords``.

    Always within [0, 1]; 0 for empty text or an empty keyword list.
    """
    words = text.split()
    terms = {k.lower().strip() for k in keywords if k and k.strip()}
    if not words or not terms:
        return 0.0
    hits = sum(len(term_pattern(t).findall(text)) for t in terms)
    return min(1.0, hits / len(words))


def term_densities(text: str, terms: list[str]) -> dict[str, float]:
    """Per-term share of words, for terms that occur at least once."""
    words = text.split()
    if not words:
        return {}
    densities: dict[str, float] = {}
    for term in dict.fromkeys(t.lower() for t in terms if t):
        count = len(term_pattern(term).findall(text))
        if count:
            densities[term] = count / len(words)
    return densities
