"""Dictionary-backed synonym expansion with deterministic candidate generation.

Curated clusters come from ``data/synonyms.yaml``. Terms outside the
dictionary are expanded into orthographic variants (kebab, snake, camel,
Pascal, acronym, slash and dot forms) for lexical matching. Nothing here
touches the network or an embedding model.
"""

import logging
import re
from collections.abc import Iterable
from typing import Any

from rapidfuzz.distance import Levenshtein

from resume_optimizer.models.schemas.synonyms import (
    ExpansionMatch,
    KeywordExpansion,
    KeywordMetadata,
    SemanticCluster,
)
from resume_optimizer.services import lexicon
from resume_optimizer.services.keyword_extractor import contains_term

logger = logging.getLogger(__name__)

SYNONYM_CONFIDENCE_DECAY = 0.9
UNKNOWN_CONFIDENCE = 0.5
MAX_RELATED_EDIT_DISTANCE = 2
MIN_EDIT_COMPARE_LENGTH = 4  # short tokens like "go"/"js" only relate by containment

_WORD_SPLIT_RE = re.compile(r"[\s\-_/.]+")
_NON_ALNUM_RE = re.compile(r"[^a-z0-9]")


def _alnum(term: str) -> str:
    return _NON_ALNUM_RE.sub("", term.lower())


def generate_candidates(term: str) -> list[str]:
    """Orthographic variants of a term, original excluded, in a fixed order."""
    term = term.strip()
    if not term:
        return []
    words = [w.lower() for w in _WORD_SPLIT_RE.split(term) if w]
    candidates: list[str] = []
    if len(words) > 1:
        candidates += [
            "-".join(words),
            "_".join(words),
            words[0] + "".join(w.capitalize() for w in words[1:]),
            "".join(w.capitalize() for w in words),
            "".join(w[0] for w in words).upper(),
            "".join(w[0] for w in words),
            "/".join(words),
            ".".join(words),
            " ".join(words),
        ]
    candidates += [term.upper(), term.lower()]
    return [c for c in dict.fromkeys(candidates) if c != term]


def are_terms_related(a: str, b: str) -> bool:
    """Containment or a small edit distance between alphanumeric forms."""
    x, y = _alnum(a), _alnum(b)
    if not x or not y:
        return False
    if x == y or x in y or y in x:
        return True
    if min(len(x), len(y)) < MIN_EDIT_COMPARE_LENGTH:
        return False
    return Levenshtein.distance(x, y) <= MAX_RELATED_EDIT_DISTANCE


class SynonymExpander:
    """Synonym lookup and keyword expansion over curated clusters."""

    def __init__(self, clusters: list[dict[str, Any]] | None = None) -> None:
        self._metadata: dict[str, KeywordMetadata] = {}
        self._synonyms: dict[str, list[str]] = {}  # canonical -> synonyms
        self._parents: dict[str, list[str]] = {}  # synonym -> canonicals
        self._expansions: dict[str, KeywordExpansion] = {}
        for cluster in lexicon.synonym_clusters() if clusters is None else clusters:
            self._add_cluster(
                cluster["canonical"],
                cluster.get("synonyms", []),
                confidence=cluster.get("confidence", 0.8),
                category=cluster.get("category", "Technical"),
                importance=cluster.get("importance", "medium"),
            )

    def _add_cluster(
        self,
        canonical: str,
        synonyms: Iterable[str],
        confidence: float,
        category: str,
        importance: str,
    ) -> None:
        canonical = canonical.lower().strip()
        self._metadata[canonical] = KeywordMetadata(
            canonical=canonical,
            confidence=confidence,
            category=category,
            importance=importance,
            in_dictionary=True,
        )
        bucket = self._synonyms.setdefault(canonical, [])
        for syn in synonyms:
            syn = syn.lower().strip()
            if syn and syn != canonical and syn not in bucket:
                bucket.append(syn)
                self._parents.setdefault(syn, []).append(canonical)
        self._expansions.clear()

    def add_custom_synonym(
        self,
        canonical: str,
        synonym: str,
        confidence: float = 0.8,
        category: str = "Custom",
        importance: str = "medium",
    ) -> None:
        key = canonical.lower().strip()
        existing = self._metadata.get(key)
        if existing is not None:
            confidence, category, importance = existing.confidence, existing.category, existing.importance
        self._add_cluster(key, [synonym], confidence, category, importance)
        logger.info("Added custom synonym %s -> %s", synonym, key)

    def get_synonyms(self, term: str) -> list[str]:
        t = term.lower().strip()
        found: list[str] = list(self._synonyms.get(t, []))
        for parent in self._parents.get(t, []):
            found.append(parent)
            found.extend(self._synonyms[parent])
        return [s for s in dict.fromkeys(found) if s != t]

    def get_keyword_metadata(self, term: str) -> KeywordMetadata:
        t = term.lower().strip()
        if t in self._metadata:
            return self._metadata[t]
        parents = self._parents.get(t)
        if parents:
            parent = self._metadata[parents[0]]
            return KeywordMetadata(
                canonical=parent.canonical,
                confidence=round(parent.confidence * SYNONYM_CONFIDENCE_DECAY, 4),
                category=parent.category,
                importance=parent.importance,
                in_dictionary=True,
            )
        return KeywordMetadata(canonical=t, confidence=UNKNOWN_CONFIDENCE)

    def expand_keyword(self, term: str) -> KeywordExpansion:
        t = term.lower().strip()
        if t not in self._expansions:
            synonyms = self.get_synonyms(t)
            if synonyms:
                meta = self.get_keyword_metadata(t)
                self._expansions[t] = KeywordExpansion(
                    keyword=t, synonyms=synonyms, confidence=meta.confidence, source="dictionary",
                )
            else:
                self._expansions[t] = KeywordExpansion(
                    keyword=t, synonyms=generate_candidates(term), confidence=UNKNOWN_CONFIDENCE,
                )
        return self._expansions[t]

    def match_with_expansion(self, text: str, keywords: list[str]) -> list[ExpansionMatch]:
        """Report, per keyword, whether it or any expansion appears in ``text``."""
        results = []
        for kw in keywords:
            match = ExpansionMatch(keyword=kw)
            for form in [kw] + self.expand_keyword(kw).synonyms:
                if contains_term(text, form):
                    match = ExpansionMatch(keyword=kw, found=True, matched_as=form)
                    break
            results.append(match)
        return results

    def is_present(self, term: str, pool: Iterable[str]) -> bool:
        """True if ``term`` or one of its dictionary synonyms is in ``pool``."""
        lowered = {p.lower().strip() for p in pool}
        t = term.lower().strip()
        return t in lowered or any(s in lowered for s in self.get_synonyms(t))

    def build_clusters(self, terms: list[str]) -> list[SemanticCluster]:
        """Greedily group related terms; each term lands in exactly one cluster."""
        clusters: list[SemanticCluster] = []
        assigned: set[int] = set()
        for i, term in enumerate(terms):
            if i in assigned:
                continue
            members = [term]
            assigned.add(i)
            synonyms = set(self.get_synonyms(term))
            for j in range(i + 1, len(terms)):
                if j in assigned:
                    continue
                other = terms[j]
                if other.lower() in synonyms or are_terms_related(term, other):
                    members.append(other)
                    assigned.add(j)
            canonical = next(
                (m.lower() for m in members if m.lower() in self._metadata),
                self.get_keyword_metadata(term).canonical,
            )
            clusters.append(SemanticCluster(canonical=canonical, members=members))
        return clusters


_expander: SynonymExpander | None = None


def get_expander() -> SynonymExpander:
    """Shared expander over the bundled dictionary, created on first use."""
    global _expander
    if _expander is None:
        _expander = SynonymExpander()
    return _expander


def reset_expander() -> None:
    global _expander
    _expander = None
