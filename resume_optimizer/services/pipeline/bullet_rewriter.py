"""Bullet Rewriter: templated rewrites validated with bounded retries.

Per bullet:
    generate -> validate -> (retry with accumulated failure reasons) -> best-of-N

Generation swaps a weak opener ("worked on", "helped", "was responsible
for", ...) for a verb from the role/seniority matrix, optionally splices in
one supported JD keyword ("using X and ...", "with X and ..."), and clamps
length without dropping a metric. Each retry sees every failure reason so
far and backs off the behaviour that caused it. If no attempt passes, the
attempt with the most passing checks is kept (first wins ties) and marked
best-effort rather than discarded.
"""

import logging
import re
from collections.abc import Iterable
from typing import Any

from rapidfuzz import fuzz

from resume_optimizer.config import settings
from resume_optimizer.models.schemas.bullet_match import BulletMatch
from resume_optimizer.models.schemas.jd_analysis import JDAnalysis
from resume_optimizer.models.schemas.metrics import MetricExtraction
from resume_optimizer.models.schemas.resume_document import ResumeDocument
from resume_optimizer.models.schemas.rewrite import BulletStatus, RewrittenBullet, ValidationResult
from resume_optimizer.services import lexicon
from resume_optimizer.services.keyword_extractor import (
    contains_term,
    display_form,
    extract_tech_keywords,
    keyword_density,
    stem,
)
from resume_optimizer.services.metric_extractor import check_preservation, extract_metrics
from resume_optimizer.services.pipeline.base import BaseStage
from resume_optimizer.services.pipeline.bullet_validator import (
    CHECK_DENSITY,
    CHECK_METRICS,
    CHECK_SEMANTIC,
    FAIL_DENSITY,
    FAIL_HALLUCINATION,
    FAIL_READABILITY,
    FAIL_SEMANTIC,
    FAIL_VERB,
    BulletValidator,
    first_word,
    supported_terms,
    verbs_for,
)
from resume_optimizer.services.readability import count_syllables
from resume_optimizer.services.similarity import similarity

logger = logging.getLogger(__name__)

MAX_SPLICE_CANDIDATES = 3

# Any of these in the failure history stops keyword splicing for good.
_SUPPRESS_SPLICE = frozenset({FAIL_DENSITY, FAIL_HALLUCINATION, FAIL_SEMANTIC, FAIL_READABILITY})

_BULLET_MARK_RE = re.compile(r"^\s*(?:[-*•▪●>]+\s*)")
_EDGE_PUNCT_RE = re.compile(r"^[^\w]+|[^\w]+$")
_USING_RE = re.compile(r"\busing\s+", re.IGNORECASE)
_WITH_RE = re.compile(r"\bwith\s+", re.IGNORECASE)


def resume_evidence_terms(resume: ResumeDocument) -> set[str]:
    """Technical terms the resume itself mentions anywhere."""
    parts = [resume.to_text()]
    parts += [" ".join(p.tech_stack) for p in resume.projects]
    parts += [c.title for c in resume.certifications]
    return set(extract_tech_keywords(" ".join(parts)))


class BulletRewriterService(BaseStage[list[RewrittenBullet]]):
    stage_name = "bullet_rewriter"
    lookup_tables = ("action_verbs", "synonyms", "vocabulary")
    required_inputs = ("resume", "jd_analysis")

    def __init__(self, validator: BulletValidator | None = None) -> None:
        self._validator = validator or BulletValidator()
        self._weak_phrases: list[tuple[str, int]] = []
        self._weak_verbs: list[tuple[str, dict[str, Any]]] = []
        self._strong_verbs: frozenset[str] = frozenset()

    def load(self) -> None:
        table = lexicon.load_table("action_verbs")
        # Longest phrase first so "was responsible for" beats "responsible for"
        self._weak_phrases = sorted(
            ((p["phrase"].lower(), int(p["slot"])) for p in table["weak_phrases"]),
            key=lambda p: len(p[0]),
            reverse=True,
        )
        self._weak_verbs = [
            (stem(base), {
                "slot": int(rule.get("slot", 0)),
                "forms": {f.lower() for f in rule.get("forms", [])},
                "particles": {p.lower() for p in rule.get("particles", [])},
            })
            for base, rule in table["weak_verbs"].items()
        ]
        self._strong_verbs = frozenset(v.lower() for v in table["strong_verbs"])
        logger.info(
            "Rewriter loaded %d weak phrases, %d weak verbs",
            len(self._weak_phrases), len(self._weak_verbs),
        )

    def _run(self, **inputs: Any) -> list[RewrittenBullet]:
        resume: ResumeDocument = inputs["resume"]
        jd_analysis: JDAnalysis = inputs["jd_analysis"]
        matches: list[BulletMatch] = inputs.get("matches") or []
        evidence: set[str] | None = inputs.get("evidence")

        best_match: dict[tuple[str, int, int], BulletMatch] = {}
        for m in matches:
            current = best_match.get(m.location)
            if current is None or m.similarity > current.similarity:
                best_match[m.location] = m

        rewrites = []
        for section, entry_index, bullet_index, text in resume.iter_bullets():
            if not text.strip():
                continue
            rewrites.append(self.rewrite_bullet(
                text,
                jd_analysis,
                match=best_match.get((section, entry_index, bullet_index)),
                supported=supported_terms(text, jd_analysis, evidence),
                section=section,
                entry_index=entry_index,
                bullet_index=bullet_index,
            ))

        passed = sum(1 for r in rewrites if r.status == BulletStatus.PASSED)
        logger.info("Rewrote %d bullets: %d passed, %d best-effort", len(rewrites), passed, len(rewrites) - passed)
        return rewrites

    # ------------------------------------------------------------------
    # Retry loop
    # ------------------------------------------------------------------

    def rewrite_bullet(
        self,
        original: str,
        jd_analysis: JDAnalysis,
        match: BulletMatch | None = None,
        supported: set[str] | None = None,
        section: str = "experience",
        entry_index: int = 0,
        bullet_index: int = 0,
    ) -> RewrittenBullet:
        self.ensure_loaded()
        metrics = extract_metrics(original)
        if supported is None:
            supported = supported_terms(original, jd_analysis)

        seen_failures: list[str] = []
        best_text = original
        best_result: ValidationResult | None = None

        for attempt in range(max(1, settings.max_attempts)):
            candidate = self.generate_candidate(
                original, jd_analysis, match, metrics, attempt, seen_failures, supported,
            )
            result = self._validator.validate(
                original, candidate, jd_analysis, metrics=metrics, supported=supported,
            ).model_copy(update={"retry_count": attempt})

            if best_result is None or result.passed_count > best_result.passed_count:
                best_text, best_result = candidate, result
            if result.passed:
                break
            for reason in result.failure_reasons:
                if reason not in seen_failures:
                    seen_failures.append(reason)
            logger.debug("Attempt %d for %.40r failed: %s", attempt, original, ", ".join(result.failure_reasons))

        semantic = best_result.check(CHECK_SEMANTIC)
        density = best_result.check(CHECK_DENSITY)
        metric_check = best_result.check(CHECK_METRICS)
        if metric_check is not None:
            metrics_preserved = metric_check.passed
        else:
            metrics_preserved = check_preservation(metrics, best_text)[0] >= settings.metric_preservation_threshold

        return RewrittenBullet(
            original=original,
            rewritten=best_text,
            validation=best_result,
            metrics_preserved=metrics_preserved,
            keyword_density=density.score if density else keyword_density(best_text, jd_analysis.keyword_terms),
            semantic_similarity=semantic.score if semantic else similarity(original, best_text),
            status=BulletStatus.PASSED if best_result.passed else BulletStatus.BEST_EFFORT,
            section=section,
            entry_index=entry_index,
            bullet_index=bullet_index,
        )

    # ------------------------------------------------------------------
    # Generation
    # ------------------------------------------------------------------

    def generate_candidate(
        self,
        original: str,
        jd_analysis: JDAnalysis,
        match: BulletMatch | None = None,
        metrics: MetricExtraction | None = None,
        attempt: int = 0,
        previous_failures: Iterable[str] = (),
        supported: set[str] | None = None,
    ) -> str:
        """Build one candidate rewrite. Deterministic for a given failure history."""
        self.ensure_loaded()
        failures = set(previous_failures)
        verbs = verbs_for(jd_analysis.role_type, jd_analysis.seniority_level)

        text = _BULLET_MARK_RE.sub("", " ".join(original.split()))
        text = self._replace_weak_opener(text, verbs, failures)

        if FAIL_VERB in failures and first_word(text).lower() not in {v.lower() for v in verbs}:
            text = self._force_matrix_verb(text, verbs, failures, attempt)

        if not failures & _SUPPRESS_SPLICE:
            pool = match.requirement.keywords if match else jd_analysis.keyword_terms
            allowed = supported if supported is not None else supported_terms(original, jd_analysis)
            text = self._splice_keyword(text, pool[:MAX_SPLICE_CANDIDATES], allowed)

        text = self._clamp_length(text, metrics or extract_metrics(original))
        return text[:1].upper() + text[1:]

    def _pick_verb(self, verbs: list[str], slot: int, failures: set[str], opener: str = "") -> str:
        if FAIL_READABILITY in failures:
            return min(verbs, key=lambda v: (count_syllables(v), len(v)))
        if FAIL_SEMANTIC in failures and opener:
            return max(verbs, key=lambda v: fuzz.ratio(v.lower(), opener.lower()))
        return verbs[slot % len(verbs)]

    def _weak_verb_rule(self, opener: str) -> dict[str, Any] | None:
        if not opener or opener.endswith("ing"):
            return None
        opener_stem = stem(opener)
        for base_stem, rule in self._weak_verbs:
            if opener in rule["forms"] or opener_stem == base_stem:
                return rule
        return None

    def _replace_weak_opener(self, text: str, verbs: list[str], failures: set[str]) -> str:
        lowered = text.lower()
        for phrase, slot in self._weak_phrases:
            if lowered == phrase or lowered.startswith(phrase + " "):
                verb = self._pick_verb(verbs, slot, failures, phrase)
                return _join(verb, text[len(phrase):])

        parts = text.split(maxsplit=1)
        if not parts:
            return text
        opener = _EDGE_PUNCT_RE.sub("", parts[0]).lower()
        rule = self._weak_verb_rule(opener)
        if rule is None:
            return text

        rest = parts[1] if len(parts) > 1 else ""
        rest_parts = rest.split(maxsplit=1)
        if rest_parts and rest_parts[0].lower() in rule["particles"]:
            rest = rest_parts[1] if len(rest_parts) > 1 else ""
        return _join(self._pick_verb(verbs, rule["slot"], failures, opener), rest)

    def _force_matrix_verb(self, text: str, verbs: list[str], failures: set[str], attempt: int) -> str:
        parts = text.split(maxsplit=1)
        if not parts:
            return text
        opener = _EDGE_PUNCT_RE.sub("", parts[0]).lower()
        verb = self._pick_verb(verbs, attempt, failures, opener)
        if opener in self._strong_verbs or opener.endswith("ed"):
            return _join(verb, parts[1] if len(parts) > 1 else "")
        return _join(verb, _decapitalize(text))

    def _splice_keyword(self, text: str, candidates: list[str], allowed: set[str]) -> str:
        for keyword in candidates:
            if keyword not in allowed or contains_term(text, keyword):
                continue
            anchor = _USING_RE.search(text) or _WITH_RE.search(text)
            if anchor is None:
                return text
            return f"{text[:anchor.end()]}{display_form(keyword)} and {text[anchor.end():]}"
        return text

    def _clamp_length(self, text: str, extraction: MetricExtraction) -> str:
        words = text.split()
        if len(words) <= settings.max_bullet_words:
            return text
        clipped = " ".join(words[:settings.max_bullet_words]).rstrip(",;:-")
        lowered = clipped.lower()
        for metric in extraction.metrics:
            if metric.value.lower() in text.lower() and metric.value.lower() not in lowered:
                return text
        return clipped


def _join(verb: str, rest: str) -> str:
    rest = rest.strip()
    return f"{verb} {rest}" if rest else verb


def _decapitalize(text: str) -> str:
    word = text.split(maxsplit=1)[0] if text.split() else ""
    # Leave acronyms and proper casing like "AWS" or "iOS" alone
    if len(word) > 1 and word[0].isupper() and word[1].islower():
        return text[0].lower() + text[1:]
    return text
