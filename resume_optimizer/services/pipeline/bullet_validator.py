"""Per-bullet validation: six independent checks on a candidate rewrite.

Checks, in report order:
    Semantic Similarity   meaning kept (lexical similarity >= 0.70)
    Metrics Preservation  >= 90% of the original's metrics survive
    Keyword Density       JD keywords < 8% of the rewrite's words
    Action Verb           first word comes from the role/seniority verb matrix
    No Hallucination      no technical term without support
    Readability           Flesch Reading Ease >= 60

validate() is a pure function of its arguments: the same pair always
yields the same ValidationResult.
"""

import logging
import re
from collections.abc import Iterable

from resume_optimizer.config import settings
from resume_optimizer.models.schemas.jd_analysis import JDAnalysis, RoleType, SeniorityLevel
from resume_optimizer.models.schemas.metrics import MetricExtraction
from resume_optimizer.models.schemas.rewrite import ValidationCheck, ValidationResult
from resume_optimizer.services import lexicon
from resume_optimizer.services.keyword_extractor import extract_tech_keywords, keyword_density
from resume_optimizer.services.metric_extractor import check_preservation, extract_metrics
from resume_optimizer.services.readability import flesch_reading_ease
from resume_optimizer.services.similarity import similarity

logger = logging.getLogger(__name__)

CHECK_SEMANTIC = "Semantic Similarity"
CHECK_METRICS = "Metrics Preservation"
CHECK_DENSITY = "Keyword Density"
CHECK_VERB = "Action Verb"
CHECK_HALLUCINATION = "No Hallucination"
CHECK_READABILITY = "Readability"

FAIL_SEMANTIC = "Semantic drift"
FAIL_METRICS = "Metrics lost"
FAIL_DENSITY = "Keyword stuffing detected"
FAIL_VERB = "Weak action verb"
FAIL_HALLUCINATION = "Hallucinated skill detected"
FAIL_READABILITY = "Awkward phrasing"

_EDGE_PUNCT_RE = re.compile(r"^[^\w]+|[^\w]+$")


def verbs_for(role: RoleType, seniority: SeniorityLevel) -> list[str]:
    """Verb list for a role/seniority cell, falling back to General."""
    matrix = lexicon.verb_matrix()
    row = matrix.get(role.value) or matrix[RoleType.GENERAL.value]
    return row.get(seniority.value) or matrix[RoleType.GENERAL.value][SeniorityLevel.MID.value]


def first_word(text: str) -> str:
    words = text.split()
    return _EDGE_PUNCT_RE.sub("", words[0]) if words else ""


def supported_terms(
    original: str,
    jd_analysis: JDAnalysis,
    evidence: Iterable[str] | None = None,
) -> set[str]:
    """Technical terms a rewrite of ``original`` may mention.

    Terms already in the bullet are always allowed. JD hard skills are
    allowed outright when no evidence is given; with resume evidence only
    the JD hard skills the resume itself backs up are allowed.
    """
    allowed = set(extract_tech_keywords(original))
    jd_skills = set(jd_analysis.hard_skills)
    if evidence is None:
        allowed |= jd_skills
    else:
        allowed |= jd_skills & {e.lower() for e in evidence}
    return allowed


class BulletValidator:
    """Runs the six checks against a (original, rewritten) pair."""

    def validate(
        self,
        original: str,
        rewritten: str,
        jd_analysis: JDAnalysis,
        metrics: MetricExtraction | None = None,
        supported: set[str] | None = None,
    ) -> ValidationResult:
        checks = [
            self._check_semantic(original, rewritten),
            self._check_metrics(metrics or extract_metrics(original), rewritten),
            self._check_density(rewritten, jd_analysis),
            self._check_verb(rewritten, jd_analysis),
            self._check_hallucination(
                original, rewritten,
                supported if supported is not None else supported_terms(original, jd_analysis),
            ),
            self._check_readability(rewritten),
        ]
        failures = [_FAILURE_REASONS[c.name] for c in checks if not c.passed]
        return ValidationResult(passed=not failures, checks=checks, failure_reasons=failures)

    def _check_semantic(self, original: str, rewritten: str) -> ValidationCheck:
        score = similarity(original, rewritten)
        threshold = settings.semantic_threshold
        return ValidationCheck(
            name=CHECK_SEMANTIC,
            passed=score >= threshold,
            score=score,
            threshold=threshold,
            message=f"Similarity to original: {score:.0%}",
        )

    def _check_metrics(self, extraction: MetricExtraction, rewritten: str) -> ValidationCheck:
        threshold = settings.metric_preservation_threshold
        if not extraction.has_quantification:
            return ValidationCheck(
                name=CHECK_METRICS, passed=True, score=1.0, threshold=threshold,
                message="No metrics to preserve",
            )
        rate, missing = check_preservation(extraction, rewritten)
        message = f"{rate:.0%} of metrics preserved"
        if missing:
            message += f" (missing: {', '.join(missing)})"
        return ValidationCheck(
            name=CHECK_METRICS, passed=rate >= threshold, score=rate, threshold=threshold, message=message,
        )

    def _check_density(self, rewritten: str, jd_analysis: JDAnalysis) -> ValidationCheck:
        density = keyword_density(rewritten, jd_analysis.keyword_terms)
        threshold = settings.max_keyword_density
        return ValidationCheck(
            name=CHECK_DENSITY,
            passed=density < threshold,
            score=density,
            threshold=threshold,
            message=f"Keyword density: {density:.1%}",
        )

    def _check_verb(self, rewritten: str, jd_analysis: JDAnalysis) -> ValidationCheck:
        verbs = verbs_for(jd_analysis.role_type, jd_analysis.seniority_level)
        opener = first_word(rewritten)
        passed = opener.lower() in {v.lower() for v in verbs}
        return ValidationCheck(
            name=CHECK_VERB,
            passed=passed,
            score=1.0 if passed else 0.0,
            threshold=1.0,
            message=f"Starts with '{opener}'" if passed else f"'{opener}' is not a {jd_analysis.seniority_level.value} {jd_analysis.role_type.value} action verb",
        )

    def _check_hallucination(self, original: str, rewritten: str, supported: set[str]) -> ValidationCheck:
        new_terms = [t for t in extract_tech_keywords(rewritten) if t not in supported]
        return ValidationCheck(
            name=CHECK_HALLUCINATION,
            passed=not new_terms,
            score=0.0 if new_terms else 1.0,
            threshold=1.0,
            message=f"Unsupported terms: {', '.join(new_terms)}" if new_terms else "No new technologies introduced",
        )

    def _check_readability(self, rewritten: str) -> ValidationCheck:
        score = flesch_reading_ease(rewritten)
        threshold = settings.min_readability
        return ValidationCheck(
            name=CHECK_READABILITY,
            passed=score >= threshold,
            score=round(score, 1),
            threshold=threshold,
            message=f"Reading ease: {score:.0f}",
        )


_FAILURE_REASONS = {
    CHECK_SEMANTIC: FAIL_SEMANTIC,
    CHECK_METRICS: FAIL_METRICS,
    CHECK_DENSITY: FAIL_DENSITY,
    CHECK_VERB: FAIL_VERB,
    CHECK_HALLUCINATION: FAIL_HALLUCINATION,
    CHECK_READABILITY: FAIL_READABILITY,
}
