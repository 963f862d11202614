"""Authenticity Validator: whole-document audit of optimized vs original.

Five passes, each contributing issues and warnings:
    1. Content change      share of original bullets no longer recognizable
    2. Metric preservation original numbers still present (within 10%)
    3. Keyword stuffing    technical terms crowding the text
    4. Skill inflation     skills list growth
    5. Fabrication         new suspicious metrics, inflated years of experience

The per-bullet hallucination check in the rewriter is a separate concern;
this pass only looks at the finished documents.
"""

import logging
import re
from typing import Any

from resume_optimizer.config import settings
from resume_optimizer.models.schemas.authenticity_report import (
    AuthenticityIssue,
    AuthenticityMetrics,
    AuthenticityReport,
    AuthenticityWarning,
    IssueCategory,
    Severity,
)
from resume_optimizer.models.schemas.resume_document import ResumeDocument
from resume_optimizer.services import lexicon
from resume_optimizer.services.keyword_extractor import (
    extract_tech_keywords,
    find_tech_keywords,
    term_densities,
)
from resume_optimizer.services.metric_extractor import extract_metric_strings, is_equivalent_metric
from resume_optimizer.services.pipeline.base import BaseStage

logger = logging.getLogger(__name__)

BULLET_PRESERVED_SIMILARITY = 0.5
MIN_COMPARED_WORD_LENGTH = 4
MAX_LISTED = 5

_PERCENT_RE = re.compile(r"(\d+(?:\.\d+)?)\s*%")
_YEARS_RES = (
    re.compile(r"(\d+)\+?\s*years?\s*(?:of\s*)?experience", re.IGNORECASE),
    re.compile(r"experience\s*:?\s*(\d+)\+?\s*years?", re.IGNORECASE),
)


def bullet_similarity(a: str, b: str) -> float:
    """Word Jaccard over words longer than three characters."""
    words_a = {w for w in a.lower().split() if len(w) >= MIN_COMPARED_WORD_LENGTH}
    words_b = {w for w in b.lower().split() if len(w) >= MIN_COMPARED_WORD_LENGTH}
    if not words_a or not words_b:
        return 0.0
    return len(words_a & words_b) / len(words_a | words_b)


def years_of_experience(text: str) -> int:
    """Largest "N years of experience" claim in the text, 0 if none."""
    years = [int(m.group(1)) for pattern in _YEARS_RES for m in pattern.finditer(text)]
    return max(years, default=0)


def _document_metrics(resume: ResumeDocument) -> list[str]:
    return [m for bullet in resume.all_bullets() for m in extract_metric_strings(bullet)]


def _skill_set(resume: ResumeDocument) -> set[str]:
    return {s.lower().strip() for s in resume.all_skills() if s.strip()}


def _tech_density(text: str) -> float:
    words = text.split()
    return len(find_tech_keywords(text)) / len(words) if words else 0.0


class AuthenticityValidatorService(BaseStage[AuthenticityReport]):
    stage_name = "authenticity_validator"
    lookup_tables = ("authenticity",)
    required_inputs = ("original", "optimized")

    def __init__(self) -> None:
        self._indicators: list[str] = []
        self._round_re: re.Pattern | None = None
        self._percent_floor = 90.0
        self._percent_values: set[float] = set()
        self._deductions: dict[str, int] = {}

    def load(self) -> None:
        rules = lexicon.authenticity_rules()
        self._indicators = list(rules["fabricated_metric_indicators"])
        numbers = "|".join(str(n) for n in rules["round_numbers"])
        self._round_re = re.compile(rf"\b(?:{numbers})\b")
        self._percent_floor = float(rules["suspicious_percent_floor"])
        self._percent_values = {float(v) for v in rules["suspicious_percent_values"]}
        self._deductions = {k: int(v) for k, v in rules["severity_deductions"].items()}

    def _run(self, **inputs: Any) -> AuthenticityReport:
        return self.validate(inputs["original"], inputs["optimized"])

    def validate(self, original: ResumeDocument, optimized: ResumeDocument) -> AuthenticityReport:
        self.ensure_loaded()
        issues: list[AuthenticityIssue] = []
        warnings: list[AuthenticityWarning] = []

        authenticity, change_rate = self._check_content_change(original, optimized, issues, warnings)
        metric_rate = self._check_metric_preservation(original, optimized, issues)
        density, stuffed = self._check_keyword_stuffing(original, optimized, issues)
        inflation = self._check_skill_inflation(original, optimized, issues, warnings)
        self._check_fabrication(original, optimized, issues)

        metrics = AuthenticityMetrics(
            authenticity_score=authenticity,
            metric_preservation_rate=metric_rate,
            keyword_density=round(density, 4),
            skill_inflation_rate=round(inflation, 2),
            content_change_rate=round(change_rate, 4),
        )
        score = self._score(metrics, issues, stuffed)
        report = AuthenticityReport(
            is_valid=score >= settings.min_authenticity_score
            and not any(i.severity == Severity.CRITICAL for i in issues),
            score=score,
            issues=issues,
            warnings=warnings,
            metrics=metrics,
        )

        if report.critical_count:
            logger.warning("Authenticity: %d critical issue(s)", report.critical_count)
        if report.is_valid:
            logger.info("Authenticity check passed: score=%d", score)
        else:
            logger.warning("Authenticity check failed: score=%d issues=%d", score, len(issues))
        return report

    # ------------------------------------------------------------------
    # Passes
    # ------------------------------------------------------------------

    def _check_content_change(self, original, optimized, issues, warnings) -> tuple[float, float]:
        before = [b for b in original.all_bullets() if b.strip()]
        after = [b for b in optimized.all_bullets() if b.strip()]
        preserved = sum(
            1 for b in before
            if b in after or any(bullet_similarity(b, o) >= BULLET_PRESERVED_SIMILARITY for o in after)
        )
        preservation = preserved / len(before) if before else 1.0
        change_rate = 1.0 - preservation

        if change_rate > settings.max_content_change:
            issues.append(AuthenticityIssue(
                severity=Severity.HIGH,
                category=IssueCategory.AUTHENTICITY,
                message=f"Content change rate ({change_rate:.0%}) exceeds safe threshold",
                location="Experience and projects",
                suggestion="Reduce content modifications to preserve authenticity",
            ))
        elif change_rate > settings.warn_content_change:
            warnings.append(AuthenticityWarning(
                message=f"Content change rate ({change_rate:.0%}) is approaching threshold",
            ))

        new_sections = [s for s in optimized.section_names() if s not in original.section_names()]
        if new_sections:
            warnings.append(AuthenticityWarning(
                level="info", message=f"New sections added: {', '.join(new_sections)}",
            ))
        return float(round(preservation * 100)), change_rate

    def _check_metric_preservation(self, original, optimized, issues) -> float:
        before = _document_metrics(original)
        after = _document_metrics(optimized)
        if not before:
            return 100.0
        preserved = sum(1 for m in before if any(is_equivalent_metric(m, o) for o in after))
        rate = preserved / len(before)
        if rate < settings.metric_preservation_threshold:
            issues.append(AuthenticityIssue(
                severity=Severity.HIGH,
                category=IssueCategory.AUTHENTICITY,
                message=f"Only {rate:.0%} of original metrics preserved",
                location="Experience and projects",
                suggestion="Ensure all original quantified achievements are retained",
            ))
        return float(round(rate * 100))

    def _check_keyword_stuffing(self, original, optimized, issues) -> tuple[float, bool]:
        """Returns (technical density, whether the aggregate limit was crossed).

        Only density the optimizer added counts: a term or total already at
        that level in the original is not flagged.
        """
        text_before = original.to_text()
        text_after = optimized.to_text()

        terms = extract_tech_keywords(text_after)
        before = term_densities(text_before, terms)
        stuffed_terms = [
            f"{term} ({density:.0%})"
            for term, density in term_densities(text_after, terms).items()
            if density > settings.max_term_density and density > before.get(term, 0.0)
        ]
        if stuffed_terms:
            issues.append(AuthenticityIssue(
                severity=Severity.MEDIUM,
                category=IssueCategory.KEYWORD_STUFFING,
                message=f"Potential keyword stuffing detected: {', '.join(stuffed_terms[:MAX_LISTED])}",
                suggestion="Reduce repetition of these keywords for natural reading",
            ))

        density = _tech_density(text_after)
        aggregate = density > settings.max_keyword_density and density > _tech_density(text_before)
        if aggregate:
            issues.append(AuthenticityIssue(
                severity=Severity.MEDIUM,
                category=IssueCategory.KEYWORD_STUFFING,
                message=f"Technical keyword density ({density:.0%}) is too high",
                suggestion="Balance technical terms with descriptive content",
            ))
        return density, aggregate

    def _check_skill_inflation(self, original, optimized, issues, warnings) -> float:
        before = _skill_set(original)
        after = _skill_set(optimized)
        if before:
            inflation = len(after) / len(before)
        else:
            inflation = 2.0 if after else 1.0
        new_skills = sorted(after - before)

        if inflation > settings.max_skill_inflation:
            issues.append(AuthenticityIssue(
                severity=Severity.HIGH,
                category=IssueCategory.SKILL_BLOAT,
                message=f"Skill count increased by {inflation - 1:.0%} ({len(before)} -> {len(after)})",
                location="Skills section",
                suggestion="Remove skills not demonstrated in experience or projects",
            ))
        if len(new_skills) > settings.max_new_skills:
            issues.append(AuthenticityIssue(
                severity=Severity.MEDIUM,
                category=IssueCategory.SKILL_BLOAT,
                message=f"{len(new_skills)} new skills added may not be authentic",
                location="Skills section",
                suggestion="Only add skills that can be backed by experience",
            ))
        elif len(new_skills) > settings.warn_new_skills:
            warnings.append(AuthenticityWarning(
                message=f"{len(new_skills)} new skills added: {', '.join(new_skills[:MAX_LISTED])}...",
            ))
        return inflation

    def _is_suspicious(self, metric: str) -> bool:
        if any(indicator in metric for indicator in self._indicators):
            return True
        m = _PERCENT_RE.search(metric)
        if m:
            percent = float(m.group(1))
            if percent >= self._percent_floor or percent in self._percent_values:
                return True
        return bool(self._round_re and self._round_re.search(metric))

    def _check_fabrication(self, original, optimized, issues) -> None:
        text_before = original.to_text()
        text_after = optimized.to_text()

        known = set(extract_metric_strings(text_before))
        suspicious = [
            m for m in extract_metric_strings(text_after)
            if m not in known and self._is_suspicious(m)
        ]
        if suspicious:
            issues.append(AuthenticityIssue(
                severity=Severity.CRITICAL,
                category=IssueCategory.METRIC_FABRICATION,
                message=f"Potentially fabricated metrics detected: {', '.join(suspicious[:3])}",
                suggestion="Remove or replace with authentic metrics from original resume",
            ))

        years_before = years_of_experience(text_before)
        years_after = years_of_experience(text_after)
        if years_after > years_before:
            issues.append(AuthenticityIssue(
                severity=Severity.CRITICAL,
                category=IssueCategory.METRIC_FABRICATION,
                message=f"Experience years inflated from {years_before} to {years_after}",
                suggestion="Do not modify years of experience",
            ))

    # ------------------------------------------------------------------
    # Score
    # ------------------------------------------------------------------

    def _score(self, metrics: AuthenticityMetrics, issues: list[AuthenticityIssue], stuffed: bool) -> int:
        score = 100.0
        score -= (100 - metrics.authenticity_score) * 0.3
        score -= (100 - metrics.metric_preservation_rate) * 0.25
        if stuffed:
            score -= 15
        if metrics.skill_inflation_rate > settings.max_skill_inflation:
            score -= 20
        for issue in issues:
            score -= self._deductions.get(issue.severity.value, 0)
        return max(0, min(100, round(score)))
