"""Pipeline orchestrator: wires the optimization stages together.

Flow:
    resume + jd_text
      ├─ jd_analyzer.run(jd_text)                       → JDAnalysis
      ├─ matcher.run(resume, jd_analysis)               → [BulletMatch]
      ├─ bullet_rewriter.run(resume, jd_analysis,
      │                      matches, evidence)         → [RewrittenBullet]
      ├─ resume_applier.run(resume, rewrites)           → optimized ResumeDocument
      │       └─ build_warning_report(resume)           → WarningReport
      ├─ ats_simulator.run(optimized)                   → ATSSimulationResult
      ├─ _validation_report(rewrites)                   → ValidationReport
      ├─ authenticity_validator.run(original, optimized) → AuthenticityReport
      └─ scoring.run(all of the above)                  → ScoringBreakdown
                       ↓
                OptimizationResult
"""

import logging
import time
from typing import Any

from resume_optimizer.models.requests import OptimizeRequest
from resume_optimizer.models.responses import (
    BulletValidationResult,
    OptimizationResult,
    ValidationReport,
)
from resume_optimizer.models.schemas.resume_document import ResumeDocument
from resume_optimizer.models.schemas.rewrite import RewrittenBullet
from resume_optimizer.services.pipeline.bullet_rewriter import resume_evidence_terms
from resume_optimizer.services.pipeline.resume_applier import build_warning_report
from resume_optimizer.services.pipeline.stage_registry import get_stage
from resume_optimizer.services.result_cache import ResultCache

logger = logging.getLogger(__name__)


def optimize(
    resume: ResumeDocument | dict[str, Any],
    job_description: str,
    target_role: str | None = None,
    cache: ResultCache | None = None,
) -> OptimizationResult:
    """Optimize ``resume`` against ``job_description``.

    ``resume`` may be a ResumeDocument or a plain dict; a dict that does not
    validate raises pydantic.ValidationError before any stage runs. The
    caller's resume is never modified. ``target_role`` is accepted for API
    compatibility and currently unused.
    """
    request = OptimizeRequest(resume=resume, job_description=job_description or "", target_role=target_role)
    # Detach from the caller's instance before anything reads it
    original = request.resume.model_copy(deep=True)
    jd_text = request.job_description

    key = None
    if cache is not None:
        key = cache.make_key(original, jd_text)
        hit = cache.get(key)
        if hit is not None:
            logger.info("Cache hit: %s", key[:12])
            return hit.model_copy(deep=True, update={"cached": True})

    start = time.perf_counter()

    # --- Stage 1: Understand the JD ---
    jd_analysis = get_stage("jd_analyzer").run(jd_text=jd_text)

    # --- Stage 2: Pair requirements with bullets ---
    matches = get_stage("matcher").run(resume=original, jd_analysis=jd_analysis)

    # --- Stage 3: Rewrite + validate every bullet ---
    rewrites = get_stage("bullet_rewriter").run(
        resume=original,
        jd_analysis=jd_analysis,
        matches=matches,
        evidence=resume_evidence_terms(original),
    )

    # --- Stage 4: Apply to a copy, report gaps ---
    optimized = get_stage("resume_applier").run(
        resume=original, rewrites=rewrites, jd_analysis=jd_analysis,
    )
    warning_report = build_warning_report(original, jd_analysis)

    # --- Stage 5: Checks on the finished document ---
    ats = get_stage("ats_simulator").run(resume=optimized)
    validation_report = _validation_report(rewrites)
    authenticity = get_stage("authenticity_validator").run(original=original, optimized=optimized)

    # --- Stage 6: Score ---
    scoring = get_stage("scoring").run(
        rewrites=rewrites,
        ats=ats,
        jd_analysis=jd_analysis,
        resume=optimized,
        authenticity=authenticity,
    )

    elapsed_ms = (time.perf_counter() - start) * 1000
    result = OptimizationResult(
        optimized_resume=optimized,
        original_resume=original,
        jd_analysis=jd_analysis,
        bullet_matches=matches,
        rewritten_bullets=rewrites,
        ats_simulation=ats,
        validation_report=validation_report,
        warning_report=warning_report,
        scoring=scoring,
        final_score=scoring.final_score,
        authenticity=authenticity,
        processing_time_ms=round(elapsed_ms, 2),
    )
    logger.info(
        "Optimization complete: final_score=%d bullets=%d in %.1fms",
        result.final_score, len(rewrites), elapsed_ms,
    )

    if cache is not None and key is not None:
        cache.set(key, result.model_copy(deep=True))
    return result


def _validation_report(rewrites: list[RewrittenBullet]) -> ValidationReport:
    return ValidationReport(
        total_bullets=len(rewrites),
        passed_bullets=sum(1 for r in rewrites if r.validation.passed),
        failed_bullets=sum(1 for r in rewrites if not r.validation.passed),
        retried_bullets=sum(1 for r in rewrites if r.validation.retry_count > 0),
        bullet_results=[
            BulletValidationResult(
                section=r.section,
                entry_index=r.entry_index,
                bullet_index=r.bullet_index,
                original=r.original,
                rewritten=r.rewritten,
                passed=r.validation.passed,
                retry_count=r.validation.retry_count,
                checks=r.validation.checks,
            )
            for r in rewrites
        ],
    )
