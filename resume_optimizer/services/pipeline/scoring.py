"""Scoring Aggregator: six weighted dimensions -> one 0-100 optimization score.

    Semantic alignment    35%  mean bullet similarity to the original
    Skill/tool match      25%  JD hard skills present in the resume
    Metric preservation   15%  bullets that kept their numbers
    Action-verb strength  10%  bullets opening with a matrix verb
    ATS readability       10%  ATS simulation score
    Keyword density        5%  100 below the density limit, else 50

Failed authenticity costs a flat penalty per critical issue.
"""

import logging
from typing import Any

import numpy as np

from resume_optimizer.config import settings
from resume_optimizer.models.schemas.ats_result import ATSSimulationResult
from resume_optimizer.models.schemas.authenticity_report import AuthenticityReport
from resume_optimizer.models.schemas.jd_analysis import JDAnalysis
from resume_optimizer.models.schemas.resume_document import ResumeDocument
from resume_optimizer.models.schemas.rewrite import RewrittenBullet
from resume_optimizer.models.schemas.scoring_breakdown import DimensionScore, ScoringBreakdown
from resume_optimizer.services.pipeline.base import BaseStage
from resume_optimizer.services.pipeline.bullet_validator import CHECK_VERB
from resume_optimizer.services.synonym_expander import get_expander

logger = logging.getLogger(__name__)

WEIGHTS = {
    "semantic_alignment": 0.35,
    "skill_tool_match": 0.25,
    "metric_preservation": 0.15,
    "action_verb_strength": 0.10,
    "ats_readability": 0.10,
    "keyword_density": 0.05,
}

NEUTRAL_SCORE = 50.0
SKILL_MATCH_TARGET = 70.0
METRIC_TARGET = 90.0
VERB_TARGET = 80.0


def safe_round(value: float, digits: int = 0) -> float:
    """Round, mapping NaN and infinities to 0."""
    if value is None or not np.isfinite(value):
        return 0.0
    return round(float(value), digits)


def _share(flags: list[bool], empty: float) -> float:
    return float(np.mean(flags)) * 100 if flags else empty


def _verb_passed(rewrite: RewrittenBullet) -> bool:
    check = rewrite.validation.check(CHECK_VERB)
    return check is not None and check.passed


class ScoringService(BaseStage[ScoringBreakdown]):
    stage_name = "scoring"
    lookup_tables = ("synonyms",)
    required_inputs = ("ats", "jd_analysis", "resume")

    def _run(self, **inputs: Any) -> ScoringBreakdown:
        return self.score(
            rewrites=inputs.get("rewrites") or [],
            ats=inputs["ats"],
            jd_analysis=inputs["jd_analysis"],
            resume=inputs["resume"],
            authenticity=inputs.get("authenticity"),
        )

    def score(
        self,
        rewrites: list[RewrittenBullet],
        ats: ATSSimulationResult,
        jd_analysis: JDAnalysis,
        resume: ResumeDocument,
        authenticity: AuthenticityReport | None = None,
    ) -> ScoringBreakdown:
        mean_semantic = float(np.mean([r.semantic_similarity for r in rewrites])) if rewrites else 0.0
        semantic = mean_semantic * 100

        if jd_analysis.hard_skills:
            expander = get_expander()
            pool = resume.all_skills()
            skill_match = _share([expander.is_present(s, pool) for s in jd_analysis.hard_skills], NEUTRAL_SCORE)
        else:
            skill_match = NEUTRAL_SCORE

        metric_score = _share([r.metrics_preserved for r in rewrites], 100.0)
        verb_score = _share([_verb_passed(r) for r in rewrites], NEUTRAL_SCORE)
        mean_density = float(np.mean([r.keyword_density for r in rewrites])) if rewrites else 0.0
        density_ok = mean_density < settings.max_keyword_density

        breakdown = ScoringBreakdown(
            semantic_alignment=DimensionScore(
                score=safe_round(semantic),
                weight=WEIGHTS["semantic_alignment"],
                validated=mean_semantic >= settings.semantic_threshold,
            ),
            skill_tool_match=DimensionScore(
                score=safe_round(skill_match),
                weight=WEIGHTS["skill_tool_match"],
                validated=skill_match >= SKILL_MATCH_TARGET,
            ),
            metric_preservation=DimensionScore(
                score=safe_round(metric_score),
                weight=WEIGHTS["metric_preservation"],
                validated=metric_score >= METRIC_TARGET,
            ),
            action_verb_strength=DimensionScore(
                score=safe_round(verb_score),
                weight=WEIGHTS["action_verb_strength"],
                validated=verb_score >= VERB_TARGET,
            ),
            ats_readability=DimensionScore(
                score=float(ats.score),
                weight=WEIGHTS["ats_readability"],
                validated=ats.parsed_successfully,
            ),
            keyword_density=DimensionScore(
                score=100.0 if density_ok else NEUTRAL_SCORE,
                weight=WEIGHTS["keyword_density"],
                validated=density_ok,
            ),
        )

        # Weighted sum uses the unrounded dimension values
        raw = {
            "semantic_alignment": semantic,
            "skill_tool_match": skill_match,
            "metric_preservation": metric_score,
            "action_verb_strength": verb_score,
            "ats_readability": float(ats.score),
            "keyword_density": 100.0 if density_ok else NEUTRAL_SCORE,
        }
        total = int(safe_round(sum(raw[name] * weight for name, weight in WEIGHTS.items())))

        penalty = 0
        if authenticity is not None and not authenticity.is_valid:
            penalty = min(
                settings.max_authenticity_penalty,
                settings.penalty_per_critical * authenticity.critical_count,
            )

        breakdown = breakdown.model_copy(update={
            "total_score": total,
            "authenticity_penalty": penalty,
            "final_score": max(0, total - penalty),
        })
        logger.info("Optimization score: total=%d penalty=%d final=%d", total, penalty, breakdown.final_score)
        return breakdown
