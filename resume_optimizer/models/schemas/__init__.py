"""Inter-stage Pydantic contracts for the optimization pipeline."""

from resume_optimizer.models.schemas.resume_document import ResumeDocument
from resume_optimizer.models.schemas.jd_analysis import JDAnalysis
from resume_optimizer.models.schemas.bullet_match import BulletMatch
from resume_optimizer.models.schemas.metrics import MetricExtraction
from resume_optimizer.models.schemas.rewrite import RewrittenBullet, ValidationResult
from resume_optimizer.models.schemas.ats_result import ATSSimulationResult
from resume_optimizer.models.schemas.authenticity_report import AuthenticityReport
from resume_optimizer.models.schemas.scoring_breakdown import ScoringBreakdown

__all__ = [
    "ResumeDocument",
    "JDAnalysis",
    "BulletMatch",
    "MetricExtraction",
    "RewrittenBullet",
    "ValidationResult",
    "ATSSimulationResult",
    "AuthenticityReport",
    "ScoringBreakdown",
]
