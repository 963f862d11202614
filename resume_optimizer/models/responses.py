from pydantic import BaseModel

from resume_optimizer.models.schemas.ats_result import ATSSimulationResult
from resume_optimizer.models.schemas.authenticity_report import AuthenticityReport
from resume_optimizer.models.schemas.bullet_match import BulletMatch
from resume_optimizer.models.schemas.jd_analysis import JDAnalysis
from resume_optimizer.models.schemas.resume_document import ResumeDocument
from resume_optimizer.models.schemas.rewrite import RewrittenBullet, ValidationCheck
from resume_optimizer.models.schemas.scoring_breakdown import ScoringBreakdown


class BulletValidationResult(BaseModel):
    section: str  # experience | project
    entry_index: int = 0
    bullet_index: int = 0  # position within the entry's bullets
    original: str
    rewritten: str
    passed: bool
    retry_count: int = 0
    checks: list[ValidationCheck] = []


class ValidationReport(BaseModel):
    total_bullets: int = 0
    passed_bullets: int = 0
    failed_bullets: int = 0
    retried_bullets: int = 0
    bullet_results: list[BulletValidationResult] = []


class SynthesizedProject(BaseModel):
    title: str
    description: str
    technologies: list[str] = []
    is_suggested: bool = True  # never written into the resume, shown as a suggestion


class WarningReport(BaseModel):
    missing_sections: list[str] = []
    required_additions: list[str] = []
    suggested_improvements: list[str] = []
    synthesized_projects: list[SynthesizedProject] = []


class OptimizationResult(BaseModel):
    optimized_resume: ResumeDocument
    original_resume: ResumeDocument
    jd_analysis: JDAnalysis
    bullet_matches: list[BulletMatch] = []
    rewritten_bullets: list[RewrittenBullet] = []
    ats_simulation: ATSSimulationResult = ATSSimulationResult()
    validation_report: ValidationReport = ValidationReport()
    warning_report: WarningReport = WarningReport()
    scoring: ScoringBreakdown = ScoringBreakdown()
    final_score: int = 0
    authenticity: AuthenticityReport = AuthenticityReport()
    processing_time_ms: float = 0.0
    cached: bool = False
