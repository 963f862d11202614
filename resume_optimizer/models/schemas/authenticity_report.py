"""Authenticity Validator output: a whole-document over-optimization audit."""

from enum import Enum

from pydantic import BaseModel


class Severity(str, Enum):
    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class IssueCategory(str, Enum):
    AUTHENTICITY = "authenticity"
    INFLATION = "inflation"
    KEYWORD_STUFFING = "keyword_stuffing"
    METRIC_FABRICATION = "metric_fabrication"
    SKILL_BLOAT = "skill_bloat"


class AuthenticityIssue(BaseModel):
    severity: Severity
    category: IssueCategory
    message: str
    location: str = ""
    suggestion: str = ""


class AuthenticityWarning(BaseModel):
    level: str = "caution"  # caution | info
    message: str


class AuthenticityMetrics(BaseModel):
    authenticity_score: float = 100.0  # 0-100, share of original bullets preserved
    metric_preservation_rate: float = 100.0  # 0-100
    keyword_density: float = 0.0  # 0.0-1.0 technical keyword share of words
    skill_inflation_rate: float = 1.0  # optimized / original skill count
    content_change_rate: float = 0.0  # 0.0-1.0


class AuthenticityReport(BaseModel):
    is_valid: bool = True
    score: int = 100
    issues: list[AuthenticityIssue] = []
    warnings: list[AuthenticityWarning] = []
    metrics: AuthenticityMetrics = AuthenticityMetrics()

    @property
    def critical_count(self) -> int:
        return sum(1 for i in self.issues if i.severity == Severity.CRITICAL)
