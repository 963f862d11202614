"""Bullet Rewriter output: a rewrite plus the checks it was validated against."""

from enum import Enum

from pydantic import BaseModel


class ValidationCheck(BaseModel):
    name: str  # e.g. "Semantic Similarity", "Action Verb"
    passed: bool
    score: float = 0.0
    threshold: float = 0.0
    message: str = ""

    model_config = {"frozen": True}


class ValidationResult(BaseModel):
    passed: bool
    checks: list[ValidationCheck] = []
    failure_reasons: list[str] = []
    retry_count: int = 0  # 0-indexed attempt that produced this result

    model_config = {"frozen": True}

    @property
    def passed_count(self) -> int:
        return sum(1 for c in self.checks if c.passed)

    def check(self, name: str) -> ValidationCheck | None:
        for c in self.checks:
            if c.name == name:
                return c
        return None


class BulletStatus(str, Enum):
    PASSED = "passed"
    BEST_EFFORT = "best_effort"


class RewrittenBullet(BaseModel):
    original: str
    rewritten: str
    validation: ValidationResult
    metrics_preserved: bool = True
    keyword_density: float = 0.0
    semantic_similarity: float = 0.0
    status: BulletStatus = BulletStatus.BEST_EFFORT
    section: str = "experience"  # experience | project
    entry_index: int = 0
    bullet_index: int = 0

    model_config = {"frozen": True}
