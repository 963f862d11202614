"""Matcher output: each JD requirement paired with its best resume bullet."""

from enum import Enum

from pydantic import BaseModel

from resume_optimizer.models.schemas.jd_analysis import Requirement


class MatchType(str, Enum):
    RELEVANT = "relevant"  # similarity >= 0.70
    PARTIAL = "partial"  # similarity >= 0.50
    NONE = "none"


class BulletMatch(BaseModel):
    requirement: Requirement
    bullet: str
    section: str = "experience"  # experience | project
    entry_index: int = 0
    bullet_index: int = 0
    similarity: float = 0.0
    match_type: MatchType = MatchType.NONE

    @property
    def location(self) -> tuple[str, int, int]:
        return self.section, self.entry_index, self.bullet_index
