"""Scoring Aggregator output."""

from pydantic import BaseModel


class DimensionScore(BaseModel):
    score: float = 0.0  # 0-100
    weight: float = 0.0
    validated: bool = False


class ScoringBreakdown(BaseModel):
    """Six weighted dimensions and the final optimization score.

    total_score is the rounded weighted sum; final_score subtracts the
    authenticity penalty (never below zero).
    """
    semantic_alignment: DimensionScore = DimensionScore(weight=0.35)
    skill_tool_match: DimensionScore = DimensionScore(weight=0.25)
    metric_preservation: DimensionScore = DimensionScore(weight=0.15)
    action_verb_strength: DimensionScore = DimensionScore(weight=0.10)
    ats_readability: DimensionScore = DimensionScore(weight=0.10)
    keyword_density: DimensionScore = DimensionScore(weight=0.05)
    total_score: int = 0
    authenticity_penalty: int = 0
    final_score: int = 0

    def dimensions(self) -> dict[str, DimensionScore]:
        return {
            "semantic_alignment": self.semantic_alignment,
            "skill_tool_match": self.skill_tool_match,
            "metric_preservation": self.metric_preservation,
            "action_verb_strength": self.action_verb_strength,
            "ats_readability": self.ats_readability,
            "keyword_density": self.keyword_density,
        }
