"""Matcher: pairs each JD requirement with its best-scoring resume bullet.

Linear scan over experience then project bullets. Only a strictly higher
score replaces the current best, so ties keep the first bullet seen.
Requirements that share no similarity with any bullet produce no match.
"""

import logging
from typing import Any

from resume_optimizer.config import settings
from resume_optimizer.models.schemas.bullet_match import BulletMatch, MatchType
from resume_optimizer.models.schemas.jd_analysis import JDAnalysis
from resume_optimizer.models.schemas.resume_document import ResumeDocument
from resume_optimizer.services.pipeline.base import BaseStage
from resume_optimizer.services.similarity import similarity
from resume_optimizer.services.synonym_expander import get_expander

logger = logging.getLogger(__name__)


def classify_match(score: float) -> MatchType:
    if score >= settings.relevant_threshold:
        return MatchType.RELEVANT
    if score >= settings.partial_threshold:
        return MatchType.PARTIAL
    return MatchType.NONE


class MatcherService(BaseStage[list[BulletMatch]]):
    stage_name = "matcher"
    lookup_tables = ("synonyms", "vocabulary")
    required_inputs = ("resume", "jd_analysis")

    def load(self) -> None:
        # similarity() consults the synonym dictionary on every call
        get_expander()

    def _run(self, **inputs: Any) -> list[BulletMatch]:
        resume: ResumeDocument = inputs["resume"]
        jd_analysis: JDAnalysis = inputs["jd_analysis"]
        return self.match(resume, jd_analysis)

    def match(self, resume: ResumeDocument, jd_analysis: JDAnalysis) -> list[BulletMatch]:
        bullets = [b for b in resume.iter_bullets() if b[3].strip()]
        matches: list[BulletMatch] = []

        for requirement in jd_analysis.requirements:
            best: BulletMatch | None = None
            best_score = 0.0
            for section, entry_index, bullet_index, text in bullets:
                score = similarity(requirement.text, text)
                if score > best_score:
                    best_score = score
                    best = BulletMatch(
                        requirement=requirement,
                        bullet=text,
                        section=section,
                        entry_index=entry_index,
                        bullet_index=bullet_index,
                        similarity=score,
                        match_type=classify_match(score),
                    )
            if best is not None:
                matches.append(best)

        relevant = sum(1 for m in matches if m.match_type == MatchType.RELEVANT)
        logger.info(
            "Matched %d/%d requirements (%d relevant)",
            len(matches), len(jd_analysis.requirements), relevant,
        )
        return matches
